"""Configuration management using pydantic-settings.

Client defaults can be overridden with EASYHTTP_* environment variables
or a .env file.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from easyhttp.constants import DEFAULT_RESPONSE_FILE


class ClientSettings(BaseSettings):
    """Default transport configuration for EasyHttpClient.

    Values here are only read when the client is built; they are never
    adjusted per call.
    """

    model_config = SettingsConfigDict(
        env_prefix="EASYHTTP_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Timeouts (seconds, None disables)
    connect_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Connection establishment timeout",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Overall read/write/pool timeout",
    )

    # Redirects
    follow_redirects: bool = False
    max_redirects: int = Field(default=20, ge=0)

    # Transport
    http2: bool = Field(default=False, description="Negotiate HTTP/2 when available")
    verify_ssl: bool = True
    proxy: str | None = Field(default=None, description="Proxy URL for all requests")
    user_agent: str | None = Field(
        default=None,
        description="Default User-Agent header (requests may override it)",
    )

    # Responses decoded into a file land here unless the call names a path
    response_file: Path = Field(default=Path(DEFAULT_RESPONSE_FILE))
