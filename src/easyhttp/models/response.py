"""Typed response envelope returned by EasyHttpClient."""

from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class EasyHttpResponse(BaseModel, Generic[T]):
    """Status, headers and decoded body of a completed call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status_code: int
    headers: httpx.Headers
    body: T | None = None
    url: httpx.URL
    http_version: str = "HTTP/1.1"

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response, body: Any) -> "EasyHttpResponse[Any]":
        return cls(
            status_code=response.status_code,
            headers=response.headers,
            body=body,
            url=response.url,
            http_version=response.http_version,
        )
