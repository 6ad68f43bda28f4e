"""Declarative HTTP request description and its fluent builder."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from easyhttp.constants import Header
from easyhttp.exceptions import InvalidRequestError


class HttpMethod(str, Enum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"

    @property
    def sends_body(self) -> bool:
        """Whether a body set on the request is transmitted for this method."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class Body(BaseModel):
    """Request payload plus the type tag that selects its encoding."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    content: Any = None
    type: Any = None


class EasyHttpRequest(BaseModel):
    """Immutable description of one HTTP call.

    Built through RequestBuilder, which validates it; the instance is
    read-only and can be reused across calls and threads.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    url: str = Field(..., min_length=1, description="URL template with optional {name} tokens")
    method: HttpMethod
    path_params: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    query_params: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    headers: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    fragment: str | None = None
    body: Body | None = None

    @field_validator("path_params", "query_params", "headers", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        """Store parameter maps as read-only views over private copies."""
        return MappingProxyType(dict(value))

    @staticmethod
    def builder(url: str | None) -> "RequestBuilder":
        """Start building a request for the given URL template."""
        return RequestBuilder(url)


class RequestBuilder:
    """Mutable, chainable builder for EasyHttpRequest."""

    def __init__(self, url: str | None):
        self._url = url
        self._method: HttpMethod | None = None
        self._path_params: dict[str, str] = {}
        self._query_params: dict[str, str] = {}
        self._headers: dict[str, str] = {}
        self._fragment: str | None = None
        self._body: Body | None = None

    # Parameters

    def path_param(self, key: str, value: str) -> "RequestBuilder":
        self._path_params[key] = value
        return self

    def path_map(self, path_params: dict[str, str]) -> "RequestBuilder":
        """Replace all path parameters."""
        self._path_params = dict(path_params)
        return self

    def query_param(self, key: str, value: str) -> "RequestBuilder":
        self._query_params[key] = value
        return self

    def query_map(self, query_params: dict[str, str]) -> "RequestBuilder":
        """Replace all query parameters. Iteration order is the wire order."""
        self._query_params = dict(query_params)
        return self

    def header(self, key: str, value: str) -> "RequestBuilder":
        self._headers[key] = value
        return self

    def header_map(self, headers: dict[str, str]) -> "RequestBuilder":
        """Replace all headers."""
        self._headers = dict(headers)
        return self

    # Common headers

    def user_agent(self, value: str) -> "RequestBuilder":
        return self.header(Header.USER_AGENT.value, value)

    def accept(self, value: str) -> "RequestBuilder":
        return self.header(Header.ACCEPT.value, value)

    def accept_language(self, value: str) -> "RequestBuilder":
        return self.header(Header.ACCEPT_LANGUAGE.value, value)

    def accept_encoding(self, value: str) -> "RequestBuilder":
        return self.header(Header.ACCEPT_ENCODING.value, value)

    def authorization(self, value: str) -> "RequestBuilder":
        return self.header(Header.AUTHORIZATION.value, value)

    def content_type(self, value: str) -> "RequestBuilder":
        return self.header(Header.CONTENT_TYPE.value, value)

    def cookie(self, value: str) -> "RequestBuilder":
        return self.header(Header.COOKIE.value, value)

    def referer(self, value: str) -> "RequestBuilder":
        return self.header(Header.REFERER.value, value)

    def origin(self, value: str) -> "RequestBuilder":
        return self.header(Header.ORIGIN.value, value)

    # Fragment and body

    def fragment(self, fragment: str | None) -> "RequestBuilder":
        self._fragment = fragment
        return self

    def body(self, content: Any, type: Any = None) -> "RequestBuilder":
        """Set the payload.

        Args:
            content: Payload value, may be None.
            type: Type tag selecting the encoding. Defaults to type(content).
        """
        if type is None and content is not None:
            type = content.__class__
        self._body = Body(content=content, type=type)
        return self

    # Methods

    def method(self, method: HttpMethod | str) -> "RequestBuilder":
        self._method = HttpMethod(method)
        return self

    def GET(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.GET)

    def POST(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.POST)

    def PUT(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.PUT)

    def PATCH(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.PATCH)

    def DELETE(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.DELETE)

    def HEAD(self) -> "RequestBuilder":  # noqa: N802
        return self.method(HttpMethod.HEAD)

    def build(self) -> EasyHttpRequest:
        """Validate and freeze the request.

        Raises:
            InvalidRequestError: If the URL is None/blank or no method was chosen.
        """
        if self._url is None or not self._url.strip():
            raise InvalidRequestError("Url can't be null or blank")
        if self._method is None:
            raise InvalidRequestError("HttpMethod can't be null")

        try:
            return EasyHttpRequest(
                url=self._url,
                method=self._method,
                path_params=dict(self._path_params),
                query_params=dict(self._query_params),
                headers=dict(self._headers),
                fragment=self._fragment,
                body=self._body,
            )
        except ValidationError as e:
            raise InvalidRequestError(str(e)) from e
