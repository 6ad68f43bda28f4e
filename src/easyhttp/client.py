"""HTTP client that turns EasyHttpRequest descriptions into httpx calls.

Builds the final URL, negotiates the request and response bodies, and
dispatches through httpx.Client (send) or httpx.AsyncClient (send_async).
"""

import os
import ssl
from typing import Any

import httpx

from easyhttp.config.settings import ClientSettings
from easyhttp.constants import DEFAULT_RESPONSE_FILE
from easyhttp.exceptions import HttpCallError
from easyhttp.models.request import EasyHttpRequest
from easyhttp.models.response import EasyHttpResponse
from easyhttp.negotiation import BodyEncoder, ContentNegotiator, EmptyEncoder
from easyhttp.serializers.base import Serializer
from easyhttp.serializers.json import PydanticJsonSerializer
from easyhttp.url_builder import build_url
from easyhttp.utils.logger import get_logger

logger = get_logger("easyhttp.client")

# Transport failures surfaced as HttpCallError
_CALL_ERRORS = (httpx.TransportError, httpx.TooManyRedirects)


class EasyHttpClient:
    """Sends EasyHttpRequest objects and decodes typed responses.

    The client holds no per-call state: one instance can serve concurrent
    calls from several threads or tasks. Call close()/aclose() (or use it
    as a context manager) to release pooled connections.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        async_client: httpx.AsyncClient,
        serializer: Serializer,
        response_file: os.PathLike | str | None = None,
    ):
        """Initialize client.

        Args:
            http_client: Engine used by send().
            async_client: Engine used by send_async().
            serializer: Codec for structured bodies.
            response_file: Default destination for bodies decoded to a path.
        """
        self._client = http_client
        self._async_client = async_client
        self._negotiator = ContentNegotiator(serializer, response_file or DEFAULT_RESPONSE_FILE)

    @classmethod
    def default_client(cls) -> "EasyHttpClient":
        """Create a client with default settings and the JSON serializer."""
        return cls.builder().build()

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "EasyHttpClient":
        return cls.builder(settings).build()

    @staticmethod
    def builder(settings: ClientSettings | None = None) -> "ClientBuilder":
        return ClientBuilder(settings)

    @property
    def serializer(self) -> Serializer:
        return self._negotiator.serializer

    def send(
        self,
        request: EasyHttpRequest,
        response_type: Any = str,
        *,
        file_path: os.PathLike | str | None = None,
    ) -> EasyHttpResponse[Any]:
        """Execute a synchronous HTTP call.

        Args:
            request: Description of the call.
            response_type: Type of the decoded body; None discards it.
            file_path: Destination when response_type is a path type.

        Returns:
            EasyHttpResponse with status, headers and decoded body.

        Raises:
            MalformedUrlError: If the assembled URL is not absolute/valid.
            SerializationError: If the request body cannot be serialized.
            FileNotFoundError: If a file body is missing.
            DeserializationError: If a structured response body cannot be decoded.
            HttpCallError: If the transport fails.
        """
        http_request = self._convert_request(request, self._client, use_async=False)
        decoder = self._negotiator.decode_body(response_type, file_path)
        log = logger.bind(method=http_request.method, url=str(http_request.url))

        log.debug("Sending request")
        try:
            response = self._client.send(http_request, stream=decoder.stream)
            body = decoder.decode(response)
        except _CALL_ERRORS as e:
            log.warning("HTTP call failed", error=str(e))
            raise HttpCallError(http_request.method, str(http_request.url), str(e)) from e

        log.debug("Response received", status_code=response.status_code)
        return EasyHttpResponse.from_httpx(response, body)

    async def send_async(
        self,
        request: EasyHttpRequest,
        response_type: Any = str,
        *,
        file_path: os.PathLike | str | None = None,
    ) -> EasyHttpResponse[Any]:
        """Execute an asynchronous HTTP call.

        Behaves exactly like send() and raises the same errors, but runs on
        the caller's event loop.
        """
        http_request = self._convert_request(request, self._async_client, use_async=True)
        decoder = self._negotiator.decode_body(response_type, file_path)
        log = logger.bind(method=http_request.method, url=str(http_request.url))

        log.debug("Sending async request")
        try:
            response = await self._async_client.send(http_request, stream=decoder.stream)
            body = await decoder.adecode(response)
        except _CALL_ERRORS as e:
            log.warning("HTTP call failed", error=str(e))
            raise HttpCallError(http_request.method, str(http_request.url), str(e)) from e

        log.debug("Response received", status_code=response.status_code)
        return EasyHttpResponse.from_httpx(response, body)

    def _convert_request(
        self,
        request: EasyHttpRequest,
        client: httpx.Client | httpx.AsyncClient,
        use_async: bool,
    ) -> httpx.Request:
        """Convert EasyHttpRequest to httpx.Request.

        GET, HEAD and DELETE never carry a body, even if one was set.
        """
        url = build_url(request.url, request.path_params, request.query_params, request.fragment)

        encoder: BodyEncoder = EmptyEncoder()
        if request.method.sends_body:
            encoder = self._negotiator.encode_body(request.body)

        content = encoder.acontent() if use_async else encoder.content()
        return client.build_request(
            request.method.value,
            url,
            headers=request.headers,
            content=content,
        )

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._async_client.aclose()

    def __enter__(self) -> "EasyHttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "EasyHttpClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class ClientBuilder:
    """Fluent builder for EasyHttpClient.

    Every transport option is passed to httpx once, at build time. Unset
    options fall back to ClientSettings.
    """

    def __init__(self, settings: ClientSettings | None = None):
        settings = settings or ClientSettings()
        self._serializer: Serializer | None = None
        self._connect_timeout = settings.connect_timeout
        self._timeout = settings.timeout
        self._follow_redirects = settings.follow_redirects
        self._max_redirects = settings.max_redirects
        self._proxy: httpx.Proxy | str | None = settings.proxy
        self._verify: ssl.SSLContext | bool = settings.verify_ssl
        self._auth: httpx.Auth | tuple[str, str] | None = None
        self._http2 = settings.http2
        self._cookies: httpx.Cookies | dict[str, str] | None = None
        self._user_agent = settings.user_agent
        self._transport: httpx.BaseTransport | None = None
        self._async_transport: httpx.AsyncBaseTransport | None = None
        self._response_file: os.PathLike | str = settings.response_file

    def serializer(self, serializer: Serializer) -> "ClientBuilder":
        self._serializer = serializer
        return self

    def connect_timeout(self, seconds: float | None) -> "ClientBuilder":
        self._connect_timeout = seconds
        return self

    def timeout(self, seconds: float | None) -> "ClientBuilder":
        self._timeout = seconds
        return self

    def follow_redirects(self, follow: bool, max_redirects: int | None = None) -> "ClientBuilder":
        self._follow_redirects = follow
        if max_redirects is not None:
            self._max_redirects = max_redirects
        return self

    def proxy(self, proxy: httpx.Proxy | str | None) -> "ClientBuilder":
        self._proxy = proxy
        return self

    def verify(self, verify: ssl.SSLContext | bool) -> "ClientBuilder":
        """Set TLS verification: an SSLContext, or a bool to toggle defaults."""
        self._verify = verify
        return self

    def auth(self, auth: httpx.Auth | tuple[str, str] | None) -> "ClientBuilder":
        self._auth = auth
        return self

    def http2(self, enabled: bool = True) -> "ClientBuilder":
        self._http2 = enabled
        return self

    def cookies(self, cookies: httpx.Cookies | dict[str, str] | None) -> "ClientBuilder":
        self._cookies = cookies
        return self

    def user_agent(self, value: str | None) -> "ClientBuilder":
        self._user_agent = value
        return self

    def transport(self, transport: httpx.BaseTransport | None) -> "ClientBuilder":
        self._transport = transport
        return self

    def async_transport(self, transport: httpx.AsyncBaseTransport | None) -> "ClientBuilder":
        self._async_transport = transport
        return self

    def response_file(self, path: os.PathLike | str) -> "ClientBuilder":
        self._response_file = path
        return self

    def build(self) -> EasyHttpClient:
        serializer = self._serializer or PydanticJsonSerializer()

        options: dict[str, Any] = {
            "timeout": httpx.Timeout(self._timeout, connect=self._connect_timeout),
            "follow_redirects": self._follow_redirects,
            "max_redirects": self._max_redirects,
            "proxy": self._proxy,
            "verify": self._verify,
            "auth": self._auth,
            "http2": self._http2,
            "cookies": self._cookies,
        }
        if self._user_agent:
            options["headers"] = {"User-Agent": self._user_agent}

        logger.debug(
            "Building HTTP client",
            serializer=type(serializer).__name__,
            http2=self._http2,
            follow_redirects=self._follow_redirects,
        )
        return EasyHttpClient(
            http_client=httpx.Client(transport=self._transport, **options),
            async_client=httpx.AsyncClient(transport=self._async_transport, **options),
            serializer=serializer,
            response_file=self._response_file,
        )
