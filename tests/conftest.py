"""Test configuration and fixtures."""

import tempfile
from pathlib import Path

import httpx
import pytest
from pydantic import BaseModel

from easyhttp import EasyHttpClient


class SampleRequest(BaseModel):
    username: str


class SampleResponse(BaseModel):
    result: str


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes | str = b"",
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.content = content.encode("utf-8") if isinstance(content, str) else content
        self.headers = headers or {}
        self.requests: list[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)


class RedirectingHandler:
    """MockTransport handler that answers /old with a 307 to /new."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/old"):
            return httpx.Response(307, headers={"Location": "/test/new"})
        return httpx.Response(200, content=b"done")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for file bodies."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_client():
    """Build an EasyHttpClient whose sync and async engines hit a handler."""
    clients: list[EasyHttpClient] = []

    def _make(handler, **builder_options) -> EasyHttpClient:
        transport = httpx.MockTransport(handler)
        builder = EasyHttpClient.builder().transport(transport).async_transport(transport)
        for name, value in builder_options.items():
            getattr(builder, name)(value)
        client = builder.build()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def base_url() -> str:
    return "http://testserver/test"
