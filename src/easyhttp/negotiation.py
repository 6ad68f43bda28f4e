"""Content negotiation between typed bodies and wire bytes.

A type tag is classified into a closed set of body kinds. Built-in kinds
(text, bytes, streams, files) are moved as-is; every other type goes
through the configured Serializer.
"""

import asyncio
import io
import os
import typing
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import httpx
import structlog

from easyhttp.constants import CHUNK_SIZE, DEFAULT_RESPONSE_FILE
from easyhttp.exceptions import DeserializationError, FileNotFoundError, SerializationError
from easyhttp.models.request import Body
from easyhttp.serializers.base import Serializer

logger = structlog.get_logger()


class BodyKind(Enum):
    """Encoding strategies, selected by type tag."""

    NONE = "none"
    TEXT = "text"
    BYTES = "bytes"
    STREAM = "stream"
    FILE = "file"
    STRUCTURED = "structured"


def classify(tp: Any) -> BodyKind:
    """Map a type tag to its body kind.

    Parametrized generics (list[str], dict[str, int]) and anything that is
    not a class fall through to STRUCTURED.
    """
    if tp is None or tp is type(None):
        return BodyKind.NONE
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return BodyKind.STRUCTURED
    if issubclass(tp, str):
        return BodyKind.TEXT
    if issubclass(tp, (bytes, bytearray, memoryview)):
        return BodyKind.BYTES
    if issubclass(tp, (io.IOBase, typing.IO)):
        return BodyKind.STREAM
    if issubclass(tp, os.PathLike):
        return BodyKind.FILE
    return BodyKind.STRUCTURED


# Outbound


class BodyEncoder(Protocol):
    """Produces request content for httpx.

    content() feeds httpx.Client, acontent() feeds httpx.AsyncClient.
    None means no payload.
    """

    def content(self) -> bytes | Iterable[bytes] | None:
        ...

    def acontent(self) -> bytes | AsyncIterable[bytes] | None:
        ...


class EmptyEncoder:
    """No payload."""

    def content(self) -> None:
        return None

    def acontent(self) -> None:
        return None


class BytesEncoder:
    """In-memory payload."""

    def __init__(self, data: bytes):
        self._data = data

    def content(self) -> bytes:
        return self._data

    def acontent(self) -> bytes:
        return self._data


class _Replayable:
    """Re-iterable content; every iteration starts a fresh chunk generator.

    httpx resends request.stream on a 307/308 redirect and will not
    iterate a plain generator twice.
    """

    def __init__(self, chunks: Callable[[], Iterator[bytes]]):
        self._chunks = chunks

    def __iter__(self) -> Iterator[bytes]:
        return self._chunks()


class _AsyncReplayable:
    """Async counterpart of _Replayable."""

    def __init__(self, chunks: Callable[[], AsyncIterator[bytes]]):
        self._chunks = chunks

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._chunks()


def _to_bytes(chunk: bytes | str) -> bytes:
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def _seekable(stream: typing.IO) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable and seekable())


class StreamEncoder:
    """Reads a file-like object lazily, chunk by chunk, at send time.

    Text-mode streams are encoded as UTF-8. The stream is owned by the
    caller and is not closed here. Seekable streams are rewound to their
    starting position on every send, so a redirected request carries the
    same body; a non-seekable stream can only be read once and a resend
    carries whatever is left of it.
    """

    def __init__(self, stream: typing.IO):
        self._stream = stream
        self._start = stream.tell() if _seekable(stream) else None

    def _rewind(self) -> None:
        if self._start is not None:
            self._stream.seek(self._start)

    def _chunks(self) -> Iterator[bytes]:
        self._rewind()
        while True:
            chunk = self._stream.read(CHUNK_SIZE)
            if not chunk:
                break
            yield _to_bytes(chunk)

    async def _achunks(self) -> AsyncIterator[bytes]:
        await asyncio.to_thread(self._rewind)
        while True:
            chunk = await asyncio.to_thread(self._stream.read, CHUNK_SIZE)
            if not chunk:
                break
            yield _to_bytes(chunk)

    def content(self) -> Iterable[bytes]:
        return _Replayable(self._chunks)

    def acontent(self) -> AsyncIterable[bytes]:
        return _AsyncReplayable(self._achunks)


class FileEncoder:
    """Streams a file from disk.

    The path is checked when the encoder is created; the file itself is
    opened only while the request body is being sent, once per send.
    """

    def __init__(self, path: os.PathLike | str):
        self._path = Path(path)
        if not self._path.is_file() or not os.access(self._path, os.R_OK):
            raise FileNotFoundError(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _chunks(self) -> Iterator[bytes]:
        with self._path.open("rb") as f:
            while True:
                chunk = f.read(CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    async def _achunks(self) -> AsyncIterator[bytes]:
        f = await asyncio.to_thread(self._path.open, "rb")
        try:
            while True:
                chunk = await asyncio.to_thread(f.read, CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        finally:
            f.close()

    def content(self) -> Iterable[bytes]:
        return _Replayable(self._chunks)

    def acontent(self) -> AsyncIterable[bytes]:
        return _AsyncReplayable(self._achunks)


# Inbound


class ResponseStream(io.RawIOBase):
    """Readable file-like view over a streamed httpx response.

    Closing the stream releases the underlying connection.
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._iterator = response.iter_bytes()
        self._buffer = b""

    @property
    def response(self) -> httpx.Response:
        return self._response

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._buffer:
            try:
                self._buffer = next(self._iterator)
            except StopIteration:
                return 0
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class AsyncResponseStream:
    """Async counterpart of ResponseStream for httpx.AsyncClient responses."""

    def __init__(self, response: httpx.Response):
        self._response = response
        self._iterator = response.aiter_bytes()
        self._buffer = b""
        self.closed = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    async def read(self, size: int = -1) -> bytes:
        """Read up to size bytes, or everything left when size is negative."""
        if size < 0:
            chunks = [self._buffer]
            async for chunk in self._iterator:
                chunks.append(chunk)
            self._buffer = b""
            return b"".join(chunks)

        while len(self._buffer) < size:
            try:
                self._buffer += await self._iterator.__anext__()
            except StopAsyncIteration:
                break
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    async def __aiter__(self) -> AsyncIterator[bytes]:
        if self._buffer:
            data, self._buffer = self._buffer, b""
            yield data
        async for chunk in self._iterator:
            yield chunk

    async def aclose(self) -> None:
        if not self.closed:
            self.closed = True
            await self._response.aclose()

    async def __aenter__(self) -> "AsyncResponseStream":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class BodyDecoder(Protocol):
    """Turns a received httpx.Response into the requested body value.

    Decoders with stream=True receive an unread streaming response and
    are responsible for reading or handing it off; the others receive a
    response whose body has already been read.
    """

    stream: bool

    def decode(self, response: httpx.Response) -> Any:
        ...

    async def adecode(self, response: httpx.Response) -> Any:
        ...


class DiscardDecoder:
    """Closes the response without reading the body."""

    stream = True

    def decode(self, response: httpx.Response) -> None:
        response.close()
        return None

    async def adecode(self, response: httpx.Response) -> None:
        await response.aclose()
        return None


class TextDecoder:
    stream = False

    def decode(self, response: httpx.Response) -> str:
        return response.content.decode("utf-8", errors="replace")

    async def adecode(self, response: httpx.Response) -> str:
        return self.decode(response)


class BytesDecoder:
    stream = False

    def decode(self, response: httpx.Response) -> bytes:
        return response.content

    async def adecode(self, response: httpx.Response) -> bytes:
        return response.content


class StreamDecoder:
    """Hands the open response to the caller as a stream."""

    stream = True

    def decode(self, response: httpx.Response) -> ResponseStream:
        return ResponseStream(response)

    async def adecode(self, response: httpx.Response) -> AsyncResponseStream:
        return AsyncResponseStream(response)


class FileDecoder:
    """Writes the body to a file and returns its path."""

    stream = True

    def __init__(self, path: os.PathLike | str):
        self._path = Path(path)

    def decode(self, response: httpx.Response) -> Path:
        try:
            with self._path.open("wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
        finally:
            response.close()
        return self._path

    async def adecode(self, response: httpx.Response) -> Path:
        """Write the body without blocking the event loop on disk I/O."""
        try:
            f = await asyncio.to_thread(self._path.open, "wb")
            try:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(f.write, chunk)
            finally:
                await asyncio.to_thread(f.close)
        finally:
            await response.aclose()
        return self._path


class StructuredDecoder:
    """Decodes the UTF-8 body through the Serializer.

    A blank body decodes to None.
    """

    stream = False

    def __init__(self, serializer: Serializer, target_type: Any):
        self._serializer = serializer
        self._target_type = target_type

    def decode(self, response: httpx.Response) -> Any:
        try:
            text = response.content.decode("utf-8")
            if not text.strip():
                return None
            return self._serializer.deserialize(text, self._target_type)
        except Exception as e:
            raise DeserializationError(self._target_type, str(e)) from e

    async def adecode(self, response: httpx.Response) -> Any:
        return self.decode(response)


class ContentNegotiator:
    """Selects body encoders and decoders by type tag."""

    def __init__(
        self,
        serializer: Serializer,
        response_file: os.PathLike | str = DEFAULT_RESPONSE_FILE,
    ):
        """Initialize negotiator.

        Args:
            serializer: Codec for structured (non built-in) types.
            response_file: Default destination for bodies decoded to a path.
        """
        self._serializer = serializer
        self._response_file = Path(response_file)

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    def encode_body(self, body: Body | None) -> BodyEncoder:
        """Pick the encoder for an outgoing body.

        Raises:
            FileNotFoundError: If a path body is not a readable file.
            SerializationError: If the serializer fails on a structured body.
        """
        if body is None or body.content is None:
            return EmptyEncoder()

        content = body.content
        declared = body.type if body.type is not None else content.__class__
        kind = classify(declared)

        if kind is BodyKind.TEXT:
            text = content if isinstance(content, str) else str(content)
            return BytesEncoder(text.encode("utf-8"))
        if kind is BodyKind.BYTES:
            return BytesEncoder(bytes(content))
        if kind is BodyKind.STREAM:
            return StreamEncoder(content)
        if kind is BodyKind.FILE:
            return FileEncoder(content)

        try:
            data = self._serializer.serialize(content)
        except Exception as e:
            logger.debug("Request body serialization failed", type=repr(declared), error=str(e))
            raise SerializationError(str(e)) from e
        return BytesEncoder(data.encode("utf-8"))

    def decode_body(
        self,
        response_type: Any,
        file_path: os.PathLike | str | None = None,
    ) -> BodyDecoder:
        """Pick the decoder for an incoming body.

        Args:
            response_type: Requested body type; None discards the body.
            file_path: Destination when response_type is a path type.
        """
        kind = classify(response_type)

        if kind is BodyKind.NONE:
            return DiscardDecoder()
        if kind is BodyKind.TEXT:
            return TextDecoder()
        if kind is BodyKind.BYTES:
            return BytesDecoder()
        if kind is BodyKind.STREAM:
            return StreamDecoder()
        if kind is BodyKind.FILE:
            return FileDecoder(file_path if file_path is not None else self._response_file)
        return StructuredDecoder(self._serializer, response_type)
