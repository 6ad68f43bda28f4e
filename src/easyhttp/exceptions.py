"""Custom exceptions for easyhttp.

Provides a structured exception hierarchy for the request pipeline:
building, URL assembly, body negotiation and transport.
"""

import builtins
import errno
from typing import Any


class EasyHttpError(Exception):
    """Base exception class for all easyhttp errors."""

    pass


class InvalidRequestError(EasyHttpError, ValueError):
    """Raised when a request is built with a blank URL or without a method."""

    pass


class MalformedUrlError(EasyHttpError):
    """Raised when the assembled URL is not a valid absolute URI.

    Attributes:
        url: The assembled URL string that failed to parse.
    """

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Malformed URL {url!r}: {message}")


class SerializationError(EasyHttpError):
    """Raised when an outbound body cannot be serialized."""

    def __init__(self, message: str):
        super().__init__(f"Failed to serialize request body: {message}")


class DeserializationError(EasyHttpError):
    """Raised when an inbound body cannot be deserialized.

    Attributes:
        target_type: The type the body was being decoded into.
    """

    def __init__(self, target_type: Any, message: str):
        self.target_type = target_type
        name = getattr(target_type, "__name__", repr(target_type))
        super().__init__(f"Failed to deserialize response body into {name}: {message}")


class FileNotFoundError(EasyHttpError, builtins.FileNotFoundError):
    """Raised when a file-backed body does not resolve to a readable file.

    Also a builtin FileNotFoundError, so callers catching OSError still see it.

    Attributes:
        path: The path that could not be read.
    """

    def __init__(self, path: Any, message: str = "No such readable file"):
        self.path = path
        super().__init__(errno.ENOENT, message, str(path))


class HttpCallError(EasyHttpError):
    """Raised when the transport fails (I/O error, timeout, interruption).

    Attributes:
        method: The HTTP method of the failed call.
        url: The URL of the failed call.
    """

    def __init__(self, method: str, url: str, message: str):
        self.method = method
        self.url = url
        super().__init__(f"HTTP call {method} {url} failed: {message}")
