"""easyhttp: declarative HTTP requests over httpx.

Describe a request with EasyHttpRequest.builder(), send it with
EasyHttpClient, and get the body back as the type you asked for.
"""

from easyhttp.client import ClientBuilder, EasyHttpClient
from easyhttp.constants import Header
from easyhttp.exceptions import (
    DeserializationError,
    EasyHttpError,
    FileNotFoundError,
    HttpCallError,
    InvalidRequestError,
    MalformedUrlError,
    SerializationError,
)
from easyhttp.models import Body, EasyHttpRequest, EasyHttpResponse, HttpMethod, RequestBuilder
from easyhttp.serializers import PydanticJsonSerializer, Serializer

__version__ = "1.0.0"

__all__ = [
    "EasyHttpClient",
    "ClientBuilder",
    "EasyHttpRequest",
    "RequestBuilder",
    "EasyHttpResponse",
    "HttpMethod",
    "Body",
    "Header",
    "Serializer",
    "PydanticJsonSerializer",
    "EasyHttpError",
    "InvalidRequestError",
    "MalformedUrlError",
    "SerializationError",
    "DeserializationError",
    "FileNotFoundError",
    "HttpCallError",
]
