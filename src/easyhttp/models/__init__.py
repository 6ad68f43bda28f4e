"""Models package."""

from easyhttp.models.request import Body, EasyHttpRequest, HttpMethod, RequestBuilder
from easyhttp.models.response import EasyHttpResponse

__all__ = [
    "Body",
    "EasyHttpRequest",
    "RequestBuilder",
    "HttpMethod",
    "EasyHttpResponse",
]
