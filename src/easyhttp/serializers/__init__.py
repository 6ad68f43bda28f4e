"""Serializers package."""

from easyhttp.serializers.base import Serializer
from easyhttp.serializers.json import PydanticJsonSerializer

__all__ = [
    "Serializer",
    "PydanticJsonSerializer",
]
