"""JSON serializer backed by pydantic TypeAdapter."""

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")


@lru_cache(maxsize=256)
def _get_type_adapter(tp: Any) -> TypeAdapter:
    """Return a cached TypeAdapter for tp."""
    return TypeAdapter(tp)


class PydanticJsonSerializer:
    """Default JSON serializer.

    Handles pydantic models, dataclasses, TypedDicts, builtins and
    parametrized generics such as list[str]. Stateless apart from the
    shared adapter cache, so one instance can serve concurrent requests.
    """

    def serialize(self, value: Any) -> str:
        adapter = _get_type_adapter(value.__class__)
        return adapter.dump_json(value).decode("utf-8")

    def deserialize(self, data: str, target_type: type[T]) -> T:
        adapter = _get_type_adapter(target_type)
        return adapter.validate_json(data)
