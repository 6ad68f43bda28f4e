"""Abstract serializer interface using Protocol."""

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Serializer(Protocol):
    """Structured body codec used for types without a built-in encoding.

    Implementations are shared by every in-flight request of a client,
    so they must be safe to call concurrently.
    """

    def serialize(self, value: Any) -> str:
        """Serialize a value to text.

        Args:
            value: The object to serialize.

        Returns:
            str: The serialized representation.
        """
        ...

    def deserialize(self, data: str, target_type: type[T]) -> T:
        """Deserialize text into an instance of target_type.

        Args:
            data: The serialized text.
            target_type: The type to produce.

        Returns:
            The decoded value.
        """
        ...
