"""
pdfh - PDF Object Primitives

Value types for the in-memory object graph. Plain Python values stand for the
simple PDF types (None, bool, int, float, bytes, list, dict); the classes here
cover the rest: names, indirect references and streams.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple


class ObjectId(NamedTuple):
    """Identifier of an indirect object: ``(number, generation)``."""

    number: int
    generation: int = 0

    def __str__(self) -> str:
        return f"{self.number} {self.generation}"


@dataclass(frozen=True)
class Name:
    """A PDF name object (e.g. ``/Page``).

    The value is stored without the leading slash; ``str(name)`` adds it back.
    """

    value: str

    def __str__(self) -> str:
        return f"/{self.value}"


@dataclass(frozen=True)
class Reference:
    """Non-owning pointer to another object of the same graph (``12 0 R``)."""

    target: ObjectId

    def __str__(self) -> str:
        return f"{self.target} R"


@dataclass
class Stream:
    """Stream dictionary plus its raw (possibly still encoded) bytes."""

    dictionary: dict[str, Any] = field(default_factory=dict)
    data: bytes = b""

    def get(self, key: str, default: Any = None) -> Any:
        return self.dictionary.get(key, default)


def type_name(value: Any) -> str | None:
    """Return the ``/Type`` of a dictionary or stream, without the slash."""
    dictionary = value.dictionary if isinstance(value, Stream) else value
    if not isinstance(dictionary, dict):
        return None
    kind = dictionary.get("Type")
    if isinstance(kind, Name):
        return kind.value
    return None


def iter_references(value: Any):
    """Yield every :class:`Reference` nested inside *value*."""
    if isinstance(value, Reference):
        yield value
    elif isinstance(value, Stream):
        yield from iter_references(value.dictionary)
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_references(item)
    elif isinstance(value, list):
        for item in value:
            yield from iter_references(item)


def map_references(value: Any, mapping) -> Any:
    """Return a copy of *value* with every reference passed through *mapping*.

    *mapping* receives an :class:`ObjectId` and returns the replacement value,
    usually another :class:`Reference` (or ``None`` for a dangling one).
    """
    if isinstance(value, Reference):
        return mapping(value.target)
    if isinstance(value, Stream):
        return Stream(map_references(value.dictionary, mapping), value.data)
    if isinstance(value, dict):
        return {key: map_references(item, mapping) for key, item in value.items()}
    if isinstance(value, list):
        return [map_references(item, mapping) for item in value]
    return value
