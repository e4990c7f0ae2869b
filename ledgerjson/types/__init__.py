"""Immutable value types carried through the JSON codecs."""

from __future__ import annotations

from typing import Any, ClassVar


class Value:
    """Base class for immutable values compared by their fields.

    Subclasses list their fields in `_fields` (constructor order) and declare
    matching `__slots__`.
    """

    __slots__ = ()
    _fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *values: Any) -> None:
        for name, value in zip(self._fields, values, strict=True):
            object.__setattr__(self, name, value)

    def astuple(self) -> tuple[Any, ...]:
        return tuple(getattr(self, name) for name in self._fields)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value) or type(self) is not type(other):
            return NotImplemented
        return self.astuple() == other.astuple()

    def __hash__(self) -> int:
        return hash((self.__class__, self.astuple()))

    def __repr__(self) -> str:
        fields = ', '.join(f'{name}={value!r}' for name, value in zip(self._fields, self.astuple()))
        return f'{self.__class__.__name__}({fields})'


from .calendar import BusinessCalendar  # noqa: E402
from .crypto import (  # noqa: E402
    ED25519,
    SHA256,
    SHA512,
    CompositeKey,
    Leaf,
    Node,
    PublicKey,
    SecureHash,
)
from .node import NodeInfo, Party, PhysicalLocation  # noqa: E402

__all__ = [
    'ED25519',
    'SHA256',
    'SHA512',
    'BusinessCalendar',
    'CompositeKey',
    'Leaf',
    'Node',
    'NodeInfo',
    'Party',
    'PhysicalLocation',
    'PublicKey',
    'SecureHash',
    'Value',
]
