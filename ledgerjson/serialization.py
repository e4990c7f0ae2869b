"""Versioned binary serialization for value types.

A blob is a three byte header (magic plus format version) followed by msgpack.
Every registered value type is written as a msgpack extension whose code
identifies the type and whose payload is the packed tuple of its fields, so a
blob describes itself and can be rebuilt without outside schema.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from msgspec import msgpack

MAGIC = b'LJ'
FORMAT_VERSION = 1
HEADER = MAGIC + bytes([FORMAT_VERSION])

T = TypeVar('T')

_codes: dict[type, int] = {}
_types: dict[int, type] = {}


def serializable(code: int) -> Callable[[type[T]], type[T]]:
    """Class decorator that registers a value type under an extension code."""

    def decorator(cls: type[T]) -> type[T]:
        if code in _types:
            raise ValueError(f'extension code {code} already used by {_types[code].__name__}')
        _codes[cls] = code
        _types[code] = cls
        return cls

    return decorator


def serialize(value: Any) -> bytes:
    """Serialize a registered value type into a versioned blob."""
    return HEADER + msgpack.encode(value, enc_hook=_enc_hook)


def deserialize(data: bytes, expected_type: type[T]) -> T:
    """Rebuild a value from a blob produced by `serialize`.

    Values are reconstructed through their constructors so that any validation
    they perform runs again.
    """
    data = bytes(data)
    if data[: len(MAGIC)] != MAGIC:
        raise ValueError('not a serialized blob')
    if len(data) <= len(MAGIC):
        raise ValueError('truncated blob header')
    version = data[len(MAGIC)]
    if version != FORMAT_VERSION:
        raise ValueError(f'unsupported format version: {version}')

    value = msgpack.decode(data[len(HEADER) :], ext_hook=_ext_hook)
    if not isinstance(value, expected_type):
        raise TypeError(f'expected {expected_type.__name__}, got {type(value).__name__}')
    return value


def _enc_hook(obj: Any) -> msgpack.Ext:
    try:
        code = _codes[type(obj)]
    except KeyError:
        raise NotImplementedError(f'unsupported type: {type(obj).__name__}') from None
    return msgpack.Ext(code, msgpack.encode(obj.astuple(), enc_hook=_enc_hook))


def _ext_hook(code: int, data: memoryview) -> Any:
    try:
        cls = _types[code]
    except KeyError:
        raise ValueError(f'unknown extension code: {code}') from None
    fields = msgpack.decode(data, ext_hook=_ext_hook)
    if not isinstance(fields, list):
        raise TypeError(f'invalid {cls.__name__} payload')
    return cls(*fields)
