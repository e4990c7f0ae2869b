"""Codec base classes and helpers."""

from __future__ import annotations

from typing import Any, ClassVar

from .. import errors, utils
from ..registry import Registry


def create(name: str | Codec, **kwargs: Any) -> Codec:
    """Return a codec by name or pass through existing instances."""
    if isinstance(name, Codec):
        return name
    cls = REGISTRY[name]
    return cls(**kwargs)


class Codec:
    """Base class for codecs that convert one value type to and from JSON.

    Subclasses implement `dump` and/or `load`. `encode` and `decode` wrap them
    with error context: decoding failures are raised as the codec's `ERROR`
    with the offending JSON value attached.
    """

    NAME: ClassVar[str]
    TYPE: ClassVar[type]
    ERROR: ClassVar[type[errors.ParseError]] = errors.ParseError

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if 'NAME' in cls.__dict__:
            REGISTRY[cls.NAME] = cls

    def __init__(self, type: type | None = None) -> None:
        self.type = self.TYPE if type is None else type

    @property
    def can_encode(self) -> bool:
        return self.__class__.dump is not Codec.dump

    @property
    def can_decode(self) -> bool:
        return self.__class__.load is not Codec.load

    def dump(self, value: Any) -> Any:
        """Convert `value` into a JSON compatible builtin."""
        raise NotImplementedError(f'{self.NAME} codec cannot encode')

    def load(self, obj: Any) -> Any:
        """Convert a decoded JSON value back into the codec's type."""
        raise NotImplementedError(f'{self.NAME} codec cannot decode')

    def encode(self, value: Any) -> Any:
        try:
            return self.dump(value)
        except errors.LedgerJsonError:
            raise
        except Exception as exc:
            raise errors.EncodeError(
                f'{exc}: value={utils.format.elide(repr(value))}'
            ) from exc

    def decode(self, obj: Any) -> Any:
        try:
            return self.load(obj)
        except errors.ParseError:
            raise
        except Exception as exc:
            raise self.ERROR(obj, exc) from exc

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.type.__name__})'


REGISTRY = Registry(Codec)


def _text(obj: Any) -> str:
    """Return `obj` if it is a JSON string."""
    if not isinstance(obj, str):
        raise TypeError(f'expected a string, got {type(obj).__name__}')
    return obj


# populate the registry
from . import calendar, dates, record, scalar  # noqa: E402

__all__ = [
    'REGISTRY',
    'Codec',
    'calendar',
    'create',
    'dates',
    'record',
    'scalar',
]
