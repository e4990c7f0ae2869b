"""Named lookups for codec classes and immutable bundles of codec instances."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from . import errors, logs

if TYPE_CHECKING:
    from .codec import Codec

log = logs.get(__name__)

T = TypeVar('T')


class Registry(Generic[T]):
    """Keeps a registry of subclasses by name."""

    def __init__(self, base_type: type[T]) -> None:
        self._base_type = base_type
        self._registry: dict[str, type[T]] = {}

    def __getitem__(self, name: str) -> type[T]:
        try:
            return self._registry[name]
        except KeyError:
            raise errors.RegistryError(f'unknown {self._base_type.__name__}: {name}') from None

    def __setitem__(self, name: str, cls: type[T]) -> None:
        if name in self._registry:
            raise errors.RegistryError(f'{self._base_type.__name__} already registered: {name}')
        self._registry[name] = cls


class Module:
    """An immutable, named bundle of codecs.

    Codecs are indexed by the type they handle in two read-only tables, one for
    encoding and one for decoding. A codec that only implements one direction
    appears in one table.
    """

    def __init__(self, name: str, codecs: Iterable[str | Codec]) -> None:
        from .codec import create

        encoders: dict[type, Codec] = {}
        decoders: dict[type, Codec] = {}

        for spec in codecs:
            codec = create(spec)
            if codec.can_encode:
                _add(encoders, codec, name)
            if codec.can_decode:
                _add(decoders, codec, name)

        self.name = name
        self.encoders: Mapping[type, Codec] = MappingProxyType(encoders)
        self.decoders: Mapping[type, Codec] = MappingProxyType(decoders)

        log.debug(
            'module created: %s (%d encoders, %d decoders)', name, len(encoders), len(decoders)
        )

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.name!r})'


def _add(table: dict[type, Any], codec: Codec, module_name: str) -> None:
    if codec.type in table:
        raise errors.RegistryError(
            f'duplicate codec for {codec.type.__name__} in module {module_name}'
        )
    table[codec.type] = codec
