"""JSON mapper configured with the ledger codecs.

msgspec does the parsing, emitting and mapping of structs, dataclasses and
containers. Types it does not know are handed to the codecs through its
encode/decode hooks, looked up by type in the registered modules.
"""

from __future__ import annotations

import dataclasses
import functools
import re
from collections.abc import Iterator, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

import msgspec

from . import errors, logs, utils
from .codec import Codec
from .codec.calendar import CalendarCodec
from .codec.scalar import HashCodec
from .registry import Module
from .types.crypto import SHA256, SHA512, SecureHash

log = logs.get(__name__)

# typed decoders kept per mapper, least recently used dropped first
DECODER_CACHE_SIZE = 128

# msgspec rejects dates itself; these messages name the offending location as
# `$.field[0]`, with `[...]` for dict values and "`key` in" for dict keys
_DATE_ERROR_RE = re.compile(
    r'(?:Invalid RFC3339 encoded date|Expected `date(?: \| [^`]*)?`, got `\w+`)'
    r' - at (?:`(?P<key>key)` in )?`(?P<path>\$[^`]*)`$'
)
_PATH_PART_RE = re.compile(r'\.([^.\[]+)|\[(\d+|\.\.\.)\]')


class MapperConfig(msgspec.Struct, frozen=True):
    """Options applied to a mapper when it is created."""

    indent: int = 2
    """Pretty-print output with this many spaces. `0` writes compact JSON."""

    single_value_as_array: bool = True
    """Read a bare calendar name as a one-element array of names."""

    big_decimal: bool = True
    """Decode untyped JSON floats as `Decimal` rather than `float`."""


def time_module() -> Module:
    """Bundle of date and date-time codecs."""
    return Module('time', ['date', 'datetime'])


def core_module(config: MapperConfig | None = None) -> Module:
    """Bundle of codecs for the ledger value types."""
    config = config or MapperConfig()
    return Module(
        'core',
        [
            'decimal',
            HashCodec(SecureHash),
            # declared hash fields pick the decoder for their exact algorithm
            HashCodec(SHA256),
            HashCodec(SHA512),
            'public_key',
            'composite_key',
            'party',
            'node_info',
            CalendarCodec(single_value_as_array=config.single_value_as_array),
        ],
    )


class Mapper:
    """Encodes and decodes JSON documents using a fixed set of codec modules.

    A mapper's codec tables are not modified after construction and it can be
    shared between threads. Typed decoders are built on first use and kept in
    a bounded LRU cache.
    """

    def __init__(self, modules: Sequence[Module], config: MapperConfig | None = None) -> None:
        self.config = config or MapperConfig()
        self.modules = tuple(modules)

        self._encoders: dict[type, Codec] = {}
        self._decoders: dict[type, Codec] = {}
        for module in self.modules:
            _merge(self._encoders, module.encoders, module)
            _merge(self._decoders, module.decoders, module)

        self._encoder = msgspec.json.Encoder(enc_hook=self._enc_hook)
        self._float_hook = Decimal if self.config.big_decimal else None
        self._untyped = msgspec.json.Decoder(float_hook=self._float_hook)
        self._typed = functools.lru_cache(maxsize=DECODER_CACHE_SIZE)(self._new_decoder)

        log.debug(
            'mapper created: modules=%s, config=%s',
            ','.join(module.name for module in self.modules),
            self.config,
        )

    def encode(self, obj: Any) -> bytes:
        """Serialize `obj` to JSON bytes."""
        try:
            data = self._encoder.encode(obj)
        except errors.LedgerJsonError:
            raise
        except Exception as exc:
            raise errors.EncodeError(f'{exc}: obj={utils.format.elide(repr(obj))}') from exc
        if self.config.indent > 0:
            data = msgspec.json.format(data, indent=self.config.indent)
        return data

    def decode(self, data: bytes | str, type: Any = Any) -> Any:
        """Deserialize a JSON document into `type`.

        Failures decoding a registered type raise that codec's `ParseError`,
        whether the value is the whole document, a field, or a date used as an
        object key; malformed documents raise `DecodeError`.
        """
        try:
            codec = self._decoders.get(type)
        except TypeError:
            # unhashable annotations are never registered
            codec = None

        try:
            if codec is not None:
                return codec.decode(self._untyped.decode(data))
            value = self._decoder(type).decode(data)
        except errors.LedgerJsonError:
            raise
        except msgspec.ValidationError as exc:
            date_error = self._date_error(data, exc)
            if date_error is not None:
                raise date_error from exc
            raise errors.DecodeError(f'{exc}: data={utils.format.elide_data(data)!r}') from exc
        except Exception as exc:
            raise errors.DecodeError(f'{exc}: data={utils.format.elide_data(data)!r}') from exc

        self._check_decimals(value)
        return value

    def encoder_for(self, cls: type) -> Codec | None:
        """Return the codec used to encode instances of `cls`, if any."""
        for base in cls.__mro__:
            codec = self._encoders.get(base)
            if codec is not None:
                return codec
        return None

    def decoder_for(self, cls: Any) -> Codec | None:
        """Return the codec used to decode values declared as `cls`, if any."""
        return self._decoders.get(cls)

    def _decoder(self, type: Any) -> msgspec.json.Decoder[Any]:
        try:
            hash(type)
        except TypeError:
            # unhashable annotations are not cached
            return self._new_decoder(type)
        return self._typed(type)

    def _new_decoder(self, type: Any) -> msgspec.json.Decoder[Any]:
        return msgspec.json.Decoder(type, dec_hook=self._dec_hook, float_hook=self._float_hook)

    def _date_error(
        self, data: bytes | str, exc: msgspec.ValidationError
    ) -> errors.InvalidDate | None:
        """Return the date codec's error for a date msgspec rejected in a document.

        msgspec decodes date fields and keys natively, so the raw value is
        looked up again at the reported location and run through the codec.
        """
        codec = self._decoders.get(date)
        match = _DATE_ERROR_RE.match(str(exc))
        if codec is None or match is None:
            return None
        try:
            doc = self._untyped.decode(data)
        except msgspec.DecodeError:
            return None

        for node in _locate(doc, match['path']):
            try:
                if match['key']:
                    if isinstance(node, dict):
                        for key in node:
                            codec.decode_key(key)
                else:
                    codec.decode(node)
            except errors.InvalidDate as err:
                return err
        return None

    def _check_decimals(self, value: Any) -> None:
        # msgspec accepts NaN and infinities for Decimal fields
        codec = self._decoders.get(Decimal)
        if codec is None:
            return
        for number in _decimals(value):
            if not number.is_finite():
                codec.decode(str(number))

    def _enc_hook(self, obj: Any) -> Any:
        codec = self.encoder_for(obj.__class__)
        if codec is None:
            raise NotImplementedError(f'unsupported type: {obj.__class__.__name__}')
        return codec.encode(obj)

    def _dec_hook(self, type: Any, obj: Any) -> Any:
        codec = self._decoders.get(type)
        if codec is None:
            raise NotImplementedError(f'unsupported type: {type}')
        return codec.decode(obj)


def _merge(table: dict[type, Codec], codecs: Any, module: Module) -> None:
    for cls, codec in codecs.items():
        if cls in table:
            raise errors.RegistryError(f'{cls.__name__} registered twice (module {module.name})')
        table[cls] = codec


def _locate(doc: Any, path: str) -> list[Any]:
    """Return the values found at a msgspec error path in an untyped document."""
    nodes = [doc]
    for name, index in _PATH_PART_RE.findall(path[1:]):
        found = []
        for node in nodes:
            if name and isinstance(node, dict) and name in node:
                found.append(node[name])
            elif index == '...' and isinstance(node, dict):
                found.extend(node.values())
            elif index.isdigit() and isinstance(node, list) and int(index) < len(node):
                found.append(node[int(index)])
        nodes = found
    return nodes


def _decimals(value: Any) -> Iterator[Decimal]:
    """Yield every `Decimal` held by a decoded document."""
    if isinstance(value, Decimal):
        yield value
    elif isinstance(value, msgspec.Struct):
        for name in value.__struct_fields__:
            yield from _decimals(getattr(value, name))
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        for field in dataclasses.fields(value):
            yield from _decimals(getattr(value, field.name))
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from _decimals(key)
            yield from _decimals(item)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            yield from _decimals(item)


def create_mapper(config: MapperConfig | None = None) -> Mapper:
    """Return a new mapper with the time and core modules installed.

    Every call builds an independent mapper; callers create one at startup and
    pass it to whatever needs it.
    """
    config = config or MapperConfig()
    return Mapper([time_module(), core_module(config)], config)
