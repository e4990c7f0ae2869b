"""Codecs for single values written as JSON strings."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from .. import errors
from ..types.crypto import ED25519, CompositeKey, PublicKey, SecureHash
from ..types.node import Party
from . import Codec, _text


class DecimalCodec(Codec):
    """Writes decimals in their own string form so no precision is lost.

    Decodes JSON numbers as well as numeric strings.
    """

    NAME = 'decimal'
    TYPE = Decimal
    ERROR = errors.InvalidDecimal

    def dump(self, value: Decimal) -> str:
        return str(value)

    def load(self, obj: Any) -> Decimal:
        if isinstance(obj, bool):
            raise TypeError('expected a number, got bool')
        if isinstance(obj, Decimal):
            value = obj
        elif isinstance(obj, (int, str)):
            value = Decimal(obj)
        elif isinstance(obj, float):
            value = Decimal(repr(obj))
        else:
            raise TypeError(f'expected a number, got {type(obj).__name__}')
        if not value.is_finite():
            raise ValueError('value is not finite')
        return value


class HashCodec(Codec):
    """Writes hashes as `<ALGORITHM>:<HEX>`.

    Instantiated once per declared hash type; decoding rejects hashes of any
    other algorithm.
    """

    NAME = 'hash'
    TYPE = SecureHash
    ERROR = errors.InvalidHash

    def dump(self, value: SecureHash) -> str:
        return str(value)

    def load(self, obj: Any) -> SecureHash:
        value = SecureHash.parse(_text(obj))
        if not isinstance(value, self.type):
            raise TypeError(f'expected {self.type.__name__}, got {value.ALGORITHM}')
        return value


class PublicKeyCodec(Codec):
    NAME = 'public_key'
    TYPE = PublicKey
    ERROR = errors.InvalidPublicKey

    def dump(self, value: PublicKey) -> str:
        if value.scheme != ED25519:
            raise errors.InvariantViolation(f'unsupported key scheme: {value.scheme}')
        return value.to_base58()

    def load(self, obj: Any) -> PublicKey:
        return PublicKey.parse_base58(_text(obj))


class CompositeKeyCodec(Codec):
    NAME = 'composite_key'
    TYPE = CompositeKey
    ERROR = errors.InvalidCompositeKey

    def dump(self, value: CompositeKey) -> str:
        return value.to_base58()

    def load(self, obj: Any) -> CompositeKey:
        return CompositeKey.parse_base58(_text(obj))


class PartyCodec(Codec):
    """Writes a party as its name; parties are never read back."""

    NAME = 'party'
    TYPE = Party

    def dump(self, value: Party) -> str:
        return value.name
