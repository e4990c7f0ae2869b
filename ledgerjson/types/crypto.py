"""Content hashes, Ed25519 public keys and composite keys."""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from typing import ClassVar

import base58
from nacl.bindings import crypto_core_ed25519_BYTES, crypto_core_ed25519_is_valid_point

from .. import serialization
from . import Value

ED25519 = 'EDDSA_ED25519_SHA512'

_HEX_RE = re.compile(r'(?:[0-9A-Fa-f]{2})+')


def _bytes(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f'expected bytes, got {type(data).__name__}')
    return bytes(data)


class SecureHash(Value):
    """A fixed-length digest tagged with the algorithm that produced it.

    The text form is `<ALGORITHM>:<UPPERCASE-HEX>`.
    """

    ALGORITHM: ClassVar[str]
    SIZE: ClassVar[int]
    ALGORITHMS: ClassVar[dict[str, type[SecureHash]]] = {}

    __slots__ = ('bytes',)
    _fields = ('bytes',)

    bytes: bytes

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        SecureHash.ALGORITHMS[cls.ALGORITHM] = cls

    def __init__(self, data: bytes) -> None:
        if type(self) is SecureHash:
            raise TypeError('SecureHash is abstract, use a concrete algorithm')
        data = _bytes(data)
        if len(data) != self.SIZE:
            raise ValueError(f'{self.ALGORITHM} digest must be {self.SIZE} bytes, got {len(data)}')
        super().__init__(data)

    @classmethod
    def digest(cls, data: bytes) -> SecureHash:
        """Hash `data` with this algorithm."""
        return cls(hashlib.new(cls.ALGORITHM.lower(), data).digest())

    @staticmethod
    def parse(text: str) -> SecureHash:
        """Parse the text form produced by `str()`."""
        if not isinstance(text, str):
            raise TypeError(f'expected a string, got {type(text).__name__}')
        algorithm, sep, digest = text.partition(':')
        if not sep:
            raise ValueError('missing algorithm prefix')
        try:
            cls = SecureHash.ALGORITHMS[algorithm.upper()]
        except KeyError:
            raise ValueError(f'unsupported hash algorithm: {algorithm}') from None
        if not _HEX_RE.fullmatch(digest):
            raise ValueError('digest is not hexadecimal')
        return cls(bytes.fromhex(digest))

    def __str__(self) -> str:
        return f'{self.ALGORITHM}:{self.bytes.hex().upper()}'


class SHA256(SecureHash):
    ALGORITHM = 'SHA256'
    SIZE = 32
    __slots__ = ()


class SHA512(SecureHash):
    ALGORITHM = 'SHA512'
    SIZE = 64
    __slots__ = ()


def is_ed25519_point(encoded: bytes) -> bool:
    """Return whether `encoded` is a canonical point on the Ed25519 main subgroup."""
    return len(encoded) == crypto_core_ed25519_BYTES and crypto_core_ed25519_is_valid_point(encoded)


@serialization.serializable(1)
class PublicKey(Value):
    """A public key, identified by its signature scheme and raw encoding.

    Ed25519 keys are checked for curve membership when constructed.
    """

    __slots__ = ('encoded', 'scheme')
    _fields = ('encoded', 'scheme')

    encoded: bytes
    scheme: str

    def __init__(self, encoded: bytes, scheme: str = ED25519) -> None:
        encoded = _bytes(encoded)
        if scheme == ED25519 and not is_ed25519_point(encoded):
            raise ValueError('not a valid Ed25519 curve point')
        super().__init__(encoded, scheme)

    @classmethod
    def parse_base58(cls, text: str) -> PublicKey:
        return cls(base58.b58decode(text))

    def to_base58(self) -> str:
        return base58.b58encode(self.encoded).decode('ascii')

    def __str__(self) -> str:
        return self.to_base58()


class CompositeKey(Value):
    """A tree of public keys satisfied once enough weighted leaves have signed."""

    __slots__ = ()

    @staticmethod
    def of(key: PublicKey | CompositeKey) -> CompositeKey:
        return key if isinstance(key, CompositeKey) else Leaf(key)

    @classmethod
    def parse_base58(cls, text: str) -> CompositeKey:
        return serialization.deserialize(base58.b58decode(text), CompositeKey)

    def to_base58(self) -> str:
        return base58.b58encode(serialization.serialize(self)).decode('ascii')

    def leaf_keys(self) -> frozenset[PublicKey]:
        raise NotImplementedError('abstract')

    def is_fulfilled_by(self, keys: Iterable[PublicKey]) -> bool:
        raise NotImplementedError('abstract')

    def __str__(self) -> str:
        return self.to_base58()


@serialization.serializable(2)
class Leaf(CompositeKey):
    __slots__ = ('public_key',)
    _fields = ('public_key',)

    public_key: PublicKey

    def __init__(self, public_key: PublicKey) -> None:
        if not isinstance(public_key, PublicKey):
            raise TypeError(f'expected PublicKey, got {type(public_key).__name__}')
        super().__init__(public_key)

    def leaf_keys(self) -> frozenset[PublicKey]:
        return frozenset([self.public_key])

    def is_fulfilled_by(self, keys: Iterable[PublicKey]) -> bool:
        return self.public_key in set(keys)


@serialization.serializable(3)
class Node(CompositeKey):
    """Fulfilled when the weights of the fulfilled children reach `threshold`.

    Weights default to 1 per child.
    """

    __slots__ = ('threshold', 'children', 'weights')
    _fields = ('threshold', 'children', 'weights')

    threshold: int
    children: tuple[CompositeKey, ...]
    weights: tuple[int, ...]

    def __init__(
        self,
        threshold: int,
        children: Iterable[PublicKey | CompositeKey],
        weights: Iterable[int] | None = None,
    ) -> None:
        children = tuple(CompositeKey.of(child) for child in children)
        weights = (1,) * len(children) if weights is None else tuple(weights)

        if not children:
            raise ValueError('a composite key node needs at least one child')
        if len(weights) != len(children):
            raise ValueError(f'expected {len(children)} weights, got {len(weights)}')
        if any(not isinstance(weight, int) or weight <= 0 for weight in weights):
            raise ValueError('weights must be positive integers')
        if not isinstance(threshold, int) or not 0 < threshold <= sum(weights):
            raise ValueError(f'threshold must be between 1 and {sum(weights)}, got {threshold}')

        super().__init__(threshold, children, weights)

    def leaf_keys(self) -> frozenset[PublicKey]:
        return frozenset().union(*(child.leaf_keys() for child in self.children))

    def is_fulfilled_by(self, keys: Iterable[PublicKey]) -> bool:
        keys = set(keys)
        total = sum(
            weight
            for child, weight in zip(self.children, self.weights)
            if child.is_fulfilled_by(keys)
        )
        return total >= self.threshold
