"""Network participants and the identity records nodes advertise."""

from __future__ import annotations

from collections.abc import Iterable

from .. import serialization
from . import Value
from .crypto import CompositeKey, PublicKey


@serialization.serializable(4)
class Party(Value):
    """A named legal identity and the key that acts for it."""

    __slots__ = ('name', 'owning_key')
    _fields = ('name', 'owning_key')

    name: str
    owning_key: CompositeKey

    def __init__(self, name: str, owning_key: PublicKey | CompositeKey) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError('party name must be a non-empty string')
        if not isinstance(owning_key, (PublicKey, CompositeKey)):
            raise TypeError(f'expected a key, got {type(owning_key).__name__}')
        super().__init__(name, CompositeKey.of(owning_key))

    def __str__(self) -> str:
        return self.name


@serialization.serializable(5)
class PhysicalLocation(Value):
    __slots__ = ('description', 'latitude', 'longitude')
    _fields = ('description', 'latitude', 'longitude')

    description: str
    latitude: float
    longitude: float

    def __init__(self, description: str, latitude: float, longitude: float) -> None:
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f'latitude out of range: {latitude}')
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f'longitude out of range: {longitude}')
        super().__init__(description, float(latitude), float(longitude))


@serialization.serializable(6)
class NodeInfo(Value):
    """Everything a node publishes about itself to the network map.

    It is only ever exchanged as a whole, serialized blob.
    """

    __slots__ = (
        'address',
        'legal_identity',
        'platform_version',
        'advertised_services',
        'physical_location',
    )
    _fields = (
        'address',
        'legal_identity',
        'platform_version',
        'advertised_services',
        'physical_location',
    )

    address: str
    legal_identity: Party
    platform_version: int
    advertised_services: tuple[str, ...]
    physical_location: PhysicalLocation | None

    def __init__(
        self,
        address: str,
        legal_identity: Party,
        platform_version: int = 1,
        advertised_services: Iterable[str] = (),
        physical_location: PhysicalLocation | None = None,
    ) -> None:
        if not isinstance(legal_identity, Party):
            raise TypeError(f'expected Party, got {type(legal_identity).__name__}')
        if not isinstance(platform_version, int) or platform_version < 1:
            raise ValueError(f'invalid platform version: {platform_version}')
        if physical_location is not None and not isinstance(physical_location, PhysicalLocation):
            raise TypeError(f'expected PhysicalLocation, got {type(physical_location).__name__}')
        super().__init__(
            str(address),
            legal_identity,
            platform_version,
            tuple(advertised_services),
            physical_location,
        )

    @classmethod
    def deserialize(cls, data: bytes) -> NodeInfo:
        return serialization.deserialize(data, cls)

    def serialize(self) -> bytes:
        return serialization.serialize(self)
