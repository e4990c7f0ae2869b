"""JSON codecs for ledger value types."""

from .errors import (
    DecodeError,
    EncodeError,
    InvariantViolation,
    LedgerJsonError,
    ParseError,
)
from .mapper import Mapper, MapperConfig, core_module, create_mapper, time_module
from .registry import Module

__all__ = [
    'DecodeError',
    'EncodeError',
    'InvariantViolation',
    'LedgerJsonError',
    'Mapper',
    'MapperConfig',
    'Module',
    'ParseError',
    'core_module',
    'create_mapper',
    'time_module',
]
