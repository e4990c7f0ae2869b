from __future__ import annotations

from typing import Any


class LedgerJsonError(Exception):
    """Base class for all ledgerjson exceptions."""


class EncodeError(LedgerJsonError):
    """Adds context for errors raised when encoding."""


class InvariantViolation(EncodeError):
    """Raised when a value breaks a precondition of its encoder.

    This indicates a programming error, not bad input.
    """


class DecodeError(LedgerJsonError):
    """Adds context for errors raised when decoding."""


class ParseError(DecodeError):
    """Raised when a single JSON value cannot be decoded into its type."""

    KIND = 'value'

    def __init__(self, text: Any, cause: BaseException | None = None) -> None:
        super().__init__(f'Invalid {self.KIND} {text!r}: {cause}')
        self.text = text
        self.cause = cause


class InvalidDate(ParseError):
    KIND = 'date'


class InvalidDecimal(ParseError):
    KIND = 'decimal'


class InvalidHash(ParseError):
    KIND = 'hash'


class InvalidPublicKey(ParseError):
    KIND = 'public key'


class InvalidCompositeKey(ParseError):
    KIND = 'composite key'


class InvalidRecord(ParseError):
    KIND = 'node info'


class InvalidCalendar(ParseError):
    KIND = 'calendar(s)'

    @property
    def names(self) -> Any:
        return self.text


class RegistryError(LedgerJsonError):
    """Raised for unknown names or attempts to register a duplicate object."""


class UnknownCalendar(LedgerJsonError, KeyError):
    """Raised when a business calendar name is not bundled."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f'unknown calendar: {self.name}'
