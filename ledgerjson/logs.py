"""Helpers for configuring and using project logging."""

from __future__ import annotations

import sys
from logging import DEBUG, INFO, Formatter, StreamHandler, getLogger
from types import TracebackType
from typing import TextIO

get = getLogger
log = get(__name__)

# loggers that only speak up at -vv: module/mapper construction and calendar loading
QUIET_LOGGERS = ('ledgerjson.registry', 'ledgerjson.mapper', 'ledgerjson.types')

_debug_level = 0


def init(debug_level: int = 0, log_exceptions: bool = True, stream: TextIO | None = None) -> None:
    """Initializes simple logging defaults."""
    global _debug_level

    root_log = get()

    if root_log.handlers:
        return

    _debug_level = debug_level

    fmt = '%(levelname).1s %(asctime)s . %(message)s'
    formatter = Formatter(fmt)

    handler = StreamHandler(stream)
    handler.setFormatter(formatter)

    root_log.addHandler(handler)
    root_log.setLevel(DEBUG if debug_level > 0 else INFO)

    for name in QUIET_LOGGERS:
        get(name).setLevel(DEBUG if debug_level > 1 else INFO)

    if log_exceptions:
        sys.excepthook = handle_exception


def handle_exception(
    etype: type[BaseException],
    evalue: BaseException,
    etb: TracebackType | None,
) -> None:
    """Log uncaught exceptions while letting Ctrl+C exit quietly.

    Codec errors already name the offending value, so their tracebacks are only
    logged when debugging.
    """
    from .errors import LedgerJsonError
    from .utils.format import format_exc

    if issubclass(etype, KeyboardInterrupt):
        sys.__excepthook__(etype, evalue, etb)
        return
    if issubclass(etype, LedgerJsonError) and _debug_level == 0:
        log.error(format_exc(evalue))
        return
    log.error('unhandled exception', exc_info=(etype, evalue, etb))
