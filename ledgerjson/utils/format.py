from __future__ import annotations

import traceback


def format_exc(exc: BaseException) -> str:
    return traceback.format_exception_only(exc.__class__, exc)[0].strip()


def elide(value: str, width: int = 100) -> str:
    return value if len(value) <= width else f'{value[: width - 3]}...'


def elide_data(data: bytes | str, width: int = 100) -> str:
    """Return a printable, width-limited rendition of a raw JSON document."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data).decode('utf8', errors='replace')
    return elide(data, width)
