"""Codecs for calendar dates and date-times."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from .. import errors
from . import Codec, _text

# ISO-8601 calendar date only: no week dates, ordinals or basic format
_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}', re.ASCII)


class DateCodec(Codec):
    """Writes dates as `YYYY-MM-DD`."""

    NAME = 'date'
    TYPE = date
    ERROR = errors.InvalidDate

    def dump(self, value: date) -> str:
        return value.isoformat()

    def load(self, obj: Any) -> date:
        text = _text(obj)
        if not _DATE_RE.fullmatch(text):
            raise ValueError('expected YYYY-MM-DD')
        return date.fromisoformat(text)

    def decode_key(self, text: str) -> date:
        """Decode a date used as an object key."""
        return self.decode(text)


class DateTimeCodec(Codec):
    """Writes naive date-times in ISO-8601 form."""

    NAME = 'datetime'
    TYPE = datetime

    def dump(self, value: datetime) -> str:
        return value.isoformat()
