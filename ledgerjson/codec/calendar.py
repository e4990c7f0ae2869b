"""Codec that builds business calendars from lists of calendar names."""

from __future__ import annotations

from typing import Any

from .. import errors
from ..types.calendar import BusinessCalendar
from . import Codec


class CalendarCodec(Codec):
    """Decodes `["UK", "US"]` into the merged calendar.

    With `single_value_as_array` a bare `"UK"` is read as `["UK"]`. Calendars
    are derived values and are never encoded.
    """

    NAME = 'calendar'
    TYPE = BusinessCalendar
    ERROR = errors.InvalidCalendar

    def __init__(self, single_value_as_array: bool = True) -> None:
        super().__init__()
        self.single_value_as_array = single_value_as_array

    def load(self, obj: Any) -> BusinessCalendar:
        if isinstance(obj, str) and self.single_value_as_array:
            obj = [obj]
        if not isinstance(obj, list):
            raise TypeError(f'expected an array of calendar names, got {type(obj).__name__}')
        for name in obj:
            if not isinstance(name, str):
                raise TypeError(f'calendar names must be strings, got {type(name).__name__}')
        return BusinessCalendar.get_instance(*obj)
