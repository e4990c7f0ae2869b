"""Business calendars built from bundled holiday lists."""

from __future__ import annotations

import functools
import itertools
import re
from collections.abc import Iterable
from datetime import date
from importlib import resources

from .. import errors, logs
from . import Value

CALENDAR_PACKAGE = f'{__package__}.calendars'

_NAME_RE = re.compile(r'[A-Za-z][A-Za-z0-9_]*')

log = logs.get(__name__)


def calendar_names() -> tuple[str, ...]:
    """Return the names of all bundled calendars."""
    files = resources.files(CALENDAR_PACKAGE).iterdir()
    return tuple(sorted(f.name[: -len('.txt')] for f in files if f.name.endswith('.txt')))


@functools.cache
def load_holidays(name: str) -> tuple[date, ...]:
    """Load the holiday dates of the bundled calendar called `name`.

    Calendar files hold comma separated ISO dates.
    """
    if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
        raise errors.UnknownCalendar(name)
    path = resources.files(CALENDAR_PACKAGE) / f'{name}.txt'
    try:
        text = path.read_text('utf8')
    except FileNotFoundError:
        raise errors.UnknownCalendar(name) from None

    values = (value.strip() for value in text.split(','))
    holidays = tuple(date.fromisoformat(value) for value in values if value)
    log.debug('calendar loaded: %s (%d holidays)', name, len(holidays))
    return holidays


class BusinessCalendar(Value):
    """A set of holiday dates; weekends are never working days."""

    __slots__ = ('holiday_dates',)
    _fields = ('holiday_dates',)

    holiday_dates: tuple[date, ...]

    def __init__(self, holiday_dates: Iterable[date] = ()) -> None:
        super().__init__(tuple(sorted(set(holiday_dates))))

    @classmethod
    def get_instance(cls, *names: str) -> BusinessCalendar:
        """Merge the named calendars into one."""
        return cls(itertools.chain.from_iterable(load_holidays(name) for name in names))

    def is_working_day(self, day: date) -> bool:
        return day.weekday() < 5 and day not in self.holiday_dates

    def __contains__(self, day: date) -> bool:
        return day in self.holiday_dates
