# habits/recurrence.py
"""
Recurrence Evaluator
====================

Decides whether a habit or routine is due on a given canonical day.

Weekday indices are Sunday-based (0=Sunday .. 6=Saturday). Malformed rule
data never raises here: a weekly rule whose day-set could not be parsed is
simply never due.
"""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional, Union

from lifeboard.dates import iter_days, to_canonical_date

RECURRENCE_DAILY = "daily"
RECURRENCE_WEEKLY = "weekly"
RECURRENCE_MONTHLY = "monthly"
RECURRENCE_TYPES = (RECURRENCE_DAILY, RECURRENCE_WEEKLY, RECURRENCE_MONTHLY)

WEEKDAY_INDICES = range(7)

Weekdays = FrozenSet[int]


@dataclass(frozen=True)
class RecurrenceRule:
    type: str
    days: Optional[Weekdays] = None
    active: bool = True
    # Creation timestamp of the owner; monthly rules repeat on its day of month
    anchor: Optional[Union[datetime.datetime, datetime.date]] = None


def sunday_weekday(day: datetime.date) -> int:
    """Python counts Monday as 0; rules count Sunday as 0."""
    return (day.weekday() + 1) % 7


def parse_weekdays(raw: Union[str, Iterable[int], None]) -> Optional[Weekdays]:
    """
    Read a stored day-set (JSON text such as ``"[1,3,5]"`` or a list).

    Returns None for anything that is not a list of weekday indices.
    """
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return None

    days = set()
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, int) or value not in WEEKDAY_INDICES:
            return None
        days.add(value)
    return frozenset(days)


def serialize_weekdays(days: Optional[Iterable[int]]) -> Optional[str]:
    if days is None:
        return None
    return json.dumps(sorted(days))


def is_due(rule: RecurrenceRule, day: datetime.date) -> bool:
    if not rule.active:
        return False

    if rule.type == RECURRENCE_DAILY:
        return True

    if rule.type == RECURRENCE_WEEKLY:
        if rule.days is None:
            return False
        return sunday_weekday(day) in rule.days

    if rule.type == RECURRENCE_MONTHLY:
        if rule.anchor is None:
            return False
        # Day 31 never matches a 30-day month; no clamping to month end
        return day.day == to_canonical_date(rule.anchor).day

    return False


def due_dates(rule: RecurrenceRule, start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield the due days between start and end, both inclusive."""
    for day in iter_days(start, end):
        if is_due(rule, day):
            yield day
