"""
Canonical-day helpers.

Every date the engines reason about (habit checks, due days, D-day buckets)
is a calendar date in ``settings.LIFEBOARD_TIME_ZONE``.
"""

import datetime
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from django.conf import settings

DEFAULT_TIME_ZONE = "Asia/Seoul"


def get_canonical_tz() -> ZoneInfo:
    return ZoneInfo(getattr(settings, "LIFEBOARD_TIME_ZONE", DEFAULT_TIME_ZONE))


def to_canonical_date(
    value: Union[datetime.datetime, datetime.date],
    tz: Optional[ZoneInfo] = None,
) -> datetime.date:
    """
    Normalize a timestamp to the canonical calendar day it falls on.

    Plain dates are already day boundaries and pass through unchanged.
    Naive datetimes are taken to be UTC, matching how Django stores them.
    """
    if not isinstance(value, datetime.datetime):
        return value
    tz = tz or get_canonical_tz()
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(tz).date()


def canonical_today(now: Optional[datetime.datetime] = None) -> datetime.date:
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    return to_canonical_date(now)


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Yield every day from start to end, both inclusive."""
    cursor = start
    one_day = datetime.timedelta(days=1)
    while cursor <= end:
        yield cursor
        cursor += one_day
