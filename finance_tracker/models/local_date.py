"""
Local Calendar Dates

A transaction date is a calendar day chosen by the user in their own
timezone. It has no time-of-day. Stores that only know instants get the
local midnight of that day, and instants coming back are read in the
same zone, so the displayed day never shifts with the host's UTC offset.

DESIGN DECISION: Python's ``date`` already is a local calendar date.
We only define the conversion to and from the storage instant here,
instead of relying on how a string literal happens to be parsed.
"""

from datetime import date, datetime, time, tzinfo
from typing import Optional


def local_zone(tz: Optional[tzinfo] = None) -> tzinfo:
    """Return ``tz`` or the host's local timezone."""
    if tz is not None:
        return tz
    return datetime.now().astimezone().tzinfo


def today(tz: Optional[tzinfo] = None) -> date:
    """Today's calendar date in ``tz`` (host zone when None)."""
    return datetime.now(local_zone(tz)).date()


def to_instant(day: date, tz: Optional[tzinfo] = None) -> datetime:
    """
    Local midnight of ``day`` as an aware datetime.

    With ``tz=None`` the host zone is resolved for that specific day,
    so DST transitions pick the right offset.
    """
    if tz is None:
        return datetime.combine(day, time.min).astimezone()
    return datetime.combine(day, time.min, tzinfo=tz)


def from_instant(instant: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar date of ``instant`` as seen in ``tz``.

    Naive datetimes are taken to already be local wall-clock time.
    """
    if instant.tzinfo is None:
        return instant.date()
    if tz is None:
        return instant.astimezone().date()
    return instant.astimezone(tz).date()
