# src/todozen/tasks/dates.py

"""
Date keys.

Tasks are partitioned by a canonical "YYYY-MM-DD" string computed in one
reference time zone. Every caller must derive keys through this module with
the same zone, otherwise a task added just before midnight lands under a
different day than the one being displayed.
"""

from __future__ import annotations

import datetime as dt
import re
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DATE_KEY_FORMAT = "%Y-%m-%d"
DEFAULT_TZ = "UTC"

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def resolve_tz(name: str | dt.tzinfo | None) -> dt.tzinfo:
    """Resolve a timezone name into a tzinfo.

    Supported forms:
      - None/"" -> the default reference zone (UTC)
      - "UTC" / "Z" / "GMT" -> dt.timezone.utc
      - "local" / "system" -> the machine's current zone
      - IANA names, e.g. "Australia/Sydney"
      - Fixed offsets: "+10:00", "+1000", "-05:00"

    Raises ValueError for anything else.
    """
    if isinstance(name, dt.tzinfo):
        return name

    s = (name or DEFAULT_TZ).strip() or DEFAULT_TZ
    low = s.lower()

    if low in {"utc", "z", "gmt"}:
        return dt.timezone.utc
    if low in {"local", "system"}:
        tz = dt.datetime.now().astimezone().tzinfo
        return tz if tz is not None else dt.timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign, hh, mm = m.groups()
        delta = dt.timedelta(hours=int(hh), minutes=int(mm))
        return dt.timezone(-delta if sign == "-" else delta)

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        # A tzdata folder name such as "America" surfaces as IsADirectoryError.
        raise ValueError(f"Invalid timezone identifier: {s!r}") from e


def date_key(value: dt.date | dt.datetime, tz: str | dt.tzinfo | None = None) -> str:
    """
    Format a calendar day as a date key.

    Aware datetimes are converted into the reference zone first; naive
    datetimes are taken as already expressed in it.
    """
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(resolve_tz(tz))
        return value.date().strftime(DATE_KEY_FORMAT)
    return value.strftime(DATE_KEY_FORMAT)


def today_key(tz: str | dt.tzinfo | None = None, now: dt.datetime | None = None) -> str:
    if now is None:
        now = dt.datetime.now(dt.timezone.utc)
    elif now.tzinfo is None:
        return date_key(now)
    return date_key(now, tz)


def parse_date_key(key: str) -> dt.date:
    s = (key or "").strip()
    if not _DATE_KEY_RE.match(s):
        raise ValueError(f"Not a YYYY-MM-DD date: {key!r}")
    return dt.datetime.strptime(s, DATE_KEY_FORMAT).date()


def is_date_key(key: str) -> bool:
    try:
        parse_date_key(key)
    except ValueError:
        return False
    return True


def shift_day(key: str, days: int) -> str:
    return date_key(parse_date_key(key) + dt.timedelta(days=days))


def next_day(key: str) -> str:
    return shift_day(key, 1)


def previous_day(key: str) -> str:
    return shift_day(key, -1)
