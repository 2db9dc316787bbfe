"""Fasting state and countdown calculations.

All functions take the current instant as ``now`` and "HH:MM" strings for
Suhoor and Iftar. Times are placed on ``now``'s calendar day and inherit its
tzinfo.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

from .const import (
    PROGRESS_ICONS,
    STATUS_AFTER_IFTAR,
    STATUS_BEFORE_SUHOOR,
    STATUS_FASTING,
    TIME_FORMAT_12HR,
)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TZ_SUFFIX_RE = re.compile(r"\s*\(.*\)")


@dataclass(frozen=True)
class TimeRemaining:
    """Whole minutes left until a target time."""

    total_minutes: int

    @property
    def hours(self) -> int:
        return self.total_minutes // 60

    @property
    def minutes(self) -> int:
        return self.total_minutes % 60

    @property
    def text(self) -> str:
        """Return "Xh Ym", or just "Ym" under an hour."""
        if self.hours > 0:
            return f"{self.hours}h {self.minutes}m"
        return f"{self.minutes}m"


def clean_time(value: str) -> str:
    """Strip a timezone annotation like " (PKT)" from an API time string."""
    return _TZ_SUFFIX_RE.sub("", value).strip()


def parse_time(value: str) -> time:
    """Parse a 24-hour "HH:MM" string, raising ValueError when malformed."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time string: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time out of range: {value!r}")
    return time(hour, minute)


def time_to_datetime(now: datetime, value: str) -> datetime:
    """Return the given time of day on the same calendar day as ``now``."""
    parsed = parse_time(value)
    return now.replace(
        hour=parsed.hour, minute=parsed.minute, second=0, microsecond=0
    )


def _seconds_between(start: datetime, end: datetime) -> float:
    if start.tzinfo is not None and end.tzinfo is not None:
        # Aware datetimes sharing a tzinfo subtract as wall time
        start = start.astimezone(timezone.utc)
        end = end.astimezone(timezone.utc)
    return (end - start).total_seconds()


def _remaining(now: datetime, target: datetime) -> TimeRemaining:
    seconds = _seconds_between(now, target)
    return TimeRemaining(total_minutes=int(seconds // 60))


def time_remaining(now: datetime, target: str) -> TimeRemaining | None:
    """Return the time left until ``target`` today, or None if it has passed."""
    target_dt = time_to_datetime(now, target)
    if _seconds_between(now, target_dt) <= 0:
        return None
    return _remaining(now, target_dt)


def time_remaining_next_day(now: datetime, target: str) -> TimeRemaining:
    """Return the time left until ``target`` on the following calendar day."""
    target_dt = time_to_datetime(now, target) + timedelta(days=1)
    return _remaining(now, target_dt)


def fasting_status(now: datetime, suhoor: str, iftar: str) -> str:
    """Return before-suhoor, fasting or after-iftar for ``now``."""
    suhoor_dt = time_to_datetime(now, suhoor)
    iftar_dt = time_to_datetime(now, iftar)

    if now < suhoor_dt:
        return STATUS_BEFORE_SUHOOR
    if now < iftar_dt:
        return STATUS_FASTING
    return STATUS_AFTER_IFTAR


def status_message(now: datetime, suhoor: str, iftar: str) -> str:
    """Return a friendly sentence describing the fasting status."""
    status = fasting_status(now, suhoor, iftar)

    if status == STATUS_BEFORE_SUHOOR:
        remaining = time_remaining(now, suhoor)
        if remaining:
            return f"Suhoor ends in {remaining.text}"
        return "Suhoor time has passed"
    if status == STATUS_FASTING:
        remaining = time_remaining(now, iftar)
        if remaining:
            return f"Fasting - Iftar in {remaining.text}"
        return "Iftar time reached!"
    return "Iftar time has passed. Alhamdulillah!"


def status_title(
    now: datetime,
    suhoor: str,
    iftar: str,
    in_ramadan: bool,
    days_until: int | None = None,
) -> str:
    """Return a short label for the current state.

    Outside Ramadan this is a day countdown. An empty string means there is
    nothing worth showing.
    """
    if not in_ramadan:
        if days_until is not None and days_until > 0:
            return f"{days_until}d to Ramadan"
        return ""

    status = fasting_status(now, suhoor, iftar)
    if status == STATUS_BEFORE_SUHOOR:
        remaining = time_remaining(now, suhoor)
    elif status == STATUS_FASTING:
        remaining = time_remaining(now, iftar)
    else:
        return ""
    return remaining.text if remaining else ""


def fasting_progress(now: datetime, suhoor: str, iftar: str) -> float:
    """Return the elapsed fraction of the fast, between 0.0 and 1.0."""
    status = fasting_status(now, suhoor, iftar)
    if status == STATUS_BEFORE_SUHOOR:
        return 0.0
    if status == STATUS_AFTER_IFTAR:
        return 1.0

    suhoor_dt = time_to_datetime(now, suhoor)
    iftar_dt = time_to_datetime(now, iftar)
    total = _seconds_between(suhoor_dt, iftar_dt)
    elapsed = _seconds_between(suhoor_dt, now)
    return max(0.0, min(1.0, elapsed / total))


def progress_icon(progress: float) -> str:
    """Return a circle-slice icon for a fasting progress fraction."""
    for index, threshold in enumerate((0.125, 0.375, 0.625, 0.875)):
        if progress < threshold:
            return PROGRESS_ICONS[index]
    return PROGRESS_ICONS[-1]


def format_time(value: str, time_format: str) -> str:
    """Format an "HH:MM" string for display.

    Home Assistant has no server-side clock preference, so the system format
    is shown as 24-hour.
    """
    parsed = parse_time(value)
    if time_format == TIME_FORMAT_12HR:
        period = "PM" if parsed.hour >= 12 else "AM"
        hour12 = parsed.hour % 12 or 12
        return f"{hour12}:{parsed.minute:02d} {period}"
    return f"{parsed.hour:02d}:{parsed.minute:02d}"
