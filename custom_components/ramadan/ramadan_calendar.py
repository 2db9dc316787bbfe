"""Ramadan month calendar built from the AlAdhan Hijri calendar endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from .fasting import clean_time, parse_time


@dataclass(frozen=True)
class RamadanDay:
    """Suhoor and Iftar for one day of Ramadan."""

    day_number: int
    gregorian_date: date
    hijri_date: str
    suhoor: str
    iftar: str
    is_today: bool

    def as_dict(self) -> dict:
        """Return the day as a plain dict for state attributes."""
        return {
            "day": self.day_number,
            "date": self.gregorian_date.isoformat(),
            "hijri_date": self.hijri_date,
            "suhoor": self.suhoor,
            "iftar": self.iftar,
            "is_today": self.is_today,
        }


def gregorian_date(entry: dict) -> date:
    """Return the Gregorian date of an AlAdhan calendar entry."""
    greg = entry["date"]["gregorian"]
    return date(int(greg["year"]), int(greg["month"]["number"]), int(greg["day"]))


def ramadan_dates(entries: list[dict], offset: int) -> list[date]:
    """Return the Gregorian dates of Ramadan after applying the Hijri offset.

    A negative offset means the local month starts later than the calculated
    one, so the first day moves forward.
    """
    if not entries:
        return []
    start = gregorian_date(entries[0]) - timedelta(days=offset)
    return [start + timedelta(days=i) for i in range(len(entries))]


def build_ramadan_days(
    year: int,
    dates: list[date],
    timings_by_date: dict[date, dict],
    today: date,
) -> list[RamadanDay]:
    """Build the Ramadan calendar rows for the given dates.

    Raises KeyError when a date has no timings and ValueError when a time
    cannot be parsed.
    """
    days = []
    for index, day in enumerate(dates):
        timings = timings_by_date[day]
        suhoor = clean_time(timings["Fajr"])
        iftar = clean_time(timings["Maghrib"])
        parse_time(suhoor)
        parse_time(iftar)
        number = index + 1
        days.append(
            RamadanDay(
                day_number=number,
                gregorian_date=day,
                hijri_date=f"{number} Ramadan {year}",
                suhoor=suhoor,
                iftar=iftar,
                is_today=day == today,
            )
        )
    return days


def ramadan_day_number(days: list[RamadanDay]) -> int | None:
    """Return today's day of Ramadan, if today is in the calendar."""
    for day in days:
        if day.is_today:
            return day.day_number
    return None
