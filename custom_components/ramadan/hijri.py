"""Hijri date adjustment for the Ramadan integration.

Dates reported by the prayer-times API follow a calculated calendar that can
drift a day or two from local moon sighting. The user configures a signed day
offset which is applied here. Month lengths use a simplified model where odd
months have 30 days and even months 29 days.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .const import AVERAGE_HIJRI_MONTH_DAYS, HIJRI_MONTHS, RAMADAN_MONTH


@dataclass(frozen=True)
class HijriDate:
    """A Hijri calendar date."""

    day: int
    month: int
    year: int

    @property
    def month_name(self) -> str:
        """Return the transliterated month name."""
        return month_name(self.month)

    def as_dict(self) -> dict:
        """Return the date as a plain dict for state attributes."""
        return {
            "day": self.day,
            "month": self.month,
            "month_name": self.month_name,
            "year": self.year,
        }

    def __str__(self) -> str:
        return f"{self.day} {self.month_name} {self.year} AH"


def days_in_month(month: int) -> int:
    """Return the simplified length of a Hijri month."""
    return 30 if month % 2 == 1 else 29


def month_name(month: int) -> str:
    """Return the name of a Hijri month number."""
    return HIJRI_MONTHS.get(month, f"Month {month}")


def adjust_hijri_date(day: int, month: int, year: int, offset: int = 0) -> HijriDate:
    """Shift a Hijri date by ``offset`` days, rolling over month and year."""
    if offset == 0:
        return HijriDate(day, month, year)

    day += offset

    while day > days_in_month(month):
        day -= days_in_month(month)
        month += 1
        if month > 12:
            month = 1
            year += 1

    while day < 1:
        month -= 1
        if month < 1:
            month = 12
            year -= 1
        day += days_in_month(month)

    return HijriDate(day, month, year)


def is_ramadan(month: int) -> bool:
    """Return True if the Hijri month is Ramadan."""
    return month == RAMADAN_MONTH


def days_until_ramadan(month: int, day: int) -> int | None:
    """Estimate the days left until the next 1 Ramadan.

    Every remaining month is counted as 29.5 days, so the result can be off by
    a day or so. Returns None during Ramadan.
    """
    if is_ramadan(month):
        return None

    if month < RAMADAN_MONTH:
        months_until = RAMADAN_MONTH - month
    else:
        months_until = 12 - month + RAMADAN_MONTH

    days_left_in_month = 30 - day
    estimate = days_left_in_month + (months_until - 1) * AVERAGE_HIJRI_MONTH_DAYS
    # Halves round up
    return math.floor(estimate + 0.5)


def ramadan_hijri_year(month: int, year: int) -> int:
    """Return the Hijri year of the current or upcoming Ramadan."""
    if month > RAMADAN_MONTH:
        return year + 1
    return year
