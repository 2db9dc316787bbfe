"""Tests for the Ramadan calendar builder."""

from datetime import date

import pytest

from custom_components.ramadan.ramadan_calendar import (
    RamadanDay,
    build_ramadan_days,
    gregorian_date,
    ramadan_dates,
    ramadan_day_number,
)

from .conftest import calendar_entries, calendar_entry

START = date(2026, 2, 18)


def test_gregorian_date():
    assert gregorian_date(calendar_entry(date(2026, 3, 1))) == date(2026, 3, 1)


def test_ramadan_dates_without_offset():
    dates = ramadan_dates(calendar_entries(START), 0)
    assert len(dates) == 30
    assert dates[0] == START
    assert dates[-1] == date(2026, 3, 19)


def test_negative_offset_starts_ramadan_later():
    dates = ramadan_dates(calendar_entries(START), -1)
    assert dates[0] == date(2026, 2, 19)
    assert dates[-1] == date(2026, 3, 20)


def test_positive_offset_starts_ramadan_earlier():
    assert ramadan_dates(calendar_entries(START), 1)[0] == date(2026, 2, 17)


def test_ramadan_dates_empty():
    assert ramadan_dates([], -1) == []


def test_build_ramadan_days():
    entries = calendar_entries(START, days=3)
    dates = ramadan_dates(entries, 0)
    timings = {gregorian_date(entry): entry["timings"] for entry in entries}

    days = build_ramadan_days(1447, dates, timings, today=date(2026, 2, 19))

    assert days[0] == RamadanDay(
        day_number=1,
        gregorian_date=START,
        hijri_date="1 Ramadan 1447",
        suhoor="05:18",
        iftar="17:45",
        is_today=False,
    )
    assert [day.is_today for day in days] == [False, True, False]
    assert ramadan_day_number(days) == 2
    assert days[1].as_dict() == {
        "day": 2,
        "date": "2026-02-19",
        "hijri_date": "2 Ramadan 1447",
        "suhoor": "05:19",
        "iftar": "17:45",
        "is_today": True,
    }


def test_build_ramadan_days_requires_timings_for_every_date():
    entries = calendar_entries(START, days=3)
    dates = ramadan_dates(entries, -1)
    timings = {gregorian_date(entry): entry["timings"] for entry in entries}

    with pytest.raises(KeyError):
        build_ramadan_days(1447, dates, timings, today=START)


def test_build_ramadan_days_rejects_bad_times():
    entry = calendar_entry(START, fajr="later")
    with pytest.raises(ValueError):
        build_ramadan_days(1447, [START], {START: entry["timings"]}, today=START)


def test_ramadan_day_number_outside_ramadan():
    entries = calendar_entries(START, days=3)
    dates = ramadan_dates(entries, 0)
    timings = {gregorian_date(entry): entry["timings"] for entry in entries}
    days = build_ramadan_days(1447, dates, timings, today=date(2026, 6, 1))
    assert ramadan_day_number(days) is None
