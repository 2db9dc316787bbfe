"""Fixtures for Ramadan integration tests."""

from datetime import date, timedelta

import pytest


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Let Home Assistant load the integration from custom_components."""
    yield


def timings(fajr: str = "05:10 (+03)", maghrib: str = "17:45 (+03)") -> dict:
    return {
        "Fajr": fajr,
        "Sunrise": "06:25 (+03)",
        "Dhuhr": "12:05 (+03)",
        "Asr": "15:20 (+03)",
        "Maghrib": maghrib,
        "Isha": "19:15 (+03)",
    }


def calendar_entry(day: date, fajr: str | None = None) -> dict:
    return {
        "timings": timings(fajr or f"05:{day.day:02d} (+03)"),
        "date": {
            "gregorian": {
                "day": f"{day.day:02d}",
                "month": {"number": day.month, "en": day.strftime("%B")},
                "year": str(day.year),
            },
        },
    }


def calendar_entries(start: date, days: int = 30) -> list[dict]:
    return [calendar_entry(start + timedelta(days=i)) for i in range(days)]


def timings_payload(
    day: date,
    hijri: tuple[int, int, int] | None = (3, 9, 1447),
    method: int = 2,
    fajr: str = "05:10 (+03)",
) -> dict:
    payload = {
        "code": 200,
        "status": "OK",
        "data": {
            "timings": timings(fajr),
            "date": {
                "readable": day.strftime("%d %b %Y"),
                "gregorian": {"date": day.strftime("%d-%m-%Y")},
            },
            "meta": {
                "timezone": "Asia/Qatar",
                "method": {"id": method, "name": "ISNA"},
            },
        },
    }
    if hijri is not None:
        hijri_day, month, year = hijri
        payload["data"]["date"]["hijri"] = {
            "day": f"{hijri_day:02d}",
            "month": {"number": month, "en": "Ramaḍān"},
            "year": str(year),
        }
    return payload
