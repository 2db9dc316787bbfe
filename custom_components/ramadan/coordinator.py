"""DataUpdateCoordinator for the Ramadan integration."""

from __future__ import annotations

import logging
import re
from datetime import date, timedelta

import aiohttp

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from .const import (
    ALADHAN_BASE,
    CALC_METHODS,
    CONF_CITY,
    CONF_COUNTRY,
    CONF_HIJRI_OFFSET,
    CONF_METHOD,
    DEFAULT_CITY,
    DEFAULT_COUNTRY,
    DEFAULT_HIJRI_OFFSET,
    DEFAULT_METHOD,
    DOMAIN,
    RAMADAN_MONTH,
)
from .fasting import clean_time, parse_time
from .hijri import (
    HijriDate,
    adjust_hijri_date,
    days_until_ramadan,
    is_ramadan,
    ramadan_hijri_year,
)
from .ramadan_calendar import (
    RamadanDay,
    build_ramadan_days,
    gregorian_date,
    ramadan_dates,
    ramadan_day_number,
)

_LOGGER = logging.getLogger(__name__)

FETCH_ERRORS = (
    aiohttp.ClientError,
    TimeoutError,
    AttributeError,
    KeyError,
    TypeError,
    ValueError,
)


def normalize_location(value: str) -> str:
    """Trim a city or country, dropping anything after a comma."""
    value = value.strip().split(",")[0]
    return re.sub(r"\s+", " ", value).strip()


class FastingData:
    """Container for one day's fasting data."""

    def __init__(
        self,
        date: str,
        suhoor: str,
        iftar: str,
        hijri: HijriDate,
        gregorian_readable: str = "",
        timezone: str | None = None,
        method_name: str | None = None,
        ramadan_year: int | None = None,
        calendar: list[RamadanDay] | None = None,
    ) -> None:
        """Initialize fasting data."""
        self.date = date
        self.suhoor = suhoor
        self.iftar = iftar
        self.hijri = hijri
        self.gregorian_readable = gregorian_readable
        self.timezone = timezone
        self.method_name = method_name
        self.ramadan_year = ramadan_year
        self.calendar = calendar or []
        self.is_ramadan = is_ramadan(hijri.month)
        self.days_until_ramadan = days_until_ramadan(hijri.month, hijri.day)
        self.ramadan_day = ramadan_day_number(self.calendar)


class RamadanCoordinator(DataUpdateCoordinator[FastingData]):
    """Coordinator to fetch fasting times and the Ramadan calendar."""

    def __init__(
        self,
        hass: HomeAssistant,
        config: dict,
        entry: ConfigEntry | None = None,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=DOMAIN,
            update_interval=timedelta(hours=6),
        )
        self.config = config
        self._calendar_year: int | None = None
        self._calendar_dates: list[date] = []
        self._calendar_timings: dict[date, dict] = {}

    @property
    def offset(self) -> int:
        """Return the configured Hijri day offset."""
        return int(self.config.get(CONF_HIJRI_OFFSET, DEFAULT_HIJRI_OFFSET))

    @property
    def method(self) -> int:
        """Return the configured calculation method."""
        return int(self.config.get(CONF_METHOD, DEFAULT_METHOD))

    def _location_params(self) -> dict[str, str]:
        city = normalize_location(self.config.get(CONF_CITY, DEFAULT_CITY))
        country = normalize_location(self.config.get(CONF_COUNTRY, DEFAULT_COUNTRY))
        if not city or not country:
            raise UpdateFailed("Both city and country must be configured")
        return {"city": city, "country": country, "method": str(self.method)}

    async def _async_update_data(self) -> FastingData:
        """Fetch today's fasting times from AlAdhan."""
        today = dt_util.now().date()

        try:
            payload = await self._fetch_timings(today)
            data = payload["data"]
            timings = data["timings"]
            suhoor = clean_time(timings["Fajr"])
            iftar = clean_time(timings["Maghrib"])
            # Reject unparsable times before they reach the sensors
            parse_time(suhoor)
            parse_time(iftar)
        except FETCH_ERRORS as err:
            raise UpdateFailed(f"Failed to fetch fasting times: {err}") from err

        day, month, year = self._raw_hijri(data, today)
        hijri = adjust_hijri_date(day, month, year, self.offset)
        ramadan_year = ramadan_hijri_year(hijri.month, hijri.year)

        try:
            calendar = await self._async_ramadan_calendar(ramadan_year, today)
        except (*FETCH_ERRORS, UpdateFailed) as err:
            _LOGGER.warning("Could not load Ramadan %s calendar: %s", ramadan_year, err)
            calendar = []

        meta = data.get("meta", {})
        result = FastingData(
            date=today.isoformat(),
            suhoor=suhoor,
            iftar=iftar,
            hijri=hijri,
            gregorian_readable=data.get("date", {}).get("readable", ""),
            timezone=meta.get("timezone"),
            method_name=CALC_METHODS.get(self.method),
            ramadan_year=ramadan_year,
            calendar=calendar,
        )

        _LOGGER.info("Fasting times refreshed for %s", today)
        _LOGGER.debug(
            "  Suhoor %s, Iftar %s, Hijri %s (offset %d)",
            suhoor,
            iftar,
            hijri,
            self.offset,
        )
        return result

    def _raw_hijri(self, data: dict, today: date) -> tuple[int, int, int]:
        """Return the API's Hijri date, converting locally if it is missing."""
        try:
            hijri = data["date"]["hijri"]
            return int(hijri["day"]), int(hijri["month"]["number"]), int(hijri["year"])
        except (KeyError, ValueError, TypeError):
            _LOGGER.debug("Could not parse Hijri date from AlAdhan response")

        try:
            from hijri_converter import Gregorian

            hijri = Gregorian(today.year, today.month, today.day).to_hijri()
        except (ImportError, OverflowError, ValueError) as err:
            raise UpdateFailed(f"Could not determine Hijri date: {err}") from err
        return hijri.day, hijri.month, hijri.year

    async def _async_ramadan_calendar(self, year: int, today: date) -> list[RamadanDay]:
        """Return the Ramadan calendar, fetching it once per Hijri year."""
        if self._calendar_year != year:
            url = f"{ALADHAN_BASE}/hijriCalendarByCity/{year}/{RAMADAN_MONTH}"
            payload = await self._fetch_json(url, self._location_params())
            entries = payload["data"]

            dates = ramadan_dates(entries, self.offset)
            timings_by_date = {gregorian_date(entry): entry["timings"] for entry in entries}

            # Shifting by the offset can move a day outside the fetched month
            for day in dates:
                if day not in timings_by_date:
                    extra = await self._fetch_timings(day)
                    timings_by_date[day] = extra["data"]["timings"]

            self._calendar_year = year
            self._calendar_dates = dates
            self._calendar_timings = timings_by_date
            _LOGGER.debug("Loaded %d days for Ramadan %s", len(dates), year)

        return build_ramadan_days(
            year, self._calendar_dates, self._calendar_timings, today
        )

    async def _fetch_timings(self, day: date) -> dict:
        """Fetch the timings of one Gregorian day."""
        url = f"{ALADHAN_BASE}/timingsByCity/{day.strftime('%d-%m-%Y')}"
        payload = await self._fetch_json(url, self._location_params())

        method_id = payload.get("data", {}).get("meta", {}).get("method", {}).get("id")
        if method_id != self.method:
            raise UpdateFailed(
                f"Calculation method mismatch for {day}: "
                f"selected {self.method}, API returned {method_id}"
            )
        return payload

    async def _fetch_json(self, url: str, params: dict[str, str]) -> dict:
        """GET a JSON document from AlAdhan."""
        session = async_get_clientsession(self.hass)
        async with session.get(
            url, params=params, headers={"Cache-Control": "no-cache"}
        ) as resp:
            resp.raise_for_status()
            return await resp.json()
