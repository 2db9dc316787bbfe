"""Tests for setting up the Ramadan integration and its entities."""

from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_fire_time_changed,
)

from custom_components.ramadan.const import (
    CONF_CITY,
    CONF_COUNTRY,
    CONF_HIJRI_OFFSET,
    CONF_METHOD,
    CONF_TIME_FORMAT,
    DOMAIN,
    SERVICE_REFRESH,
)
from custom_components.ramadan.coordinator import RamadanCoordinator

from .conftest import calendar_entries, timings_payload
from .test_coordinator import NOW, TODAY, default_responses, fake_api

CONFIG = {
    CONF_CITY: "Doha",
    CONF_COUNTRY: "Qatar",
    CONF_METHOD: 2,
    CONF_HIJRI_OFFSET: 0,
    CONF_TIME_FORMAT: "12hr",
}

EVENING = datetime(2026, 2, 20, 19, 0, tzinfo=timezone.utc)


@contextmanager
def mocked_aladhan(api: AsyncMock, now: datetime = NOW):
    """Serve AlAdhan from ``api`` with the clock frozen at ``now``."""
    with (
        patch.object(RamadanCoordinator, "_fetch_json", api),
        patch("custom_components.ramadan.coordinator.dt_util.now", return_value=now),
    ):
        yield


async def setup_entry(hass: HomeAssistant, data: dict = CONFIG) -> MockConfigEntry:
    entry = MockConfigEntry(domain=DOMAIN, unique_id=DOMAIN, data=data)
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    return entry


async def unload_entry(hass: HomeAssistant, entry: MockConfigEntry) -> None:
    assert await hass.config_entries.async_unload(entry.entry_id)
    await hass.async_block_till_done()


async def test_setup_creates_sensors(hass: HomeAssistant) -> None:
    with mocked_aladhan(fake_api(default_responses())):
        entry = await setup_entry(hass)

        assert entry.state is ConfigEntryState.LOADED
        assert hass.services.has_service(DOMAIN, SERVICE_REFRESH)

        assert hass.states.get("sensor.ramadan_suhoor").state == "5:10 AM"
        assert hass.states.get("sensor.ramadan_iftar").state == "5:45 PM"
        assert hass.states.get("sensor.ramadan_fasting_status").state == "fasting"
        assert hass.states.get("sensor.ramadan_title").state == "5h 45m"
        assert hass.states.get("sensor.ramadan_countdown").state == "345"

        iftar = hass.states.get("sensor.ramadan_iftar")
        assert iftar.attributes["passed"] is False
        assert iftar.attributes["datetime"] == "2026-02-20T17:45:00+00:00"

        hijri = hass.states.get("sensor.ramadan_hijri_date")
        assert hijri.state == "3 Ramadan 1447 AH"
        assert hijri.attributes["month_name"] == "Ramadan"
        assert hijri.attributes["timezone"] == "Asia/Qatar"
        assert hijri.attributes["method"] == "Islamic Society of North America"

        calendar = hass.states.get("sensor.ramadan_calendar")
        assert calendar.state == "Ramadan 1447 AH"
        assert calendar.attributes["today"] == 3
        assert len(calendar.attributes["days"]) == 30

        await unload_entry(hass, entry)

    assert entry.state is ConfigEntryState.NOT_LOADED
    assert not hass.services.has_service(DOMAIN, SERVICE_REFRESH)


async def test_after_iftar_counts_down_to_next_suhoor(hass: HomeAssistant) -> None:
    with mocked_aladhan(fake_api(default_responses()), now=EVENING):
        entry = await setup_entry(hass)

        assert hass.states.get("sensor.ramadan_fasting_status").state == "after-iftar"
        assert hass.states.get("sensor.ramadan_title").state == ""

        # 19:00 to 05:10 the next morning
        countdown = hass.states.get("sensor.ramadan_countdown")
        assert countdown.state == "610"
        assert countdown.attributes["target"] == "Suhoor"
        assert countdown.attributes["text"] == "10h 10m"

        iftar = hass.states.get("sensor.ramadan_iftar")
        assert iftar.attributes["passed"] is True
        assert iftar.attributes["datetime"] == "2026-02-21T17:45:00+00:00"
        assert iftar.attributes["countdown_minutes"] == 22 * 60 + 45

        await unload_entry(hass, entry)


async def test_outside_ramadan_shows_days_to_ramadan(hass: HomeAssistant) -> None:
    responses = default_responses()
    responses["/timingsByCity/20-02-2026"] = timings_payload(TODAY, hijri=(1, 8, 1447))
    responses["/hijriCalendarByCity/1447/9"] = {
        "data": calendar_entries(date(2026, 3, 20))
    }

    with mocked_aladhan(fake_api(responses)):
        entry = await setup_entry(hass)

        assert hass.states.get("sensor.ramadan_title").state == "29d to Ramadan"

        ramadan = hass.states.get("sensor.ramadan_is_ramadan")
        assert ramadan.state == "No"
        assert ramadan.attributes["days_until_ramadan"] == 29
        assert "ramadan_day" not in ramadan.attributes

        await unload_entry(hass, entry)


async def test_refresh_button_refetches(hass: HomeAssistant) -> None:
    api = fake_api(default_responses())

    with mocked_aladhan(api):
        entry = await setup_entry(hass)
        before = len(api.calls)

        await hass.services.async_call(
            "button",
            "press",
            {"entity_id": "button.ramadan_refresh_times"},
            blocking=True,
        )
        await hass.async_block_till_done()

        assert len(api.calls) > before

        await unload_entry(hass, entry)


async def test_refresh_after_midnight(hass: HomeAssistant) -> None:
    with mocked_aladhan(fake_api(default_responses())):
        entry = await setup_entry(hass)
        coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

        local_now = dt_util.as_local(dt_util.utcnow())
        next_run = dt_util.start_of_local_day(
            local_now.date() + timedelta(days=1)
        ) + timedelta(minutes=1)

        with patch.object(
            coordinator, "async_request_refresh", AsyncMock()
        ) as request_refresh:
            async_fire_time_changed(hass, next_run)
            await hass.async_block_till_done()

        request_refresh.assert_called()

        await unload_entry(hass, entry)


async def test_options_change_reloads_entry(hass: HomeAssistant) -> None:
    responses = default_responses()
    responses["/timingsByCity/20-03-2026"] = timings_payload(date(2026, 3, 20))

    with mocked_aladhan(fake_api(responses)):
        entry = await setup_entry(hass)
        old_coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

        hass.config_entries.async_update_entry(
            entry, options={CONF_HIJRI_OFFSET: -1}
        )
        await hass.async_block_till_done()

        assert entry.state is ConfigEntryState.LOADED
        coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
        assert coordinator is not old_coordinator
        assert coordinator.offset == -1
        assert hass.states.get("sensor.ramadan_hijri_date").state == "2 Ramadan 1447 AH"

        await unload_entry(hass, entry)


async def test_refresh_service_covers_every_entry(hass: HomeAssistant) -> None:
    with mocked_aladhan(fake_api(default_responses())):
        entries = []
        for unique_id in ("doha", "lusail"):
            entry = MockConfigEntry(domain=DOMAIN, unique_id=unique_id, data=CONFIG)
            entry.add_to_hass(hass)
            assert await hass.config_entries.async_setup(entry.entry_id)
            await hass.async_block_till_done()
            entries.append(entry)

        with patch.object(
            RamadanCoordinator, "async_request_refresh", AsyncMock()
        ) as request_refresh:
            await hass.services.async_call(DOMAIN, SERVICE_REFRESH, {}, blocking=True)

        assert request_refresh.await_count == 2

        for entry in entries:
            await unload_entry(hass, entry)

    assert not hass.services.has_service(DOMAIN, SERVICE_REFRESH)
