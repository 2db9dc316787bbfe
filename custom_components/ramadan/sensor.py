"""Sensor platform for the Ramadan integration."""

from __future__ import annotations

from datetime import timedelta

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.util import dt as dt_util

from .const import (
    CONF_HIJRI_OFFSET,
    CONF_TIME_FORMAT,
    DEFAULT_HIJRI_OFFSET,
    DEFAULT_TIME_FORMAT,
    DOMAIN,
    FASTING_STATES,
    ICONS,
    STATUS_BEFORE_SUHOOR,
    STATUS_FASTING,
)
from .coordinator import RamadanCoordinator
from .fasting import (
    TimeRemaining,
    fasting_progress,
    fasting_status,
    format_time,
    progress_icon,
    status_message,
    status_title,
    time_remaining,
    time_remaining_next_day,
    time_to_datetime,
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Ramadan sensors from a config entry."""
    store = hass.data[DOMAIN][entry.entry_id]
    coordinator: RamadanCoordinator = store["coordinator"]

    async_add_entities(
        [
            FastingTimeSensor(coordinator, entry, "Suhoor"),
            FastingTimeSensor(coordinator, entry, "Iftar"),
            FastingStatusSensor(coordinator, entry),
            FastingCountdownSensor(coordinator, entry),
            FastingTitleSensor(coordinator, entry),
            HijriDateSensor(coordinator, entry),
            RamadanSensor(coordinator, entry),
            RamadanCalendarSensor(coordinator, entry),
        ]
    )


class RamadanBaseSensor(CoordinatorEntity[RamadanCoordinator], SensorEntity):
    """Base class for Ramadan sensors."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._entry = entry
        config = {**entry.data, **entry.options}
        self._time_format = config.get(CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT)

    @property
    def device_info(self) -> DeviceInfo:
        """Return device info."""
        return DeviceInfo(
            identifiers={(DOMAIN, self._entry.entry_id)},
            name="Ramadan",
            manufacturer="AlAdhan",
            model="Fasting Times",
            entry_type=DeviceEntryType.SERVICE,
        )


class RamadanMinuteSensor(RamadanBaseSensor):
    """Sensor whose state depends on the clock and is rewritten every minute."""

    _unsub_timer = None

    async def async_added_to_hass(self) -> None:
        """Start the per-minute timer when added."""
        await super().async_added_to_hass()
        self._unsub_timer = async_track_time_interval(
            self.hass, self._update_state, timedelta(minutes=1)
        )

    async def async_will_remove_from_hass(self) -> None:
        """Cancel the timer when removed."""
        if self._unsub_timer:
            self._unsub_timer()
            self._unsub_timer = None

    @callback
    def _update_state(self, _now) -> None:
        """Force a state write every minute."""
        self.async_write_ha_state()


class FastingTimeSensor(RamadanMinuteSensor):
    """Sensor for today's Suhoor or Iftar time."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
        kind: str,
    ) -> None:
        """Initialize the fasting time sensor."""
        super().__init__(coordinator, entry)
        self._kind = kind
        self._attr_unique_id = f"{entry.entry_id}_{kind.lower()}"
        self._attr_icon = ICONS[kind]

    @property
    def name(self) -> str:
        """Return the name of the sensor."""
        return self._kind

    def _get_time(self) -> str | None:
        data = self.coordinator.data
        if not data:
            return None
        return data.suhoor if self._kind == "Suhoor" else data.iftar

    @property
    def native_value(self) -> str | None:
        """Return the time in the configured display format."""
        value = self._get_time()
        if value is None:
            return None
        return format_time(value, self._time_format)

    @property
    def extra_state_attributes(self) -> dict:
        """Return countdown attributes."""
        value = self._get_time()
        if value is None:
            return {}

        now = dt_util.now()
        target = time_to_datetime(now, value)
        remaining = time_remaining(now, value)
        passed = remaining is None
        if passed:
            target += timedelta(days=1)
            remaining = time_remaining_next_day(now, value)

        return {
            "time": value,
            "datetime": target.isoformat(),
            "passed": passed,
            "countdown": remaining.text,
            "countdown_minutes": remaining.total_minutes,
        }


class FastingStatusSensor(RamadanMinuteSensor):
    """Sensor for the current fasting state."""

    _attr_device_class = SensorDeviceClass.ENUM
    _attr_options = FASTING_STATES

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the status sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_fasting_status"

    @property
    def name(self) -> str:
        """Return the name."""
        return "Fasting Status"

    @property
    def native_value(self) -> str | None:
        """Return before-suhoor, fasting or after-iftar."""
        data = self.coordinator.data
        if not data:
            return None
        return fasting_status(dt_util.now(), data.suhoor, data.iftar)

    @property
    def icon(self) -> str:
        """Return an icon showing how far along the fast is."""
        data = self.coordinator.data
        if not data or not data.is_ramadan:
            return progress_icon(0.0)
        return progress_icon(fasting_progress(dt_util.now(), data.suhoor, data.iftar))

    @property
    def extra_state_attributes(self) -> dict:
        """Return the status message and progress."""
        data = self.coordinator.data
        if not data:
            return {}
        now = dt_util.now()
        return {
            "message": status_message(now, data.suhoor, data.iftar),
            "progress": round(fasting_progress(now, data.suhoor, data.iftar) * 100),
            "is_ramadan": data.is_ramadan,
        }


class FastingCountdownSensor(RamadanMinuteSensor):
    """Sensor showing minutes until the next Suhoor or Iftar."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the countdown sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_countdown"
        self._attr_icon = ICONS["Countdown"]
        self._attr_native_unit_of_measurement = "min"

    @property
    def name(self) -> str:
        """Return the name."""
        return "Countdown"

    def _get_countdown(self) -> tuple[str, str, TimeRemaining | None] | None:
        """Return (target name, time, remaining) for the next event."""
        data = self.coordinator.data
        if not data:
            return None

        now = dt_util.now()
        status = fasting_status(now, data.suhoor, data.iftar)
        if status == STATUS_BEFORE_SUHOOR:
            return "Suhoor", data.suhoor, time_remaining(now, data.suhoor)
        if status == STATUS_FASTING:
            return "Iftar", data.iftar, time_remaining(now, data.iftar)
        return "Suhoor", data.suhoor, time_remaining_next_day(now, data.suhoor)

    @property
    def native_value(self) -> int | None:
        """Return minutes until the next event."""
        countdown = self._get_countdown()
        if not countdown or countdown[2] is None:
            return None
        return countdown[2].total_minutes

    @property
    def extra_state_attributes(self) -> dict:
        """Return countdown breakdown."""
        countdown = self._get_countdown()
        if not countdown or countdown[2] is None:
            return {"target": None, "time": None, "hours": 0, "minutes": 0, "text": ""}

        target, value, remaining = countdown
        return {
            "target": target,
            "time": format_time(value, self._time_format),
            "hours": remaining.hours,
            "minutes": remaining.minutes,
            "text": remaining.text,
        }


class FastingTitleSensor(RamadanMinuteSensor):
    """Short label: time left during Ramadan, days to Ramadan otherwise."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the title sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_title"
        self._attr_icon = ICONS["Title"]

    @property
    def name(self) -> str:
        """Return the name."""
        return "Title"

    @property
    def native_value(self) -> str | None:
        """Return the short label, empty when there is nothing to show."""
        data = self.coordinator.data
        if not data:
            return None
        return status_title(
            dt_util.now(),
            data.suhoor,
            data.iftar,
            data.is_ramadan,
            data.days_until_ramadan,
        )


class HijriDateSensor(RamadanBaseSensor):
    """Sensor showing today's Hijri date after the configured offset."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the Hijri date sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_hijri_date"
        self._attr_icon = ICONS["Hijri"]

    @property
    def name(self) -> str:
        """Return the name."""
        return "Hijri Date"

    @property
    def native_value(self) -> str | None:
        """Return the Hijri date string."""
        if not self.coordinator.data:
            return None
        return str(self.coordinator.data.hijri)

    @property
    def extra_state_attributes(self) -> dict:
        """Return Hijri date components."""
        data = self.coordinator.data
        if not data:
            return {}
        config = {**self._entry.data, **self._entry.options}
        return {
            **data.hijri.as_dict(),
            "offset": config.get(CONF_HIJRI_OFFSET, DEFAULT_HIJRI_OFFSET),
            "gregorian": data.gregorian_readable,
            "timezone": data.timezone,
            "method": data.method_name,
        }


class RamadanSensor(RamadanBaseSensor):
    """Sensor showing whether it is Ramadan and how long until the next one."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the Ramadan sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_ramadan"
        self._attr_icon = ICONS["Ramadan"]

    @property
    def name(self) -> str:
        """Return the name."""
        return "Is Ramadan"

    @property
    def native_value(self) -> str:
        """Return Yes/No for Ramadan status."""
        if not self.coordinator.data:
            return "Unknown"
        return "Yes" if self.coordinator.data.is_ramadan else "No"

    @property
    def extra_state_attributes(self) -> dict:
        """Return Ramadan attributes."""
        data = self.coordinator.data
        if not data:
            return {}
        attrs: dict = {"is_ramadan": data.is_ramadan}
        if data.days_until_ramadan is not None:
            # Estimate: assumes 29.5 days per Hijri month
            attrs["days_until_ramadan"] = data.days_until_ramadan
        if data.ramadan_day is not None:
            attrs["ramadan_day"] = data.ramadan_day
        if data.ramadan_year is not None:
            attrs["ramadan_year"] = data.ramadan_year
        return attrs


class RamadanCalendarSensor(RamadanBaseSensor):
    """Sensor carrying the Suhoor and Iftar times of every Ramadan day."""

    def __init__(
        self,
        coordinator: RamadanCoordinator,
        entry: ConfigEntry,
    ) -> None:
        """Initialize the calendar sensor."""
        super().__init__(coordinator, entry)
        self._attr_unique_id = f"{entry.entry_id}_calendar"
        self._attr_icon = ICONS["Calendar"]

    @property
    def name(self) -> str:
        """Return the name."""
        return "Calendar"

    @property
    def native_value(self) -> str | None:
        """Return the Hijri year of the calendar."""
        data = self.coordinator.data
        if not data or not data.calendar:
            return None
        return f"Ramadan {data.ramadan_year} AH"

    @property
    def extra_state_attributes(self) -> dict:
        """Return the calendar rows."""
        data = self.coordinator.data
        if not data or not data.calendar:
            return {}
        days = []
        for day in data.calendar:
            row = day.as_dict()
            row["suhoor"] = format_time(day.suhoor, self._time_format)
            row["iftar"] = format_time(day.iftar, self._time_format)
            days.append(row)
        return {
            "start": data.calendar[0].gregorian_date.isoformat(),
            "end": data.calendar[-1].gregorian_date.isoformat(),
            "today": data.ramadan_day,
            "days": days,
        }
