"""Button platform for the Ramadan integration."""

from __future__ import annotations

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, SERVICE_REFRESH


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Ramadan buttons from a config entry."""
    async_add_entities([RamadanRefreshButton(entry)])


class RamadanRefreshButton(ButtonEntity):
    """Button to refetch fasting times."""

    _attr_has_entity_name = True

    def __init__(self, entry: ConfigEntry) -> None:
        """Initialize the refresh button."""
        self._entry = entry
        self._attr_unique_id = f"{entry.entry_id}_refresh_times"
        self._attr_icon = "mdi:refresh"

    @property
    def name(self) -> str:
        """Return the name."""
        return "Refresh Times"

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

    async def async_press(self) -> None:
        """Handle button press."""
        await self.hass.services.async_call(DOMAIN, SERVICE_REFRESH, {})
