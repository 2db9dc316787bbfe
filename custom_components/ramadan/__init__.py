"""The Ramadan integration: Suhoor, Iftar and the Ramadan calendar."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall, callback
from homeassistant.helpers.event import async_track_time_change

from .const import DOMAIN, SERVICE_REFRESH
from .coordinator import RamadanCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.SENSOR, Platform.BUTTON]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Ramadan from a config entry."""
    config = {**entry.data, **entry.options}
    coordinator = RamadanCoordinator(hass, config, entry)
    await coordinator.async_config_entry_first_refresh()

    store = {"coordinator": coordinator}
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = store

    @callback
    def _midnight_refresh(_now) -> None:
        """Refetch once the local date has changed."""
        _LOGGER.debug("New day, refreshing fasting times")
        hass.async_create_task(coordinator.async_request_refresh())

    entry.async_on_unload(
        async_track_time_change(hass, _midnight_refresh, hour=0, minute=1, second=0)
    )
    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    if not hass.services.has_service(DOMAIN, SERVICE_REFRESH):

        async def _handle_refresh(call: ServiceCall) -> None:
            """Refresh every configured entry."""
            for entry_store in list(hass.data.get(DOMAIN, {}).values()):
                await entry_store["coordinator"].async_request_refresh()

        hass.services.async_register(DOMAIN, SERVICE_REFRESH, _handle_refresh)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unloaded = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unloaded:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        if not hass.data[DOMAIN]:
            hass.services.async_remove(DOMAIN, SERVICE_REFRESH)
    return unloaded
