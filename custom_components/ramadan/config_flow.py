"""Config flow for the Ramadan integration."""

from __future__ import annotations

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult, OptionsFlow
from homeassistant.core import callback

from .const import (
    CALC_METHODS,
    CONF_CITY,
    CONF_COUNTRY,
    CONF_HIJRI_OFFSET,
    CONF_METHOD,
    CONF_TIME_FORMAT,
    DEFAULT_CITY,
    DEFAULT_COUNTRY,
    DEFAULT_HIJRI_OFFSET,
    DEFAULT_METHOD,
    DEFAULT_TIME_FORMAT,
    DOMAIN,
    MAX_HIJRI_OFFSET,
    MIN_HIJRI_OFFSET,
    TIME_FORMATS,
)
from .coordinator import normalize_location


def _location_schema(current: dict) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_CITY, default=current.get(CONF_CITY, DEFAULT_CITY)): str,
            vol.Required(
                CONF_COUNTRY, default=current.get(CONF_COUNTRY, DEFAULT_COUNTRY)
            ): str,
            vol.Required(
                CONF_METHOD, default=current.get(CONF_METHOD, DEFAULT_METHOD)
            ): vol.In(CALC_METHODS),
        }
    )


def _preferences_schema(current: dict) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(
                CONF_HIJRI_OFFSET,
                default=current.get(CONF_HIJRI_OFFSET, DEFAULT_HIJRI_OFFSET),
            ): vol.All(
                vol.Coerce(int), vol.Range(min=MIN_HIJRI_OFFSET, max=MAX_HIJRI_OFFSET)
            ),
            vol.Required(
                CONF_TIME_FORMAT,
                default=current.get(CONF_TIME_FORMAT, DEFAULT_TIME_FORMAT),
            ): vol.In(TIME_FORMATS),
        }
    )


def _validate_location(user_input: dict) -> dict[str, str]:
    """Return form errors for an empty city or country."""
    errors: dict[str, str] = {}
    if not normalize_location(user_input.get(CONF_CITY, "")):
        errors[CONF_CITY] = "empty_location"
    if not normalize_location(user_input.get(CONF_COUNTRY, "")):
        errors[CONF_COUNTRY] = "empty_location"
    return errors


class RamadanConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Ramadan fasting times."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._data: dict = {}

    async def async_step_user(
        self, user_input: dict | None = None
    ) -> ConfigFlowResult:
        """Step 1: Location and calculation method."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_location(user_input)
            if not errors:
                self._data.update(user_input)
                return await self.async_step_preferences()

        return self.async_show_form(
            step_id="user",
            data_schema=_location_schema(user_input or {}),
            errors=errors,
        )

    async def async_step_preferences(
        self, user_input: dict | None = None
    ) -> ConfigFlowResult:
        """Step 2: Hijri offset and time format."""
        if user_input is not None:
            self._data.update(user_input)
            await self.async_set_unique_id(DOMAIN)
            self._abort_if_unique_id_configured()
            return self.async_create_entry(
                title=f"Ramadan ({self._data[CONF_CITY]})",
                data=self._data,
            )

        return self.async_show_form(
            step_id="preferences",
            data_schema=_preferences_schema({}),
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Get the options flow for this handler."""
        return RamadanOptionsFlow(config_entry)


class RamadanOptionsFlow(OptionsFlow):
    """Handle options flow for Ramadan fasting times."""

    def __init__(self, config_entry) -> None:
        """Initialize options flow."""
        self._config_entry = config_entry
        self._data: dict = {}

    async def async_step_init(
        self, user_input: dict | None = None
    ) -> ConfigFlowResult:
        """Options step 1: Location and calculation method."""
        errors: dict[str, str] = {}

        if user_input is not None:
            errors = _validate_location(user_input)
            if not errors:
                self._data.update(user_input)
                return await self.async_step_preferences()

        current = {**self._config_entry.data, **self._config_entry.options}

        return self.async_show_form(
            step_id="init",
            data_schema=_location_schema(current),
            errors=errors,
        )

    async def async_step_preferences(
        self, user_input: dict | None = None
    ) -> ConfigFlowResult:
        """Options step 2: Hijri offset and time format."""
        if user_input is not None:
            self._data.update(user_input)
            return self.async_create_entry(title="", data=self._data)

        current = {**self._config_entry.data, **self._config_entry.options}

        return self.async_show_form(
            step_id="preferences",
            data_schema=_preferences_schema(current),
        )
