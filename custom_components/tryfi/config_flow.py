"""Config flow for TryFi collar integration."""
from __future__ import annotations
import logging
import uuid
from typing import Any, Dict, Optional
import homeassistant.helpers.config_validation as cv
import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import callback

from .const import (
    CONF_ESCAPE_ALERT_TYPE,
    CONF_ESCAPE_CHECK_INTERVAL,
    CONF_ESCAPE_CONFIRMATIONS,
    CONF_GUID,
    CONF_IGNORED_PETS,
    CONF_POLLING_INTERVAL,
    DOMAIN,
    ESCAPE_ALERT_TYPES,
    MIN_ESCAPE_CHECK_INTERVAL,
    MIN_POLLING_INTERVAL,
)
from .coordinator_utils import validate_credentials as _validate_credentials
from .options import TryFiOptions


_LOGGER = logging.getLogger(__name__)
CONFIG_SCHEMA = vol.Schema(
            {
                vol.Required(CONF_USERNAME, default=''): cv.string,
                vol.Required(CONF_PASSWORD, default=''): cv.string,
            }
        )


def _options_schema(options: TryFiOptions) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_POLLING_INTERVAL, default=options.polling_interval):
                vol.All(vol.Coerce(int), vol.Range(min=MIN_POLLING_INTERVAL)),
            vol.Required(CONF_ESCAPE_ALERT_TYPE, default=options.escape_alert_type):
                vol.In(ESCAPE_ALERT_TYPES),
            vol.Optional(CONF_IGNORED_PETS, default=", ".join(options.ignored_pets)): cv.string,
            vol.Required(CONF_ESCAPE_CONFIRMATIONS, default=options.escape_confirmations):
                vol.All(vol.Coerce(int), vol.Range(min=1)),
            vol.Required(CONF_ESCAPE_CHECK_INTERVAL, default=options.escape_check_interval):
                vol.All(vol.Coerce(int), vol.Range(min=MIN_ESCAPE_CHECK_INTERVAL)),
        }
    )


class CustomFlow(config_entries.ConfigFlow, domain=DOMAIN):
    data: Optional[Dict[str, Any]]

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None):
        errors: Dict[str, str] = {}
        if user_input is not None:
            self.data = dict(user_input)
            # If username is null or empty string, add error
            if not self.data.get(CONF_USERNAME):
                errors['base'] = 'username_required'
            # If password is null or empty string, add error
            elif not self.data.get(CONF_PASSWORD):
                errors['base'] = 'password_required'
            else:
                error = await _validate_credentials(self.data[CONF_USERNAME], self.data[CONF_PASSWORD])
                if error:
                    errors['base'] = error
            if not errors:
                # Create new guid for the entry
                self.data[CONF_GUID] = str(uuid.uuid4())
                return self.async_create_entry(title=self.data[CONF_USERNAME], data=self.data)

        return self.async_show_form(step_id="user", data_schema=CONFIG_SCHEMA, errors=errors)

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Get the options flow for this handler."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Handles options flow for the component."""

    def __init__(self, config_entry: config_entries.ConfigEntry) -> None:
        self._entry = config_entry

    async def async_step_init(
        self, user_input: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        if user_input is not None:
            # Normalise the names so the stored option reads back the same way
            options = TryFiOptions.from_dict(user_input)
            new_options = dict(user_input)
            new_options[CONF_IGNORED_PETS] = ", ".join(options.ignored_pets)
            return self.async_create_entry(title="", data=new_options)

        current = TryFiOptions.from_entry(self._entry)
        return self.async_show_form(step_id="init", data_schema=_options_schema(current))
