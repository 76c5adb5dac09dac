"""
TryFiOptions: validated view of a config entry's settings.

Options live in entry.options once the user has edited them; older entries
may carry them in entry.data.  Options win over data.  Any value that fails
validation falls back to its default with a warning, so a bad option never
prevents the integration from starting.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any

import voluptuous as vol

from .const import (
    CONF_ESCAPE_ALERT_TYPE,
    CONF_ESCAPE_CHECK_INTERVAL,
    CONF_ESCAPE_CONFIRMATIONS,
    CONF_IGNORED_PETS,
    CONF_POLLING_INTERVAL,
    DEFAULT_ESCAPE_ALERT_TYPE,
    DEFAULT_ESCAPE_CHECK_INTERVAL,
    DEFAULT_ESCAPE_CONFIRMATIONS,
    DEFAULT_POLLING_INTERVAL,
    ESCAPE_ALERT_TYPES,
    MIN_ESCAPE_CHECK_INTERVAL,
    MIN_POLLING_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)


def pet_names(value: Any) -> tuple[str, ...]:
    """Accept "Rex, Bella" or ["Rex", "Bella"]; blanks are dropped."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise vol.Invalid(f"expected a comma separated list of names, got {value!r}")
    return tuple(str(name).strip() for name in value if str(name).strip())


polling_interval = vol.All(vol.Coerce(int), vol.Range(min=MIN_POLLING_INTERVAL))
escape_check_interval = vol.All(vol.Coerce(int), vol.Range(min=MIN_ESCAPE_CHECK_INTERVAL))
escape_confirmations = vol.All(vol.Coerce(int), vol.Range(min=1))
escape_alert_type = vol.All(vol.Lower, vol.In(ESCAPE_ALERT_TYPES))

# key → (validator, default)
_FIELDS: dict[str, tuple[Any, Any]] = {
    CONF_POLLING_INTERVAL: (polling_interval, DEFAULT_POLLING_INTERVAL),
    CONF_ESCAPE_ALERT_TYPE: (escape_alert_type, DEFAULT_ESCAPE_ALERT_TYPE),
    CONF_IGNORED_PETS: (pet_names, ()),
    CONF_ESCAPE_CONFIRMATIONS: (escape_confirmations, DEFAULT_ESCAPE_CONFIRMATIONS),
    CONF_ESCAPE_CHECK_INTERVAL: (escape_check_interval, DEFAULT_ESCAPE_CHECK_INTERVAL),
}


@dataclasses.dataclass(frozen=True)
class TryFiOptions:
    polling_interval: int = DEFAULT_POLLING_INTERVAL
    escape_alert_type: str = DEFAULT_ESCAPE_ALERT_TYPE
    ignored_pets: tuple[str, ...] = ()
    escape_confirmations: int = DEFAULT_ESCAPE_CONFIRMATIONS
    escape_check_interval: int = DEFAULT_ESCAPE_CHECK_INTERVAL

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TryFiOptions:
        values = {}
        for key, (validator, default) in _FIELDS.items():
            value = raw.get(key)
            if value is None or value == "":
                values[key] = default
                continue
            try:
                values[key] = vol.Schema(validator)(value)
            except vol.Invalid as err:
                _LOGGER.warning(
                    "Invalid value %r for option %s (%s), using default %r",
                    value, key, err, default,
                )
                values[key] = default
        return cls(**values)

    @classmethod
    def from_entry(cls, entry) -> TryFiOptions:
        return cls.from_dict({**entry.data, **entry.options})

    def is_ignored(self, name: str) -> bool:
        """Case-insensitive match against the ignored pet names."""
        lowered = name.lower()
        return any(ignored.lower() == lowered for ignored in self.ignored_pets)
