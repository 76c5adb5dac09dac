import logging

from homeassistant import config_entries, core
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from .coordinator import TryFiCoordinator
from .coordinator_utils import validate_credentials as _validate_credentials

PLATFORMS: list[Platform] = [
    Platform.BINARY_SENSOR,
    Platform.DEVICE_TRACKER,
    Platform.LIGHT,
    Platform.SENSOR,
    Platform.SWITCH,
]
_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Set up platform from a ConfigEntry."""
    error = await _validate_credentials(entry.data[CONF_USERNAME], entry.data[CONF_PASSWORD])
    if error == "cannot_connect":
        raise ConfigEntryNotReady("Cannot reach the TryFi API, will retry later")
    if error == "invalid_auth":
        raise ConfigEntryNotReady("TryFi rejected the credentials, will retry later")

    coordinator = TryFiCoordinator(hass, entry)
    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady:
        await coordinator.async_shutdown()
        raise

    entry.runtime_data = coordinator
    entry.async_on_unload(
        entry.add_update_listener(_async_update_listener)
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_remove_config_entry_device(
    hass: core.HomeAssistant, config_entry: config_entries.ConfigEntry, device_entry
) -> bool:
    """Allow removing a device only once its pet is gone from the account."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    tracked = {coordinator.device_identifier(pet_id) for pet_id in coordinator.data.pets}
    if tracked & set(device_entry.identifiers):
        _LOGGER.warning("Device %s still belongs to a tracked pet", device_entry.id)
        return False
    return True


async def _async_update_listener(hass: HomeAssistant, config_entry):
    """Handle config options update."""
    # Reload the integration when the options change.
    await hass.config_entries.async_reload(config_entry.entry_id)


async def async_unload_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Unload a config entry."""
    unloaded = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unloaded:
        await entry.runtime_data.async_shutdown()
    return unloaded
