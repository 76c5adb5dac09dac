"""
Platform for TryFi binary sensor integration.
Sets up, per collar, the escape alert, the charging state and the low
battery warning.
"""
from __future__ import annotations

import logging

from homeassistant import config_entries
from homeassistant.components.binary_sensor import BinarySensorDeviceClass, BinarySensorEntity
from homeassistant.core import HomeAssistant

from .const import ESCAPE_ALERT_MOTION, LOW_BATTERY_LEVEL
from .coordinator import TryFiCoordinator
from .entity import TryFiEntity, async_setup_pet_entities
from .escape_detector import EscapeState

_LOGGER = logging.getLogger(__name__)


class TryFiEscapeSensor(TryFiEntity, BinarySensorEntity):
    """
    On while the escape of the pet is confirmed.

    Shown as a leak sensor by default so alarm panels treat it as urgent;
    the escape_alert_type option switches it to a motion sensor.
    """

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "escape", "Escape Alert")
        if coordinator.options.escape_alert_type == ESCAPE_ALERT_MOTION:
            self._attr_device_class = BinarySensorDeviceClass.MOTION
        else:
            self._attr_device_class = BinarySensorDeviceClass.MOISTURE
        self._attr_icon = "mdi:dog-side"

    @property
    def is_on(self) -> bool:
        status = self.coordinator.data.escape_status(self._pet_id)
        return status.state is EscapeState.CONFIRMED

    @property
    def extra_state_attributes(self) -> dict:
        status = self.coordinator.data.escape_status(self._pet_id)
        pet = self.pet
        return {
            "escape_state": status.state.value,
            "confirmations": status.counter,
            "place": pet.place_name if pet is not None else None,
            "connected_to": pet.connected_to if pet is not None else None,
        }


class TryFiChargingSensor(TryFiEntity, BinarySensorEntity):
    _attr_device_class = BinarySensorDeviceClass.BATTERY_CHARGING

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "charging", "Charging")

    @property
    def is_on(self) -> bool | None:
        pet = self.pet
        return pet.is_charging if pet is not None else None


class TryFiLowBatterySensor(TryFiEntity, BinarySensorEntity):
    _attr_device_class = BinarySensorDeviceClass.BATTERY

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "low_battery", "Low Battery")

    @property
    def is_on(self) -> bool | None:
        pet = self.pet
        if pet is None:
            return None
        return pet.battery_percent < LOW_BATTERY_LEVEL


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: config_entries.ConfigEntry,
    async_add_entities,
):
    """Add binary sensors for passed config_entry in HA."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    _LOGGER.debug("Setting up TryFi binary sensors")
    async_setup_pet_entities(
        coordinator,
        config_entry,
        async_add_entities,
        lambda coord, pet_id: [
            TryFiEscapeSensor(coord, pet_id),
            TryFiChargingSensor(coord, pet_id),
            TryFiLowBatterySensor(coord, pet_id),
        ],
    )
