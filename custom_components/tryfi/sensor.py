"""
Platform for TryFi sensor integration.
This module is responsible for setting up the collar battery sensor entities
and updating their state from the coordinator snapshot.
"""
from __future__ import annotations

import logging

from homeassistant import config_entries
from homeassistant.components.sensor import SensorDeviceClass, SensorEntity, SensorStateClass
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant

from .coordinator import TryFiCoordinator
from .entity import TryFiEntity, async_setup_pet_entities

_LOGGER = logging.getLogger(__name__)


def battery_icon(battery_level: int | None) -> str:
    """Pick the battery icon in 10% increments."""
    if battery_level is None:
        return "mdi:battery-alert"
    if battery_level >= 100:
        return "mdi:battery"
    if battery_level < 10:
        return "mdi:battery-alert"
    return f"mdi:battery-{battery_level // 10 * 10}"


class TryFiBatterySensor(TryFiEntity, SensorEntity):
    """Representation of a TryFi collar battery level sensor."""

    _attr_device_class = SensorDeviceClass.BATTERY
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = PERCENTAGE

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "battery", "Battery Level")

    @property
    def native_value(self) -> int | None:
        pet = self.pet
        if pet is None:
            return None
        return pet.battery_percent

    @property
    def icon(self) -> str | None:
        return battery_icon(self.native_value)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: config_entries.ConfigEntry,
    async_add_entities,
):
    """Add sensors for passed config_entry in HA."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    _LOGGER.debug("Setting up TryFi battery sensors")
    async_setup_pet_entities(
        coordinator,
        config_entry,
        async_add_entities,
        lambda coord, pet_id: [TryFiBatterySensor(coord, pet_id)],
    )
