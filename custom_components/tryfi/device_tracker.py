"""
Platform for TryFi device tracker integration.
Reports the last known position of each collar.  Inside a safe place the
place name becomes the location name, otherwise the area name reported by
TryFi is used.
"""
from __future__ import annotations

import logging

from homeassistant import config_entries
from homeassistant.components.device_tracker import SourceType, TrackerEntity
from homeassistant.core import HomeAssistant

from .coordinator import TryFiCoordinator
from .entity import TryFiEntity, async_setup_pet_entities

_LOGGER = logging.getLogger(__name__)


class TryFiPetTracker(TryFiEntity, TrackerEntity):
    """Representation of a TryFi collar position."""

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "gps", "Location")
        self._attr_icon = "mdi:map-marker"

    @property
    def latitude(self) -> float | None:
        """Return latitude value of the collar."""
        pet = self.pet
        return pet.location.latitude if pet is not None else None

    @property
    def longitude(self) -> float | None:
        """Return longitude value of the collar."""
        pet = self.pet
        return pet.location.longitude if pet is not None else None

    @property
    def location_name(self) -> str | None:
        pet = self.pet
        if pet is None:
            return None
        return pet.location.place_name or pet.location.area_name

    @property
    def source_type(self) -> SourceType:
        return SourceType.GPS

    @property
    def battery_level(self) -> int | None:
        pet = self.pet
        return pet.battery_percent if pet is not None else None


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: config_entries.ConfigEntry,
    async_add_entities,
):
    """Add trackers for passed config_entry in HA."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    _LOGGER.debug("Setting up TryFi trackers")
    async_setup_pet_entities(
        coordinator,
        config_entry,
        async_add_entities,
        lambda coord, pet_id: [TryFiPetTracker(coord, pet_id)],
    )
