"""Platform for the TryFi collar LED."""
from __future__ import annotations

import logging

from homeassistant import config_entries
from homeassistant.components.light import ColorMode, LightEntity
from homeassistant.core import HomeAssistant

from .coordinator import TryFiCoordinator
from .entity import TryFiEntity, async_setup_pet_entities

_LOGGER = logging.getLogger(__name__)


class TryFiCollarLight(TryFiEntity, LightEntity):
    """The LED on the collar; on/off only."""

    _attr_color_mode = ColorMode.ONOFF
    _attr_supported_color_modes = {ColorMode.ONOFF}

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "light", "Collar Light")
        self._attr_icon = "mdi:led-on"

    @property
    def is_on(self) -> bool | None:
        pet = self.pet
        return pet.led_enabled if pet is not None else None

    async def async_turn_on(self, **kwargs) -> None:
        await self.coordinator.async_set_light(self._pet_id, True)

    async def async_turn_off(self, **kwargs) -> None:
        await self.coordinator.async_set_light(self._pet_id, False)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: config_entries.ConfigEntry,
    async_add_entities,
):
    """Add collar lights for passed config_entry in HA."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    async_setup_pet_entities(
        coordinator,
        config_entry,
        async_add_entities,
        lambda coord, pet_id: [TryFiCollarLight(coord, pet_id)],
    )
