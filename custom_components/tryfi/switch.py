"""
Platform for TryFi switch integration.
Lost Dog Mode makes the collar report its position far more often.  It is
independent of the escape alert, which keeps working in either mode.
"""
from __future__ import annotations

import logging

from homeassistant import config_entries
from homeassistant.components.switch import SwitchDeviceClass, SwitchEntity
from homeassistant.core import HomeAssistant

from .coordinator import TryFiCoordinator
from .entity import TryFiEntity, async_setup_pet_entities

_LOGGER = logging.getLogger(__name__)


class TryFiLostModeSwitch(TryFiEntity, SwitchEntity):
    """Representation of the Lost Dog Mode of a collar."""

    _attr_device_class = SwitchDeviceClass.SWITCH

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str) -> None:
        super().__init__(coordinator, pet_id, "lost_mode", "Lost Dog Mode")
        self._attr_icon = "mdi:map-search"

    @property
    def is_on(self) -> bool | None:
        """Return true if the collar is in Lost Dog Mode."""
        pet = self.pet
        return pet.is_lost if pet is not None else None

    async def async_turn_on(self, **kwargs) -> None:
        await self.coordinator.async_set_lost_mode(self._pet_id, True)

    async def async_turn_off(self, **kwargs) -> None:
        await self.coordinator.async_set_lost_mode(self._pet_id, False)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: config_entries.ConfigEntry,
    async_add_entities,
):
    """Add switches for passed config_entry in HA."""
    coordinator: TryFiCoordinator = config_entry.runtime_data
    _LOGGER.debug("Setting up TryFi lost mode switches")
    async_setup_pet_entities(
        coordinator,
        config_entry,
        async_add_entities,
        lambda coord, pet_id: [TryFiLostModeSwitch(coord, pet_id)],
    )
