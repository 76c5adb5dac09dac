"""
Base entity shared by every TryFi platform.

Each entity is bound to one pet id and reads its state from the
coordinator snapshot.  Entities of pets that disappear from the account
stay registered but report unavailable.
"""
from __future__ import annotations

from typing import Callable, Iterable

from homeassistant.core import callback
from homeassistant.helpers.entity import DeviceInfo, Entity
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import TryFiCoordinator
from .models import TryFiPet


class TryFiEntity(CoordinatorEntity[TryFiCoordinator]):

    def __init__(self, coordinator: TryFiCoordinator, pet_id: str, key: str, label: str) -> None:
        super().__init__(coordinator)
        self._pet_id = pet_id
        pet = coordinator.data.pets.get(pet_id)
        self._pet_name = pet.name if pet is not None else pet_id
        self._attr_unique_id = f"{DOMAIN}_{coordinator.guid}_{pet_id}_{key}"
        self._attr_name = f"{self._pet_name} {label}"

    @property
    def pet(self) -> TryFiPet | None:
        return self.coordinator.data.pets.get(self._pet_id)

    @property
    def available(self) -> bool:
        return super().available and self.pet is not None

    @property
    def device_info(self) -> DeviceInfo | None:
        """Return the device info."""
        return self.coordinator.get_device_info(self._pet_id)


def async_setup_pet_entities(
    coordinator: TryFiCoordinator,
    config_entry,
    async_add_entities,
    build: Callable[[TryFiCoordinator, str], Iterable[Entity]],
) -> None:
    """
    Add the entities returned by build() for every pet, now and whenever a
    later poll discovers a new one.
    """
    known: set[str] = set()

    @callback
    def _add_new_pets() -> None:
        entities: list[Entity] = []
        for pet_id in coordinator.data.pets:
            if pet_id in known:
                continue
            known.add(pet_id)
            entities.extend(build(coordinator, pet_id))
        if entities:
            async_add_entities(entities)

    _add_new_pets()
    config_entry.async_on_unload(coordinator.async_add_listener(_add_new_pets))
