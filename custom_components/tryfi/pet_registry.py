"""
PetRegistry: the set of pets currently tracked, keyed by pet id.

Mirrors the remote pet list: every successful poll reconciles it, adding
new pets, replacing known ones wholesale and dropping the ones that
disappeared.  Acknowledged write commands patch a single pet in place of a
full refresh.
"""
from __future__ import annotations

import dataclasses
import logging

from .models import TryFiPet

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RegistryDiff:
    added: list[str] = dataclasses.field(default_factory=list)
    updated: list[str] = dataclasses.field(default_factory=list)
    removed: list[str] = dataclasses.field(default_factory=list)


class PetRegistry:
    def __init__(self) -> None:
        self._pets: dict[str, TryFiPet] = {}

    def reconcile(self, pets: list[TryFiPet]) -> RegistryDiff:
        """Replace the tracked set with *pets* and report what changed."""
        incoming = {pet.pet_id: pet for pet in pets}
        diff = RegistryDiff(
            added=[pet_id for pet_id in incoming if pet_id not in self._pets],
            updated=[pet_id for pet_id in incoming if pet_id in self._pets],
            removed=[pet_id for pet_id in self._pets if pet_id not in incoming],
        )
        self._pets = incoming
        if diff.added:
            _LOGGER.info("Discovered %s new TryFi collar(s): %s", len(diff.added), diff.added)
        if diff.removed:
            _LOGGER.info("Removing %s TryFi collar(s) no longer on the account: %s", len(diff.removed), diff.removed)
        return diff

    def upsert(self, pet: TryFiPet) -> None:
        self._pets[pet.pet_id] = pet

    def apply(self, pet_id: str, **changes) -> TryFiPet:
        """Return and store a copy of the pet with *changes* applied."""
        pet = dataclasses.replace(self._pets[pet_id], **changes)
        self._pets[pet_id] = pet
        return pet

    def get(self, pet_id: str) -> TryFiPet | None:
        return self._pets.get(pet_id)

    def snapshot(self) -> dict[str, TryFiPet]:
        return dict(self._pets)

    def __contains__(self, pet_id: object) -> bool:
        return pet_id in self._pets

    def __len__(self) -> int:
        return len(self._pets)
