"""
CoordinatorData: immutable snapshot of all TryFi data shared with entities.

This is a pure data module with no HA or network dependencies.
"""
from __future__ import annotations

import dataclasses

from .escape_detector import SAFE_STATUS, EscapeStatus
from .models import TryFiPet


@dataclasses.dataclass(frozen=True)
class CoordinatorData:
    """
    Typed, copy-on-write snapshot of all TryFi data.

    Always replace via dataclasses.replace(), never mutate in place.
    A pet and its escape status are always published in the same snapshot.
    """

    # pet_id → last TryFiPet
    pets: dict[str, TryFiPet] = dataclasses.field(default_factory=dict)

    # pet_id → escape state after the last evaluation
    escape: dict[str, EscapeStatus] = dataclasses.field(default_factory=dict)

    def escape_status(self, pet_id: str) -> EscapeStatus:
        return self.escape.get(pet_id, SAFE_STATUS)
