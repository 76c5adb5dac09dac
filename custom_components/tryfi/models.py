"""
Domain models for the TryFi integration.

This module contains pure data classes representing TryFi entities.
These classes have no dependencies on HTTP, API logic, or Home Assistant internals.
"""
from __future__ import annotations

import dataclasses
import enum


class PetMode(str, enum.Enum):
    """Operating mode of a collar."""

    NORMAL = "NORMAL"
    LOST_DOG = "LOST_DOG"


@dataclasses.dataclass(frozen=True)
class Session:
    """Credential pair returned by a successful login."""

    user_id: str
    session_id: str


@dataclasses.dataclass(frozen=True)
class PetLocation:
    """Last known location of a pet."""

    latitude: float = 0.0
    longitude: float = 0.0
    area_name: str | None = None
    # Safe zone name; None when the pet is not inside any known place
    place_name: str | None = None
    place_address: str | None = None


# Returned when a location has never been fetched successfully
NEUTRAL_LOCATION = PetLocation()


@dataclasses.dataclass(frozen=True)
class TryFiPet:
    """Representation of a single pet and its collar."""

    pet_id: str
    name: str
    module_id: str
    breed: str = "Unknown"
    battery_percent: int = 0
    is_charging: bool = False
    led_enabled: bool = False
    mode: PetMode = PetMode.NORMAL
    # First name of the user the collar is connected to, if any
    connected_to: str | None = None
    location: PetLocation = NEUTRAL_LOCATION

    @property
    def is_lost(self) -> bool:
        return self.mode is PetMode.LOST_DOG

    @property
    def place_name(self) -> str | None:
        return self.location.place_name
