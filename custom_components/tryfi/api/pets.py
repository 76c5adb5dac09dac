"""
Low-level pet list fetching from the TryFi API.

Responsible for:
- Fetching the raw pet list across every household of the user
- Mapping the JSON fields of one pet onto a TryFiPet model instance
"""
import logging

import aiohttp

from custom_components.tryfi.api.errors import MalformedResponseError
from custom_components.tryfi.api.graphql import graphql_request
from custom_components.tryfi.api.queries import PETS_QUERY
from custom_components.tryfi.models import PetLocation, PetMode, TryFiPet

_LOGGER = logging.getLogger(__name__)


def _parse_battery(value) -> int:
    """Return the battery level as an int clamped to 0..100 (0 when unreadable)."""
    try:
        level = int(float(value))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, level))


def _parse_mode(value) -> PetMode:
    try:
        return PetMode(value)
    except ValueError:
        _LOGGER.debug("Unknown collar mode %r, treating as NORMAL", value)
        return PetMode.NORMAL


def build_pet(raw: dict, location: PetLocation) -> TryFiPet:
    """Map a single raw pet dict (with its collar) onto a TryFiPet instance."""
    try:
        device = raw["device"]
        info = device.get("info")
        if not isinstance(info, dict):
            info = {}
        params = device.get("operationParams") or {}
        connection = device.get("lastConnectionState") or {}
        connection_type = connection.get("__typename")

        name = raw["name"]
        if not isinstance(name, str) or not name:
            raise MalformedResponseError(f"Pet {raw.get('id')!r} has no usable name: {name!r}")

        connected_to = None
        if connection_type == "ConnectedToUser":
            connected_to = (connection.get("user") or {}).get("firstName") or None

        return TryFiPet(
            pet_id=str(raw["id"]),
            name=name,
            module_id=str(device["moduleId"]),
            breed=(raw.get("breed") or {}).get("name") or "Unknown",
            battery_percent=_parse_battery(info.get("batteryPercent")),
            is_charging=bool(info.get("isCharging")) or connection_type == "ConnectedToBase",
            led_enabled=bool(params.get("ledEnabled")),
            mode=_parse_mode(params.get("mode", PetMode.NORMAL.value)),
            connected_to=connected_to,
            location=location,
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise MalformedResponseError(f"Unexpected pet record: {e!r}") from e


async def fetch_raw_pets(http: aiohttp.ClientSession) -> list[dict]:
    """
    Fetch every pet with a collar from all households of the current user.

    Pets without a collar are skipped.  Raises MalformedResponseError when the
    response has no currentUser, so an empty list always means "no pets".
    """
    data = await graphql_request(http, PETS_QUERY)

    current_user = data.get("currentUser")
    if not isinstance(current_user, dict):
        raise MalformedResponseError("Pet list response has no currentUser")

    pets: list[dict] = []
    for user_household in current_user.get("userHouseholds") or []:
        household = (user_household or {}).get("household") or {}
        for pet in household.get("pets") or []:
            if not isinstance(pet, dict):
                raise MalformedResponseError(f"Unexpected pet entry: {pet!r}")
            if not pet.get("device"):
                _LOGGER.warning("Pet %s has no collar, skipping", pet.get("name"))
                continue
            pets.append(pet)
    return pets
