"""
Low-level location fetching from the TryFi API.

Responsible for:
- Fetching the ongoing activity (rest or walk) of one pet
- Extracting coordinates and the safe place from that activity
- Keeping the last good location per pet for use when a fetch fails
"""
import json
import logging

import aiohttp

from custom_components.tryfi.api.errors import MalformedResponseError
from custom_components.tryfi.api.graphql import graphql_request
from custom_components.tryfi.api.queries import PET_LOCATION_QUERY
from custom_components.tryfi.models import NEUTRAL_LOCATION, PetLocation

_LOGGER = logging.getLogger(__name__)


def _coordinates(position: dict | None) -> tuple[float, float]:
    position = position or {}
    return float(position.get("latitude") or 0.0), float(position.get("longitude") or 0.0)


def parse_location(data: dict) -> PetLocation:
    """
    Map the ``pet.ongoingActivity`` object onto a PetLocation.

    OngoingRest carries a position and, inside a safe zone, a place.
    OngoingWalk carries a list of positions; the last one is used and the
    place is always absent.
    """
    pet = data.get("pet")
    if not isinstance(pet, dict):
        raise MalformedResponseError("Location response has no pet")

    activity = pet.get("ongoingActivity")
    if not isinstance(activity, dict):
        raise MalformedResponseError("Location response has no ongoing activity")

    area_name = activity.get("areaName") or None
    typename = activity.get("__typename")
    latitude, longitude = 0.0, 0.0
    place_name = None
    place_address = None

    try:
        if typename == "OngoingRest":
            latitude, longitude = _coordinates(activity.get("position"))
            place = activity.get("place") or {}
            place_name = place.get("name") or None
            place_address = place.get("address") or None
        elif typename == "OngoingWalk":
            positions = activity.get("positions") or []
            if positions:
                latitude, longitude = _coordinates(positions[-1].get("position"))
        else:
            _LOGGER.debug("Unknown activity type %s, keeping neutral coordinates", typename)
    except (TypeError, ValueError, AttributeError) as e:
        raise MalformedResponseError(f"Unexpected activity record: {e!r}") from e

    return PetLocation(
        latitude=latitude,
        longitude=longitude,
        area_name=area_name,
        place_name=place_name,
        place_address=place_address,
    )


async def fetch_pet_location(http: aiohttp.ClientSession, pet_id: str) -> PetLocation:
    """Fetch the current location of one pet; raises on any failure."""
    data = await graphql_request(http, PET_LOCATION_QUERY % json.dumps(pet_id))
    return parse_location(data)


class LocationCache:
    """
    Last successfully fetched location per pet id.

    Written only after a successful fetch; read only as a fallback.
    """

    def __init__(self) -> None:
        self._locations: dict[str, PetLocation] = {}

    def store(self, pet_id: str, location: PetLocation) -> None:
        self._locations[pet_id] = location

    def get(self, pet_id: str) -> PetLocation:
        """Return the cached location, or the neutral location when none exists."""
        return self._locations.get(pet_id, NEUTRAL_LOCATION)

    def discard(self, pet_id: str) -> None:
        self._locations.pop(pet_id, None)

    def __contains__(self, pet_id: object) -> bool:
        return pet_id in self._locations

    def __len__(self) -> int:
        return len(self._locations)
