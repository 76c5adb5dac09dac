"""
TryFiApi: the client the coordinator talks to.

Responsibilities:
- Own the aiohttp session (and with it the TryFi session cookie).
- Log in lazily and replace the Session wholesale on every login.
- Assemble the pet list with one location per pet.
- Fall back to the last good location when a location fetch fails, so a
  transient failure never looks like the pet leaving its safe zone.
"""
from __future__ import annotations

import logging

import aiohttp

from custom_components.tryfi.api import auth, commands, location, pets
from custom_components.tryfi.api.errors import (
    RequestTimeoutError,
    TransientRemoteError,
    TryFiError,
)
from custom_components.tryfi.api.location import LocationCache
from custom_components.tryfi.models import PetLocation, Session, TryFiPet

_LOGGER = logging.getLogger(__name__)


class TryFiApi:
    """Client for the TryFi REST login and GraphQL endpoints."""

    def __init__(
        self,
        email: str,
        password: str,
        http: aiohttp.ClientSession | None = None,
    ) -> None:
        self._email = email
        self._password = password
        self._http = http
        self._owns_http = http is None
        self._session: Session | None = None
        self._locations = LocationCache()

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def locations(self) -> LocationCache:
        return self._locations

    # ------------------------------------------------------------------
    # Session handling
    # ------------------------------------------------------------------

    def _get_http(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(cookie_jar=aiohttp.CookieJar())
            self._owns_http = True
        return self._http

    async def login(self) -> Session:
        """Exchange the credentials for a new Session; raises AuthError."""
        http = self._get_http()
        # Drop the old cookie so the new session is the only one sent
        http.cookie_jar.clear()
        session = await auth.login(http, self._email, self._password)
        self._session = session
        _LOGGER.info("Successfully authenticated with TryFi")
        return session

    async def _ensure_authenticated(self) -> None:
        if self._session is None:
            await self.login()

    async def close(self) -> None:
        if self._http is not None and self._owns_http and not self._http.closed:
            await self._http.close()
        self._http = None

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def list_devices(self) -> list[TryFiPet]:
        """
        Return every pet with a collar, each with its current location.

        Either the full list is returned or an error is raised.
        """
        await self._ensure_authenticated()
        raw_pets = await pets.fetch_raw_pets(self._get_http())

        result = []
        for raw in raw_pets:
            pet_location = await self.fetch_location(str(raw.get("id")))
            result.append(pets.build_pet(raw, pet_location))

        _LOGGER.debug("Retrieved %s pet(s) from TryFi", len(result))
        return result

    async def fetch_location(self, pet_id: str) -> PetLocation:
        """
        Return the current location of a pet.

        On success the cached location is overwritten.  On failure the cached
        location is returned, or the neutral location when none exists yet.
        """
        try:
            pet_location = await location.fetch_pet_location(self._get_http(), pet_id)
        except RequestTimeoutError:
            _LOGGER.debug("Timeout fetching location for pet %s, using last known location", pet_id)
        except TransientRemoteError as e:
            _LOGGER.debug(
                "TryFi busy (HTTP %s) fetching location for pet %s, using last known location",
                e.status, pet_id,
            )
        except TryFiError as e:
            _LOGGER.warning(
                "Failed to get location for pet %s, using last known location: %s", pet_id, e
            )
        else:
            self._locations.store(pet_id, pet_location)
            return pet_location

        return self._locations.get(pet_id)

    def forget_pet(self, pet_id: str) -> None:
        """Drop everything cached for a pet that is no longer tracked."""
        self._locations.discard(pet_id)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def set_light(self, module_id: str, on: bool) -> None:
        """Switch the collar LED; raises RemoteError on any API error."""
        await self._ensure_authenticated()
        await commands.set_led(self._get_http(), module_id, on)
        _LOGGER.debug("Set LED %s for module %s", "on" if on else "off", module_id)

    async def set_lost_mode(self, module_id: str, lost: bool) -> None:
        """Switch lost-dog mode; raises RemoteError on any API error."""
        await self._ensure_authenticated()
        await commands.set_mode(self._get_http(), module_id, lost)
        _LOGGER.info("Set Lost Dog Mode %s for module %s", "ON" if lost else "OFF", module_id)
