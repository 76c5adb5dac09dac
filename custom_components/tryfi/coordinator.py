"""
DataUpdateCoordinator for the TryFi integration.

Responsibilities:
- Own the single TryFiApi instance for the lifetime of a config entry.
- Drive the main poll every polling_interval seconds and reconcile the
  PetRegistry against the fetched list.
- Feed every pet's reading to the EscapeDetector and fire bus events on
  confirmed / cleared escapes.
- Delegate accelerated rechecks of suspected pets to RecheckQueue
  (recheck_queue.py).
- Push CoordinatorData snapshots to entities after polls, rechecks and
  acknowledged writes.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from homeassistant.const import CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .api import AuthError, TransientRemoteError, TryFiApi, TryFiError
from .const import (
    CONF_GUID,
    DOMAIN,
    EVENT_ESCAPE_CLEARED,
    EVENT_ESCAPE_CONFIRMED,
    MANUFACTURER,
    VERSION,
)
from .coordinator_data import CoordinatorData
from .coordinator_utils import split_ignored
from .escape_detector import EscapeDecision, EscapeDetector, EscapeEvent, EscapeState, is_escaped
from .models import PetMode, TryFiPet
from .options import TryFiOptions
from .pet_registry import PetRegistry
from .recheck_queue import RecheckQueue

__all__ = ["CoordinatorData", "TryFiCoordinator"]

_LOGGER = logging.getLogger(__name__)


class TryFiCoordinator(DataUpdateCoordinator[CoordinatorData]):
    """
    Coordinator for the TryFi integration.

    The main poll and the quick rechecks share one lock, so the remote list
    is never fetched twice at the same time and every state change happens
    on a single path.
    """

    def __init__(self, hass: HomeAssistant, entry, *, sleep=asyncio.sleep) -> None:
        """Initialize the coordinator from a config entry."""
        self.options = TryFiOptions.from_entry(entry)
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=DOMAIN,
            update_interval=timedelta(seconds=self.options.polling_interval),
        )

        self.api = TryFiApi(
            email=entry.data[CONF_USERNAME],
            password=entry.data[CONF_PASSWORD],
        )
        self._guid = entry.data.get(CONF_GUID, entry.entry_id)
        self.registry = PetRegistry()
        self.detector = EscapeDetector(self.options.escape_confirmations)
        self._rechecks = RecheckQueue(
            self._async_quick_check,
            self.options.escape_check_interval,
            sleep=sleep,
        )
        self._poll_lock = asyncio.Lock()

        # Names already reported as ignored, so the info log appears once
        self._reported_ignored: set[str] = set()

        # Flag to distinguish first call from subsequent ones
        self._initial_refresh_done: bool = False

        # Snapshot starts empty; entities must handle missing pets until first refresh
        self.data = CoordinatorData()

    # ------------------------------------------------------------------
    # HA entry point
    # ------------------------------------------------------------------

    async def _async_update_data(self) -> CoordinatorData:
        """
        Called by HA on every update_interval tick.

        A failed poll leaves registry, escape counters and location cache
        untouched and returns the previous snapshot.  Only the very first
        poll raises UpdateFailed, so setup is retried by HA.
        """
        async with self._poll_lock:
            try:
                pets = await self._async_fetch_pets()
            except UpdateFailed:
                if not self._initial_refresh_done:
                    raise
                return self.data

            self._initial_refresh_done = True
            return self._apply_pets(pets)

    async def _async_fetch_pets(self) -> list[TryFiPet]:
        """
        Fetch the full pet list, logging in again once if the session was
        rejected.  Ignored pets are dropped here and never reach the registry.

        Raises UpdateFailed after logging the failure at the level its kind
        deserves.
        """
        try:
            try:
                pets = await self.api.list_devices()
            except AuthError:
                if self.api.session is None:
                    # The lazy first login was itself rejected
                    raise
                _LOGGER.debug("TryFi session rejected, logging in again")
                await self.api.login()
                pets = await self.api.list_devices()
        except TransientRemoteError as exc:
            _LOGGER.debug("TryFi temporarily unavailable, keeping previous state: %s", exc)
            raise UpdateFailed(f"TryFi temporarily unavailable: {exc}") from exc
        except AuthError as exc:
            _LOGGER.error("TryFi authentication failed: %s", exc)
            raise UpdateFailed(f"TryFi authentication failed: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Unexpected error polling TryFi")
            raise UpdateFailed(f"TryFi poll failed: {exc}") from exc

        tracked, ignored = split_ignored(pets, self.options)
        newly_ignored = sorted({pet.name for pet in ignored} - self._reported_ignored)
        if newly_ignored:
            _LOGGER.info("Ignoring pets: %s", ", ".join(newly_ignored))
            self._reported_ignored.update(newly_ignored)
        return tracked

    def _apply_pets(self, pets: list[TryFiPet]) -> CoordinatorData:
        """Reconcile, evaluate every pet and build the new snapshot."""
        diff = self.registry.reconcile(pets)
        for pet_id in diff.removed:
            self._rechecks.cancel(pet_id)
            self.detector.discard(pet_id)
            self.api.forget_pet(pet_id)

        for pet in pets:
            decision = self.detector.evaluate(pet.pet_id, is_escaped(pet))
            self._handle_decision(pet, decision)

        return self._snapshot()

    # ------------------------------------------------------------------
    # Quick recheck (called by RecheckQueue)
    # ------------------------------------------------------------------

    async def _async_quick_check(self, pet_id: str) -> bool:
        """
        Re-poll the full list and re-evaluate only pet_id.

        Returns True while the pet is still suspected, which keeps the
        recheck loop going.
        """
        async with self._poll_lock:
            if pet_id not in self.registry:
                return False
            try:
                pets = await self._async_fetch_pets()
            except UpdateFailed:
                return self.detector.status(pet_id).state is EscapeState.SUSPECTED

            pet = next((p for p in pets if p.pet_id == pet_id), None)
            if pet is None:
                _LOGGER.debug("Pet %s missing from quick recheck, leaving it to the next poll", pet_id)
                return False

            self.registry.upsert(pet)
            decision = self.detector.evaluate(pet_id, is_escaped(pet))
            self._handle_decision(pet, decision)
            # Publish without async_set_updated_data, which would restart the poll timer
            self.data = self._snapshot()
            self.async_update_listeners()
            return decision.needs_recheck

    def _handle_decision(self, pet: TryFiPet, decision: EscapeDecision) -> None:
        if decision.event is EscapeEvent.CONFIRMED:
            _LOGGER.warning(
                "%s has escaped: outside every safe place and not with anyone", pet.name
            )
            self.hass.bus.async_fire(
                EVENT_ESCAPE_CONFIRMED, {"pet_id": pet.pet_id, "name": pet.name}
            )
        elif decision.event is EscapeEvent.CLEARED:
            _LOGGER.info("%s is safe again (%s)", pet.name, pet.place_name or pet.connected_to)
            self.hass.bus.async_fire(
                EVENT_ESCAPE_CLEARED, {"pet_id": pet.pet_id, "name": pet.name}
            )
        elif decision.event is EscapeEvent.RECOVERED:
            _LOGGER.info("%s was briefly outside its safe places, escape not confirmed", pet.name)

        if decision.needs_recheck:
            self._rechecks.schedule(pet.pet_id)
        else:
            self._rechecks.cancel(pet.pet_id)

    def _snapshot(self) -> CoordinatorData:
        return CoordinatorData(pets=self.registry.snapshot(), escape=self.detector.snapshot())

    @property
    def pending_rechecks(self) -> set[str]:
        return self._rechecks.pending

    # ------------------------------------------------------------------
    # Write path, called from light.py and switch.py
    # ------------------------------------------------------------------

    def _require_pet(self, pet_id: str) -> TryFiPet:
        pet = self.registry.get(pet_id)
        if pet is None:
            raise HomeAssistantError(f"TryFi pet {pet_id} is not tracked")
        return pet

    async def async_set_light(self, pet_id: str, on: bool) -> None:
        """
        Switch the collar LED, then update the local snapshot.

        Does NOT trigger a coordinator refresh; the next poll confirms the
        server-side state.
        """
        pet = self._require_pet(pet_id)
        try:
            await self.api.set_light(pet.module_id, on)
        except TryFiError as exc:
            _LOGGER.error("Failed to switch LED %s for %s: %s", "on" if on else "off", pet.name, exc)
            raise HomeAssistantError(f"Failed to switch LED for {pet.name}: {exc}") from exc

        self.registry.apply(pet_id, led_enabled=on)
        self.async_set_updated_data(self._snapshot())

    async def async_set_lost_mode(self, pet_id: str, lost: bool) -> None:
        """Switch lost-dog mode, then update the local snapshot."""
        pet = self._require_pet(pet_id)
        try:
            await self.api.set_lost_mode(pet.module_id, lost)
        except TryFiError as exc:
            _LOGGER.error("Failed to set Lost Dog Mode for %s: %s", pet.name, exc)
            raise HomeAssistantError(f"Failed to set Lost Dog Mode for {pet.name}: {exc}") from exc

        self.registry.apply(pet_id, mode=PetMode.LOST_DOG if lost else PetMode.NORMAL)
        self.async_set_updated_data(self._snapshot())

    # ------------------------------------------------------------------
    # Entity helper: device info dict
    # ------------------------------------------------------------------

    def get_device_info(self, pet_id: str) -> dict | None:
        """Return the HA DeviceInfo dict for the given pet_id."""
        pet = self.data.pets.get(pet_id)
        if pet is None:
            return None
        return {
            "identifiers": {self.device_identifier(pet_id)},
            "name": pet.name,
            "manufacturer": MANUFACTURER,
            "model": pet.breed or "Unknown",
            "serial_number": pet.module_id,
            "sw_version": VERSION,
        }

    @property
    def guid(self) -> str:
        return self._guid

    def device_identifier(self, pet_id: str) -> tuple[str, str]:
        return DOMAIN, f"{self._guid}_{pet_id}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def async_shutdown(self) -> None:
        """Clean up all resources owned by this coordinator."""
        await super().async_shutdown()
        await self._rechecks.shutdown()
        await self.api.close()
