"""
EscapeDetector: debounced escape state per pet.

A pet counts as escaped when it is outside every safe place and not
connected to any user.  A single escaped reading only raises suspicion; the
alarm is confirmed after ``threshold`` consecutive escaped readings and
cleared by the first safe one.

This is pure state-machine logic with no HA, timer or network dependencies.
The coordinator feeds it one boolean per pet per successful poll and acts on
the returned EscapeDecision.
"""
from __future__ import annotations

import dataclasses
import enum
import logging

from .models import TryFiPet

_LOGGER = logging.getLogger(__name__)


class EscapeState(enum.Enum):
    SAFE = "safe"
    SUSPECTED = "suspected"
    CONFIRMED = "confirmed"


class EscapeEvent(enum.Enum):
    """Transitions worth reporting."""

    CONFIRMED = "confirmed"   # alarm raised
    CLEARED = "cleared"       # CONFIRMED -> SAFE
    RECOVERED = "recovered"   # SUSPECTED -> SAFE, alarm was never raised


@dataclasses.dataclass(frozen=True)
class EscapeStatus:
    """Published escape state of one pet."""

    state: EscapeState = EscapeState.SAFE
    counter: int = 0


SAFE_STATUS = EscapeStatus()


@dataclasses.dataclass(frozen=True)
class EscapeDecision:
    """Outcome of evaluating one reading."""

    status: EscapeStatus
    event: EscapeEvent | None = None

    @property
    def state(self) -> EscapeState:
        return self.status.state

    @property
    def needs_recheck(self) -> bool:
        """A quick recheck is wanted while suspicion is unresolved."""
        return self.status.state is EscapeState.SUSPECTED


def is_escaped(pet: TryFiPet) -> bool:
    """Outside every safe place and not with a companion."""
    return pet.location.place_name is None and pet.connected_to is None


class EscapeDetector:
    """Per-pet confirmation counters."""

    def __init__(self, threshold: int = 2) -> None:
        if threshold < 1:
            raise ValueError(f"threshold must be at least 1, got {threshold}")
        self._threshold = threshold
        # pet_id -> counter; absent means 0
        self._counters: dict[str, int] = {}

    @property
    def threshold(self) -> int:
        return self._threshold

    def _state_for(self, counter: int) -> EscapeState:
        if counter == 0:
            return EscapeState.SAFE
        if counter < self._threshold:
            return EscapeState.SUSPECTED
        return EscapeState.CONFIRMED

    def status(self, pet_id: str) -> EscapeStatus:
        counter = self._counters.get(pet_id, 0)
        return EscapeStatus(state=self._state_for(counter), counter=counter)

    def evaluate(self, pet_id: str, escaped: bool) -> EscapeDecision:
        """Apply one reading for *pet_id* and return the resulting decision."""
        previous = self._state_for(self._counters.get(pet_id, 0))

        if not escaped:
            self._counters[pet_id] = 0
            event = None
            if previous is EscapeState.CONFIRMED:
                event = EscapeEvent.CLEARED
            elif previous is EscapeState.SUSPECTED:
                event = EscapeEvent.RECOVERED
            return EscapeDecision(status=SAFE_STATUS, event=event)

        # Saturate at the threshold
        counter = min(self._counters.get(pet_id, 0) + 1, self._threshold)
        self._counters[pet_id] = counter
        state = self._state_for(counter)

        event = None
        if state is EscapeState.CONFIRMED and previous is not EscapeState.CONFIRMED:
            event = EscapeEvent.CONFIRMED
        _LOGGER.debug(
            "Pet %s escaped reading %s/%s -> %s", pet_id, counter, self._threshold, state.value
        )
        return EscapeDecision(status=EscapeStatus(state=state, counter=counter), event=event)

    def discard(self, pet_id: str) -> None:
        """Forget a pet that is no longer tracked."""
        self._counters.pop(pet_id, None)

    def snapshot(self) -> dict[str, EscapeStatus]:
        return {pet_id: self.status(pet_id) for pet_id in self._counters}
