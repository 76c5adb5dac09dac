"""
Low-level helpers for the TryFi coordinator.

Responsibilities:
- Validate a pair of credentials against the live API before an entry is
  created or set up.
- Split a fetched pet list into tracked and ignored pets.

No HA imports; these functions are pure data / network primitives.
"""
from __future__ import annotations

import logging

from .api import AuthError, TryFiApi, TryFiError
from .models import TryFiPet
from .options import TryFiOptions
from .requests import check_tryfi_availability

_LOGGER = logging.getLogger(__name__)


async def validate_credentials(username: str, password: str) -> str | None:
    """
    Try to log in with the given credentials.

    Returns None on success, "cannot_connect" when TryFi is unreachable and
    "invalid_auth" when the credentials are rejected.
    """
    if not await check_tryfi_availability():
        return "cannot_connect"

    api = TryFiApi(username, password)
    try:
        await api.login()
    except AuthError as exc:
        _LOGGER.warning("TryFi rejected the credentials: %s", exc)
        return "invalid_auth"
    except (TryFiError, OSError) as exc:
        _LOGGER.warning("Could not reach TryFi to validate credentials: %s", exc)
        return "cannot_connect"
    finally:
        await api.close()
    return None


def split_ignored(
    pets: list[TryFiPet], options: TryFiOptions
) -> tuple[list[TryFiPet], list[TryFiPet]]:
    """Return (tracked, ignored) according to the ignored_pets option."""
    tracked: list[TryFiPet] = []
    ignored: list[TryFiPet] = []
    for pet in pets:
        (ignored if options.is_ignored(pet.name) else tracked).append(pet)
    return tracked, ignored
