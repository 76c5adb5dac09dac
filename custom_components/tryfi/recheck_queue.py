"""
RecheckQueue: accelerated re-polls for pets under escape suspicion.

This is a pure asyncio concurrency primitive with no HA or network dependencies.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

_LOGGER = logging.getLogger(__name__)


class RecheckQueue:
    """
    Runs at most one recheck task per pet.

    A task sleeps ``interval`` seconds, then awaits ``check(pet_id)``.  It
    keeps looping while the check returns True and ends as soon as it
    returns False.  The sleep function is injectable so tests can drive the
    loop without real timers.
    """

    def __init__(
        self,
        check: Callable[[str], Awaitable[bool]],
        interval: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._check = check
        self._interval = interval
        self._sleep = sleep
        # pet_id → running recheck Task
        self._tasks: dict[str, asyncio.Task] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def schedule(self, pet_id: str) -> bool:
        """
        Start a recheck loop for pet_id.

        Returns False without doing anything when one is already pending for
        this pet or the queue has been shut down.
        """
        if self._closed or pet_id in self._tasks:
            return False
        self._tasks[pet_id] = asyncio.ensure_future(self._run(pet_id))
        _LOGGER.debug("Quick recheck for pet %s scheduled in %ss", pet_id, self._interval)
        return True

    def is_pending(self, pet_id: str) -> bool:
        return pet_id in self._tasks

    @property
    def pending(self) -> set[str]:
        return set(self._tasks)

    def cancel(self, pet_id: str) -> None:
        """
        Cancel the recheck loop of pet_id, if any.

        A loop calling this from inside its own check is left alone; it ends
        by returning False from the check.
        """
        task = self._tasks.get(pet_id)
        if task is None or task is asyncio.current_task():
            return
        del self._tasks[pet_id]
        task.cancel()
        _LOGGER.debug("Quick recheck for pet %s cancelled", pet_id)

    async def shutdown(self) -> None:
        """Cancel every pending loop and refuse new ones."""
        self._closed = True
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception) and not isinstance(result, asyncio.CancelledError):
                _LOGGER.debug("RecheckQueue task error during shutdown: %s", result)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run(self, pet_id: str) -> None:
        try:
            while True:
                await self._sleep(self._interval)
                if not await self._check(pet_id):
                    break
        except asyncio.CancelledError:
            raise
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Quick recheck for pet %s failed", pet_id)
        finally:
            if self._tasks.get(pet_id) is asyncio.current_task():
                del self._tasks[pet_id]
