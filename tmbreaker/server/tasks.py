"""Background decision cycles — detached from the request that accepted them."""

from __future__ import annotations

import asyncio

import structlog

from tmbreaker.breaker.engine import Breaker
from tmbreaker.core.types import CycleResult, ResourceIdentity

logger = structlog.stdlib.get_logger()


class CycleScheduler:
    """Spawns one task per accepted alert and reports how each one ended.

    Tasks are neither queued nor deduplicated.  The scheduler only keeps a
    reference until a task finishes, so the event loop cannot collect it
    mid-flight, and routes the outcome (or crash) into the log.
    """

    def __init__(self, breaker: Breaker) -> None:
        self._breaker = breaker
        self._tasks: set[asyncio.Task[CycleResult]] = set()

    @property
    def pending(self) -> int:
        """Number of cycles still running."""
        return len(self._tasks)

    def spawn(self, identity: ResourceIdentity) -> asyncio.Task[CycleResult]:
        """Start a decision cycle without waiting for it."""
        task = asyncio.create_task(
            self._breaker.trip(identity),
            name=f"breaker:{identity.subscription_id}/{identity.resource_group}/{identity.profile_name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        logger.debug("breaker_cycle_spawned", task=task.get_name(), pending=len(self._tasks))
        return task

    def _on_done(self, task: asyncio.Task[CycleResult]) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            logger.warning("breaker_cycle_cancelled", task=task.get_name())
            return

        exc = task.exception()
        if exc is not None:
            logger.error("breaker_cycle_crashed", task=task.get_name(), exc_info=exc)
            return

        result = task.result()
        log_fn = logger.info if result.ok else logger.error
        log_fn(
            "breaker_cycle_completed",
            profile=result.identity.profile_name,
            resource_group=result.identity.resource_group,
            outcome=result.outcome.value,
            disabled=result.disabled,
            primary=result.primary,
            reason=result.reason,
            error_code=result.error_code,
        )

    async def drain(self, timeout: float) -> None:
        """Wait up to *timeout* seconds for running cycles, then cancel the rest."""
        if not self._tasks:
            return

        pending = list(self._tasks)
        logger.info("breaker_cycles_draining", pending=len(pending), timeout_secs=timeout)
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning("breaker_cycles_abandoned", count=len(still_running))
