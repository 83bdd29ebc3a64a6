"""Periodic live-update scheduling.

UpdateScheduler owns at most one pending timer. Each tick synthesizes a fresh
dataset for the current chart kind, hands it to the update callback, and only
then arms the next timer, so ticks never overlap and a slow render stretches
the interval instead of queueing work. The refresh interval is read from the
current settings every time a timer is armed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from ..core.enums import ChartKind, SchedulerState
from ..core.errors import SchedulerFault
from ..core.logging_config import get_logger
from ..core.models import Dataset, DisplaySettings
from ..data.synthesizer import DataSynthesizer

logger = get_logger(__name__)


class UpdateScheduler:
    def __init__(
        self,
        synthesizer: DataSynthesizer,
        on_update: Callable[[Dataset], Awaitable[Any]],
        *,
        kind_provider: Callable[[], ChartKind | str],
        settings_provider: Callable[[], DisplaySettings],
        on_fault: Callable[[SchedulerFault], None] | None = None,
    ):
        """Initialize the scheduler.

        Args:
            synthesizer: Source of fresh datasets
            on_update: Awaited with each new dataset (normally a render)
            kind_provider: Returns the chart kind selected at tick time
            settings_provider: Returns the current display settings
            on_fault: Called once when a tick fails and the scheduler stops
        """
        self.synthesizer = synthesizer
        self.on_update = on_update
        self.kind_provider = kind_provider
        self.settings_provider = settings_provider
        self.on_fault = on_fault
        self.last_fault: SchedulerFault | None = None
        self.tick_count = 0
        self._state = SchedulerState.IDLE
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._tick_task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    def start(self) -> None:
        """Begin periodic updates. No-op while already running.

        Must be called from inside a running event loop.
        """
        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._state = SchedulerState.RUNNING
        self._generation += 1
        self.last_fault = None
        self._arm(self._generation)
        logger.info("Live updates started")

    def stop(self) -> None:
        """Cancel the pending timer and return to idle. Safe to call repeatedly.

        A tick already in flight finishes delivering its dataset but arms no
        further timer.
        """
        if not self.is_running:
            return
        self._state = SchedulerState.IDLE
        self._cancel_timer()
        logger.info("Live updates stopped", extra={"ticks": self.tick_count})

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self, generation: int) -> None:
        assert self._loop is not None
        interval_s = self.settings_provider().refresh_interval_ms / 1000.0
        self._timer = self._loop.call_later(interval_s, self._fire, generation)

    def _fire(self, generation: int) -> None:
        self._timer = None
        if not self.is_running or generation != self._generation:
            return
        assert self._loop is not None
        self._tick_task = self._loop.create_task(self._tick(generation))

    async def _tick(self, generation: int) -> None:
        kind: ChartKind | str | None = None
        try:
            kind = self.kind_provider()
            settings = self.settings_provider()
            dataset = await self.synthesizer.generate(kind, settings.point_count)
            await self.on_update(dataset)
        except Exception as e:
            fault = SchedulerFault(f"Live update failed: {e}")
            fault.__cause__ = e
            self.last_fault = fault
            logger.error(
                f"Live update tick failed: {e}",
                exc_info=True,
                extra={"kind": getattr(kind, "value", kind), "ticks": self.tick_count},
            )
            if generation == self._generation:
                self.stop()
            if self.on_fault is not None:
                self.on_fault(fault)
            return

        self.tick_count += 1
        logger.debug("Live update delivered", extra={"tick": self.tick_count})
        if self.is_running and generation == self._generation:
            self._arm(generation)

    async def wait_for_tick(self) -> None:
        """Wait until the tick currently in flight, if any, has finished."""
        task = self._tick_task
        if task is not None and not task.done():
            await task
