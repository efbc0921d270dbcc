from __future__ import annotations

import asyncio
import contextlib
import enum
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class GasPriceRefresher:
    """Runs ``tick`` right away and then every ``poll_interval_ms``.

    A failing tick is logged and the next one still fires. Once stopped the
    refresher cannot be started again.
    """

    def __init__(self, tick: Callable[[], Awaitable[None]], poll_interval_ms: int, name: str = "gas-price"):
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        self._tick = tick
        self.poll_interval_ms = poll_interval_ms
        self.name = name
        self.state = SchedulerState.CREATED
        self._task: asyncio.Task | None = None
        self._stopping = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self.state is SchedulerState.RUNNING

    def start(self) -> None:
        if self.state is SchedulerState.STOPPED:
            raise RuntimeError(f"Refresher {self.name} was stopped and cannot be restarted")
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run_loop(), name=f"refresher:{self.name}")
            self.state = SchedulerState.RUNNING

    async def stop(self) -> None:
        if self.state is SchedulerState.STOPPED:
            return
        self.state = SchedulerState.STOPPED
        self._stopping.set()
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        logger.info(f"Background refresher {self.name} stopped")

    async def _run_loop(self) -> None:
        interval = self.poll_interval_ms / 1000
        logger.info(f"Background refresher {self.name} started (interval={interval}s)")
        while not self._stopping.is_set():
            try:
                await self._tick()
            except Exception as e:
                logger.exception(f"Gas price refresh tick failed: {e}")
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
