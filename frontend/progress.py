# frontend/progress.py

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from config.settings import settings

logger = logging.getLogger(__name__)

COMPLETE = 100


def stage_label(value: int) -> str:
    if value < 30:
        return "Uploading image..."
    if value < 60:
        return "Processing with nano-banana..."
    if value < 90:
        return "Generating result..."
    return "Almost done..."


@dataclass(frozen=True)
class ProgressHandle:
    generation: int


class ProgressSimulator:
    """
    Time-driven progress indicator for a call that reports no progress of its own.

    While running the value climbs by `step` every `period` seconds and holds at
    `cap`; only `complete()` can show 100. Each run gets a new generation number
    and every tick or delayed reset checks it, so a task left over from an
    earlier run can never move the value of the current one.
    """

    def __init__(
        self,
        step: int = settings.PROGRESS_STEP,
        cap: int = settings.PROGRESS_CAP,
        period: float = settings.PROGRESS_TICK,
        reset_delay: float = settings.PROGRESS_RESET_DELAY,
        on_change: Optional[Callable[[int], None]] = None,
    ):
        if cap >= COMPLETE:
            raise ValueError("cap must stay below 100")
        self.step = step
        self.cap = cap
        self.period = period
        self.reset_delay = reset_delay
        self.on_change = on_change

        self._value = 0
        self._generation = 0
        self._running = False
        self._tick_task: Optional[asyncio.Task] = None
        self._reset_task: Optional[asyncio.Task] = None

    @property
    def value(self) -> int:
        return self._value

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> ProgressHandle:
        self._cancel_tasks()
        self._generation += 1
        handle = ProgressHandle(self._generation)
        self._running = True
        self._set(0)
        self._tick_task = asyncio.get_running_loop().create_task(self._tick(handle.generation))
        return handle

    def stop(self, handle: ProgressHandle) -> None:
        if handle.generation != self._generation or not self._running:
            return
        self._running = False
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    def complete(self, handle: ProgressHandle) -> None:
        self.stop(handle)
        if handle.generation == self._generation:
            self._set(COMPLETE)

    def schedule_reset(self, handle: ProgressHandle, delay: Optional[float] = None) -> None:
        if handle.generation != self._generation:
            return
        delay = self.reset_delay if delay is None else delay
        self._reset_task = asyncio.get_running_loop().create_task(
            self._reset_after(handle.generation, delay)
        )

    async def settle(self) -> None:
        """Wait for a pending delayed reset, if any."""
        task = self._reset_task
        if task is not None and not task.done():
            await asyncio.shield(task)

    async def _tick(self, generation: int) -> None:
        while self._value < self.cap:
            await asyncio.sleep(self.period)
            if generation != self._generation:
                return
            self._set(min(self._value + self.step, self.cap))

    async def _reset_after(self, generation: int, delay: float) -> None:
        await asyncio.sleep(delay)
        if generation != self._generation:
            logger.debug("[Progress] Dropping stale reset for generation %d", generation)
            return
        self._set(0)

    def _cancel_tasks(self) -> None:
        for task in (self._tick_task, self._reset_task):
            if task is not None and not task.done():
                task.cancel()
        self._tick_task = None
        self._reset_task = None

    def _set(self, value: int) -> None:
        self._value = value
        if self.on_change is not None:
            self.on_change(value)
