"""Time-boxed, resumable draining of the frontier scheduler."""

from __future__ import annotations

import time
from typing import Callable

from .scheduler import FrontierScheduler

FRAME_BUDGET = 1.0 / 60


class FrameStepper:
    def __init__(self, scheduler: FrontierScheduler, clock: Callable[[], float] = time.perf_counter) -> None:
        self.scheduler = scheduler
        self.clock = clock
        self.ticks = 0
        self.propagations = 0

    def step(self, budget: float = FRAME_BUDGET) -> bool:
        """Run propagation for up to ``budget`` seconds and report whether work remains.

        At least one cell is processed per call while the queue is non-empty.
        When the queue runs dry the fill pass runs once and ``False`` is
        returned; later calls return ``False`` without doing anything.
        """

        if budget <= 0:
            raise ValueError("frame budget must be positive.")
        scheduler = self.scheduler
        if scheduler.settled:
            return False

        self.ticks += 1
        start = self.clock()
        while scheduler.queue:
            scheduler.propagate_one()
            self.propagations += 1
            if self.clock() - start >= budget:
                break

        if scheduler.queue:
            return True
        scheduler.fill()
        return False
