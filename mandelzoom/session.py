"""The fractal session: one viewport, its field buffer and the work that resolves it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .field import FieldBuffer
from .iterator import BigNumberIterator
from .scheduler import FrontierScheduler
from .stepper import FRAME_BUDGET, FrameStepper
from .viewport import DEFAULT_FACTOR, Viewport


@dataclass(frozen=True)
class Frame:
    """Grayscale grid handed to rendering and export collaborators."""

    pixels: np.ndarray
    width: int
    height: int


class FractalSession:
    """Own the viewport, field buffer and frontier queue of an interactive zoom.

    Every viewport change starts a new epoch: a fresh iterator bound to the new
    viewport, a replacement buffer pre-filled with a resampled preview of the
    old one, and a reseeded scheduler. Work queued for the previous epoch is
    dropped.
    """

    def __init__(self, viewport: Optional[Viewport] = None, clock: Optional[Callable[[], float]] = None) -> None:
        self.viewport = viewport if viewport is not None else Viewport()
        self._clock = clock
        self.epoch = 0
        grid_w, grid_h = self.viewport.grid_size()
        self._start_epoch(self.viewport, FieldBuffer(grid_w, grid_h))

    def _start_epoch(self, viewport: Viewport, field: FieldBuffer) -> None:
        self.viewport = viewport
        self.field = field
        self.iterator = BigNumberIterator(viewport)
        self.scheduler = FrontierScheduler(field, self.iterator.compute_color)
        if self._clock is None:
            self.stepper = FrameStepper(self.scheduler)
        else:
            self.stepper = FrameStepper(self.scheduler, clock=self._clock)
        self.scheduler.seed()
        self.epoch += 1

    def _resample_to(self, viewport: Viewport) -> None:
        grid_w, grid_h = viewport.grid_size()
        self._start_epoch(viewport, FieldBuffer.resampled(self.field, grid_w, grid_h))

    def resize(self, width: int, height: int) -> None:
        self._resample_to(self.viewport.resized(width, height))

    def set_resolution(self, percent: int) -> None:
        self._resample_to(self.viewport.with_resolution(percent))

    def pan_click(self, screen_x: float, screen_y: float, factor: int = DEFAULT_FACTOR) -> None:
        """Zoom in by ``factor`` toward the clicked screen point."""

        grid_x, grid_y = self.viewport.screen_to_grid(screen_x, screen_y)
        viewport = self.viewport.zoom_at(grid_x, grid_y, factor)
        self._start_epoch(viewport, FieldBuffer.zoomed(self.field, grid_x, grid_y, factor))

    def pan(self, screen_dx: float, screen_dy: float) -> None:
        grid_dx, grid_dy = self.viewport.screen_delta_to_grid(screen_dx, screen_dy)
        if grid_dx == 0 and grid_dy == 0:
            return
        viewport = self.viewport.pan(grid_dx, grid_dy)
        self._start_epoch(viewport, FieldBuffer.shifted(self.field, grid_dx, grid_dy))

    def step(self, budget: float = FRAME_BUDGET) -> bool:
        return self.stepper.step(budget)

    def drain(self, budget: float = FRAME_BUDGET) -> int:
        """Step until settled; returns the number of ticks it took."""

        ticks = 0
        while not self.scheduler.settled:
            self.stepper.step(budget)
            ticks += 1
        return ticks

    def is_settled(self) -> bool:
        return self.scheduler.settled

    def current_frame(self) -> Frame:
        return Frame(pixels=self.field.frame(), width=self.field.width, height=self.field.height)

    def request_export(self) -> Frame:
        """Settled snapshot of the field, draining any pending work first."""

        self.drain()
        return Frame(
            pixels=self.field.colors.reshape(self.field.height, self.field.width).copy(),
            width=self.field.width,
            height=self.field.height,
        )
