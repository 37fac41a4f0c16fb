"""Frontier propagation over the field buffer."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterator

from .field import FieldBuffer


def border_indices(width: int, height: int) -> Iterator[int]:
    """Border cells column by column, each exactly once."""

    for x in range(width):
        if x == 0 or x == width - 1:
            for y in range(height):
                yield x + y * width
        else:
            yield x
            if height > 1:
                yield x + (height - 1) * width


class FrontierScheduler:
    """FIFO flood fill that only follows colour changes.

    A cell is enqueued at most once per seed: ``QUEUED`` stays set after the
    cell is popped, so two differing neighbours cannot re-enqueue each other.
    Colours are compared after the modulo 256 reduction, so escape counts that
    alias to the same byte do not propagate.
    """

    def __init__(self, field: FieldBuffer, evaluate: Callable[[int], int]) -> None:
        self.field = field
        self.evaluate = evaluate
        self.queue: deque[int] = deque()
        self.enqueued = 0
        self.settled = False

    @property
    def pending(self) -> int:
        return len(self.queue)

    def seed(self) -> None:
        self.field.reset_flags()
        self.queue.clear()
        self.enqueued = 0
        self.settled = False
        for index in border_indices(self.field.width, self.field.height):
            self._enqueue(index)

    def _enqueue(self, index: int) -> None:
        self.field.mark_queued(index)
        self.queue.append(index)
        self.enqueued += 1

    def _check(self, index: int, color: int) -> None:
        field = self.field
        if not field.is_queued(index) and color != field.color(index, self.evaluate):
            self._enqueue(index)

    def propagate_one(self) -> int:
        """Pop the oldest pending cell, colour it and enqueue differing neighbours."""

        pixel = self.queue.popleft()
        width = self.field.width
        height = self.field.height
        color = self.field.color(pixel, self.evaluate)
        y, x = divmod(pixel, width)

        if y > 0:
            self._check(pixel - width, color)
            if x > 0:
                self._check(pixel - width - 1, color)
            if x < width - 1:
                self._check(pixel - width + 1, color)

        if y < height - 1:
            self._check(pixel + width, color)
            if x > 0:
                self._check(pixel + width - 1, color)
            if x < width - 1:
                self._check(pixel + width + 1, color)

        if x > 0:
            self._check(pixel - 1, color)
        if x < width - 1:
            self._check(pixel + 1, color)

        return pixel

    def fill(self) -> None:
        self.field.fill_unreached()
        self.settled = True
