"""Arbitrary-precision escape-time evaluation of single grid cells."""

from __future__ import annotations

import math

from .viewport import Viewport

ESCAPE_SCALE = 5
ITERATIONS_PER_OCTAVE = 50
_MANTISSA_BITS = 53


def superlog2(value: int) -> float:
    """Return ``log2(value)`` for integers far beyond the range of a double."""

    if value <= 0:
        raise ValueError("superlog2 is only defined for positive integers.")
    exponent = value.bit_length()
    shift = max(exponent - _MANTISSA_BITS, 0)
    mantissa = (value >> shift) / float(1 << (exponent - shift))
    return math.log2(mantissa) + exponent


def iteration_bound(zoom: int) -> int:
    """Iteration cap for a zoom denominator, growing with log2 of the zoom."""

    return int(math.floor(superlog2(zoom) * ITERATIONS_PER_OCTAVE))


def escape_count(cx: int, cy: int, zoom: int, bound: int) -> int:
    """Iterate ``z <- z**2 + c`` in fixed point scaled by ``zoom``.

    Returns the loop index at which ``x + y`` exceeds ``5 * zoom``, or 0 when
    the orbit stays bounded for ``bound`` iterations.
    """

    threshold = ESCAPE_SCALE * zoom
    x = 0
    y = 0
    for i in range(bound):
        if x + y > threshold:
            return i
        px = x * x // zoom
        py = y * y // zoom
        y = 2 * x * y // zoom + cy
        x = px - py + cx
    return 0


class BigNumberIterator:
    """Colour cells of one viewport epoch.

    The iterator is pure for a fixed viewport; ``evaluations`` counts how many
    times the recurrence actually ran, which is what the field buffer's
    ``COMPUTED`` flag is meant to keep low.
    """

    def __init__(self, viewport: Viewport) -> None:
        self.viewport = viewport
        self.width, self.height = viewport.grid_size()
        self.bound = iteration_bound(viewport.zoom)
        self.evaluations = 0
        self._origin_x = self.width // 2 + viewport.pos_x
        self._origin_y = self.height // 2 + viewport.pos_y

    def plane_point(self, index: int) -> tuple[int, int]:
        row, col = divmod(index, self.width)
        return col - self._origin_x, row - self._origin_y

    def compute_color(self, index: int) -> int:
        cx, cy = self.plane_point(index)
        self.evaluations += 1
        return escape_count(cx, cy, self.viewport.zoom, self.bound) % 256
