"""Colour grid and per-cell status flags for one viewport epoch."""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

COMPUTED = 1
QUEUED = 2


def _truncated_half(value: int) -> int:
    return -((-value) // 2) if value < 0 else value // 2


def _gather(old_w: int, old_h: int, src_x: np.ndarray, src_y: np.ndarray) -> np.ndarray:
    inside = (src_x >= 0) & (src_x < old_w) & (src_y >= 0) & (src_y < old_h)
    return np.where(inside, src_x + src_y * old_w, -1).astype(np.int64)


def resize_source_indices(old_w: int, old_h: int, new_w: int, new_h: int) -> np.ndarray:
    """Map every cell of a ``new_h x new_w`` grid to its centered source in the old grid.

    Cells without a source are ``-1``.
    """

    offset_x = _truncated_half(old_w - new_w)
    offset_y = _truncated_half(old_h - new_h)
    ys, xs = np.mgrid[0:new_h, 0:new_w]
    return _gather(old_w, old_h, xs + offset_x, ys + offset_y)


def zoom_source_indices(width: int, height: int, grid_x: int, grid_y: int, factor: int) -> np.ndarray:
    """Source cells of the shrinking window previewed after zooming in at ``(grid_x, grid_y)``."""

    ys, xs = np.mgrid[0:height, 0:width]
    return _gather(width, height, (xs + grid_x) // factor, (ys + grid_y) // factor)


def shift_source_indices(width: int, height: int, dx: int, dy: int) -> np.ndarray:
    ys, xs = np.mgrid[0:height, 0:width]
    return _gather(width, height, xs - dx, ys - dy)


class FieldBuffer:
    """Owns the grayscale colour bytes and status bitmask of a ``width x height`` grid."""

    def __init__(self, width: int, height: int, colors: Optional[np.ndarray] = None) -> None:
        if width < 1 or height < 1:
            raise ValueError("field dimensions must be at least 1x1.")
        self.width = int(width)
        self.height = int(height)
        size = self.width * self.height
        if colors is None:
            self.colors = np.zeros(size, dtype=np.uint8)
        else:
            colors = np.asarray(colors, dtype=np.uint8).reshape(-1)
            if colors.size != size:
                raise ValueError(f"expected {size} colour bytes, got {colors.size}.")
            self.colors = colors.copy()
        self.status = np.zeros(size, dtype=np.uint8)

    @property
    def size(self) -> int:
        return self.colors.size

    @classmethod
    def _from_sources(cls, old: "FieldBuffer", width: int, height: int, sources: np.ndarray) -> "FieldBuffer":
        flat = sources.reshape(-1)
        colors = np.zeros(width * height, dtype=np.uint8)
        valid = flat >= 0
        colors[valid] = old.colors[flat[valid]]
        return cls(width, height, colors)

    @classmethod
    def resampled(cls, old: "FieldBuffer", width: int, height: int) -> "FieldBuffer":
        """New buffer showing the centered nearest-cell crop or pad of ``old``.

        Only colours are carried over; no cell starts out ``COMPUTED``.
        """

        sources = resize_source_indices(old.width, old.height, width, height)
        return cls._from_sources(old, width, height, sources)

    @classmethod
    def zoomed(cls, old: "FieldBuffer", grid_x: int, grid_y: int, factor: int) -> "FieldBuffer":
        sources = zoom_source_indices(old.width, old.height, grid_x, grid_y, factor)
        return cls._from_sources(old, old.width, old.height, sources)

    @classmethod
    def shifted(cls, old: "FieldBuffer", dx: int, dy: int) -> "FieldBuffer":
        sources = shift_source_indices(old.width, old.height, dx, dy)
        return cls._from_sources(old, old.width, old.height, sources)

    def is_computed(self, index: int) -> bool:
        return bool(self.status[index] & COMPUTED)

    def is_queued(self, index: int) -> bool:
        return bool(self.status[index] & QUEUED)

    def mark_queued(self, index: int) -> None:
        self.status[index] |= QUEUED

    def reset_flags(self) -> None:
        self.status.fill(0)

    def color(self, index: int, evaluate: Callable[[int], int]) -> int:
        """Colour of ``index``, running ``evaluate`` only if it is not cached yet."""

        if self.status[index] & COMPUTED:
            return int(self.colors[index])
        value = evaluate(index) & 0xFF
        self.colors[index] = value
        self.status[index] |= COMPUTED
        return value

    def computed_count(self) -> int:
        return int(np.count_nonzero(self.status & COMPUTED))

    def fill_unreached(self) -> None:
        """Copy each uncomputed cell from its predecessor in scan order.

        Runs of uncomputed cells all take the colour of the last computed cell
        before them. Afterwards every cell counts as computed.
        """

        computed = (self.status & COMPUTED).astype(bool)
        if not computed.all():
            source = np.where(computed, np.arange(self.size), 0)
            np.maximum.accumulate(source, out=source)
            self.colors[:] = self.colors[source]
        self.status |= COMPUTED

    def frame(self) -> np.ndarray:
        view = self.colors.reshape(self.height, self.width).view()
        view.flags.writeable = False
        return view
