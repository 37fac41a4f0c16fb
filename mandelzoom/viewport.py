"""Viewport parameters for the incremental Mandelbrot field."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_ZOOM = 200
DEFAULT_FACTOR = 2


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class Viewport:
    """Pan offset and zoom denominator in plane space, plus screen sampling.

    ``pos_x``, ``pos_y`` and ``zoom`` are Python integers of unbounded size:
    the zoom denominator is the fixed-point scale of every plane coordinate.
    """

    pos_x: int = 0
    pos_y: int = 0
    zoom: int = DEFAULT_ZOOM
    resolution: int = 100
    width: int = 640
    height: int = 480

    def __post_init__(self) -> None:
        if not (_is_integer(self.pos_x) and _is_integer(self.pos_y)):
            raise ValueError("pan offsets must be integers in units of 1/zoom.")
        if not _is_integer(self.zoom) or self.zoom <= 0:
            raise ValueError("zoom denominator must be a positive integer.")
        if not _is_integer(self.resolution) or not 1 <= self.resolution <= 100:
            raise ValueError("resolution must be a percentage between 1 and 100.")
        if self.width < 1 or self.height < 1:
            raise ValueError("screen size must be at least 1x1.")

    def grid_size(self) -> tuple[int, int]:
        """Logical grid dimensions, never smaller than 1x1."""

        return (
            max(1, self.width * self.resolution // 100),
            max(1, self.height * self.resolution // 100),
        )

    def grid_center(self) -> tuple[int, int]:
        grid_w, grid_h = self.grid_size()
        return grid_w // 2, grid_h // 2

    def screen_to_grid(self, screen_x: float, screen_y: float) -> tuple[int, int]:
        if not (0 <= screen_x < self.width and 0 <= screen_y < self.height):
            raise ValueError(
                f"screen point ({screen_x}, {screen_y}) lies outside the {self.width}x{self.height} screen."
            )
        grid_w, grid_h = self.grid_size()
        return int(screen_x * grid_w / self.width), int(screen_y * grid_h / self.height)

    def screen_delta_to_grid(self, delta_x: float, delta_y: float) -> tuple[int, int]:
        grid_w, grid_h = self.grid_size()
        return int(delta_x * grid_w / self.width), int(delta_y * grid_h / self.height)

    def pan(self, grid_dx: int, grid_dy: int) -> "Viewport":
        return replace(self, pos_x=self.pos_x + grid_dx, pos_y=self.pos_y + grid_dy)

    def zoom_at(self, grid_x: int, grid_y: int, factor: int = DEFAULT_FACTOR) -> "Viewport":
        """Zoom in by ``factor`` so that grid point ``(grid_x, grid_y)`` moves to the center."""

        if not _is_integer(factor) or factor < 2:
            raise ValueError("zoom factor must be an integer of at least 2.")
        grid_w, grid_h = self.grid_size()
        if not (0 <= grid_x < grid_w and 0 <= grid_y < grid_h):
            raise ValueError(f"grid point ({grid_x}, {grid_y}) lies outside the {grid_w}x{grid_h} grid.")
        center_x, center_y = self.grid_center()
        return replace(
            self,
            zoom=self.zoom * factor,
            pos_x=self.pos_x * factor - (grid_x - center_x) * (factor - 1),
            pos_y=self.pos_y * factor - (grid_y - center_y) * (factor - 1),
        )

    def with_resolution(self, percent: int) -> "Viewport":
        return replace(self, resolution=percent)

    def resized(self, width: int, height: int) -> "Viewport":
        return replace(self, width=int(width), height=int(height))
