"""Public API for the incremental deep-zoom Mandelbrot field."""

from .field import COMPUTED, QUEUED, FieldBuffer, resize_source_indices, zoom_source_indices
from .iterator import BigNumberIterator, escape_count, iteration_bound, superlog2
from .scheduler import FrontierScheduler, border_indices
from .session import Frame, FractalSession
from .stepper import FRAME_BUDGET, FrameStepper
from .viewport import Viewport

__all__ = [
    "COMPUTED",
    "FRAME_BUDGET",
    "QUEUED",
    "BigNumberIterator",
    "FieldBuffer",
    "Frame",
    "FractalSession",
    "FrameStepper",
    "FrontierScheduler",
    "Viewport",
    "border_indices",
    "escape_count",
    "iteration_bound",
    "resize_source_indices",
    "superlog2",
    "zoom_source_indices",
]
