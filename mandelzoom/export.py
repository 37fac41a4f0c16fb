"""Image outputs for settled and in-progress fields."""

from __future__ import annotations

from pathlib import Path

import imageio.v2 as imageio
import numpy as np
import PIL.Image
from matplotlib import colormaps as _mpl_colormaps

from .session import Frame

SINE_PALETTE = "sine"
_PIL_FORMAT_ALIASES = {"jpg": "JPEG", "tif": "TIFF"}


def _save(image: PIL.Image.Image, path: Path, image_format: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(path), format=_PIL_FORMAT_ALIASES.get(image_format.lower(), image_format.upper()))
    return path


def get_colormap(name):
    return _mpl_colormaps[name]


def colorize(pixels: np.ndarray, colormap: str = SINE_PALETTE, invert: bool = False) -> np.ndarray:
    """Map grayscale field bytes to an RGB ``uint8`` array.

    The ``sine`` palette is ``(sin 3v, sin 4v, sin 5v)`` over the normalized
    byte ``v``; anything else is looked up as a matplotlib colormap.
    """

    v = np.asarray(pixels, dtype=np.float64) / 255.0
    if invert:
        v = 1.0 - v
    if colormap == SINE_PALETTE:
        rgb = np.stack((np.sin(v * 3.0), np.sin(v * 4.0), np.sin(v * 5.0)), axis=-1)
    else:
        rgb = np.asarray(get_colormap(colormap)(v))[..., :3]
    return np.uint8(np.clip(rgb, 0.0, 1.0) * 255)


def grayscale_image(frame: Frame) -> PIL.Image.Image:
    return PIL.Image.fromarray(np.array(frame.pixels, dtype=np.uint8))


def write_grayscale(frame: Frame, output_path: Path, image_format: str = "png") -> None:
    """Save ``frame`` as a single-channel image, one byte per cell.

    Failures to create or write the file surface as ``OSError``.
    """

    _save(grayscale_image(frame), Path(output_path), image_format)


def write_frame_sequence(
    image: PIL.Image.Image,
    frame_dir: Path,
    index: int,
    digits: int,
    image_format: str,
    prefix: str,
) -> Path:
    """Save ``image`` as ``<prefix><index>.<format>`` in ``frame_dir``, zero-padded to ``digits``."""

    return _save(image, frame_dir / f"{prefix}{index:0{digits}d}.{image_format}", image_format)


class GifRecorder:
    """Append colourised frames to an animated GIF; ``duration`` is milliseconds per frame."""

    def __init__(self, path: Path, colormap: str = SINE_PALETTE, invert: bool = False, duration: int = 100) -> None:
        self.path = Path(path)
        self.colormap = colormap
        self.invert = invert
        self.frames_written = 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._writer = imageio.get_writer(str(self.path), mode="I", duration=duration, loop=0)

    def append(self, frame: Frame) -> None:
        if self._writer is None:
            raise ValueError("GIF recorder is already closed.")
        self._writer.append_data(colorize(frame.pixels, self.colormap, self.invert))
        self.frames_written += 1

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None
