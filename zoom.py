import os
import sys
from argparse import Action, ArgumentParser
from dataclasses import dataclass
from pathlib import Path

import PIL.Image

from mandelzoom import FRAME_BUDGET, FractalSession, Viewport
from mandelzoom.export import (
    GifRecorder,
    SINE_PALETTE,
    colorize,
    grayscale_image,
    write_frame_sequence,
    write_grayscale,
)

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


@dataclass
class OutputConfig:
    modes: tuple[str, ...]
    gif_path: Path | None
    image_path: Path | None
    frame_dir: Path | None
    save_color_frames: bool
    save_mono_frames: bool
    image_format: str


class GestureAction(Action):
    """Collect viewport gestures in command-line order under one destination."""

    def __call__(self, parser, namespace, values, option_string=None):
        gestures = list(getattr(namespace, self.dest, None) or [])
        gestures.append((self.const, tuple(values)))
        setattr(namespace, self.dest, gestures)


def build_parser():
    parser = ArgumentParser()

    parser.add_argument('--width', type=int,
                        dest='width', help='screen width in device pixels',
                        metavar='WIDTH', default=640)

    parser.add_argument('--height', type=int,
                        dest='height', help='screen height in device pixels',
                        metavar='HEIGHT', default=480)

    parser.add_argument('--resolution', type=int,
                        dest='resolution', help='sampling density as a percentage of the screen (1-100)',
                        metavar='PERCENT', default=50)

    parser.add_argument('--zoom', type=int,
                        dest='zoom', help='initial zoom denominator; larger values zoom further in',
                        metavar='ZOOM', default=200)

    parser.add_argument('--pos-x', type=int,
                        dest='pos_x', help='initial pan offset along x, in units of 1/ZOOM',
                        metavar='POS_X', default=0)

    parser.add_argument('--pos-y', type=int,
                        dest='pos_y', help='initial pan offset along y, in units of 1/ZOOM',
                        metavar='POS_Y', default=0)

    parser.add_argument('--factor', type=int,
                        dest='factor', help='integer zoom factor applied by each --click',
                        metavar='FACTOR', default=2)

    parser.add_argument('--click', dest='gestures', action=GestureAction, const='click', nargs=2, type=float,
                        metavar=('X', 'Y'), help='Zoom in toward a screen point. May be repeated.')

    parser.add_argument('--pan', dest='gestures', action=GestureAction, const='pan', nargs=2, type=float,
                        metavar=('DX', 'DY'), help='Drag the view by a screen-space delta. May be repeated.')

    parser.add_argument('--resize', dest='gestures', action=GestureAction, const='resize', nargs=2, type=int,
                        metavar=('WIDTH', 'HEIGHT'), help='Change the screen size. May be repeated.')

    parser.add_argument('--set-resolution', dest='gestures', action=GestureAction, const='resolution', nargs=1,
                        type=int, metavar='PERCENT', help='Change the sampling density. May be repeated.')

    parser.add_argument('--frame-budget', type=float,
                        dest='frame_budget', help='seconds of work per rendering tick',
                        metavar='SECONDS', default=FRAME_BUDGET)

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Output modes to generate. May be repeated. Choices: gif, image, frames, mono.')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination for single-file outputs (gif/image) or container directory when both are requested.')

    parser.add_argument('--frame-dir', dest='frame_dir', type=str,
                        help='Directory in which to store the settled frame after every gesture (frames/mono).')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='"sine" for the classic palette or a matplotlib colormap name',
                        metavar='COLORMAP', default=SINE_PALETTE)

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for image-based outputs. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--invert', action='store_true', help='Invert the selected colormap.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of scheduler progress.')

    return parser


def _normalize_path(path_str: str) -> str:
    return os.path.normpath(os.path.abspath(os.path.expanduser(path_str)))


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    valid_modes = {"gif", "image", "frames", "mono"}
    modes = list(opt.modes or []) or ["image"]

    normalized_modes: list[str] = []
    for mode in modes:
        if mode not in valid_modes:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(sorted(valid_modes))}.")
        if mode not in normalized_modes:
            normalized_modes.append(mode)

    modes_tuple = tuple(normalized_modes)
    modes_set = set(modes_tuple)

    frame_dir_path: Path | None = None
    if {"frames", "mono"} & modes_set:
        frame_dir_path = Path(_normalize_path(opt.frame_dir or "./frames"))
    elif opt.frame_dir is not None:
        parser.error("--frame-dir is only valid with frames/mono modes.")

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    file_modes = [mode for mode in modes_tuple if mode in {"gif", "image"}]
    output_arg = opt.output
    gif_path: Path | None = None
    image_path: Path | None = None

    if not file_modes:
        if output_arg:
            parser.error("--output is only valid when gif or image modes are requested.")
    elif len(file_modes) == 1:
        mode = file_modes[0]
        if output_arg:
            output_path = Path(output_arg).expanduser()
            if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))):
                parser.error("--output must be a file path when a single file-based mode is selected.")
            if output_path.exists() and output_path.is_dir():
                parser.error("--output must point to a file, not a directory, when a single file mode is active.")
            if mode == "gif":
                if output_path.suffix:
                    if output_path.suffix.lower() != ".gif":
                        parser.error("GIF outputs must end with .gif.")
                else:
                    output_path = output_path.with_suffix(".gif")
                gif_path = output_path.resolve()
            else:
                suffix = output_path.suffix
                expected_suffix = f".{image_format}"
                if suffix:
                    if suffix.lower() != expected_suffix.lower():
                        parser.error(f"--output extension {suffix} does not match --format {image_format}.")
                else:
                    output_path = output_path.with_suffix(expected_suffix)
                image_path = output_path.resolve()
        elif mode == "gif":
            gif_path = Path("zoom.gif").resolve()
        else:
            image_path = Path(f"field.{image_format}").resolve()
    else:
        base_dir = Path(output_arg).expanduser() if output_arg else Path.cwd()
        if base_dir.exists() and not base_dir.is_dir():
            parser.error("--output must be a directory when both gif and image modes are active.")
        gif_path = (base_dir / "zoom.gif").resolve()
        image_path = (base_dir / f"field.{image_format}").resolve()

    return OutputConfig(
        modes=modes_tuple,
        gif_path=gif_path,
        image_path=image_path,
        frame_dir=frame_dir_path,
        save_color_frames="frames" in modes_set,
        save_mono_frames="mono" in modes_set,
        image_format=image_format,
    )


def apply_gesture(session: FractalSession, kind: str, values: tuple, factor: int) -> None:
    if kind == "click":
        session.pan_click(values[0], values[1], factor)
    elif kind == "pan":
        session.pan(values[0], values[1])
    elif kind == "resize":
        session.resize(values[0], values[1])
    elif kind == "resolution":
        session.set_resolution(values[0])
    else:
        raise ValueError(f"Unknown gesture '{kind}'.")


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    if opt.frame_budget <= 0:
        parser.error("--frame-budget must be positive.")

    try:
        viewport = Viewport(
            pos_x=opt.pos_x,
            pos_y=opt.pos_y,
            zoom=opt.zoom,
            resolution=opt.resolution,
            width=opt.width,
            height=opt.height,
        )
    except ValueError as exc:
        parser.error(str(exc))

    session = FractalSession(viewport)
    gestures = opt.gestures or []
    total = len(gestures) + 1
    digits = max(3, len(str(total - 1)))

    log("grid %dx%d, zoom denominator %d" % (*viewport.grid_size(), viewport.zoom))

    recorder = None
    if output_config.gif_path is not None:
        recorder = GifRecorder(output_config.gif_path, colormap=opt.colormap, invert=opt.invert)

    final = None
    try:
        for i in range(total):
            if i > 0:
                kind, values = gestures[i - 1]
                try:
                    apply_gesture(session, kind, values, opt.factor)
                except ValueError as exc:
                    parser.error(f"--{kind} {' '.join(str(v) for v in values)}: {exc}")
            print("gesture {0} out of {1}".format(i, total - 1), end='\r')

            ticks = 0
            more = True
            while more:
                more = session.step(opt.frame_budget)
                ticks += 1
                if recorder is not None:
                    recorder.append(session.current_frame())

            final = session.request_export()
            log("epoch %d: %d ticks, %d evaluations, %d cells enqueued, zoom %d" % (
                session.epoch,
                ticks,
                session.iterator.evaluations,
                session.scheduler.enqueued,
                session.viewport.zoom,
            ))

            if output_config.save_mono_frames:
                write_frame_sequence(grayscale_image(final), output_config.frame_dir, i, digits,
                                     output_config.image_format, "mono")
            if output_config.save_color_frames:
                color_image = PIL.Image.fromarray(colorize(final.pixels, opt.colormap, opt.invert))
                write_frame_sequence(color_image, output_config.frame_dir, i, digits,
                                     output_config.image_format, "frame")
    finally:
        if recorder is not None:
            recorder.close()
    print()

    if output_config.image_path is not None and final is not None:
        try:
            write_grayscale(final, output_config.image_path, output_config.image_format)
        except OSError as exc:
            print(f"Failed to write image {output_config.image_path}: {exc}", file=sys.stderr)
            return 1
        log("wrote %s" % output_config.image_path)

    return 0


if __name__ == '__main__':
    sys.exit(main())
