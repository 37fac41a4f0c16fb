from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "120", "--resolution", "100", "--mode", "image"]


@dataclass
class Expected:
    path: Path
    is_dir: bool = False


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]

    def full_args(self) -> list[str]:
        return [sys.executable, "zoom.py", *self.args]


def _single(name: str, file_name: str, *extra: str) -> Example:
    target = EXAMPLES_ROOT / name / file_name
    return Example(name=name, args=[*BASE_ARGS, *extra, "--output", str(target)], expected=[Expected(target)])


EXAMPLES: list[Example] = [
    _single("default", "field.png"),
    _single("resolution", "quarter.png", "--resolution", "25"),
    _single("zoom", "deep-start.png", "--zoom", "3200"),
    _single("pan-offset", "shifted.png", "--pos-x", "60", "--pos-y", "-20"),
    _single("click", "seahorse.png", "--click", "40", "50", "--click", "80", "60"),
    _single("factor", "factor-four.png", "--factor", "4", "--click", "45", "55"),
    _single("pan", "dragged.png", "--pan", "30", "0"),
    _single("resize", "resized.png", "--resize", "200", "100"),
    _single("set-resolution", "coarse.png", "--set-resolution", "40"),
    _single("frame-budget", "slow-ticks.png", "--frame-budget", "0.002"),
    _single("verbose", "diagnostic.png", "--verbose"),
    Example(
        name="gif",
        args=[
            "--width", "120", "--height", "90", "--mode", "gif", "--click", "40", "50", "--frame-budget", "0.005",
            "--output", str(EXAMPLES_ROOT / "gif" / "progressive.gif"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "gif" / "progressive.gif")],
    ),
    Example(
        name="frames",
        args=[
            "--width", "120", "--height", "90", "--mode", "frames", "--mode", "mono", "--colormap", "inferno",
            "--click", "40", "50", "--click", "60", "45", "--frame-dir", str(EXAMPLES_ROOT / "frames" / "seq"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "frames" / "seq", is_dir=True)],
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "webp", "--output", str(EXAMPLES_ROOT / "format" / "field.webp")],
        expected=[Expected(EXAMPLES_ROOT / "format" / "field.webp")],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean([EXAMPLES_ROOT / example.name])
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if expected.is_dir:
            if not expected.path.is_dir():
                raise RuntimeError(f"Expected directory {expected.path} was not created")
            if not any(expected.path.iterdir()):
                raise RuntimeError(f"Directory {expected.path} is empty")
        elif not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
