from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from PIL import Image

from . import codec
from .codec import FormatError
from .formatting import output_name
from .grid import Grid
from .ops import (
    EditOptions,
    apply_edits,
    op_blur,
    op_brightness,
    op_contrast,
    op_flip_h,
    op_flip_v,
    op_grayscale,
    op_rotate90,
)

logger = logging.getLogger(__name__)


class PpmKitError(Exception):
    """User-facing one-line errors."""


@dataclass(frozen=True)
class ImageResult:
    width: int
    height: int
    channels: int
    source_path: Path
    output_path: Path
    png_path: Optional[Path] = None


@dataclass(frozen=True)
class DemoStep:
    name: str
    path: Path
    grid: Grid


# 4x4 pattern written by the demo run, rows of (R, G, B).
TEST_PATTERN: Tuple[Tuple[Tuple[int, int, int], ...], ...] = (
    ((255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255)),          # red green blue white
    ((255, 255, 0), (255, 0, 255), (0, 255, 255), (128, 128, 128)),    # yellow magenta cyan gray
    ((255, 128, 0), (128, 255, 0), (128, 0, 255), (255, 128, 128)),    # orange lgreen purple pink
    ((128, 255, 128), (128, 128, 255), (255, 255, 128), (0, 0, 0)),    # lgreen lblue lyellow black
)


def make_test_image() -> Grid:
    grid = Grid(4, 4)
    for y, row in enumerate(TEST_PATTERN):
        for x, rgb in enumerate(row):
            for c, v in enumerate(rgb):
                grid.set(y, x, c, v)
    return grid


def grid_to_pil(grid: Grid) -> Image.Image:
    """
    8-bit Pillow image: mode 'L' for one channel, 'RGB' otherwise.
    Samples are rescaled when max_value is not 255.
    """
    if grid.width == 0 or grid.height == 0:
        raise PpmKitError(f"Cannot export an empty {grid.width}x{grid.height} image")

    scale = grid.max_value

    def _to8(v: int) -> int:
        return v if scale == 255 else (v * 255) // scale

    mode = "L" if grid.channels == 1 else "RGB"
    img = Image.new(mode, (grid.width, grid.height))
    px = img.load()
    for y, row in enumerate(grid.rows()):
        for x, p in enumerate(row):
            if mode == "L":
                px[x, y] = _to8(p[0])
            else:
                rgb = (tuple(p) + (0, 0))[:3]
                px[x, y] = tuple(_to8(v) for v in rgb)
    return img


def load_image(path: Path) -> Grid:
    if not path.exists():
        raise PpmKitError(f"File not found: {path}")
    try:
        return codec.load(path)
    except FormatError as e:
        raise PpmKitError(f"{path.name}: {e}") from e
    except UnicodeDecodeError as e:
        raise PpmKitError(f"{path.name}: not a text (P3) image") from e


def save_outputs(grid: Grid, out_path: Path, png: bool) -> Optional[Path]:
    codec.save(grid, out_path)
    logger.info("Wrote %s (%dx%d, %d channel(s))", out_path, grid.width, grid.height, grid.channels)
    if not png:
        return None
    png_path = out_path.with_suffix(".png")
    grid_to_pil(grid).save(png_path)
    logger.info("Wrote %s", png_path)
    return png_path


def process_single_image(
    input_path: Path,
    out_dir: Path | None,
    edits: EditOptions,
    suffix: str = "out",
    png: bool = False,
) -> ImageResult:
    grid = load_image(input_path)
    logger.debug("Loaded %s: %r", input_path, grid)
    try:
        result = apply_edits(grid, edits)
    except ValueError as e:
        raise PpmKitError(f"{input_path.name}: {e}") from e

    out_dir_final = out_dir or input_path.parent
    out_path = out_dir_final / output_name(input_path.stem, suffix)
    if out_path.resolve() == input_path.resolve():
        raise PpmKitError(f"Refusing to overwrite input: {input_path}")
    png_path = save_outputs(result, out_path, png)

    return ImageResult(
        width=result.width,
        height=result.height,
        channels=result.channels,
        source_path=input_path,
        output_path=out_path,
        png_path=png_path,
    )


def demo_steps(brightness: int, contrast: float) -> Sequence[Tuple[str, str, Callable[[Grid], Grid]]]:
    return (
        ("grayscale", "gray_image.ppm", op_grayscale),
        ("flip_h", "flipped_horizontal.ppm", op_flip_h),
        ("flip_v", "flipped_vertical.ppm", op_flip_v),
        ("brightness", "bright_image.ppm", lambda g: op_brightness(g, brightness)),
        ("contrast", "contrast_image.ppm", lambda g: op_contrast(g, contrast)),
        ("blur", "blurred_image.ppm", op_blur),
        ("rotate90", "rotated90_image.ppm", op_rotate90),
    )


def run_demo(
    out_dir: Path,
    brightness: int = 50,
    contrast: float = 1.5,
    png: bool = False,
) -> List[DemoStep]:
    """
    Write the 4x4 test image, read it back and run every transform on it.
    Returns the source step first, then one step per transform.
    """
    source_path = out_dir / "test_image.ppm"
    save_outputs(make_test_image(), source_path, png)
    source = load_image(source_path)

    steps = [DemoStep("original", source_path, source)]
    for name, filename, fn in demo_steps(brightness, contrast):
        out = fn(source)
        path = out_dir / filename
        save_outputs(out, path, png)
        steps.append(DemoStep(name, path, out))
    logger.info("Demo complete: %d files in %s", len(steps), out_dir)
    return steps
