from __future__ import annotations

from dataclasses import dataclass

from .clamp import clamp_to_byte_range, luminance, mean_floor, to_intensity
from .grid import Grid


@dataclass(frozen=True)
class EditOptions:
    grayscale: bool = False
    brightness: int = 0
    contrast: float | None = None  # None = untouched; 1.0 is also a no-op
    blur: bool = False
    flip_h: bool = False
    flip_v: bool = False
    rotate: int | None = None  # one of {90, 180, 270} (clockwise)


def _blank_like(grid: Grid, channels: int | None = None) -> Grid:
    return Grid(grid.width, grid.height, grid.channels if channels is None else channels)


def op_grayscale(grid: Grid) -> Grid:
    """
    gray = int(0.299*R + 0.587*G + 0.114*B), truncated, one channel out.
    """
    if grid.channels == 1:
        out = grid.copy()
        out.max_value = 255
        return out
    if grid.channels < 3:
        raise ValueError(f"grayscale needs 1 or >= 3 channels, got {grid.channels}")

    out = _blank_like(grid, channels=1)
    for y in range(grid.height):
        for x in range(grid.width):
            r = grid.get(y, x, 0)
            g = grid.get(y, x, 1)
            b = grid.get(y, x, 2)
            out.set(y, x, 0, to_intensity(luminance(r, g, b)))
    return out


def op_flip_h(grid: Grid) -> Grid:
    w = grid.width
    out = _blank_like(grid)
    for y in range(grid.height):
        for x in range(w):
            for c in range(grid.channels):
                out.set(y, w - 1 - x, c, grid.get(y, x, c))
    return out


def op_flip_v(grid: Grid) -> Grid:
    h = grid.height
    out = _blank_like(grid)
    for y in range(h):
        for x in range(grid.width):
            for c in range(grid.channels):
                out.set(h - 1 - y, x, c, grid.get(y, x, c))
    return out


def op_brightness(grid: Grid, delta: int) -> Grid:
    out = _blank_like(grid)
    for y in range(grid.height):
        for x in range(grid.width):
            for c in range(grid.channels):
                out.set(y, x, c, clamp_to_byte_range(grid.get(y, x, c) + delta))
    return out


def op_contrast(grid: Grid, factor: float) -> Grid:
    """
    out = factor * (in - 128) + 128 in floating point, clamped, then truncated.
    """
    out = _blank_like(grid)
    for y in range(grid.height):
        for x in range(grid.width):
            for c in range(grid.channels):
                adjusted = factor * (grid.get(y, x, c) - 128.0) + 128.0
                out.set(y, x, c, to_intensity(adjusted))
    return out


def op_blur(grid: Grid) -> Grid:
    """
    3x3 box mean over interior pixels only.
    Border rows/cols are not computed and stay 0, so images smaller
    than 3x3 come back all zeros.
    """
    out = _blank_like(grid)
    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            for c in range(grid.channels):
                window = [
                    grid.get(y + ky, x + kx, c)
                    for ky in (-1, 0, 1)
                    for kx in (-1, 0, 1)
                ]
                out.set(y, x, c, clamp_to_byte_range(mean_floor(window)))
    return out


def op_rotate90(grid: Grid) -> Grid:
    """
    Clockwise quarter turn: input (y, x) -> output (x, h-1-y).
    Output is h wide and w tall.
    """
    w, h = grid.width, grid.height
    out = Grid(h, w, grid.channels)
    for y in range(h):
        for x in range(w):
            for c in range(grid.channels):
                out.set(x, h - 1 - y, c, grid.get(y, x, c))
    return out


def op_rotate(grid: Grid, angle: int) -> Grid:
    """
    Clockwise rotation by 90/180/270.
    """
    if angle not in (90, 180, 270):
        raise ValueError("rotate must be one of 90, 180, 270")
    out = grid
    for _ in range(angle // 90):
        out = op_rotate90(out)
    return out


def apply_edits(grid: Grid, opts: EditOptions) -> Grid:
    """
    Deterministic edit order:
    grayscale → brightness → contrast → blur → flip-h → flip-v → rotate
    """
    out = grid
    if opts.grayscale:
        out = op_grayscale(out)
    if opts.brightness:
        out = op_brightness(out, opts.brightness)
    if opts.contrast is not None:
        out = op_contrast(out, opts.contrast)
    if opts.blur:
        out = op_blur(out)
    if opts.flip_h:
        out = op_flip_h(out)
    if opts.flip_v:
        out = op_flip_v(out)
    if opts.rotate is not None:
        out = op_rotate(out, opts.rotate)
    if out is grid:
        out = grid.copy()
    return out
