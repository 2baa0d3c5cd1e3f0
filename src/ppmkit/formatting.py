from __future__ import annotations

import re
from typing import List

from .grid import Grid


def sanitize_stem(name: str) -> str:
    """
    Make a filesystem-friendly file stem:
    - Replace anything outside [A-Za-z0-9_.-] with '_'
    - Never return an empty string or a leading '.'
    """
    name = re.sub(r"[^A-Za-z0-9_.\-]", "_", name.strip())
    if not name:
        return "_"
    if name.startswith("."):
        name = "_" + name
    return name


def output_name(stem: str, suffix: str, ext: str = ".ppm") -> str:
    base = sanitize_stem(stem)
    if suffix:
        base = f"{base}_{sanitize_stem(suffix)}"
    return base + ext


def format_grid(grid: Grid) -> str:
    """
    Human-readable dump for small images, e.g.

        Image 2x1 (3 channels):
        (255,0,0) (0,0,255)
    """
    lines: List[str] = [
        f"Image {grid.width}x{grid.height} ({grid.channels} channels):"
    ]
    for row in grid.rows():
        lines.append(" ".join("(" + ",".join(str(v) for v in px) + ")" for px in row))
    return "\n".join(lines)
