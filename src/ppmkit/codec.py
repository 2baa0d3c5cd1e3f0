from __future__ import annotations

import re
from pathlib import Path
from typing import List

from .grid import Grid

MAGIC = "P3"
MAX_SAMPLE_LIMIT = 65535

_COMMENT_RE = re.compile(r"#[^\r\n]*")
_INT_RE = re.compile(r"[+-]?[0-9]+")


class FormatError(ValueError):
    """Malformed P3 text."""


def _tokenize(text: str) -> List[str]:
    return _COMMENT_RE.sub(" ", text).split()


def _parse_int(token: str, what: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise FormatError(f"expected an integer for {what}, got {token!r}")
    return int(token)


def decode(text: str) -> Grid:
    """
    Parse P3 text into a 3-channel Grid.

    Whitespace (newlines included) between tokens is insignificant and
    '#' starts a comment running to end of line. Stops at the first
    problem with a FormatError; tokens after the last sample are ignored.
    """
    tokens = _tokenize(text)
    if not tokens:
        raise FormatError("empty input: expected magic 'P3'")
    if tokens[0] != MAGIC:
        raise FormatError(f"bad magic {tokens[0]!r}: only 'P3' is supported")

    if len(tokens) < 4:
        raise FormatError(
            f"truncated header: expected width, height and max value, got {len(tokens) - 1} token(s)"
        )
    width = _parse_int(tokens[1], "width")
    height = _parse_int(tokens[2], "height")
    max_value = _parse_int(tokens[3], "max value")
    if width < 0 or height < 0:
        raise FormatError(f"invalid size {width}x{height}")
    if not (1 <= max_value <= MAX_SAMPLE_LIMIT):
        raise FormatError(f"max value must be in 1..{MAX_SAMPLE_LIMIT}, got {max_value}")

    expected = width * height * 3
    body = tokens[4 : 4 + expected]
    if len(body) < expected:
        raise FormatError(
            f"pixel data truncated: {width}x{height} needs {expected} integers, found {len(body)}"
        )

    grid = Grid(width, height, 3)
    grid.max_value = max_value
    i = 0
    for y in range(height):
        for x in range(width):
            for c in range(3):
                v = _parse_int(body[i], f"sample {i}")
                if v < 0 or v > max_value:
                    raise FormatError(f"sample {i} = {v} outside 0..{max_value}")
                grid.set(y, x, c, v)
                i += 1
    return grid


def encode(grid: Grid) -> str:
    """
    Serialize to P3: one line per row, 'r g b ' per pixel.
    Single-channel grids are written as equal R=G=B triples.
    """
    parts = [MAGIC, "\n", f"{grid.width} {grid.height} {grid.max_value}\n"]
    for row in grid.rows():
        line = []
        for px in row:
            if len(px) == 1:
                rgb = (px[0], px[0], px[0])
            else:
                rgb = (tuple(px) + (0, 0))[:3]
            line.append(f"{rgb[0]} {rgb[1]} {rgb[2]} ")
        parts.append("".join(line))
        parts.append("\n")
    return "".join(parts)


def load(path: Path) -> Grid:
    return decode(Path(path).read_text(encoding="utf-8"))


def save(grid: Grid, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(encode(grid), encoding="utf-8", newline="\n")
