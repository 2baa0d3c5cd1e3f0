from __future__ import annotations

from typing import Sequence, Union

Number = Union[int, float]

BYTE_MIN = 0
BYTE_MAX = 255


def clamp_to_byte_range(x: Number) -> Number:
    return max(BYTE_MIN, min(BYTE_MAX, x))


def to_intensity(x: Number) -> int:
    """
    Clamp to 0..255, then truncate toward zero (never round).
    """
    return int(clamp_to_byte_range(x))


def mean_floor(values: Sequence[int]) -> int:
    if not values:
        raise ValueError("mean of an empty neighborhood")
    return sum(values) // len(values)


def luminance(r: int, g: int, b: int) -> float:
    # ITU-R BT.601 weights
    return 0.299 * r + 0.587 * g + 0.114 * b
