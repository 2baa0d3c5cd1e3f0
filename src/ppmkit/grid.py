from __future__ import annotations

from typing import Iterator, List, Tuple

DEFAULT_MAX_VALUE = 255


class Grid:
    """
    Dense (row, col, channel) intensity store.

    Samples live in one flat list at offset ((row * width + col) * channels + channel).
    A fresh grid is all zeros with max_value 255.
    """

    __slots__ = ("width", "height", "channels", "max_value", "_data")

    def __init__(self, width: int, height: int, channels: int = 3) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"grid size must be >= 0, got {width}x{height}")
        if channels < 1:
            raise ValueError(f"channel count must be >= 1, got {channels}")
        self.width = width
        self.height = height
        self.channels = channels
        self.max_value = DEFAULT_MAX_VALUE
        self._data: List[int] = [0] * (width * height * channels)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.height, self.width, self.channels)

    def _offset(self, row: int, col: int, channel: int) -> int:
        if not (0 <= row < self.height and 0 <= col < self.width and 0 <= channel < self.channels):
            raise IndexError(
                f"pixel ({row}, {col}, {channel}) out of range for "
                f"{self.width}x{self.height}x{self.channels} grid"
            )
        return (row * self.width + col) * self.channels + channel

    def get(self, row: int, col: int, channel: int) -> int:
        return self._data[self._offset(row, col, channel)]

    def set(self, row: int, col: int, channel: int, value: int) -> None:
        self._data[self._offset(row, col, channel)] = value

    def pixel(self, row: int, col: int) -> Tuple[int, ...]:
        start = self._offset(row, col, 0)
        return tuple(self._data[start : start + self.channels])

    def rows(self) -> Iterator[List[Tuple[int, ...]]]:
        """Yield each row as a list of pixel tuples, top to bottom."""
        c = self.channels
        stride = self.width * c
        for y in range(self.height):
            base = y * stride
            yield [tuple(self._data[base + x * c : base + x * c + c]) for x in range(self.width)]

    def values(self) -> Tuple[int, ...]:
        return tuple(self._data)

    def resize_channels(self, new_count: int) -> None:
        """
        Change the channel count in place.
        Channels that survive keep their values; added channels are zero.
        """
        if new_count < 1:
            raise ValueError(f"channel count must be >= 1, got {new_count}")
        old = self.channels
        if new_count == old:
            return
        keep = min(old, new_count)
        pad = [0] * (new_count - keep)
        out: List[int] = []
        for i in range(self.width * self.height):
            out.extend(self._data[i * old : i * old + keep])
            out.extend(pad)
        self._data = out
        self.channels = new_count

    def copy(self) -> "Grid":
        out = Grid(self.width, self.height, self.channels)
        out.max_value = self.max_value
        out._data = self._data[:]
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.shape == other.shape
            and self.max_value == other.max_value
            and self._data == other._data
        )

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, height={self.height}, channels={self.channels})"
