"""Text measurement used to size nodes.

Layout never talks to a font backend directly; it asks a TextMeasurer. The
default ApproximateTextMeasurer is deterministic, so layouts are reproducible
without any platform text metrics.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

DEFAULT_FONT_SIZE = 14.0

_FONT_SIZE = re.compile(r"(\d+(?:\.\d+)?)px")


@dataclass(frozen=True)
class TextSize:
    width: float
    height: float


class TextMeasurer(Protocol):
    """Anything that can size a string in a CSS-style font descriptor."""

    def measure(self, text: str, font: str) -> TextSize:
        ...


def font_size(font: str) -> float:
    """Pixel size from a descriptor such as ``"600 14px sans-serif"``."""
    match = _FONT_SIZE.search(font)
    return float(match.group(1)) if match else DEFAULT_FONT_SIZE


class ApproximateTextMeasurer:
    """Width is ``len(text) * size * 4/7``, height ``size * 1.5``.

    The parsed font size is memoized per descriptor.
    """

    def __init__(self) -> None:
        self._sizes: dict[str, float] = {}

    def _size(self, font: str) -> float:
        size = self._sizes.get(font)
        if size is None:
            size = self._sizes[font] = font_size(font)
        return size

    def measure(self, text: str, font: str) -> TextSize:
        size = self._size(font)
        return TextSize(width=len(text) * size * 4 / 7, height=size * 1.5)
