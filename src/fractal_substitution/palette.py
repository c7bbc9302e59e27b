"""
Color Palette
Ordered set of 24-bit colors usable as genes and substitution keys
"""

import numpy as np
from typing import Dict, Iterable, Iterator, Union

from .exceptions import InvalidPaletteError

EMPTY_COLOR = 0x000000
FULL_INTENSITY_COLOR = 0xFFFFFF


def parse_color(value: Union[int, str]) -> int:
    """
    Parse a color given as an int or as a '#RRGGBB' / '0xRRGGBB' string.

    Args:
        value: Color value

    Returns:
        24-bit color as int
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith('#'):
            text = text[1:]
        elif text.startswith('0x'):
            text = text[2:]
        try:
            color = int(text, 16)
        except ValueError:
            raise InvalidPaletteError(f"Cannot parse color: {value!r}")
    else:
        color = int(value)

    if not EMPTY_COLOR <= color <= FULL_INTENSITY_COLOR:
        raise InvalidPaletteError(f"Color out of 24-bit range: {value!r}")

    return color


class ColorPalette:
    """
    Ordered, non-empty list of distinct 24-bit colors.

    Index 0 is conventionally the empty color and the last index the
    full-intensity color. Instances are immutable.
    """

    def __init__(self, colors: Iterable[Union[int, str]]):
        """
        Initialize palette.

        Args:
            colors: Colors in palette order (ints or hex strings)
        """
        parsed = tuple(parse_color(color) for color in colors)

        if len(parsed) == 0:
            raise InvalidPaletteError("Palette must contain at least one color")
        if len(set(parsed)) != len(parsed):
            raise InvalidPaletteError(f"Palette colors must be distinct: {parsed}")

        self._colors = parsed
        self._nearest_cache: Dict[int, int] = {}

    @classmethod
    def default(cls) -> 'ColorPalette':
        """Two-color palette: empty and full intensity."""
        return cls([EMPTY_COLOR, FULL_INTENSITY_COLOR])

    @property
    def colors(self) -> tuple:
        return self._colors

    def nearest_index(self, color: int) -> int:
        """
        Index of the palette color numerically closest to a color.

        Scans in palette order; a later index only wins with a strictly
        smaller distance, so ties resolve to the lowest index.

        Args:
            color: Any 24-bit value

        Returns:
            Palette index
        """
        color = int(color)
        cached = self._nearest_cache.get(color)
        if cached is not None:
            return cached

        index = 0
        best = abs(color - self._colors[0])
        for i in range(1, len(self._colors)):
            distance = abs(color - self._colors[i])
            if distance < best:
                index = i
                best = distance

        self._nearest_cache[color] = index
        return index

    def random_color(self, rng: np.random.Generator) -> int:
        """Draw a palette color uniformly at random."""
        return self._colors[int(rng.integers(len(self._colors)))]

    def __len__(self) -> int:
        return len(self._colors)

    def __getitem__(self, index: int) -> int:
        return self._colors[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._colors)

    def __contains__(self, color) -> bool:
        return int(color) in self._colors

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColorPalette):
            return NotImplemented
        return self._colors == other._colors

    def __hash__(self) -> int:
        return hash(self._colors)

    def __getstate__(self):
        return {'colors': self._colors}

    def __setstate__(self, state):
        self._colors = state['colors']
        self._nearest_cache = {}

    def __repr__(self) -> str:
        return "ColorPalette([" + ", ".join(f"{c:#08x}" for c in self._colors) + "])"
