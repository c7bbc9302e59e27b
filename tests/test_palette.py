"""
Tests for Color Palette
"""

import pytest
import numpy as np
from src.fractal_substitution.palette import (
    ColorPalette,
    parse_color,
    EMPTY_COLOR,
    FULL_INTENSITY_COLOR
)
from src.fractal_substitution.exceptions import InvalidPaletteError


def test_default_palette():
    """Default palette holds the empty and full-intensity sentinels."""
    palette = ColorPalette.default()

    assert len(palette) == 2
    assert palette[0] == EMPTY_COLOR
    assert palette[-1] == FULL_INTENSITY_COLOR


def test_nearest_index_is_reflexive():
    """Every palette color maps to its own index."""
    palette = ColorPalette([0x000000, 0x00FF00, 0x123456, 0xFF0000, 0xFFFFFF])

    for i, color in enumerate(palette):
        assert palette.nearest_index(color) == i


def test_nearest_index_off_palette():
    """Colors not in the palette map to the numerically closest entry."""
    palette = ColorPalette([0, 100, 200])

    assert palette.nearest_index(160) == 2
    assert palette.nearest_index(140) == 1
    assert palette.nearest_index(0xFFFFFF) == 2


def test_nearest_index_ties_keep_first():
    """Equal distances resolve to the lowest index."""
    assert ColorPalette([0, 10]).nearest_index(5) == 0
    assert ColorPalette([10, 0]).nearest_index(5) == 0


def test_single_color_palette():
    """A one-color palette always answers index 0."""
    palette = ColorPalette([0x808080])

    assert palette.nearest_index(0) == 0
    assert palette.nearest_index(0xFFFFFF) == 0


def test_invalid_palettes():
    """Empty, duplicated and out-of-range palettes are rejected."""
    with pytest.raises(InvalidPaletteError):
        ColorPalette([])
    with pytest.raises(InvalidPaletteError):
        ColorPalette([0, 0])
    with pytest.raises(InvalidPaletteError):
        ColorPalette([0x1000000])


def test_parse_color_strings():
    """Hex strings in either notation are accepted."""
    assert parse_color('#FFFFFF') == 0xFFFFFF
    assert parse_color('0x00ff00') == 0x00FF00
    assert parse_color(255) == 255

    with pytest.raises(InvalidPaletteError):
        parse_color('not-a-color')


def test_random_color_is_in_palette():
    """Random draws only return palette colors."""
    palette = ColorPalette([1, 2, 3])
    rng = np.random.default_rng(0)

    draws = {palette.random_color(rng) for _ in range(200)}

    assert draws == {1, 2, 3}


if __name__ == "__main__":
    pytest.main([__file__])
