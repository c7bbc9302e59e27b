"""
Fractal Substitution Errors
Construction-time failures for palettes, rules and grids
"""


class FractalError(ValueError):
    """Base class for invalid fractal substitution inputs."""


class InvalidPaletteError(FractalError):
    """Palette is empty, has duplicates or holds non 24-bit colors."""


class InvalidRepresentationError(FractalError):
    """Gene sequence length does not match len(palette) * 27."""


class ShapeMismatchError(FractalError):
    """Two voxel grids that must be compared have different shapes."""


class DegenerateRecursionError(FractalError):
    """Grid side cannot be split into thirds down to the requested depth."""
