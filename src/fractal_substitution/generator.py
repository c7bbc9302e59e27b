"""
Fractal Generator
Recursive 3x3x3 substitution of a voxel grid driven by a substitution rule
"""

import numpy as np

from .grid import SUBDIVISION, VoxelGrid, check_recursion
from .palette import ColorPalette
from .rule import SubstitutionRule


def expand(rule: SubstitutionRule, start: VoxelGrid, depth: int) -> VoxelGrid:
    """
    Expand a start grid by applying a substitution rule `depth` times.

    Every region is split into 27 equal sub-regions. The color each
    sub-region receives depends on the nearest palette color of the
    region's first cell, read before the region is rewritten.

    Args:
        rule: Substitution rule (read only)
        start: Start grid (never modified)
        depth: Number of subdivision levels

    Returns:
        New expanded grid
    """
    check_recursion(start.side, depth)

    cells = start.to_array()
    _substitute(cells, rule.genes, rule.palette, depth, 0, 0, 0, start.side)

    return VoxelGrid(cells)


def _substitute(
    cells: np.ndarray,
    genes: tuple,
    palette: ColorPalette,
    level: int,
    x: int,
    y: int,
    z: int,
    size: int
):
    """
    Rewrite the cube at (x, y, z) of side `size` in place.

    Sub-cube offsets run x, then y, then z ascending: offset = 9i + 3j + k.
    """
    if level <= 0:
        return

    step = size // SUBDIVISION
    color_index = palette.nearest_index(cells[x, y, z])
    base = color_index * SUBDIVISION ** 3

    offset = 0
    for i in range(SUBDIVISION):
        sx = x + i * step
        for j in range(SUBDIVISION):
            sy = y + j * step
            for k in range(SUBDIVISION):
                sz = z + k * step
                cells[sx:sx + step, sy:sy + step, sz:sz + step] = genes[base + offset]
                _substitute(cells, genes, palette, level - 1, sx, sy, sz, step)
                offset += 1
