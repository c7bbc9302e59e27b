"""
Voxel Grid
Cubic 3D volume of 24-bit color cells
"""

import numpy as np
from typing import Tuple

from .exceptions import DegenerateRecursionError, FractalError
from .palette import EMPTY_COLOR, FULL_INTENSITY_COLOR

SUBDIVISION = 3


def side_for_depth(depth: int) -> int:
    """Side length of a grid that supports `depth` levels of substitution."""
    if depth < 0:
        raise DegenerateRecursionError(f"Recursion depth must be non-negative, got {depth}")
    return SUBDIVISION ** depth


def check_recursion(side: int, depth: int):
    """
    Ensure a cube of `side` can be split into thirds `depth` times.

    Args:
        side: Grid side length
        depth: Recursion depth
    """
    if depth < 0:
        raise DegenerateRecursionError(f"Recursion depth must be non-negative, got {depth}")
    if side <= 0 or side % side_for_depth(depth) != 0:
        raise DegenerateRecursionError(
            f"Grid side {side} is not divisible by 3^{depth} = {side_for_depth(depth)}"
        )


class VoxelGrid:
    """
    Cubic voxel volume backed by an int64 numpy array.

    All three dimensions are equal and every cell holds a value in
    [0, 0xFFFFFF].
    """

    def __init__(self, cells):
        """
        Initialize grid from an array-like of colors.

        Args:
            cells: 3D array-like with equal dimensions
        """
        array = np.array(cells, dtype=np.int64)

        if array.ndim != 3:
            raise FractalError(f"Voxel grid must be 3D, got {array.ndim} dimensions")
        if not (array.shape[0] == array.shape[1] == array.shape[2]) or array.shape[0] == 0:
            raise FractalError(f"Voxel grid must be a non-empty cube, got shape {array.shape}")
        if array.size and (array.min() < EMPTY_COLOR or array.max() > FULL_INTENSITY_COLOR):
            raise FractalError("Voxel colors must be 24-bit values")

        self._cells = array

    @classmethod
    def empty(cls, depth: int, color: int = EMPTY_COLOR) -> 'VoxelGrid':
        """Grid of side 3^depth filled with a single color."""
        return cls.filled(side_for_depth(depth), color)

    @classmethod
    def filled(cls, side: int, color: int) -> 'VoxelGrid':
        """Grid of the given side filled with a single color."""
        return cls(np.full((side, side, side), color, dtype=np.int64))

    @property
    def side(self) -> int:
        return self._cells.shape[0]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._cells.shape

    @property
    def depth(self) -> int:
        """Largest recursion depth this grid supports."""
        depth = 0
        side = self.side
        while side % SUBDIVISION == 0:
            side //= SUBDIVISION
            depth += 1
        return depth

    @property
    def cells(self) -> np.ndarray:
        """Read-only view of the underlying array."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def to_array(self) -> np.ndarray:
        """Independent copy of the cells."""
        return self._cells.copy()

    def copy(self) -> 'VoxelGrid':
        return VoxelGrid(self._cells)

    def clear(self, color: int = EMPTY_COLOR) -> 'VoxelGrid':
        """New grid of the same side with every cell set to the empty color."""
        return VoxelGrid.filled(self.side, color)

    def get_statistics(self) -> dict:
        """
        Compute statistics about the volume.

        Returns:
            Dictionary with statistics
        """
        return {
            'num_filled': int(np.sum(self._cells != EMPTY_COLOR)),
            'num_colors_used': len(np.unique(self._cells)),
            'entropy': self._compute_entropy(),
            'density': float(np.mean(self._cells != EMPTY_COLOR))
        }

    def _compute_entropy(self) -> float:
        """Compute Shannon entropy of the color distribution."""
        unique, counts = np.unique(self._cells, return_counts=True)
        probabilities = counts / counts.sum()
        entropy = -np.sum(probabilities * np.log2(probabilities + 1e-10))
        return float(entropy)

    def __getitem__(self, index):
        value = self._cells[index]
        if isinstance(value, np.ndarray):
            return value.copy()
        return int(value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, VoxelGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._cells, other._cells))

    __hash__ = None

    def __repr__(self) -> str:
        return f"VoxelGrid(side={self.side}, colors={len(np.unique(self._cells))})"
