"""
Fitness Evaluation
Scores a substitution rule by how close its fractal lands to a target volume
"""

import numpy as np
from dataclasses import dataclass

from .exceptions import InvalidRepresentationError, ShapeMismatchError
from .generator import expand
from .grid import VoxelGrid, check_recursion
from .palette import ColorPalette
from .rule import SubstitutionRule

# Upper bound of the score; a perfect match scores exactly this.
MAX_SCORE = 1.0e12


@dataclass(frozen=True)
class EvaluationContext:
    """
    Read-only inputs shared by every individual of a run.

    Attributes:
        target: Volume the search tries to approximate
        start: Volume the substitution starts from
        palette: Colors available to rules
        depth: Recursion depth
    """
    target: VoxelGrid
    start: VoxelGrid
    palette: ColorPalette
    depth: int

    def __post_init__(self):
        if self.target.shape != self.start.shape:
            raise ShapeMismatchError(
                f"Target shape {self.target.shape} differs from start shape {self.start.shape}"
            )
        check_recursion(self.start.side, self.depth)

    @property
    def rule_length(self) -> int:
        return len(self.palette) * 27


def distance(a: VoxelGrid, b: VoxelGrid, allow_partial: bool = False) -> float:
    """
    Euclidean distance between two volumes as flat vectors of color values.

    Args:
        a: First volume
        b: Second volume
        allow_partial: Compare only the overlapping index range when shapes differ

    Returns:
        Distance (0 for identical volumes)
    """
    cells_a = a.cells
    cells_b = b.cells

    if cells_a.shape != cells_b.shape:
        if not allow_partial:
            raise ShapeMismatchError(f"Cannot compare shapes {cells_a.shape} and {cells_b.shape}")
        overlap = tuple(slice(0, min(sa, sb)) for sa, sb in zip(cells_a.shape, cells_b.shape))
        cells_a = cells_a[overlap]
        cells_b = cells_b[overlap]

    diff = cells_a.astype(np.float64) - cells_b.astype(np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


def fitness(rule: SubstitutionRule, context: EvaluationContext) -> float:
    """
    Score a rule against an evaluation context. Larger is better.

    Args:
        rule: Rule to score
        context: Target, start, palette and depth

    Returns:
        MAX_SCORE minus the distance between target and generated volume
    """
    if rule.palette != context.palette:
        raise InvalidRepresentationError("Rule was encoded against a different palette than the context")

    generated = expand(rule, context.start, context.depth)
    return MAX_SCORE - distance(context.target, generated)
