"""
Diagnostic Metrics
How well a generated volume matches its target, and how a rule uses its palette
"""

import numpy as np
from scipy import ndimage
from typing import Dict

from ..fractal_substitution.fitness import distance
from ..fractal_substitution.grid import VoxelGrid
from ..fractal_substitution.palette import EMPTY_COLOR
from ..fractal_substitution.rule import SubstitutionRule


def count_components(grid: VoxelGrid) -> int:
    """Number of face-connected non-empty regions."""
    binary = (grid.cells != EMPTY_COLOR).astype(int)
    _, num_components = ndimage.label(binary)
    return int(num_components)


def compare_volumes(target: VoxelGrid, generated: VoxelGrid) -> Dict[str, float]:
    """
    Compare a generated volume with its target.

    Args:
        target: Target volume
        generated: Volume produced by a rule

    Returns:
        Dictionary with comparison metrics
    """
    target_cells = target.cells
    generated_cells = generated.cells

    target_filled = target_cells != EMPTY_COLOR
    generated_filled = generated_cells != EMPTY_COLOR

    union = np.sum(target_filled | generated_filled)
    intersection = np.sum(target_filled & generated_filled)

    return {
        'distance': distance(target, generated),
        'match_ratio': float(np.mean(target_cells == generated_cells)),
        'filled_iou': float(intersection / union) if union > 0 else 1.0,
        'target_components': count_components(target),
        'generated_components': count_components(generated)
    }


def rule_usage(rule: SubstitutionRule) -> Dict[int, int]:
    """
    Count how many genes hold each palette color.

    Args:
        rule: Substitution rule

    Returns:
        Mapping color -> gene count (colors outside the palette included)
    """
    usage = {color: 0 for color in rule.palette}
    for gene in rule.genes:
        usage[gene] = usage.get(gene, 0) + 1
    return usage
