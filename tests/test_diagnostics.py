"""
Tests for Diagnostics
"""

import matplotlib
matplotlib.use("Agg")

import pytest
import numpy as np
from src.fractal_substitution.palette import ColorPalette
from src.fractal_substitution.grid import VoxelGrid
from src.fractal_substitution.rule import SubstitutionRule
from src.diagnostics.metrics import compare_volumes, count_components, rule_usage
from src.diagnostics.visualizer import DiagnosticVisualizer

WHITE = 0xFFFFFF


def test_compare_identical_volumes():
    """Identical volumes match perfectly."""
    grid = VoxelGrid.filled(3, WHITE)

    metrics = compare_volumes(grid, grid)

    assert metrics['distance'] == 0.0
    assert metrics['match_ratio'] == 1.0
    assert metrics['filled_iou'] == 1.0
    assert metrics['target_components'] == metrics['generated_components'] == 1


def test_compare_empty_volumes():
    """Two empty volumes have no components and full overlap."""
    metrics = compare_volumes(VoxelGrid.empty(1), VoxelGrid.empty(1))

    assert metrics['filled_iou'] == 1.0
    assert metrics['target_components'] == 0


def test_count_components():
    """Separated filled voxels count as distinct components."""
    cells = np.zeros((3, 3, 3), dtype=np.int64)
    cells[0, 0, 0] = WHITE
    cells[2, 2, 2] = WHITE

    assert count_components(VoxelGrid(cells)) == 2


def test_rule_usage():
    """Gene counts per color add up to the rule length."""
    palette = ColorPalette.default()
    rule = SubstitutionRule([WHITE] * 10 + [0] * 44, palette)

    usage = rule_usage(rule)

    assert usage == {0: 44, WHITE: 10}
    assert sum(usage.values()) == len(rule)


def test_visualizer_writes_plots(tmp_path):
    """Plots are saved under the output directory."""
    visualizer = DiagnosticVisualizer(output_dir=str(tmp_path / "plots"))

    history_path = visualizer.plot_fitness_history({'best': [1.0, 2.0, 3.0], 'average': [0.5, 1.0, 2.0]})
    slices_path = visualizer.plot_volume_slices(VoxelGrid.filled(9, 0x336699), name='target')

    assert history_path.exists()
    assert slices_path.exists()


if __name__ == "__main__":
    pytest.main([__file__])
