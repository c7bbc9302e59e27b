"""
Diagnostic Visualizer
Plots of fitness progress and voxel volume slices
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import Dict, List, Optional
from pathlib import Path

from ..fractal_substitution.grid import VoxelGrid


def _to_rgb(cells: np.ndarray) -> np.ndarray:
    """Split 24-bit colors into an (..., 3) float RGB array."""
    red = (cells >> 16) & 0xFF
    green = (cells >> 8) & 0xFF
    blue = cells & 0xFF
    return np.stack([red, green, blue], axis=-1) / 255.0


class DiagnosticVisualizer:
    """
    Visualization tools for evolution runs.
    """

    def __init__(self, output_dir: str = "diagnostics_plots"):
        """
        Initialize visualizer.

        Args:
            output_dir: Directory to save plots
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def plot_fitness_history(self, history: Dict[str, List[float]], save: bool = True) -> Optional[Path]:
        """
        Plot best and average fitness per generation.

        Args:
            history: Dictionary with 'best' and 'average' lists
            save: Whether to save the plot

        Returns:
            Path of the saved figure, if saved
        """
        fig, ax = plt.subplots(figsize=(10, 6))

        ax.plot(history['best'], label='Best', color='blue')
        ax.plot(history['average'], label='Average', color='orange')
        ax.set_title('Fitness per Generation')
        ax.set_xlabel('Generation')
        ax.set_ylabel('Fitness')
        ax.legend()
        ax.grid(True)

        plt.tight_layout()

        path = None
        if save:
            path = self.output_dir / 'fitness_history.png'
            fig.savefig(path, dpi=150, bbox_inches='tight')

        plt.close(fig)
        return path

    def plot_volume_slices(
        self,
        grid: VoxelGrid,
        name: str = 'volume',
        max_slices: int = 9,
        save: bool = True
    ) -> Optional[Path]:
        """
        Plot evenly spaced x-slices of a volume.

        Args:
            grid: Volume to plot
            name: File name stem
            max_slices: Maximum number of slices shown
            save: Whether to save the plot

        Returns:
            Path of the saved figure, if saved
        """
        num_slices = min(max_slices, grid.side)
        indices = np.linspace(0, grid.side - 1, num_slices).astype(int)
        rgb = _to_rgb(grid.cells)

        fig, axes = plt.subplots(1, num_slices, figsize=(2 * num_slices, 2.4), squeeze=False)
        fig.suptitle(f'{name} (side {grid.side})')

        for ax, x in zip(axes[0], indices):
            ax.imshow(rgb[x], interpolation='nearest')
            ax.set_title(f'x={x}', fontsize=8)
            ax.axis('off')

        path = None
        if save:
            path = self.output_dir / f'{name}_slices.png'
            fig.savefig(path, dpi=150, bbox_inches='tight')

        plt.close(fig)
        return path
