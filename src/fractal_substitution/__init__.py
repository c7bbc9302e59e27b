"""
Fractal Substitution Module
Evolves recursive 3x3x3 substitution rules that grow a voxel volume toward a target
"""

from .exceptions import (
    FractalError,
    InvalidPaletteError,
    InvalidRepresentationError,
    ShapeMismatchError,
    DegenerateRecursionError
)
from .palette import ColorPalette, EMPTY_COLOR, FULL_INTENSITY_COLOR
from .grid import VoxelGrid
from .rule import SubstitutionRule, SUBCUBES
from .generator import expand
from .fitness import EvaluationContext, MAX_SCORE, distance, fitness
from .operators import mutate, mutation_site, uniform_crossover, tournament_select
from .individual import Chromosome, Individual, mutate_individual
from .evolution import RuleEvolver

__all__ = [
    'FractalError',
    'InvalidPaletteError',
    'InvalidRepresentationError',
    'ShapeMismatchError',
    'DegenerateRecursionError',
    'ColorPalette',
    'EMPTY_COLOR',
    'FULL_INTENSITY_COLOR',
    'VoxelGrid',
    'SubstitutionRule',
    'SUBCUBES',
    'expand',
    'EvaluationContext',
    'MAX_SCORE',
    'distance',
    'fitness',
    'mutate',
    'mutation_site',
    'uniform_crossover',
    'tournament_select',
    'Chromosome',
    'Individual',
    'mutate_individual',
    'RuleEvolver'
]
