"""
Genetic Operators
Mutation, crossover and selection for substitution rules
"""

import numpy as np
from typing import Sequence, Tuple

from .exceptions import InvalidRepresentationError
from .palette import ColorPalette
from .rule import SubstitutionRule


def mutation_site(
    rule: SubstitutionRule,
    palette: ColorPalette,
    rng: np.random.Generator
) -> Tuple[int, int]:
    """
    Draw the gene index and replacement color for a single mutation.

    Args:
        rule: Rule to mutate
        palette: Palette replacement colors are drawn from
        rng: Random generator

    Returns:
        (gene_index, new_color)
    """
    index = int(rng.integers(len(rule)))
    color = palette.random_color(rng)
    return index, color


def mutate(
    rule: SubstitutionRule,
    palette: ColorPalette,
    rng: np.random.Generator
) -> SubstitutionRule:
    """
    Resample exactly one gene uniformly from the palette.

    The new color may coincide with the old one.

    Args:
        rule: Original rule (unchanged)
        palette: Palette to draw from
        rng: Random generator

    Returns:
        New rule
    """
    index, color = mutation_site(rule, palette, rng)
    return rule.with_gene(index, color)


def uniform_crossover(
    parent1: SubstitutionRule,
    parent2: SubstitutionRule,
    rng: np.random.Generator,
    swap_probability: float = 0.5
) -> Tuple[SubstitutionRule, SubstitutionRule]:
    """
    Swap each gene position between two parents with a fixed probability.

    Args:
        parent1: First parent
        parent2: Second parent
        rng: Random generator
        swap_probability: Per-gene swap probability

    Returns:
        Two children with the parents' length
    """
    if len(parent1) != len(parent2):
        raise InvalidRepresentationError(
            f"Parents differ in length: {len(parent1)} vs {len(parent2)}"
        )

    genes1 = np.array(parent1.genes, dtype=np.int64)
    genes2 = np.array(parent2.genes, dtype=np.int64)
    swap = rng.random(len(genes1)) < swap_probability

    child1 = np.where(swap, genes2, genes1)
    child2 = np.where(swap, genes1, genes2)

    return parent1.with_genes(child1.tolist()), parent2.with_genes(child2.tolist())


def tournament_select(
    fitness_scores: Sequence[float],
    rng: np.random.Generator,
    tournament_size: int = 2
) -> int:
    """
    Pick the best of a random sample of the population.

    Ties go to the lowest population index.

    Args:
        fitness_scores: Fitness per population index
        rng: Random generator
        tournament_size: Number of contestants

    Returns:
        Index of the winner
    """
    size = min(tournament_size, len(fitness_scores))
    candidates = sorted(rng.choice(len(fitness_scores), size=size, replace=False).tolist())
    return max(candidates, key=lambda i: fitness_scores[i])

