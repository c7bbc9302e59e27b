"""
Individuals
Population members pairing a rule with its memoized fitness
"""

import numpy as np
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from .fitness import EvaluationContext, fitness
from .grid import VoxelGrid
from .generator import expand
from .operators import mutate
from .rule import SubstitutionRule


@runtime_checkable
class Chromosome(Protocol):
    """What the evolution loop needs from a population member."""

    @property
    def genes(self) -> Sequence[int]: ...

    def fitness(self) -> float: ...

    def new_fixed_length(self, genes: Sequence[int]) -> 'Chromosome': ...


class Individual:
    """
    A substitution rule scored against one evaluation context.

    Fitness is computed on first access and cached.
    """

    def __init__(
        self,
        rule: SubstitutionRule,
        context: EvaluationContext,
        fitness_score: Optional[float] = None
    ):
        self.rule = rule
        self.context = context
        self._fitness = fitness_score

    @classmethod
    def random(cls, context: EvaluationContext, rng: np.random.Generator) -> 'Individual':
        return cls(SubstitutionRule.random(context.palette, rng), context)

    @property
    def genes(self):
        return self.rule.genes

    @property
    def is_scored(self) -> bool:
        return self._fitness is not None

    def fitness(self) -> float:
        if self._fitness is None:
            self._fitness = fitness(self.rule, self.context)
        return self._fitness

    def set_fitness(self, score: float):
        """Store a score computed elsewhere (e.g. in a worker process)."""
        self._fitness = float(score)

    def new_fixed_length(self, genes: Sequence[int]) -> 'Individual':
        """Unscored individual with new genes in the same context."""
        return Individual(self.rule.with_genes(genes), self.context)

    def render(self) -> VoxelGrid:
        """Volume this individual's rule produces from the start grid."""
        return expand(self.rule, self.context.start, self.context.depth)

    def __repr__(self) -> str:
        score = f"{self._fitness:.3f}" if self._fitness is not None else "unscored"
        return f"Individual({self.rule!r}, fitness={score})"


def mutate_individual(original: Any, rng: np.random.Generator) -> Any:
    """
    Mutate one gene of an individual.

    Anything that is not an Individual is returned unchanged.
    """
    if not isinstance(original, Individual):
        return original

    rule = mutate(original.rule, original.context.palette, rng)
    return Individual(rule, original.context)
