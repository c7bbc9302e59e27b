"""
Substitution Rule Evolution Engine
Genetic algorithm searching for a rule whose fractal approximates a target volume
"""

import logging
import math
import pickle
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .fitness import EvaluationContext, fitness
from .individual import Individual, mutate_individual
from .operators import tournament_select, uniform_crossover
from .rule import SubstitutionRule

logger = logging.getLogger(__name__)


def _score_rule(args: Tuple[SubstitutionRule, EvaluationContext]) -> float:
    """Worker entry point for process-pool scoring."""
    rule, context = args
    return fitness(rule, context)


class RuleEvolver:
    """
    Genetic algorithm for evolving substitution rules.

    Runs a generational loop (elitism, tournament selection, uniform
    crossover, single-gene mutation) until a wall-clock or generation
    budget is spent, and keeps the best individual ever scored.
    """

    def __init__(
        self,
        context: EvaluationContext,
        population_size: int = 40,
        elitism_rate: float = 0.1,
        crossover_rate: float = 0.9,
        mutation_rate: float = 0.03,
        tournament_size: int = 2,
        swap_probability: float = 0.5,
        max_generations: Optional[int] = 100,
        time_budget: Optional[float] = None,
        n_workers: int = 1,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Initialize rule evolver.

        Args:
            context: Target, start, palette and depth shared by all individuals
            population_size: Number of rules per generation
            elitism_rate: Fraction of best rules copied unchanged
            crossover_rate: Probability that a parent pair is crossed over
            mutation_rate: Probability that an offspring gets one gene resampled
            tournament_size: Contestants per tournament
            swap_probability: Per-gene swap probability of uniform crossover
            max_generations: Generation budget (None = unlimited)
            time_budget: Wall-clock budget in seconds (None = unlimited)
            n_workers: Processes used to score a generation
            seed: Random seed for reproducibility
            rng: Explicit generator (overrides seed)
        """
        if max_generations is None and time_budget is None:
            raise ValueError("Either max_generations or time_budget must be set")

        for name, value in (
            ('population_size', population_size),
            ('tournament_size', tournament_size),
            ('n_workers', n_workers),
            ('max_generations', max_generations),
            ('time_budget', time_budget),
        ):
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        for name, value in (
            ('elitism_rate', elitism_rate),
            ('crossover_rate', crossover_rate),
            ('mutation_rate', mutation_rate),
            ('swap_probability', swap_probability),
        ):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

        self.context = context
        self.population_size = population_size
        self.elitism_rate = elitism_rate
        self.crossover_rate = crossover_rate
        self.mutation_rate = mutation_rate
        self.tournament_size = tournament_size
        self.swap_probability = swap_probability
        self.max_generations = max_generations
        self.time_budget = time_budget
        self.n_workers = n_workers
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.population: List[Individual] = []
        self.generation = 0
        self.best_individual: Optional[Individual] = None
        self.best_fitness_history: List[float] = []
        self.avg_fitness_history: List[float] = []

        self._initialize_population()

    @property
    def elite_size(self) -> int:
        return min(self.population_size, int(math.ceil(self.elitism_rate * self.population_size)))

    def _initialize_population(self):
        """Create initial random population of rules."""
        self.population = [
            Individual.random(self.context, self.rng)
            for _ in range(self.population_size)
        ]

    def _evaluate_population(self) -> List[float]:
        """
        Score every individual, reusing cached scores.

        Returns:
            Fitness per population index
        """
        pending = [ind for ind in self.population if not ind.is_scored]

        if pending and self.n_workers > 1:
            with ProcessPoolExecutor(max_workers=self.n_workers) as executor:
                scores = executor.map(_score_rule, [(ind.rule, self.context) for ind in pending])
                for ind, score in zip(pending, scores):
                    ind.set_fitness(score)

        return [ind.fitness() for ind in self.population]

    def _rank(self, fitness_scores: List[float]) -> List[int]:
        """Population indices from best to worst; ties keep population order."""
        return sorted(range(len(fitness_scores)), key=lambda i: -fitness_scores[i])

    def _track_best(self, fitness_scores: List[float]):
        best_idx = self._rank(fitness_scores)[0]
        candidate = self.population[best_idx]
        if self.best_individual is None or candidate.fitness() > self.best_individual.fitness():
            self.best_individual = candidate

    def _breed(self, parent1: Individual, parent2: Individual) -> List[Individual]:
        """
        Create two offspring from a parent pair.

        Args:
            parent1: First parent
            parent2: Second parent

        Returns:
            Two offspring individuals
        """
        if self.rng.random() < self.crossover_rate:
            rule1, rule2 = uniform_crossover(
                parent1.rule, parent2.rule, self.rng, self.swap_probability
            )
            offspring = [Individual(rule1, self.context), Individual(rule2, self.context)]
        else:
            offspring = [parent1, parent2]

        return [
            mutate_individual(child, self.rng) if self.rng.random() < self.mutation_rate else child
            for child in offspring
        ]

    def _evolve_generation(self) -> Tuple[List[float], float, float]:
        """
        Evolve one generation.

        Returns:
            (fitness_scores, best_fitness, avg_fitness)
        """
        fitness_scores = self._evaluate_population()
        self._track_best(fitness_scores)

        best_fitness = max(fitness_scores)
        avg_fitness = float(np.mean(fitness_scores))

        ranking = self._rank(fitness_scores)
        new_population = [self.population[i] for i in ranking[:self.elite_size]]

        while len(new_population) < self.population_size:
            parent1 = self.population[tournament_select(fitness_scores, self.rng, self.tournament_size)]
            parent2 = self.population[tournament_select(fitness_scores, self.rng, self.tournament_size)]
            new_population.extend(self._breed(parent1, parent2))

        self.population = new_population[:self.population_size]
        self.generation += 1

        return fitness_scores, best_fitness, avg_fitness

    def _budget_exhausted(self, started: float, generations_run: int) -> Optional[str]:
        if self.max_generations is not None and generations_run >= self.max_generations:
            return "generation budget"
        if self.time_budget is not None and time.monotonic() - started >= self.time_budget:
            return "time budget"
        return None

    def evolve(self, verbose: bool = True) -> Dict:
        """
        Run the evolution until the time or generation budget is spent.

        Args:
            verbose: Whether to show progress

        Returns:
            Dictionary with evolution results
        """
        logger.info(
            "Evolving %d rules of %d genes (depth=%d, generations=%s, time budget=%s)",
            self.population_size, self.context.rule_length, self.context.depth,
            self.max_generations, self.time_budget
        )

        if verbose:
            pbar = tqdm(total=self.max_generations, desc="Evolving substitution rules")

        started = time.monotonic()
        generations_run = 0

        while True:
            reason = self._budget_exhausted(started, generations_run)
            if reason is not None:
                break

            fitness_scores, best_fitness, avg_fitness = self._evolve_generation()
            generations_run += 1

            self.best_fitness_history.append(best_fitness)
            self.avg_fitness_history.append(avg_fitness)
            logger.debug("Generation %d: best=%.3f avg=%.3f", self.generation, best_fitness, avg_fitness)

            if verbose:
                pbar.set_postfix({
                    'best': f"{best_fitness:.3f}",
                    'avg': f"{avg_fitness:.3f}"
                })
                pbar.update(1)

        if verbose:
            pbar.close()

        # Offspring of the last generation have not been scored yet
        final_fitness = self._evaluate_population()
        self._track_best(final_fitness)

        elapsed = time.monotonic() - started
        logger.info(
            "Stopped after %d generations (%s, %.1fs); best fitness %.3f",
            generations_run, reason, elapsed, self.best_individual.fitness()
        )

        return {
            'best_individual': self.best_individual,
            'best_rule': self.best_individual.rule,
            'best_fitness': self.best_individual.fitness(),
            'best_grid': self.best_individual.render(),
            'final_population': self.population,
            'fitness_history': {
                'best': self.best_fitness_history,
                'average': self.avg_fitness_history
            },
            'generations': self.generation,
            'elapsed': elapsed
        }

    def save_population(self, filepath: str):
        """Save evolved population to file."""
        with open(filepath, 'wb') as f:
            pickle.dump({
                'population': [ind.rule.to_list() for ind in self.population],
                'palette': list(self.context.palette),
                'generation': self.generation,
                'fitness_history': {
                    'best': self.best_fitness_history,
                    'average': self.avg_fitness_history
                }
            }, f)

    def load_population(self, filepath: str):
        """Load population from file into the current context."""
        with open(filepath, 'rb') as f:
            data = pickle.load(f)

        if tuple(data['palette']) != self.context.palette.colors:
            raise ValueError("Saved population was evolved with a different palette")

        self.population = [
            Individual(SubstitutionRule(genes, self.context.palette), self.context)
            for genes in data['population']
        ]
        self.population_size = len(self.population)
        self.generation = data['generation']
        self.best_fitness_history = data['fitness_history']['best']
        self.avg_fitness_history = data['fitness_history']['average']
        self.best_individual = None
