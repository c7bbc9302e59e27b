"""
Tests for Rule Evolution
"""

import pytest
import numpy as np
from src.fractal_substitution.palette import ColorPalette
from src.fractal_substitution.grid import VoxelGrid
from src.fractal_substitution.rule import SubstitutionRule
from src.fractal_substitution.fitness import EvaluationContext, MAX_SCORE, fitness
from src.fractal_substitution.individual import Chromosome, Individual, mutate_individual
from src.fractal_substitution.evolution import RuleEvolver

WHITE = 0xFFFFFF


@pytest.fixture
def context():
    target = VoxelGrid.filled(9, WHITE).to_array()
    target[4, 4, 4] = 0
    return EvaluationContext(
        target=VoxelGrid(target),
        start=VoxelGrid.empty(2),
        palette=ColorPalette.default(),
        depth=2
    )


def test_individual_caches_fitness(context):
    """Fitness is computed once and then reused."""
    individual = Individual.random(context, np.random.default_rng(0))

    assert not individual.is_scored
    score = individual.fitness()
    assert individual.is_scored
    assert individual.fitness() == score == fitness(individual.rule, context)


def test_individual_contract(context):
    """Individuals satisfy the chromosome protocol."""
    individual = Individual.random(context, np.random.default_rng(1))
    sibling = individual.new_fixed_length(list(reversed(individual.genes)))

    assert isinstance(individual, Chromosome)
    assert not sibling.is_scored
    assert sibling.context is context
    assert len(sibling.genes) == len(individual.genes)


def test_mutate_individual(context):
    """Individuals get a new one-gene mutant; other objects pass through."""
    individual = Individual.random(context, np.random.default_rng(2))
    mutant = mutate_individual(individual, np.random.default_rng(3))
    other = object()

    assert mutant is not individual
    assert len(individual.rule.differing_positions(mutant.rule)) <= 1
    assert mutate_individual(other, np.random.default_rng(3)) is other


def test_evolve_generation_budget(context):
    """Evolution stops after max_generations and reports the best rule."""
    evolver = RuleEvolver(context, population_size=10, max_generations=5, seed=0)

    results = evolver.evolve(verbose=False)

    assert results['generations'] == 5
    assert len(results['fitness_history']['best']) == 5
    assert len(results['final_population']) == 10
    assert results['best_fitness'] <= MAX_SCORE
    assert results['best_fitness'] >= max(results['fitness_history']['best'])
    assert results['best_grid'] == results['best_individual'].render()
    assert results['best_grid'].shape == (9, 9, 9)


def test_elitism_keeps_best(context):
    """With elites preserved, the best score never drops."""
    evolver = RuleEvolver(context, population_size=12, elitism_rate=0.25, max_generations=8, seed=3)

    history = evolver.evolve(verbose=False)['fitness_history']['best']

    assert all(later >= earlier for earlier, later in zip(history, history[1:]))


def test_evolution_is_reproducible(context):
    """Equal seeds give equal runs."""
    first = RuleEvolver(context, population_size=8, max_generations=4, seed=42).evolve(verbose=False)
    second = RuleEvolver(context, population_size=8, max_generations=4, seed=42).evolve(verbose=False)

    assert first['best_rule'] == second['best_rule']
    assert first['fitness_history'] == second['fitness_history']


def test_evolve_time_budget(context):
    """A wall-clock budget alone terminates the run."""
    evolver = RuleEvolver(context, population_size=6, max_generations=None, time_budget=0.2, seed=1)

    results = evolver.evolve(verbose=False)

    assert results['generations'] >= 1
    assert results['elapsed'] >= 0.2


def test_invalid_configuration(context):
    """Missing budgets and non-positive sizes are rejected."""
    with pytest.raises(ValueError):
        RuleEvolver(context, max_generations=None, time_budget=None)
    with pytest.raises(ValueError):
        RuleEvolver(context, population_size=0)
    with pytest.raises(ValueError):
        RuleEvolver(context, elitism_rate=1.5)


def test_parallel_scoring_matches_serial(context):
    """Scores from worker processes belong to the right individuals."""
    evolver = RuleEvolver(context, population_size=6, max_generations=1, n_workers=2, seed=5)

    evolver.evolve(verbose=False)

    for individual in evolver.population:
        assert individual.fitness() == fitness(individual.rule, context)


def test_save_and_load_population(context, tmp_path):
    """Saved populations load back with the same rules."""
    evolver = RuleEvolver(context, population_size=5, max_generations=2, seed=8)
    evolver.evolve(verbose=False)
    filepath = tmp_path / "population.pkl"
    evolver.save_population(str(filepath))

    restored = RuleEvolver(context, population_size=5, max_generations=2, seed=99)
    restored.load_population(str(filepath))

    assert [ind.rule for ind in restored.population] == [ind.rule for ind in evolver.population]
    assert restored.generation == 2
    assert restored.best_fitness_history == evolver.best_fitness_history


def test_load_population_palette_mismatch(context, tmp_path):
    """Populations evolved with another palette are refused."""
    evolver = RuleEvolver(context, population_size=4, max_generations=1, seed=0)
    filepath = tmp_path / "population.pkl"
    evolver.save_population(str(filepath))

    other = EvaluationContext(
        target=context.target,
        start=context.start,
        palette=ColorPalette([0, 0x808080, WHITE]),
        depth=context.depth
    )

    with pytest.raises(ValueError):
        RuleEvolver(other, population_size=4, max_generations=1).load_population(str(filepath))


def test_known_rule_is_found_by_elitism(context):
    """A perfect rule seeded into the population is returned as the best."""
    evolver = RuleEvolver(context, population_size=6, max_generations=3, seed=4)
    genes = [WHITE] * 27 + [WHITE] * 27
    # Empty parents keep their centre empty; white parents fill white
    genes[13] = 0
    evolver.population[0] = Individual(SubstitutionRule(genes, context.palette), context)

    results = evolver.evolve(verbose=False)

    assert results['best_fitness'] == MAX_SCORE


if __name__ == "__main__":
    pytest.main([__file__])
