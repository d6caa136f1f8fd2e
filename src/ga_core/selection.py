"""
Selection Methods Module

Implements parent selection and elitist carry-over for the generation step.

Features:
- Roulette-wheel (fitness-proportionate) parent selection with replacement
- Elitist selection of the top individuals by fitness
- Statistics on fallback draws, which should only occur on rounding edge cases
"""

import random
from typing import List, Sequence, Tuple

from ga_exceptions import PopulationError
from .individual import Individual


class SelectionMethods:
    """
    Collection of selection methods for the genetic algorithm.

    Roulette selection reads each individual's ``normalized_fitness``, so it
    expects a normalized population.
    """

    def __init__(self):
        # Statistics tracking
        self.selection_stats = {
            'roulette_spins': 0,
            'roulette_fallbacks': 0,
            'elites_preserved': 0
        }

    def roulette_selection(self, population: Sequence[Individual]) -> Individual:
        """
        Select an individual with probability equal to its normalized fitness.

        Draws r in [0, 1) and returns the first individual, in stored order,
        whose cumulative normalized fitness reaches r. If rounding leaves the
        cumulative sum just short of r the last individual is returned.

        Args:
            population: Normalized population

        Returns:
            Selected individual
        """
        if not population:
            raise PopulationError("Cannot select from an empty population")

        self.selection_stats['roulette_spins'] += 1
        selection_point = random.random()

        cumulative = 0.0
        for individual in population:
            cumulative += individual.normalized_fitness
            if cumulative >= selection_point:
                return individual

        self.selection_stats['roulette_fallbacks'] += 1
        return population[-1]

    def select_parents(self, population: Sequence[Individual]) -> Tuple[Individual, Individual]:
        """
        Select a parent pair by two independent roulette spins.

        The same individual may be drawn as both parents.
        """
        return self.roulette_selection(population), self.roulette_selection(population)

    def elitist_selection(self, population: Sequence[Individual], count: int) -> List[Individual]:
        """
        Select the ``count`` fittest individuals, unchanged.

        Ties keep their order in ``population``.

        Args:
            population: Current population
            count: Number of elites (clamped to the population size)

        Returns:
            Elites in descending fitness order
        """
        count = max(0, min(count, len(population)))
        if count == 0:
            return []

        sorted_population = sorted(population, key=lambda ind: ind.fitness, reverse=True)
        elites = sorted_population[:count]
        self.selection_stats['elites_preserved'] += len(elites)
        return elites

    def get_statistics(self) -> dict:
        """Get selection statistics."""
        return self.selection_stats.copy()

    def reset_statistics(self):
        """Reset selection statistics."""
        self.selection_stats = {
            'roulette_spins': 0,
            'roulette_fallbacks': 0,
            'elites_preserved': 0
        }
