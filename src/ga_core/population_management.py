"""
Population Management Module

Handles population initialization, individual creation and the
generation-advance step that ties selection, crossover, mutation and elitism
together.

Features:
- Random population initialization over the encoded domain
- Scoring of genotypes through the run's domain cache
- Generation advance with elitism and odd/even size handling
- Best / worst / average population queries
"""

from typing import List, Sequence

from ga_exceptions import PopulationError
from ga_logging import get_logger
from .encoding import decode, random_genotype
from .fitness import DomainCache, fitness, normalize_population
from .genetic_operations import GeneticOperations
from .individual import Individual
from .selection import SelectionMethods


class PopulationManager:
    """
    Manages population-level operations for the genetic algorithm.

    Scores individuals against the expression given to each call, using the
    domain cache it was constructed with for the fitness shift.
    """

    def __init__(self, domain_cache: DomainCache = None,
                 selection_methods: SelectionMethods = None,
                 genetic_operations: GeneticOperations = None):
        """
        Initialize population manager.

        Args:
            domain_cache: Domain extrema cache of the owning run
            selection_methods: Parent/elite selection (created if None)
            genetic_operations: Crossover/mutation operators (created if None)
        """
        self.domain_cache = domain_cache if domain_cache is not None else DomainCache()
        self.selection_methods = selection_methods or SelectionMethods()
        self.genetic_operations = genetic_operations or GeneticOperations(0.0, 0.0)
        self.logger = get_logger("PopulationManager")

        # Statistics
        self.stats = {
            'individuals_created': 0,
            'populations_initialized': 0,
            'generations_advanced': 0
        }

    def create_individual(self, genotype: str, expression: str) -> Individual:
        """
        Decode and score a genotype.

        Args:
            genotype: 8-bit string
            expression: Fitness expression

        Returns:
            New individual with ``normalized_fitness`` of 0
        """
        x = decode(genotype)
        self.stats['individuals_created'] += 1
        return Individual(genotype=genotype, x=x,
                          fitness=fitness(x, expression, self.domain_cache))

    def initialize_population(self, size: int, expression: str) -> List[Individual]:
        """
        Create a normalized population of ``size`` random individuals.

        Args:
            size: Population size
            expression: Fitness expression

        Returns:
            Normalized population
        """
        population = [self.create_individual(random_genotype(), expression)
                      for _ in range(size)]
        self.stats['populations_initialized'] += 1
        self.logger.debug("Population initialized", size=size, expression=expression)
        return normalize_population(population)

    def advance_generation(self, population: Sequence[Individual], config) -> List[Individual]:
        """
        Produce the next generation.

        Elites are copied unchanged; the remaining slots are filled with
        children of roulette-selected parent pairs after crossover and
        mutation, two per pair except for a final odd slot.

        Args:
            population: Current normalized population
            config: GAConfig of the run

        Returns:
            Normalized population of exactly ``config.population_size``
        """
        if not population:
            raise PopulationError("Cannot advance an empty population")

        target_size = config.population_size
        expression = config.function_expression

        self.genetic_operations.crossover_rate = config.crossover_rate
        self.genetic_operations.mutation_rate = config.mutation_rate

        new_population = list(self.selection_methods.elitist_selection(
            population, config.effective_elitism))

        while len(new_population) < target_size:
            parent1, parent2 = self.selection_methods.select_parents(population)

            child1, child2 = self.genetic_operations.crossover(parent1.genotype, parent2.genotype)
            child1 = self.genetic_operations.mutate(child1)
            child2 = self.genetic_operations.mutate(child2)

            new_population.append(self.create_individual(child1, expression))
            if len(new_population) < target_size:
                new_population.append(self.create_individual(child2, expression))

        self.stats['generations_advanced'] += 1
        return normalize_population(new_population)

    def get_statistics(self) -> dict:
        """Get population management statistics."""
        return self.stats.copy()

    def reset_statistics(self):
        """Reset statistics counters."""
        self.stats = {
            'individuals_created': 0,
            'populations_initialized': 0,
            'generations_advanced': 0
        }


def get_best(population: Sequence[Individual]) -> Individual:
    """Individual with the highest fitness; the first one wins ties."""
    if not population:
        raise PopulationError("Cannot find the best individual of an empty population")
    best = population[0]
    for individual in population[1:]:
        if individual.fitness > best.fitness:
            best = individual
    return best


def get_worst(population: Sequence[Individual]) -> Individual:
    """Individual with the lowest fitness; the first one wins ties."""
    if not population:
        raise PopulationError("Cannot find the worst individual of an empty population")
    worst = population[0]
    for individual in population[1:]:
        if individual.fitness < worst.fitness:
            worst = individual
    return worst


def get_average_fitness(population: Sequence[Individual]) -> float:
    """Mean fitness of the population, 0 when it is empty."""
    if not population:
        return 0.0
    return sum(individual.fitness for individual in population) / len(population)
