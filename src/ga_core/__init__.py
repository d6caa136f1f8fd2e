"""
GA Core Module

Components of the single-variable genetic algorithm engine. Each component
handles a specific aspect of the GA process:

- expression: Safe parsing and evaluation of the fitness expression
- encoding: 8-bit genotype <-> phenotype conversion
- Individual: Immutable scored candidate solution
- fitness: Domain scan, positive fitness shift and normalization
- SelectionMethods: Roulette-wheel parent selection and elitism
- GeneticOperations: Single-point crossover and bit-flip mutation
- PopulationManager: Initialization and generation advance
- GAReporter: Generation tables, fitness history and run summaries
- EvolutionVisualizer: Fitness history and landscape plots

Usage:
    from ga_core import PopulationManager, DomainCache
    from ga_core.expression import evaluate
"""

from .individual import Individual
from .expression import evaluate, compile_expression, validate_expression
from .encoding import decode, encode, random_genotype, is_valid_genotype
from .fitness import (
    DomainBounds, DomainCache, find_min_max, raw_fitness, normalize_population
)
from .selection import SelectionMethods
from .genetic_operations import GeneticOperations, single_point_crossover
from .population_management import (
    PopulationManager, get_best, get_worst, get_average_fitness
)
from .reporting import GAReporter, population_statistics

__all__ = [
    'Individual',
    'evaluate',
    'compile_expression',
    'validate_expression',
    'decode',
    'encode',
    'random_genotype',
    'is_valid_genotype',
    'DomainBounds',
    'DomainCache',
    'find_min_max',
    'raw_fitness',
    'normalize_population',
    'SelectionMethods',
    'GeneticOperations',
    'single_point_crossover',
    'PopulationManager',
    'get_best',
    'get_worst',
    'get_average_fitness',
    'GAReporter',
    'population_statistics',
]

# Version information
__version__ = '1.0.0'
__description__ = 'Single-variable bit-string genetic algorithm'
