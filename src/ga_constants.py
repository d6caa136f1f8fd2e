"""
Configuration Constants for Genetic Algorithm

Centralizes all magic numbers and hard-coded values for better maintainability.
All constants are organized by category with clear documentation.
"""


class EncodingConstants:
    """Genotype encoding constants. The encoding width is fixed, not a run parameter."""

    GENOTYPE_BITS = 8                   # Bits per genotype
    DOMAIN_MIN = 0                      # Smallest phenotype
    DOMAIN_MAX = 2 ** GENOTYPE_BITS - 1 # Largest phenotype (255)
    BIT_CHARS = '01'


class GAConstants:
    """Default run parameters and numeric tolerances."""

    # Default run parameters
    DEFAULT_POPULATION_SIZE = 18
    DEFAULT_CROSSOVER_RATE = 0.64
    DEFAULT_MUTATION_RATE = 0.025
    DEFAULT_MAX_GENERATIONS = 100
    DEFAULT_ELITISM = 0
    DEFAULT_EXPRESSION = '(2*x/256)^2 - 5*x + 130'
    DEFAULT_OUTPUT_DIR = 'ga_results'

    # Fitness
    FAILED_EVALUATION_VALUE = 0.0       # Fail-safe result of a broken expression
    FITNESS_SHIFT_OFFSET = 1.0          # Shifted fitness is always >= this value
    NORMALIZATION_TOLERANCE = 1e-9      # Allowed drift of sum(normalized_fitness) from 1

    # Display pacing used by the CLI between generation steps
    DEFAULT_STEP_DELAY_SECONDS = 0.0


class ReportingConstants:
    """File names and column layouts used by the reporter."""

    GENERATION_CSV_TEMPLATE = 'generation_{generation}.csv'
    FITNESS_HISTORY_CSV = 'fitness_history.csv'
    SUMMARY_JSON_TEMPLATE = '{experiment_name}_summary.json'

    POPULATION_COLUMNS = ['Index', 'Genotype', 'X', 'Fitness', 'Normalized_Fitness']
    HISTORY_COLUMNS = ['Generation', 'Best_Fitness', 'Avg_Fitness', 'Worst_Fitness',
                       'Fitness_Std', 'Best_X', 'Best_Genotype']

    BEST_FITNESS_PLOT = 'best_fitness.png'
    FITNESS_LANDSCAPE_PLOT = 'fitness_landscape.png'


# Convenient access to commonly used constants
GENOTYPE_BITS = EncodingConstants.GENOTYPE_BITS
DOMAIN_MIN = EncodingConstants.DOMAIN_MIN
DOMAIN_MAX = EncodingConstants.DOMAIN_MAX
DEFAULT_EXPRESSION = GAConstants.DEFAULT_EXPRESSION
FAILED_EVALUATION_VALUE = GAConstants.FAILED_EVALUATION_VALUE


def domain_points() -> range:
    """Every phenotype of the encoded domain, in ascending order."""
    return range(DOMAIN_MIN, DOMAIN_MAX + 1)
