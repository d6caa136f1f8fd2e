"""
Test Fixtures and Utilities for GA Tests

Provides reusable test data, population builders and helper assertions
for GA component and integration testing.
"""

import os
import sys
import shutil
import tempfile
from typing import List, Sequence, Tuple

# Add project root and src directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from ga_config import GAConfig
from ga_core.encoding import encode, is_valid_genotype
from ga_core.individual import Individual


class TestFixtures:
    """Centralized test fixtures and utilities."""

    __test__ = False

    @staticmethod
    def get_test_config(population_size: int = 10, max_generations: int = 5,
                        expression: str = "x", **overrides) -> GAConfig:
        """Get test configuration with sensible defaults."""
        params = dict(
            population_size=population_size,
            crossover_rate=0.8,
            mutation_rate=0.05,
            max_generations=max_generations,
            function_expression=expression,
        )
        params.update(overrides)
        return GAConfig(**params)

    @staticmethod
    def make_individual(x: int, fitness: float = None,
                        normalized_fitness: float = 0.0) -> Individual:
        """Create an individual for phenotype ``x`` (fitness defaults to x + 1)."""
        return Individual(genotype=encode(x), x=x,
                          fitness=float(x + 1) if fitness is None else fitness,
                          normalized_fitness=normalized_fitness)

    @staticmethod
    def make_population(fitness_values: Sequence[float]) -> List[Individual]:
        """Create an unnormalized population with the given fitness values."""
        return [TestFixtures.make_individual(i, fitness=value)
                for i, value in enumerate(fitness_values)]

    @staticmethod
    def create_temp_test_dir() -> str:
        """Create temporary test directory and return path."""
        return tempfile.mkdtemp(prefix='ga_test_')

    @staticmethod
    def cleanup_path(path: str):
        """Clean up test files or directories."""
        try:
            if os.path.isfile(path):
                os.unlink(path)
            elif os.path.isdir(path):
                shutil.rmtree(path)
        except OSError:
            pass  # Ignore cleanup errors

    @staticmethod
    def assert_valid_individual(individual: Individual):
        """Assert that an individual is internally consistent."""
        assert isinstance(individual, Individual), "Individual must be an Individual"
        assert is_valid_genotype(individual.genotype), \
            f"Invalid genotype {individual.genotype!r}"
        assert int(individual.genotype, 2) == individual.x, "Phenotype must match genotype"
        assert individual.fitness >= 1.0, \
            f"Shifted fitness ({individual.fitness}) must be at least 1"

    @staticmethod
    def assert_normalized(population: Sequence[Individual], tolerance: float = 1e-9):
        """Assert normalized fitness values are probabilities summing to 1."""
        total = sum(individual.normalized_fitness for individual in population)
        assert abs(total - 1.0) <= tolerance, f"Normalized fitness sums to {total}"
        for individual in population:
            assert 0.0 <= individual.normalized_fitness <= 1.0


class TestDataBuilder:
    """Builder pattern for creating run configurations."""

    __test__ = False

    def __init__(self):
        self.config = TestFixtures.get_test_config()
        self.temp_dirs = []

    def with_config(self, **config_updates) -> 'TestDataBuilder':
        """Update configuration parameters."""
        self.config = self.config.update(**config_updates)
        return self

    def with_temp_output_dir(self) -> 'TestDataBuilder':
        """Create temporary output directory and enable reporting into it."""
        temp_dir = TestFixtures.create_temp_test_dir()
        self.temp_dirs.append(temp_dir)
        self.config = self.config.update(output_dir=temp_dir, enable_reporting=True)
        return self

    def build(self) -> GAConfig:
        """Build the test configuration."""
        return self.config

    def cleanup(self):
        """Clean up temporary directories."""
        for temp_dir in self.temp_dirs:
            TestFixtures.cleanup_path(temp_dir)
        self.temp_dirs.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()


def constant_draws(value: float):
    """Side effect for patching ``random.random`` with a fixed draw."""
    return lambda: value


def sequence_draws(values: Sequence[float]):
    """Side effect for patching ``random.random`` with a repeating sequence."""
    state = {'index': 0}

    def draw():
        value = values[state['index'] % len(values)]
        state['index'] += 1
        return value
    return draw


# Global test constants
DEFAULT_TEST_POPULATION_SIZE = 8
TOLERANCE = 1e-9
SCENARIO_PARENTS: Tuple[str, str] = ("11110000", "00001111")
