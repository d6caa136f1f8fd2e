"""
Configuration Management for Genetic Algorithm

Validates and organizes user-provided parameters into a single immutable
config object. Invalid configurations are rejected here, before a run starts;
the engine itself assumes validated parameters.
"""

from dataclasses import dataclass, asdict
from typing import Optional
from ga_constants import GAConstants
from ga_exceptions import ConfigurationError


@dataclass(frozen=True)
class GAConfig:
    """
    Validated parameter set for one run.

    Elitism above the population size is accepted and clamped through
    ``effective_elitism``; every other invalid value raises ConfigurationError.
    """

    # Core GA Parameters
    population_size: int = GAConstants.DEFAULT_POPULATION_SIZE
    crossover_rate: float = GAConstants.DEFAULT_CROSSOVER_RATE
    mutation_rate: float = GAConstants.DEFAULT_MUTATION_RATE
    max_generations: int = GAConstants.DEFAULT_MAX_GENERATIONS
    function_expression: str = GAConstants.DEFAULT_EXPRESSION
    elitism: int = GAConstants.DEFAULT_ELITISM

    # Run driver settings
    output_dir: str = GAConstants.DEFAULT_OUTPUT_DIR
    enable_reporting: bool = False
    step_delay: float = GAConstants.DEFAULT_STEP_DELAY_SECONDS
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate user parameters after initialization."""
        self._validate()

    @staticmethod
    def _is_int(value) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    @staticmethod
    def _is_number(value) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def _validate(self):
        """Validate parameters, reporting every problem at once."""
        errors = []

        if not self._is_int(self.population_size) or self.population_size < 1:
            errors.append(f"Population size ({self.population_size}) must be a positive integer")
        if not self._is_int(self.max_generations) or self.max_generations < 1:
            errors.append(f"Max generations ({self.max_generations}) must be a positive integer")

        # Rate validation
        if not self._is_number(self.crossover_rate) or not 0.0 <= self.crossover_rate <= 1.0:
            errors.append(f"Crossover rate ({self.crossover_rate}) must be between 0.0 and 1.0")
        if not self._is_number(self.mutation_rate) or not 0.0 <= self.mutation_rate <= 1.0:
            errors.append(f"Mutation rate ({self.mutation_rate}) must be between 0.0 and 1.0")

        if not self._is_int(self.elitism) or self.elitism < 0:
            errors.append(f"Elitism ({self.elitism}) must be a non-negative integer")

        if not isinstance(self.function_expression, str) or not self.function_expression.strip():
            errors.append("Function expression cannot be empty")

        if not self._is_number(self.step_delay) or self.step_delay < 0:
            errors.append(f"Step delay ({self.step_delay}) cannot be negative")

        if self.seed is not None and not self._is_int(self.seed):
            errors.append(f"Seed ({self.seed}) must be an integer")

        if self.enable_reporting and (not self.output_dir or not str(self.output_dir).strip()):
            errors.append("Output directory cannot be empty when reporting is enabled")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors),
                errors=errors)

    @classmethod
    def from_args(cls, args) -> 'GAConfig':
        """
        Create configuration from parsed CLI arguments.

        Args:
            args: argparse.Namespace from CLI parsing

        Returns:
            Validated GAConfig instance
        """
        return cls(
            population_size=args.population_size,
            crossover_rate=args.crossover_rate,
            mutation_rate=args.mutation_rate,
            max_generations=args.generations,
            function_expression=args.expression,
            elitism=args.elitism,
            output_dir=args.output_dir,
            enable_reporting=not getattr(args, 'no_report', False),
            step_delay=getattr(args, 'step_delay', GAConstants.DEFAULT_STEP_DELAY_SECONDS),
            seed=getattr(args, 'seed', None)
        )

    @property
    def effective_elitism(self) -> int:
        """Number of elites actually carried over (never above population size)."""
        return min(self.elitism, self.population_size)

    @property
    def num_offspring(self) -> int:
        """Number of offspring needed to fill population after elites."""
        return self.population_size - self.effective_elitism

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        summary = f"""GA Configuration:
  Function: f(x) = {self.function_expression}, x in [0, 255]
  Population: {self.population_size} (offspring: {self.num_offspring}, elites: {self.effective_elitism})
  Generations: {self.max_generations}
  Rates: crossover={self.crossover_rate:.3f}, mutation={self.mutation_rate:.3f}"""

        if self.seed is not None:
            summary += f"\n  Seed: {self.seed}"
        if self.enable_reporting:
            summary += f"\n  Output: {self.output_dir}"

        return summary

    def __str__(self) -> str:
        return f"GAConfig(pop={self.population_size}, gen={self.max_generations}, f='{self.function_expression}')"

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'GAConfig':
        """Create config from dictionary."""
        return cls(**config_dict)

    def update(self, **kwargs) -> 'GAConfig':
        """Create a new config with updated values."""
        current_config = self.to_dict()
        current_config.update(kwargs)
        return self.from_dict(current_config)
