"""
Individual value type.

An individual is created once from a genotype and never mutated; a new
generation produces new Individual values.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict


@dataclass(frozen=True)
class Individual:
    """A scored candidate solution."""

    genotype: str                   # 8-bit string
    x: int                          # decoded phenotype in [0, 255]
    fitness: float                  # shifted-positive fitness
    normalized_fitness: float = 0.0 # share of total population fitness

    def with_normalized_fitness(self, normalized_fitness: float) -> 'Individual':
        """Copy of this individual carrying a new selection probability."""
        return replace(self, normalized_fitness=normalized_fitness)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'genotype': self.genotype,
            'x': self.x,
            'fitness': self.fitness,
            'normalized_fitness': self.normalized_fitness,
        }
