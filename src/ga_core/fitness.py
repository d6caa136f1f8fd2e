"""
Fitness Evaluation Module

Turns the raw value of the user's expression into a strictly positive fitness
and a population's fitness values into selection probabilities.

Features:
- Full scan of the encoded domain for the expression's minimum and maximum
- Per-run memoization of the scan, keyed by expression, with explicit invalidation
- Positive shift: fitness = raw - domain_min + 1
- Normalization with a uniform fallback for degenerate landscapes
"""

import math
import threading
from typing import List, NamedTuple, Optional, Sequence

from ga_constants import GAConstants, domain_points
from ga_logging import get_logger
from .expression import evaluate, validate_expression
from .individual import Individual


class DomainBounds(NamedTuple):
    minimum: float
    maximum: float


def scan_domain(expression: str) -> DomainBounds:
    """Evaluate the expression at every phenotype and return its extrema."""
    values = [evaluate(expression, x) for x in domain_points()]
    return DomainBounds(min(values), max(values))


class DomainCache:
    """
    Memoized domain extrema for one expression at a time.

    Owned by a run rather than shared process-wide. Asking for a different
    expression recomputes and replaces the stored entry; ``invalidate`` drops
    it explicitly. Access is serialized with a lock so a host running steps
    from several threads never reads a half-written entry.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._expression: Optional[str] = None
        self._bounds: Optional[DomainBounds] = None
        self.logger = get_logger("DomainCache")

        # Statistics tracking
        self.stats = {
            'hits': 0,
            'misses': 0,
            'invalidations': 0
        }

    @property
    def cached_expression(self) -> Optional[str]:
        return self._expression

    def get_bounds(self, expression: str) -> DomainBounds:
        """
        Get the domain minimum and maximum of ``expression``.

        Args:
            expression: Fitness expression

        Returns:
            DomainBounds for the expression over [0, 255]
        """
        with self._lock:
            if self._bounds is not None and expression == self._expression:
                self.stats['hits'] += 1
                return self._bounds

            self.stats['misses'] += 1
            if self._expression is not None and expression != self._expression:
                self.logger.debug("Expression changed, rescanning domain",
                                  previous=self._expression, current=expression)

            is_valid, error = validate_expression(expression)
            if not is_valid:
                self.logger.warning("Expression does not parse; fitness landscape will be constant",
                                    expression=expression, error=error)

            bounds = scan_domain(expression)
            self.logger.log_domain_scan(expression, bounds.minimum, bounds.maximum)

            self._expression = expression
            self._bounds = bounds
            return bounds

    def invalidate(self):
        """Drop the stored entry so the next lookup rescans the domain."""
        with self._lock:
            if self._bounds is not None:
                self.stats['invalidations'] += 1
            self._expression = None
            self._bounds = None

    def get_statistics(self) -> dict:
        """Get cache statistics."""
        return self.stats.copy()


def find_min_max(expression: str, cache: DomainCache = None) -> DomainBounds:
    """Domain extrema of ``expression``, memoized through ``cache`` when given."""
    if cache is None:
        return scan_domain(expression)
    return cache.get_bounds(expression)


def raw_fitness(x: float, expression: str) -> float:
    """Unshifted value of the expression at ``x``."""
    return evaluate(expression, x)


def fitness(x: float, expression: str, cache: DomainCache = None) -> float:
    """
    Shifted fitness of ``x``; at least 1 everywhere on the domain.

    Args:
        x: Phenotype
        expression: Fitness expression
        cache: Domain cache of the current run

    Returns:
        raw_fitness(x) - domain_min + 1
    """
    bounds = find_min_max(expression, cache)
    return raw_fitness(x, expression) - bounds.minimum + GAConstants.FITNESS_SHIFT_OFFSET


def normalize_population(population: Sequence[Individual]) -> List[Individual]:
    """
    Assign each individual its share of the population's total fitness.

    Falls back to a uniform 1/n for every individual when the total fitness
    is not positive, when it overflows to a non-finite value or when every
    individual has the same fitness.

    Args:
        population: Scored individuals

    Returns:
        New list of individuals with ``normalized_fitness`` set
    """
    if not population:
        return []

    total_fitness = sum(individual.fitness for individual in population)
    uniform = (not math.isfinite(total_fitness)
               or total_fitness <= 0
               or len({individual.fitness for individual in population}) == 1)

    if uniform:
        share = 1.0 / len(population)
        return [individual.with_normalized_fitness(share) for individual in population]

    return [individual.with_normalized_fitness(individual.fitness / total_fitness)
            for individual in population]
