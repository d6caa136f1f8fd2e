"""
Genetic Operations Module

Core genetic algorithm operations: single-point crossover and bit-flip
mutation on fixed-width genotypes.

Features:
- Single-point crossover with the cut strictly inside the genotype
- Independent per-bit flip mutation
- Operation counters for run statistics
"""

import random
from typing import Dict, Tuple

from ga_constants import GENOTYPE_BITS


def single_point_crossover(genotype1: str, genotype2: str, point: int) -> Tuple[str, str]:
    """
    Splice two genotypes at ``point``.

    Child 1 takes the head of genotype1 and the tail of genotype2; child 2
    the reverse.
    """
    child1 = genotype1[:point] + genotype2[point:]
    child2 = genotype2[:point] + genotype1[point:]
    return child1, child2


class GeneticOperations:
    """
    Core genetic operations for the bit-string encoding.

    Handles crossover and mutation with the run's configured probabilities.
    """

    def __init__(self, crossover_rate: float, mutation_rate: float):
        """
        Initialize genetic operations.

        Args:
            crossover_rate: Probability of crossover occurring for a parent pair
            mutation_rate: Probability of each bit being flipped
        """
        self.crossover_rate = crossover_rate
        self.mutation_rate = mutation_rate

        # Statistics tracking
        self.crossover_count = 0
        self.mutation_count = 0

    def crossover(self, genotype1: str, genotype2: str) -> Tuple[str, str]:
        """
        Perform single-point crossover between two parent genotypes.

        With probability ``crossover_rate`` a cut point is drawn uniformly from
        1..7 and the parents are spliced; otherwise the children are copies of
        the parents.

        Args:
            genotype1: First parent's genotype
            genotype2: Second parent's genotype

        Returns:
            Tuple of two child genotypes
        """
        if random.random() >= self.crossover_rate:
            # No crossover - return parents as-is
            return genotype1, genotype2

        point = random.randint(1, GENOTYPE_BITS - 1)
        self.crossover_count += 1
        return single_point_crossover(genotype1, genotype2, point)

    def mutate(self, genotype: str) -> str:
        """
        Flip each bit independently with probability ``mutation_rate``.

        Args:
            genotype: Genotype to mutate

        Returns:
            Mutated genotype (the same string if no bit flipped)
        """
        mutated_bits = []
        flipped = False

        for bit in genotype:
            if random.random() < self.mutation_rate:
                mutated_bits.append('1' if bit == '0' else '0')
                flipped = True
            else:
                mutated_bits.append(bit)

        if not flipped:
            return genotype

        self.mutation_count += 1
        return ''.join(mutated_bits)

    def get_statistics(self) -> Dict[str, int]:
        """Get statistics about genetic operations performed."""
        return {
            'crossover_count': self.crossover_count,
            'mutation_count': self.mutation_count
        }

    def reset_statistics(self):
        """Reset operation counters."""
        self.crossover_count = 0
        self.mutation_count = 0
