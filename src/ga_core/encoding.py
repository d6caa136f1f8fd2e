"""
Genotype Encoding Module

Bidirectional mapping between fixed-width bit-strings (genotypes) and the
integers of the encoded domain (phenotypes).

Features:
- Unsigned big-endian decoding of 8-bit genotypes
- Total encoding: out-of-range or fractional input is clamped and floored
- Uniform random genotype generation
"""

import math
import random

from ga_constants import GENOTYPE_BITS, DOMAIN_MIN, DOMAIN_MAX, EncodingConstants
from ga_exceptions import GenotypeError


def is_valid_genotype(genotype) -> bool:
    """Check that ``genotype`` is a bit-string of exactly GENOTYPE_BITS characters."""
    return (isinstance(genotype, str)
            and len(genotype) == GENOTYPE_BITS
            and all(bit in EncodingConstants.BIT_CHARS for bit in genotype))


def decode(genotype: str) -> int:
    """
    Convert a genotype to its phenotype.

    Args:
        genotype: 8-character bit-string

    Returns:
        Integer in [0, 255]

    Raises:
        GenotypeError: If ``genotype`` is not a valid bit-string
    """
    if not is_valid_genotype(genotype):
        raise GenotypeError(genotype, GENOTYPE_BITS)
    return int(genotype, 2)


def encode(value: float) -> str:
    """
    Convert a phenotype to its genotype.

    The value is clamped to [0, 255] and floored first, so every real number
    maps to some genotype.
    """
    clamped = math.floor(max(DOMAIN_MIN, min(DOMAIN_MAX, value)))
    return format(clamped, f'0{GENOTYPE_BITS}b')


def random_genotype() -> str:
    """Sample a phenotype uniformly from the domain and encode it."""
    return encode(random.randint(DOMAIN_MIN, DOMAIN_MAX))
