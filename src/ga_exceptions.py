"""
Custom Exception Classes for Genetic Algorithm

Provides specific, meaningful exceptions for the failure modes a caller can
actually observe. Expression evaluation failures are recovered inside the
evaluator and never surface here.
"""

from typing import List, Optional


class GAException(Exception):
    """Base exception for all genetic algorithm related errors."""
    pass


class ConfigurationError(GAException):
    """Raised when GA configuration is invalid or inconsistent."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ExpressionError(GAException):
    """Raised when a fitness expression cannot be parsed."""

    def __init__(self, message: str, expression: str = None):
        super().__init__(message)
        self.expression = expression


class ExpressionSyntaxError(ExpressionError):
    """Raised by the parser for input outside the expression grammar."""

    def __init__(self, message: str, expression: str = None, position: int = None):
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message, expression=expression)
        self.position = position


class GenotypeError(GAException):
    """Raised when a string is not a valid fixed-width bit-string."""

    def __init__(self, genotype, expected_length: int):
        super().__init__(
            f"Invalid genotype {genotype!r}: expected {expected_length} characters of '0'/'1'")
        self.genotype = genotype
        self.expected_length = expected_length


class PopulationError(GAException):
    """Raised when population operations are used before a population exists."""
    pass


class ReportingError(GAException):
    """Raised when result reporting/saving fails."""

    def __init__(self, message: str, output_dir: str = None,
                 file_type: str = None):
        super().__init__(message)
        self.output_dir = output_dir
        self.file_type = file_type

