"""
Centralized Logging System for Genetic Algorithm

Structured logging for the engine, the run driver and the CLI.
Provides consistent formatting, log levels, and optional file output.
"""

import logging
import sys
from datetime import datetime
from typing import Dict, Optional
from pathlib import Path


ROOT_LOGGER_NAME = "GA"


class GAFormatter(logging.Formatter):
    """Custom formatter for GA logging with color support and structured output."""

    # Color codes for console output
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        self.use_colors = use_colors and hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()
        self.include_timestamp = include_timestamp

        if include_timestamp:
            fmt = '[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s'
            datefmt = '%H:%M:%S'
        else:
            fmt = '%(levelname)-8s | %(name)s | %(message)s'
            datefmt = None

        super().__init__(fmt, datefmt)

    def format(self, record):
        if self.use_colors:
            color = self.COLORS.get(record.levelname, '')
            reset = self.COLORS['RESET']
            # Work on a copy so file handlers sharing the record stay uncoloured
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{reset}"

        return super().format(record)


class GALogger:
    """
    Thin wrapper around a stdlib logger with GA-specific helpers.

    Instances for components are children of the shared ``GA`` logger, so
    handlers are configured once by :func:`setup_logging`.
    """

    def __init__(self, name: str = ROOT_LOGGER_NAME):
        self.logger = logging.getLogger(name)
        self.log_file: Optional[str] = None

    def configure(self, level: str = "INFO", log_to_file: bool = False,
                  output_dir: str = "logs", console_colors: bool = True):
        """
        Attach console (and optionally file) handlers to this logger.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Whether to log to file
            output_dir: Directory for log files
            console_colors: Whether to use colors in console output
        """
        log_level = getattr(logging, level.upper(), logging.INFO)
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        # Clear any existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()
        self.log_file = None

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(GAFormatter(use_colors=console_colors, include_timestamp=False))
        self.logger.addHandler(console_handler)

        if log_to_file:
            self._setup_file_logging(output_dir)

    def _setup_file_logging(self, output_dir: str):
        """Setup file logging with a timestamped file name."""
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"ga_run_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # File gets all levels
        file_handler.setFormatter(GAFormatter(use_colors=False, include_timestamp=True))
        self.logger.addHandler(file_handler)

        self.log_file = str(log_file)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, exception: Exception = None, **kwargs):
        """Log warning message with optional context."""
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {exception}"
        self.logger.warning(formatted_msg)

    def error(self, message: str, exception: Exception = None, **kwargs):
        """Log error message with optional exception details."""
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {exception}"
        self.logger.error(formatted_msg)

    def critical(self, message: str, exception: Exception = None, **kwargs):
        """Log critical message with optional exception details."""
        formatted_msg = self._format_message(message, **kwargs)
        if exception:
            formatted_msg += f" | Exception: {type(exception).__name__}: {exception}"
        self.logger.critical(formatted_msg)

    def _format_message(self, message: str, **kwargs) -> str:
        """Format message with optional context parameters."""
        if kwargs:
            context = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {context}"
        return message

    # GA-specific logging methods
    def log_config_summary(self, config):
        """Log configuration summary."""
        self.info("GA Configuration loaded",
                  expression=config.function_expression,
                  population=config.population_size,
                  generations=config.max_generations,
                  crossover_rate=config.crossover_rate,
                  mutation_rate=config.mutation_rate,
                  elitism=config.effective_elitism)

    def log_generation_complete(self, generation: int, best_fitness: float,
                                avg_fitness: float, best_x: int):
        """Log generation completion."""
        self.info(f"Generation {generation} complete",
                  best_fitness=f"{best_fitness:.4f}",
                  avg_fitness=f"{avg_fitness:.4f}",
                  best_x=best_x)

    def log_domain_scan(self, expression: str, minimum: float, maximum: float):
        """Log the result of a full scan of the encoded domain."""
        self.debug("Domain scanned",
                   expression=expression,
                   min=f"{minimum:.6g}",
                   max=f"{maximum:.6g}")

    def log_evaluation_fallback(self, expression: str, x: float, reason: str):
        """Log an expression evaluation that degraded to the fail-safe value."""
        self.debug("Expression evaluation failed, using 0",
                   expression=expression, x=x, reason=reason)

    def log_run_complete(self, generations: int, best):
        """Log the end of a run with its best individual."""
        self.info("GA run complete",
                  generations=generations,
                  best_x=best.x,
                  best_genotype=best.genotype,
                  best_fitness=f"{best.fitness:.4f}")


# Cached wrappers, one per component name
_loggers: Dict[str, GALogger] = {}


def get_logger(name: str = ROOT_LOGGER_NAME) -> GALogger:
    """Get or create the logger for a component (a child of the ``GA`` logger)."""
    full_name = name if name == ROOT_LOGGER_NAME else f"{ROOT_LOGGER_NAME}.{name}"
    if full_name not in _loggers:
        _loggers[full_name] = GALogger(full_name)
    return _loggers[full_name]


def setup_logging(level: str = "INFO", log_to_file: bool = False,
                  output_dir: str = "logs", console_colors: bool = True) -> GALogger:
    """
    Setup global logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to file
        output_dir: Directory for log files
        console_colors: Whether to use colors in console output

    Returns:
        Configured root GALogger instance
    """
    root = get_logger(ROOT_LOGGER_NAME)
    root.configure(level=level, log_to_file=log_to_file,
                   output_dir=output_dir, console_colors=console_colors)
    return root


def log_exception(exception: Exception, context: str = "", **kwargs):
    """Log exception with context using the root logger."""
    logger = get_logger()
    logger.error(f"Exception in {context}", exception=exception, **kwargs)
