"""
Genetic Algorithm for Single-Variable Function Maximization

Command-line interface that maximizes a user-supplied expression f(x) over
the 8-bit domain x in [0, 255].

Features:
- Safe expression grammar (+ - * / ^, parentheses, sqrt, sin, abs, ...)
- Roulette selection, single-point crossover, bit-flip mutation, elitism
- Per-generation CSV tables, fitness history and JSON run summary
- Optional fitness history and landscape plots

Usage:
    python ga_cli.py --expression "(2*x/256)^2 - 5*x + 130" --generations 100 --plot
"""

import argparse
import sys
from typing import List, Optional

from tqdm import tqdm

from ga_config import GAConfig
from ga_constants import GAConstants
from ga_exceptions import ConfigurationError, ReportingError
from ga_logging import setup_logging, get_logger
from ga_core.expression import validate_expression
from genetic_algorithm import GeneticAlgorithm


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Maximize f(x) over x in [0, 255] with a genetic algorithm.')

    parser.add_argument('--expression', '-f', type=str, default=GAConstants.DEFAULT_EXPRESSION,
                        help=f"Function of x to maximize (default: '{GAConstants.DEFAULT_EXPRESSION}')")

    # GA parameters
    parser.add_argument('--population_size', '-ps', type=int, default=GAConstants.DEFAULT_POPULATION_SIZE,
                        help=f"Population size (default: {GAConstants.DEFAULT_POPULATION_SIZE})")
    parser.add_argument('--generations', '-g', type=int, default=GAConstants.DEFAULT_MAX_GENERATIONS,
                        help=f"Number of generations (default: {GAConstants.DEFAULT_MAX_GENERATIONS})")
    parser.add_argument('--crossover_rate', '-mcr', type=float, default=GAConstants.DEFAULT_CROSSOVER_RATE,
                        help=f"Crossover rate (default: {GAConstants.DEFAULT_CROSSOVER_RATE})")
    parser.add_argument('--mutation_rate', '-mr', type=float, default=GAConstants.DEFAULT_MUTATION_RATE,
                        help=f"Per-bit mutation rate (default: {GAConstants.DEFAULT_MUTATION_RATE})")
    parser.add_argument('--elitism', '-e', type=int, default=GAConstants.DEFAULT_ELITISM,
                        help="Number of best individuals copied unchanged to the next generation (default: 0)")
    parser.add_argument('--seed', type=int, default=None,
                        help="Random seed for reproducible runs")

    # Output
    parser.add_argument('--output_dir', '-o', type=str, default=GAConstants.DEFAULT_OUTPUT_DIR,
                        help=f"Folder to store the CSV results (default: '{GAConstants.DEFAULT_OUTPUT_DIR}')")
    parser.add_argument('--no_report', action='store_true',
                        help="Do not write CSV/JSON results")
    parser.add_argument('--plot', action='store_true',
                        help="Save fitness history and landscape plots to the output folder")

    # Presentation
    parser.add_argument('--step_delay', type=float, default=GAConstants.DEFAULT_STEP_DELAY_SECONDS,
                        help="Pause in seconds between generations (default: 0)")
    parser.add_argument('--log_level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help="Console log level (default: INFO)")
    parser.add_argument('--quiet', '-q', action='store_true',
                        help="Only log warnings and errors; keep the progress bar")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Parses command-line arguments, validates the configuration, runs the
    genetic algorithm and saves results to the output directory.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    level = 'WARNING' if args.quiet else args.log_level

    try:
        logger = setup_logging(level=level, log_to_file=not args.no_report,
                               output_dir=args.output_dir, console_colors=True)
    except OSError as e:
        logger = setup_logging(level=level, log_to_file=False, console_colors=True)
        logger.warning("Logging to console only", exception=e, output_dir=args.output_dir)

    try:
        config = GAConfig.from_args(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    is_valid, error = validate_expression(config.function_expression)
    if not is_valid:
        logger.warning("Expression does not parse and will evaluate to 0 everywhere", error=error)

    logger.log_config_summary(config)

    try:
        ga = GeneticAlgorithm(config)
        with tqdm(total=config.max_generations, desc="Evolving", unit="gen",
                  disable=args.log_level == 'DEBUG') as progress:
            def on_generation(result):
                if result.generation > 0:
                    progress.update(1)
                progress.set_postfix(best=f"{result.max_fitness:.4f}", x=result.best.x)

            best = ga.run(callback=on_generation)

        get_logger("Main").info(f"Best solution: x = {best.x} ({best.genotype})",
                                fitness=f"{best.fitness:.4f}")

        summary_file = ga.save_results()
        if summary_file:
            logger.info("Results saved", summary=summary_file)

        if args.plot:
            from ga_core.plotting import EvolutionVisualizer
            visualizer = EvolutionVisualizer(config.output_dir)
            history = ga.history_frame().rename(columns={
                'generation': 'Generation',
                'max_fitness': 'Best_Fitness',
                'avg_fitness': 'Avg_Fitness'
            })
            visualizer.plot_fitness_history(history)
            visualizer.plot_fitness_landscape(config.function_expression, best)
    except ReportingError as e:
        logger.critical("Could not save results", exception=e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
