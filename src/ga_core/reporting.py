"""
Reporting and I/O Module

Handles data persistence and run statistics for genetic algorithm runs.

Features:
- Per-generation population tables as CSV
- Fitness history export (best / average / worst per generation)
- JSON run summary with configuration and best solution
- Population statistics computed with numpy
"""

import json
import os
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ga_constants import ReportingConstants
from ga_exceptions import ReportingError
from ga_logging import get_logger
from .individual import Individual
from .population_management import get_best, get_worst


def population_statistics(population: Sequence[Individual]) -> Dict[str, Any]:
    """
    Summarize a population's fitness distribution.

    Returns:
        Dictionary with best/worst individuals and mean, variance and std of fitness
    """
    if not population:
        return {'size': 0, 'best': None, 'worst': None,
                'avg_fitness': 0.0, 'fitness_variance': 0.0, 'fitness_std': 0.0}

    values = np.array([individual.fitness for individual in population], dtype=float)
    return {
        'size': len(population),
        'best': get_best(population),
        'worst': get_worst(population),
        'avg_fitness': float(values.mean()),
        'fitness_variance': float(values.var()),
        'fitness_std': float(values.std()),
    }


def population_frame(population: Sequence[Individual]) -> pd.DataFrame:
    """Population as a table with one row per individual, in stored order."""
    rows = [[index + 1, ind.genotype, ind.x, ind.fitness, ind.normalized_fitness]
            for index, ind in enumerate(population)]
    return pd.DataFrame(rows, columns=ReportingConstants.POPULATION_COLUMNS)


class GAReporter:
    """
    Reporting and I/O manager for genetic algorithm runs.

    Collects one history row per generation and writes population tables,
    the fitness history and a run summary under ``output_dir``.
    """

    def __init__(self, output_dir: str = "ga_results", experiment_name: str = None,
                 save_populations: bool = True):
        """
        Initialize GA reporter.

        Args:
            output_dir: Directory for output files
            experiment_name: Name of the experiment (auto-generated if None)
            save_populations: Whether to write a CSV for every generation
        """
        self.output_dir = output_dir
        self.experiment_name = experiment_name or f"ga_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.save_populations = save_populations
        self.logger = get_logger("Reporter")

        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise ReportingError(f"Cannot create output directory: {e}",
                                 output_dir=output_dir) from e

        # Initialize tracking
        self.start_time: Optional[float] = None
        self.run_config: Dict[str, Any] = {}
        self.history_rows: List[Dict[str, Any]] = []

    def start_run(self, run_config: Dict[str, Any]):
        """
        Start a new GA run, discarding history of a previous one.

        Args:
            run_config: Configuration parameters for the run
        """
        self.start_time = time.time()
        self.run_config = dict(run_config)
        self.history_rows = []
        self.logger.info(f"Starting GA run: {self.experiment_name}", output_dir=self.output_dir)

    def save_generation_data(self, generation: int, population: Sequence[Individual]) -> Dict[str, Any]:
        """
        Record a generation and optionally write its population table.

        Args:
            generation: Generation number (0 for the initial population)
            population: Population of that generation

        Returns:
            The history row recorded for the generation
        """
        stats = population_statistics(population)
        best = stats['best']
        row = {
            'Generation': generation,
            'Best_Fitness': best.fitness if best else 0.0,
            'Avg_Fitness': stats['avg_fitness'],
            'Worst_Fitness': stats['worst'].fitness if stats['worst'] else 0.0,
            'Fitness_Std': stats['fitness_std'],
            'Best_X': best.x if best else None,
            'Best_Genotype': best.genotype if best else None,
        }
        self.history_rows.append(row)

        if self.save_populations:
            filename = os.path.join(
                self.output_dir,
                ReportingConstants.GENERATION_CSV_TEMPLATE.format(generation=generation))
            self._write_csv(population_frame(population), filename)

        self.logger.debug(f"Generation {generation} recorded",
                          best=f"{row['Best_Fitness']:.4f}", avg=f"{row['Avg_Fitness']:.4f}")
        return row

    def history_frame(self) -> pd.DataFrame:
        """Fitness history as a DataFrame, one row per recorded generation."""
        return pd.DataFrame(self.history_rows, columns=ReportingConstants.HISTORY_COLUMNS)

    def export_fitness_history(self, filename: str = None) -> str:
        """
        Export fitness history to CSV.

        Args:
            filename: Output filename (defaults to fitness_history.csv in output_dir)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = os.path.join(self.output_dir, ReportingConstants.FITNESS_HISTORY_CSV)
        self._write_csv(self.history_frame(), filename)
        return filename

    def save_run_summary(self, best: Individual, extra_statistics: Dict[str, Any] = None) -> str:
        """
        Save run summary as JSON.

        Args:
            best: Best individual of the final population
            extra_statistics: Component statistics to include

        Returns:
            Path to the summary file
        """
        total_runtime = time.time() - self.start_time if self.start_time else 0.0
        history = self.history_frame()

        summary_data = {
            'experiment_name': self.experiment_name,
            'end_time': datetime.now().isoformat(),
            'configuration': self.run_config,
            'statistics': {
                'generations_recorded': len(self.history_rows),
                'total_runtime': total_runtime,
                'best_overall_fitness': float(history['Best_Fitness'].max()) if len(history) else None,
                **(extra_statistics or {})
            },
            'best_solution': best.to_dict() if best else None,
        }

        filename = os.path.join(
            self.output_dir,
            ReportingConstants.SUMMARY_JSON_TEMPLATE.format(experiment_name=self.experiment_name))
        try:
            with open(filename, 'w') as f:
                json.dump(summary_data, f, indent=2, default=str)
        except OSError as e:
            raise ReportingError(f"Failed to write run summary: {e}",
                                 output_dir=self.output_dir, file_type='json') from e

        self.logger.info("Run summary saved", file=filename, runtime=f"{total_runtime:.2f}s")
        return filename

    def _write_csv(self, frame: pd.DataFrame, filename: str):
        try:
            frame.to_csv(filename, index=False)
        except OSError as e:
            raise ReportingError(f"Failed to write {filename}: {e}",
                                 output_dir=self.output_dir, file_type='csv') from e
