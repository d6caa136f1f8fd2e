"""
Evolution plots.

Renders the fitness history of a run and the landscape of the fitness
expression over the encoded domain as PNG files.
"""

import os
from typing import Optional, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from ga_constants import ReportingConstants, domain_points
from ga_exceptions import ReportingError
from ga_logging import get_logger
from .expression import evaluate
from .individual import Individual


class EvolutionVisualizer:
    def __init__(self, output_dir: str):
        """
        Initialize the visualizer with the directory the images are written to.
        """
        self.output_dir = output_dir
        self.logger = get_logger("Visualizer")

        try:
            os.makedirs(self.output_dir, exist_ok=True)
        except OSError as e:
            raise ReportingError(f"Cannot create output directory: {e}",
                                 output_dir=output_dir) from e

    @staticmethod
    def load_history(source: Union[str, pd.DataFrame]) -> pd.DataFrame:
        """
        Accept either a fitness history DataFrame or the path of the CSV the
        reporter exports, and return the history sorted by generation.
        """
        frame = pd.read_csv(source) if isinstance(source, str) else source.copy()
        for column in ('Best_Fitness', 'Avg_Fitness'):
            frame[column] = pd.to_numeric(frame[column], errors="coerce")
        return frame.dropna(subset=['Best_Fitness']).sort_values(by='Generation')

    def plot_fitness_history(self, source: Union[str, pd.DataFrame], filename: str = None) -> str:
        """
        Plot the best and average fitness across generations.
        """
        history = self.load_history(source)
        filename = filename or os.path.join(self.output_dir, ReportingConstants.BEST_FITNESS_PLOT)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(history['Generation'], history['Best_Fitness'], marker="o", linestyle="-",
                color="b", label="Best Fitness")
        ax.plot(history['Generation'], history['Avg_Fitness'], marker=".", linestyle="--",
                color="g", label="Average Fitness")
        ax.set_title("Fitness Across Generations")
        ax.set_xlabel("Generation")
        ax.set_ylabel("Fitness")
        ax.grid(True)
        ax.legend()
        self._save(fig, filename)

        self.logger.info("Fitness history plot saved", file=filename)
        return filename

    def plot_fitness_landscape(self, expression: str, best: Optional[Individual] = None,
                               filename: str = None) -> str:
        """
        Plot f(x) over [0, 255], marking the best individual when given.
        """
        filename = filename or os.path.join(self.output_dir, ReportingConstants.FITNESS_LANDSCAPE_PLOT)
        xs = list(domain_points())
        ys = [evaluate(expression, x) for x in xs]

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(xs, ys, linestyle="-", color="b", label=f"f(x) = {expression}")
        if best is not None:
            ax.scatter([best.x], [evaluate(expression, best.x)], color="r", zorder=3,
                       label=f"Best x = {best.x} ({best.genotype})")
        ax.set_title("Fitness Landscape")
        ax.set_xlabel("x")
        ax.set_ylabel("f(x)")
        ax.grid(True)
        ax.legend()
        self._save(fig, filename)

        self.logger.info("Fitness landscape plot saved", file=filename)
        return filename

    def _save(self, fig, filename: str):
        try:
            fig.savefig(filename)
        except OSError as e:
            raise ReportingError(f"Failed to write {filename}: {e}",
                                 output_dir=self.output_dir, file_type="png") from e
        finally:
            plt.close(fig)
