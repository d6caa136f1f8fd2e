"""
Genetic Algorithm run driver.

Owns everything one optimization run needs: the validated config, a private
domain cache, the current population, the generation counter and the fitness
history. Callers drive it with ``initialize``/``step`` (or ``run``) and stop
whenever they like by no longer stepping.
"""

import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

import pandas as pd

from ga_config import GAConfig
from ga_exceptions import PopulationError
from ga_logging import get_logger
from ga_core.fitness import DomainCache
from ga_core.genetic_operations import GeneticOperations
from ga_core.individual import Individual
from ga_core.population_management import (
    PopulationManager, get_best, get_worst, get_average_fitness
)
from ga_core.reporting import GAReporter
from ga_core.selection import SelectionMethods


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    ADVANCING = "advancing"


@dataclass(frozen=True)
class GenerationResult:
    """Snapshot of one generation."""

    generation: int
    population: Tuple[Individual, ...]
    best: Individual
    worst: Individual
    avg_fitness: float

    @property
    def max_fitness(self) -> float:
        return self.best.fitness

    def to_history_row(self) -> dict:
        return {
            'generation': self.generation,
            'max_fitness': self.max_fitness,
            'avg_fitness': self.avg_fitness,
        }


class GeneticAlgorithm:
    def __init__(self, config: GAConfig, reporter: GAReporter = None) -> None:
        self.config = config
        self.logger = get_logger("GeneticAlgorithm")

        # One cache per run; nothing is shared between runs
        self.domain_cache = DomainCache()
        self.selection_methods = SelectionMethods()
        self.genetic_operations = GeneticOperations(
            crossover_rate=config.crossover_rate,
            mutation_rate=config.mutation_rate
        )
        self.population_manager = PopulationManager(
            self.domain_cache,
            selection_methods=self.selection_methods,
            genetic_operations=self.genetic_operations
        )

        if reporter is None and config.enable_reporting:
            reporter = GAReporter(output_dir=config.output_dir)
        self.reporter = reporter

        self.state = EngineState.UNINITIALIZED
        self.population: List[Individual] = []
        self.generation = 0
        self.history: List[GenerationResult] = []
        self._stop_requested = False

        if config.seed is not None:
            random.seed(config.seed)

    @property
    def is_initialized(self) -> bool:
        return self.state is not EngineState.UNINITIALIZED

    @property
    def is_finished(self) -> bool:
        return self.is_initialized and self.generation >= self.config.max_generations

    @property
    def best(self) -> Optional[Individual]:
        return get_best(self.population) if self.population else None

    @property
    def average_fitness(self) -> float:
        return get_average_fitness(self.population)

    def initialize(self) -> GenerationResult:
        """Create generation 0 and start a fresh history."""
        self.population = self.population_manager.initialize_population(
            self.config.population_size, self.config.function_expression)
        self.generation = 0
        self.history = []
        self._stop_requested = False
        self.state = EngineState.READY

        if self.reporter:
            self.reporter.start_run(self.config.to_dict())

        self.logger.info("Population initialized",
                         size=len(self.population),
                         expression=self.config.function_expression)
        return self._record_generation()

    def step(self) -> Optional[GenerationResult]:
        """
        Advance exactly one generation.

        Returns:
            The new generation, or None once max_generations has been reached

        Raises:
            PopulationError: If the run has not been initialized
        """
        if not self.is_initialized:
            raise PopulationError("Population not initialized; call initialize() first")
        if self.is_finished:
            self.logger.debug("Maximum generations reached, step ignored",
                              generation=self.generation)
            return None

        self.state = EngineState.ADVANCING
        try:
            self.population = self.population_manager.advance_generation(
                self.population, self.config)
            self.generation += 1
        finally:
            self.state = EngineState.READY

        result = self._record_generation()
        if self.is_finished:
            self.logger.info("Evolution finished",
                             max_generations=self.config.max_generations)
        return result

    def run(self, callback: Callable[[GenerationResult], None] = None) -> Individual:
        """
        Evolve until max_generations or until ``stop`` is called.

        Initializes first if needed. Sleeps ``config.step_delay`` seconds
        between generations and calls ``callback`` with every new generation.

        Returns:
            Best individual of the final population
        """
        if not self.is_initialized:
            result = self.initialize()
            if callback:
                callback(result)

        self._stop_requested = False
        while not self.is_finished and not self._stop_requested:
            if self.config.step_delay > 0:
                time.sleep(self.config.step_delay)

            result = self.step()
            if callback:
                callback(result)

        best = self.best
        self.logger.log_run_complete(self.generation, best)
        return best

    def stop(self):
        """Ask a running ``run`` loop to return after the current generation."""
        self._stop_requested = True

    def reset(self):
        """Drop the population, history and domain cache."""
        self.population = []
        self.generation = 0
        self.history = []
        self._stop_requested = False
        self.domain_cache.invalidate()
        self.state = EngineState.UNINITIALIZED
        self.logger.info("Run reset")

    def reconfigure(self, config: GAConfig):
        """
        Replace the run's config. Only allowed before initialization; a changed
        expression invalidates the domain cache.
        """
        if self.is_initialized:
            raise PopulationError("Cannot change configuration of an initialized run; reset() first")
        if config.function_expression != self.config.function_expression:
            self.domain_cache.invalidate()
        self.config = config

    def history_frame(self) -> pd.DataFrame:
        """Generation, max fitness and average fitness of every recorded generation."""
        return pd.DataFrame([result.to_history_row() for result in self.history],
                            columns=['generation', 'max_fitness', 'avg_fitness'])

    def get_statistics(self) -> dict:
        """Collect statistics from all components."""
        return {
            'domain_cache': self.domain_cache.get_statistics(),
            'population_manager': self.population_manager.get_statistics(),
            'selection_methods': self.selection_methods.get_statistics(),
            'genetic_operations': self.genetic_operations.get_statistics(),
        }

    def save_results(self) -> Optional[str]:
        """Write fitness history and run summary through the reporter, if any."""
        if not self.reporter or not self.population:
            return None
        self.reporter.export_fitness_history()
        return self.reporter.save_run_summary(self.best, self.get_statistics())

    def _record_generation(self) -> GenerationResult:
        best = get_best(self.population)
        result = GenerationResult(
            generation=self.generation,
            population=tuple(self.population),
            best=best,
            worst=get_worst(self.population),
            avg_fitness=get_average_fitness(self.population)
        )
        self.history.append(result)

        if self.reporter:
            self.reporter.save_generation_data(self.generation, self.population)

        self.logger.log_generation_complete(self.generation, best.fitness,
                                            result.avg_fitness, best.x)
        return result
