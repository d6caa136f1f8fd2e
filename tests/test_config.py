"""
Configuration Tests

Tests defaults, validation and the helpers of GAConfig.
"""

import os
import sys
import unittest
from dataclasses import FrozenInstanceError

# Add project root and src directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from ga_cli import build_parser
from ga_config import GAConfig
from ga_constants import DEFAULT_EXPRESSION
from ga_exceptions import ConfigurationError
from ga_logging import setup_logging


class TestConfigDefaults(unittest.TestCase):

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_defaults(self):
        config = GAConfig()
        self.assertEqual(config.population_size, 18)
        self.assertEqual(config.crossover_rate, 0.64)
        self.assertEqual(config.mutation_rate, 0.025)
        self.assertEqual(config.max_generations, 100)
        self.assertEqual(config.function_expression, DEFAULT_EXPRESSION)
        self.assertEqual(config.elitism, 0)
        self.assertFalse(config.enable_reporting)
        self.assertIsNone(config.seed)

    def test_config_is_immutable(self):
        config = GAConfig()
        with self.assertRaises(FrozenInstanceError):
            config.population_size = 5

    def test_boundary_rates_are_accepted(self):
        GAConfig(crossover_rate=0.0, mutation_rate=0.0)
        GAConfig(crossover_rate=1.0, mutation_rate=1.0)
        GAConfig(crossover_rate=1, mutation_rate=0)

    def test_minimal_sizes_are_accepted(self):
        config = GAConfig(population_size=1, max_generations=1)
        self.assertEqual(config.num_offspring, 1)

    def test_unparseable_expression_is_accepted(self):
        config = GAConfig(function_expression="x +")
        self.assertEqual(config.function_expression, "x +")


class TestConfigValidation(unittest.TestCase):

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_invalid_values(self):
        invalid = [
            {'population_size': 0},
            {'population_size': -3},
            {'population_size': 2.5},
            {'population_size': True},
            {'max_generations': 0},
            {'crossover_rate': -0.1},
            {'crossover_rate': 1.5},
            {'mutation_rate': 2},
            {'mutation_rate': '0.1'},
            {'elitism': -1},
            {'function_expression': ''},
            {'function_expression': '   '},
            {'step_delay': -1.0},
            {'seed': 'abc'},
            {'enable_reporting': True, 'output_dir': ''},
        ]
        for params in invalid:
            with self.subTest(params=params):
                with self.assertRaises(ConfigurationError):
                    GAConfig(**params)

    def test_all_errors_are_reported(self):
        with self.assertRaises(ConfigurationError) as context:
            GAConfig(population_size=0, crossover_rate=2.0, elitism=-1)

        errors = context.exception.errors
        self.assertEqual(len(errors), 3)
        self.assertIn("Population size", str(context.exception))
        self.assertIn("Crossover rate", str(context.exception))

    def test_update_validates(self):
        config = GAConfig()
        with self.assertRaises(ConfigurationError):
            config.update(population_size=-1)


class TestConfigHelpers(unittest.TestCase):

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_elitism_is_clamped(self):
        config = GAConfig(population_size=6, elitism=50)
        self.assertEqual(config.effective_elitism, 6)
        self.assertEqual(config.num_offspring, 0)

        config = GAConfig(population_size=6, elitism=2)
        self.assertEqual(config.effective_elitism, 2)
        self.assertEqual(config.num_offspring, 4)

    def test_update_returns_new_config(self):
        config = GAConfig()
        updated = config.update(population_size=30, function_expression="x")

        self.assertEqual(updated.population_size, 30)
        self.assertEqual(updated.function_expression, "x")
        self.assertEqual(config.population_size, 18)

    def test_dictionary_conversion(self):
        config = GAConfig(population_size=7, seed=4, elitism=1)
        data = config.to_dict()

        self.assertEqual(data['population_size'], 7)
        self.assertEqual(data['seed'], 4)
        self.assertEqual(GAConfig.from_dict(data), config)

    def test_summary(self):
        config = GAConfig(seed=9, elitism=2)
        summary = config.summary()

        self.assertIn(DEFAULT_EXPRESSION, summary)
        self.assertIn("elites: 2", summary)
        self.assertIn("Seed: 9", summary)
        self.assertIn("pop=18", str(config))

    def test_from_args(self):
        args = build_parser().parse_args([
            '--expression', 'x ^ 2', '-ps', '12', '-g', '40', '-mcr', '0.7',
            '-mr', '0.01', '-e', '1', '--seed', '5', '--no_report'
        ])
        config = GAConfig.from_args(args)

        self.assertEqual(config.function_expression, 'x ^ 2')
        self.assertEqual(config.population_size, 12)
        self.assertEqual(config.max_generations, 40)
        self.assertEqual(config.crossover_rate, 0.7)
        self.assertEqual(config.mutation_rate, 0.01)
        self.assertEqual(config.elitism, 1)
        self.assertEqual(config.seed, 5)
        self.assertFalse(config.enable_reporting)

    def test_from_args_defaults(self):
        config = GAConfig.from_args(build_parser().parse_args([]))

        self.assertEqual(config.population_size, 18)
        self.assertEqual(config.function_expression, DEFAULT_EXPRESSION)
        self.assertTrue(config.enable_reporting)


if __name__ == '__main__':
    unittest.main()
