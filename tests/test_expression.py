"""
Expression Evaluation Tests

Tests the expression grammar, the function table and the fail-safe
evaluation of broken or ill-defined expressions.
"""

import math
import os
import sys
import unittest

# Add project root and src directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from ga_constants import DEFAULT_EXPRESSION
from ga_exceptions import ExpressionError, ExpressionSyntaxError
from ga_core.expression import compile_expression, evaluate, validate_expression, tokenize
from ga_core.fitness import DomainBounds, DomainCache
from ga_logging import setup_logging


class TestExpressionGrammar(unittest.TestCase):
    """Test operator precedence and associativity."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_default_expression(self):
        """Default expression at the ends of the domain."""
        self.assertAlmostEqual(evaluate(DEFAULT_EXPRESSION, 0), 130.0)
        self.assertAlmostEqual(evaluate(DEFAULT_EXPRESSION, 255), (510 / 256) ** 2 - 1275 + 130)
        self.assertAlmostEqual(evaluate(DEFAULT_EXPRESSION, 128), 4.0 - 640 + 130)

    def test_precedence(self):
        self.assertEqual(evaluate("2 + 3 * 4", 0), 14.0)
        self.assertEqual(evaluate("(2 + 3) * 4", 0), 20.0)
        self.assertEqual(evaluate("10 / 4", 0), 2.5)
        self.assertEqual(evaluate("2 * x ^ 2", 3), 18.0)

    def test_left_associative_subtraction_and_division(self):
        self.assertEqual(evaluate("x - 2 - 3", 10), 5.0)
        self.assertEqual(evaluate("x / 2 / 5", 100), 10.0)

    def test_power_is_right_associative(self):
        self.assertEqual(evaluate("2 ^ 3 ^ 2", 0), 512.0)

    def test_unary_minus_binds_looser_than_power(self):
        self.assertEqual(evaluate("-x ^ 2", 3), -9.0)
        self.assertEqual(evaluate("(-x) ^ 2", 3), 9.0)
        self.assertEqual(evaluate("2 ^ -1", 0), 0.5)
        self.assertEqual(evaluate("--x", 4), 4.0)

    def test_double_star_is_power(self):
        self.assertEqual(evaluate("x ** 2", 7), 49.0)
        self.assertEqual(compile_expression("x ** 2").to_string(),
                         compile_expression("x ^ 2").to_string())

    def test_number_formats(self):
        self.assertEqual(evaluate("1.5 + .5", 0), 2.0)
        self.assertEqual(evaluate("1e3", 0), 1000.0)
        self.assertEqual(evaluate("2.5E-1", 0), 0.25)

    def test_whitespace_is_ignored(self):
        self.assertEqual(evaluate("  x*2\t+ 1 ", 3), 7.0)

    def test_tree_rendering(self):
        tree = compile_expression("1 + x * 2")
        self.assertEqual(tree.to_string(), "(1.0 + (x * 2.0))")
        self.assertEqual(compile_expression("-x").to_string(), "(-x)")


class TestExpressionFunctions(unittest.TestCase):
    """Test named functions and constants."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_basic_functions(self):
        self.assertEqual(evaluate("sqrt(x)", 16), 4.0)
        self.assertEqual(evaluate("abs(x - 10)", 3), 7.0)
        self.assertEqual(evaluate("floor(x / 3)", 10), 3.0)
        self.assertEqual(evaluate("ceil(x / 3)", 10), 4.0)
        self.assertEqual(evaluate("sign(x - 5)", 2), -1.0)
        self.assertAlmostEqual(evaluate("sin(x)", 0), 0.0)
        self.assertAlmostEqual(evaluate("cos(0)", 0), 1.0)
        self.assertAlmostEqual(evaluate("cbrt(x)", -8), -2.0)

    def test_round_half_up(self):
        self.assertEqual(evaluate("round(2.5)", 0), 3.0)
        self.assertEqual(evaluate("round(-2.5)", 0), -2.0)
        self.assertEqual(evaluate("round(x / 10)", 14), 1.0)

    def test_multi_argument_functions(self):
        self.assertEqual(evaluate("pow(x, 3)", 2), 8.0)
        self.assertEqual(evaluate("hypot(3, 4)", 0), 5.0)
        self.assertEqual(evaluate("max(1, x, 3)", 2), 3.0)
        self.assertEqual(evaluate("min(x)", 9), 9.0)

    def test_constants(self):
        self.assertAlmostEqual(evaluate("pi", 0), math.pi)
        self.assertAlmostEqual(evaluate("PI * x", 2), 2 * math.pi)
        self.assertAlmostEqual(evaluate("e", 0), math.e)

    def test_math_prefix(self):
        """JavaScript-style names are accepted."""
        self.assertEqual(evaluate("Math.sqrt(x)", 25), 5.0)
        self.assertAlmostEqual(evaluate("Math.PI", 0), math.pi)
        self.assertEqual(evaluate("Math.max(x, 10)", 3), 10.0)


class TestExpressionFailures(unittest.TestCase):
    """Test that broken or undefined expressions evaluate to 0."""

    def setUp(self):
        setup_logging(level="ERROR", log_to_file=False)

    def test_division_by_zero(self):
        self.assertEqual(evaluate("1 / x", 0), 0.0)
        self.assertEqual(evaluate("1 / x", 4), 0.25)

    def test_math_domain_errors(self):
        self.assertEqual(evaluate("sqrt(x - 10)", 0), 0.0)
        self.assertEqual(evaluate("log(x)", 0), 0.0)
        self.assertEqual(evaluate("asin(x)", 2), 0.0)

    def test_overflow_and_non_finite_results(self):
        self.assertEqual(evaluate("exp(x * 10)", 255), 0.0)
        self.assertEqual(evaluate("10 ^ (x * 2)", 255), 0.0)
        self.assertEqual(evaluate("1e308 * 10", 0), 0.0)

    def test_unparseable_expressions(self):
        for expression in ["x +", "", "   ", "(x", "x)", "2x", "foo(x)", "X",
                           "sqrt", "sqrt(1, 2)", "min()", "x; import os",
                           "__import__('os')", "Math.x"]:
            with self.subTest(expression=expression):
                self.assertEqual(evaluate(expression, 5), 0.0)

    def test_non_string_expression(self):
        self.assertEqual(evaluate(None, 5), 0.0)
        with self.assertRaises(ExpressionError):
            compile_expression(42)

    def test_syntax_error_position(self):
        with self.assertRaises(ExpressionSyntaxError) as context:
            compile_expression("x + * 2")
        self.assertEqual(context.exception.position, 4)
        self.assertEqual(context.exception.expression, "x + * 2")

    def test_tokenizer_rejects_unknown_characters(self):
        with self.assertRaises(ExpressionSyntaxError) as context:
            tokenize("x % 2")
        self.assertEqual(context.exception.position, 2)

    def test_deep_parentheses_evaluate_to_zero(self):
        expression = "(" * 2000 + "x" + ")" * 2000
        self.assertEqual(evaluate(expression, 3), 0.0)

        is_valid, error = validate_expression(expression)
        self.assertFalse(is_valid)
        self.assertIn("nested", error)

    def test_long_sign_chain_evaluates_to_zero(self):
        expression = "-" * 3000 + "x"
        self.assertEqual(evaluate(expression, 3), 0.0)
        self.assertFalse(validate_expression(expression)[0])
        self.assertEqual(DomainCache().get_bounds(expression), DomainBounds(0.0, 0.0))

    def test_nesting_within_limit_is_accepted(self):
        self.assertEqual(evaluate("(" * 50 + "x" + ")" * 50, 3), 3.0)
        self.assertEqual(evaluate("-" * 50 + "x", 3), 3.0)
        self.assertEqual(evaluate("sqrt(" * 30 + "x" + ")" * 30, 1), 1.0)

    def test_long_operator_chain_never_raises(self):
        """A flat chain parses iteratively but builds a very deep tree."""
        expression = "x" + " + x" * 5000
        self.assertEqual(evaluate(expression, 1), 0.0)

    def test_validate_expression(self):
        self.assertEqual(validate_expression("x ^ 2 + sin(x)"), (True, None))

        is_valid, error = validate_expression("x +")
        self.assertFalse(is_valid)
        self.assertIsInstance(error, str)

        is_valid, error = validate_expression("sqrt(1, 2)")
        self.assertFalse(is_valid)
        self.assertIn("sqrt", error)


if __name__ == '__main__':
    unittest.main()
