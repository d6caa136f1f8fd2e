"""
Expression Evaluation Module

Parses and evaluates the single-variable fitness expression supplied by the
user. Expressions are tokenized and parsed by a recursive-descent parser into
a small tree of nodes which is then evaluated by walking it; nothing is ever
compiled or executed as Python code.

Grammar (lowest to highest precedence):

    sum      := product (('+' | '-') product)*
    product  := unary (('*' | '/') unary)*
    unary    := ('+' | '-') unary | power
    power    := atom (('^' | '**') unary)?
    atom     := NUMBER | NAME | NAME '(' sum (',' sum)* ')' | '(' sum ')'

Features:
- Fixed function table (sqrt, trig, abs, log, ...) with arity checks at parse time
- Optional ``Math.`` prefix on names for JavaScript-style expressions
- Fail-safe evaluation: any failure evaluates to 0 instead of raising
"""

import math
import operator
import re
from functools import lru_cache
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from ga_constants import FAILED_EVALUATION_VALUE
from ga_exceptions import ExpressionError, ExpressionSyntaxError
from ga_logging import get_logger


VARIABLE_NAME = 'x'
NAMESPACE_PREFIX = 'Math.'
MAX_NESTING_DEPTH = 64  # parentheses, signs, exponents and call arguments combined

CONSTANTS: Dict[str, float] = {
    'pi': math.pi,
    'PI': math.pi,
    'e': math.e,
    'E': math.e,
}


def _sign(value: float) -> float:
    return float((value > 0) - (value < 0))


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def _minimum(*values: float) -> float:
    return min(values)


def _maximum(*values: float) -> float:
    return max(values)


class FunctionSpec(NamedTuple):
    func: Callable[..., float]
    min_args: int
    max_args: Optional[int]  # None means variadic


FUNCTIONS: Dict[str, FunctionSpec] = {
    'sqrt': FunctionSpec(math.sqrt, 1, 1),
    'cbrt': FunctionSpec(_cbrt, 1, 1),
    'abs': FunctionSpec(abs, 1, 1),
    'sign': FunctionSpec(_sign, 1, 1),
    'floor': FunctionSpec(math.floor, 1, 1),
    'ceil': FunctionSpec(math.ceil, 1, 1),
    'round': FunctionSpec(_round_half_up, 1, 1),
    'trunc': FunctionSpec(math.trunc, 1, 1),
    'exp': FunctionSpec(math.exp, 1, 1),
    'log': FunctionSpec(math.log, 1, 1),
    'ln': FunctionSpec(math.log, 1, 1),
    'log2': FunctionSpec(math.log2, 1, 1),
    'log10': FunctionSpec(math.log10, 1, 1),
    'sin': FunctionSpec(math.sin, 1, 1),
    'cos': FunctionSpec(math.cos, 1, 1),
    'tan': FunctionSpec(math.tan, 1, 1),
    'asin': FunctionSpec(math.asin, 1, 1),
    'acos': FunctionSpec(math.acos, 1, 1),
    'atan': FunctionSpec(math.atan, 1, 1),
    'sinh': FunctionSpec(math.sinh, 1, 1),
    'cosh': FunctionSpec(math.cosh, 1, 1),
    'tanh': FunctionSpec(math.tanh, 1, 1),
    'pow': FunctionSpec(math.pow, 2, 2),
    'atan2': FunctionSpec(math.atan2, 2, 2),
    'hypot': FunctionSpec(math.hypot, 2, 2),
    'min': FunctionSpec(_minimum, 1, None),
    'max': FunctionSpec(_maximum, 1, None),
}

BINARY_OPERATORS: Dict[str, Callable[[float, float], float]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
    '^': math.pow,
}


# ----------------------------------------------------------------------------
# Syntax tree
# ----------------------------------------------------------------------------

class Node:
    """Base class of the expression tree."""

    def evaluate(self, x: float) -> float:
        raise NotImplementedError

    def to_string(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()})"


class NumberNode(Node):
    """Numeric literal or named constant."""

    def __init__(self, value: float, label: str = None):
        self.value = value
        self.label = label

    def evaluate(self, x: float) -> float:
        return self.value

    def to_string(self) -> str:
        return self.label if self.label else repr(self.value)


class VariableNode(Node):
    """The free variable ``x``."""

    def evaluate(self, x: float) -> float:
        return x

    def to_string(self) -> str:
        return VARIABLE_NAME


class UnaryNode(Node):
    def __init__(self, op: str, operand: Node):
        self.op = op
        self.operand = operand

    def evaluate(self, x: float) -> float:
        value = self.operand.evaluate(x)
        return -value if self.op == '-' else value

    def to_string(self) -> str:
        return f"({self.op}{self.operand.to_string()})"


class BinaryNode(Node):
    def __init__(self, op: str, left: Node, right: Node):
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, x: float) -> float:
        return BINARY_OPERATORS[self.op](self.left.evaluate(x), self.right.evaluate(x))

    def to_string(self) -> str:
        return f"({self.left.to_string()} {self.op} {self.right.to_string()})"


class CallNode(Node):
    def __init__(self, name: str, args: List[Node]):
        self.name = name
        self.args = args

    def evaluate(self, x: float) -> float:
        values = [arg.evaluate(x) for arg in self.args]
        return float(FUNCTIONS[self.name].func(*values))

    def to_string(self) -> str:
        return f"{self.name}({', '.join(arg.to_string() for arg in self.args)})"


# ----------------------------------------------------------------------------
# Tokenizer and parser
# ----------------------------------------------------------------------------

class Token(NamedTuple):
    kind: str      # NUMBER, NAME, OP or END
    text: str
    position: int


_TOKEN_PATTERN = re.compile(r"""
    (?P<NUMBER>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
  | (?P<NAME>[A-Za-z_][A-Za-z_0-9]*(?:\.[A-Za-z_][A-Za-z_0-9]*)?)
  | (?P<OP>\*\*|[-+*/^(),])
""", re.VERBOSE)


def tokenize(expression: str) -> List[Token]:
    """Split an expression into tokens, terminated by an END token."""
    tokens = []
    position = 0
    length = len(expression)

    while position < length:
        if expression[position].isspace():
            position += 1
            continue

        match = _TOKEN_PATTERN.match(expression, position)
        if not match:
            raise ExpressionSyntaxError(
                f"Unexpected character {expression[position]!r}", expression, position)

        kind = match.lastgroup
        text = match.group(kind)
        if kind == 'OP' and text == '**':
            text = '^'
        tokens.append(Token(kind, text, position))
        position = match.end()

    tokens.append(Token('END', '', length))
    return tokens


class ExpressionParser:
    """Recursive-descent parser producing a :class:`Node` tree."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0
        self.depth = 0

    def parse(self) -> Node:
        if self._peek().kind == 'END':
            raise ExpressionSyntaxError("Empty expression", self.expression, 0)

        tree = self._parse_sum()

        token = self._peek()
        if token.kind != 'END':
            raise ExpressionSyntaxError(
                f"Unexpected token {token.text!r}", self.expression, token.position)
        return tree

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _accept(self, *ops: str) -> Optional[Token]:
        token = self._peek()
        if token.kind == 'OP' and token.text in ops:
            return self._advance()
        return None

    def _expect(self, op: str) -> Token:
        token = self._accept(op)
        if token is None:
            found = self._peek()
            found_text = found.text or 'end of expression'
            raise ExpressionSyntaxError(
                f"Expected {op!r} but found {found_text!r}", self.expression, found.position)
        return token

    def _parse_sum(self) -> Node:
        node = self._parse_product()
        while True:
            token = self._accept('+', '-')
            if token is None:
                return node
            node = BinaryNode(token.text, node, self._parse_product())

    def _parse_product(self) -> Node:
        node = self._parse_unary()
        while True:
            token = self._accept('*', '/')
            if token is None:
                return node
            node = BinaryNode(token.text, node, self._parse_unary())

    def _parse_unary(self) -> Node:
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise ExpressionSyntaxError(
                f"Expression nested deeper than {MAX_NESTING_DEPTH} levels",
                self.expression, self._peek().position)
        try:
            token = self._accept('+', '-')
            if token is not None:
                return UnaryNode(token.text, self._parse_unary())
            return self._parse_power()
        finally:
            self.depth -= 1

    def _parse_power(self) -> Node:
        base = self._parse_atom()
        if self._accept('^'):
            # Right associative: 2^3^2 == 2^(3^2); exponent may carry a sign
            return BinaryNode('^', base, self._parse_unary())
        return base

    def _parse_atom(self) -> Node:
        token = self._advance()

        if token.kind == 'NUMBER':
            return NumberNode(float(token.text))

        if token.kind == 'NAME':
            return self._parse_name(token)

        if token.kind == 'OP' and token.text == '(':
            node = self._parse_sum()
            self._expect(')')
            return node

        found_text = token.text or 'end of expression'
        raise ExpressionSyntaxError(
            f"Unexpected token {found_text!r}", self.expression, token.position)

    def _parse_name(self, token: Token) -> Node:
        name = token.text
        if name.startswith(NAMESPACE_PREFIX):
            name = name[len(NAMESPACE_PREFIX):]

        if self._accept('('):
            return self._parse_call(name, token)

        if name == VARIABLE_NAME and name == token.text:
            return VariableNode()
        if name in CONSTANTS:
            return NumberNode(CONSTANTS[name], label=name)
        if name in FUNCTIONS:
            raise ExpressionSyntaxError(
                f"Function {name!r} must be called", self.expression, token.position)
        raise ExpressionSyntaxError(f"Unknown name {token.text!r}", self.expression, token.position)

    def _parse_call(self, name: str, token: Token) -> Node:
        spec = FUNCTIONS.get(name)
        if spec is None:
            raise ExpressionSyntaxError(
                f"Unknown function {token.text!r}", self.expression, token.position)

        args = []
        if self._peek().kind != 'OP' or self._peek().text != ')':
            args.append(self._parse_sum())
            while self._accept(','):
                args.append(self._parse_sum())
        self._expect(')')

        if len(args) < spec.min_args or (spec.max_args is not None and len(args) > spec.max_args):
            expected = (str(spec.min_args) if spec.min_args == spec.max_args
                        else f"at least {spec.min_args}" if spec.max_args is None
                        else f"{spec.min_args}-{spec.max_args}")
            raise ExpressionSyntaxError(
                f"Function {name!r} takes {expected} argument(s), got {len(args)}",
                self.expression, token.position)

        return CallNode(name, args)


# ----------------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------------

@lru_cache(maxsize=128)
def compile_expression(expression: str) -> Node:
    """
    Parse an expression into an evaluable tree.

    Args:
        expression: Expression in the variable ``x``

    Returns:
        Root node of the parsed expression

    Raises:
        ExpressionError: If the input is not a string
        ExpressionSyntaxError: If the input is outside the grammar
    """
    if not isinstance(expression, str):
        raise ExpressionError(
            f"Expression must be a string, got {type(expression).__name__}", expression)
    return ExpressionParser(expression).parse()


def evaluate(expression: str, x: float) -> float:
    """
    Evaluate ``expression`` at ``x``.

    Never raises: parse errors, arithmetic errors (division by zero, overflow,
    math domain errors), trees too deep to walk and non-finite results all
    evaluate to 0.
    """
    try:
        result = compile_expression(expression).evaluate(float(x))
    except ExpressionError as e:
        get_logger("Expression").log_evaluation_fallback(expression, x, str(e))
        return FAILED_EVALUATION_VALUE
    except (ArithmeticError, ValueError) as e:
        get_logger("Expression").log_evaluation_fallback(expression, x, f"{type(e).__name__}: {e}")
        return FAILED_EVALUATION_VALUE
    except RecursionError:
        get_logger("Expression").log_evaluation_fallback(expression, x, "expression tree too deep")
        return FAILED_EVALUATION_VALUE

    if not math.isfinite(result):
        get_logger("Expression").log_evaluation_fallback(expression, x, f"non-finite result {result}")
        return FAILED_EVALUATION_VALUE

    return result


def validate_expression(expression: str) -> Tuple[bool, Optional[str]]:
    """
    Check that an expression parses.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        compile_expression(expression)
    except ExpressionError as e:
        return False, str(e)
    except RecursionError:
        return False, "Expression nested too deeply"
    return True, None
