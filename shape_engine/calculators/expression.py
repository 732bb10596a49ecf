"""
Arithmetic expression compiler for catalog formulas.

Formulas are user-authored strings like "pi * ((ID/2 + t)^2 - (ID/2)^2) * L".
They are tokenized, parsed by a small recursive-descent parser into a tree,
and evaluated with decimal.Decimal at configurable precision. Engineering
magnitudes run from 1e-6 (mm to km conversions) to 1e12 (mm³ volumes).

Grammar (lowest to highest precedence):

    additive       := multiplicative (("+" | "-") multiplicative)*
    multiplicative := unary (("*" | "/") unary)*
    unary          := ("+" | "-") unary | power
    power          := atom (("^" | "**") unary)?      right-associative
    atom           := NUMBER | NAME | NAME "(" args ")" | "(" additive ")"

"-2^2" is -(2^2) = -4, matching common math-notation conventions.
Trees deeper than settings.MAX_EXPRESSION_DEPTH are rejected at parse time.

Parsing happens once per distinct expression string (compile_expression is
cached), and the same compiled tree serves syntax validation, free-symbol
extraction and evaluation.
"""

import decimal
import functools
import math
import re
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional

from ..config import settings
from ..errors import EvaluationError, FormulaSyntaxError, MissingVariablesError

_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)
    | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<op>\*\*|[-+*/^(),])
    | (?P<space>\s+)
    """,
    re.VERBOSE,
)

CONSTANTS = ("pi", "PI", "e", "E")

# Largest angle exponent sin/cos will reduce exactly
_MAX_ANGLE_DIGITS = 1000


# --- Decimal math helpers ---
# pi/sin/cos follow the recipes in the decimal module documentation.

def _pi() -> Decimal:
    return _pi_at(decimal.getcontext().prec)


@functools.lru_cache(maxsize=8)
def _pi_at(prec: int) -> Decimal:
    with decimal.localcontext() as ctx:
        ctx.prec = prec
        ctx.prec += 2
        three = Decimal(3)
        lasts, t, s, n, na, d, da = 0, three, 3, 1, 0, 0, 24
        while s != lasts:
            lasts = s
            n, na = n + na, na + 8
            d, da = d + da, da + 32
            t = (t * n) / d
            s += t
    return +s


def _reduce_angle(x: Decimal) -> Decimal:
    """x modulo 2*pi, with pi carried to enough digits to keep the fraction of x."""
    extra = max(0, x.adjusted())
    if extra > _MAX_ANGLE_DIGITS:
        raise ValueError(f"angle {x} is too large for trigonometric functions")
    with decimal.localcontext() as ctx:
        ctx.prec += extra
        return x % (2 * _pi())


def _cos(x: Decimal) -> Decimal:
    with decimal.localcontext() as ctx:
        ctx.prec += 2
        x = _reduce_angle(x)
        i, lasts, s, fact, num, sign = 0, 0, 1, 1, 1, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
    return +s


def _sin(x: Decimal) -> Decimal:
    with decimal.localcontext() as ctx:
        ctx.prec += 2
        x = _reduce_angle(x)
        i, lasts, s, fact, num, sign = 1, 0, x, 1, x, 1
        while s != lasts:
            lasts = s
            i += 2
            fact *= i * (i - 1)
            num *= x * x
            sign *= -1
            s += num / fact * sign
    return +s


def _via_float(fn):
    """Wrap a float-only math function; precision is limited to ~15 digits."""
    def wrapper(*args):
        return Decimal(repr(fn(*(float(a) for a in args))))
    return wrapper


def _log(x: Decimal, base: Optional[Decimal] = None) -> Decimal:
    if base is None:
        return x.ln()
    return x.ln() / base.ln()


def _round(x: Decimal, places: Optional[Decimal] = None) -> Decimal:
    digits = 0 if places is None else int(places)
    return x.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)


def _cbrt(x: Decimal) -> Decimal:
    if x == 0:
        return Decimal(0)
    root = abs(x) ** (Decimal(1) / Decimal(3))
    return root if x > 0 else -root


# name -> (min args, max args or None for variadic, implementation)
FUNCTIONS = {
    "sqrt": (1, 1, lambda x: x.sqrt()),
    "cbrt": (1, 1, _cbrt),
    "exp": (1, 1, lambda x: x.exp()),
    "log": (1, 2, _log),
    "ln": (1, 1, lambda x: x.ln()),
    "log10": (1, 1, lambda x: x.log10()),
    "abs": (1, 1, abs),
    "floor": (1, 1, lambda x: x.to_integral_value(rounding=ROUND_FLOOR)),
    "ceil": (1, 1, lambda x: x.to_integral_value(rounding=ROUND_CEILING)),
    "round": (1, 2, _round),
    "min": (1, None, lambda *xs: min(xs)),
    "max": (1, None, lambda *xs: max(xs)),
    "pow": (2, 2, lambda x, y: x ** y),
    "sin": (1, 1, _sin),
    "cos": (1, 1, _cos),
    "tan": (1, 1, lambda x: _sin(x) / _cos(x)),
    "asin": (1, 1, _via_float(math.asin)),
    "acos": (1, 1, _via_float(math.acos)),
    "atan": (1, 1, _via_float(math.atan)),
    "atan2": (2, 2, _via_float(math.atan2)),
    "sinh": (1, 1, _via_float(math.sinh)),
    "cosh": (1, 1, _via_float(math.cosh)),
    "tanh": (1, 1, _via_float(math.tanh)),
}


# --- Syntax tree ---

class Node:
    __slots__ = ("depth",)


class Number(Node):
    __slots__ = ("value",)

    def __init__(self, value: Decimal):
        self.value = value
        self.depth = 1

    def evaluate(self, values):
        return self.value


class Symbol(Node):
    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name
        self.depth = 1

    def evaluate(self, values):
        if self.name in ("pi", "PI"):
            return _pi()
        if self.name in ("e", "E"):
            return Decimal(1).exp()
        try:
            return values[self.name]
        except KeyError:
            raise MissingVariablesError([self.name])


class UnaryOp(Node):
    __slots__ = ("op", "operand")

    def __init__(self, op: str, operand: Node):
        self.op = op
        self.operand = operand
        self.depth = operand.depth + 1

    def evaluate(self, values):
        value = self.operand.evaluate(values)
        return -value if self.op == "-" else +value


class BinaryOp(Node):
    __slots__ = ("op", "left", "right")

    def __init__(self, op: str, left: Node, right: Node):
        self.op = op
        self.left = left
        self.right = right
        self.depth = max(left.depth, right.depth) + 1

    def evaluate(self, values):
        left = self.left.evaluate(values)
        right = self.right.evaluate(values)
        if self.op == "+":
            return left + right
        if self.op == "-":
            return left - right
        if self.op == "*":
            return left * right
        if self.op == "/":
            return left / right
        return left ** right


class Call(Node):
    __slots__ = ("name", "args")

    def __init__(self, name: str, args: list):
        self.name = name
        self.args = args
        self.depth = max((arg.depth for arg in args), default=0) + 1

    def evaluate(self, values):
        fn = FUNCTIONS[self.name][2]
        return fn(*(arg.evaluate(values) for arg in self.args))


# --- Tokenizer / parser ---

class _Token:
    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: str, value=None, pos: int = 0):
        self.kind = kind
        self.value = value
        self.pos = pos


def _tokenize(expression: str) -> list:
    tokens = []
    pos = 0
    while pos < len(expression):
        m = _TOKEN_RE.match(expression, pos)
        if m is None:
            raise FormulaSyntaxError(
                f"Invalid formula syntax: unexpected character {expression[pos]!r} at position {pos}",
                expression, pos,
            )
        kind = m.lastgroup
        if kind == "number":
            tokens.append(_Token("NUMBER", Decimal(m.group(kind)), pos))
        elif kind == "name":
            tokens.append(_Token("NAME", m.group(kind), pos))
        elif kind == "op":
            op = m.group(kind)
            tokens.append(_Token("^" if op == "**" else op, op, pos))
        pos = m.end()
    tokens.append(_Token("EOF", None, len(expression)))
    return tokens


class _Parser:
    """Recursive-descent parser producing a Node tree."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = _tokenize(expression)
        self.pos = 0
        self.depth = 0

    def _peek(self) -> _Token:
        return self.tokens[self.pos]

    def _advance(self) -> _Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _error(self, message: str, tok: _Token):
        return FormulaSyntaxError(
            f"Invalid formula syntax: {message} at position {tok.pos}",
            self.expression, tok.pos,
        )

    def _describe(self, tok: _Token) -> str:
        return "end of expression" if tok.kind == "EOF" else repr(str(tok.value))

    def _too_deep(self, tok: _Token):
        return self._error(
            f"expression nested deeper than {settings.MAX_EXPRESSION_DEPTH} levels", tok
        )

    def _checked(self, node: Node, tok: _Token) -> Node:
        if node.depth > settings.MAX_EXPRESSION_DEPTH:
            raise self._too_deep(tok)
        return node

    def _expect(self, kind: str) -> _Token:
        tok = self._advance()
        if tok.kind != kind:
            raise self._error(f"expected {kind!r}, got {self._describe(tok)}", tok)
        return tok

    def parse(self):
        if self._peek().kind == "EOF":
            return None
        node = self._additive()
        if self._peek().kind != "EOF":
            tok = self._peek()
            raise self._error(f"unexpected {self._describe(tok)}", tok)
        return node

    def _additive(self) -> Node:
        left = self._multiplicative()
        while self._peek().kind in ("+", "-"):
            tok = self._advance()
            left = self._checked(BinaryOp(tok.kind, left, self._multiplicative()), tok)
        return left

    def _multiplicative(self) -> Node:
        left = self._unary()
        while self._peek().kind in ("*", "/"):
            tok = self._advance()
            left = self._checked(BinaryOp(tok.kind, left, self._unary()), tok)
        return left

    def _unary(self) -> Node:
        # all nesting passes through here
        tok = self._peek()
        self.depth += 1
        try:
            if self.depth > settings.MAX_EXPRESSION_DEPTH:
                raise self._too_deep(tok)
            if tok.kind in ("+", "-"):
                self._advance()
                return self._checked(UnaryOp(tok.kind, self._unary()), tok)
            return self._power()
        finally:
            self.depth -= 1

    def _power(self) -> Node:
        base = self._atom()
        if self._peek().kind == "^":
            tok = self._advance()
            return self._checked(BinaryOp("^", base, self._unary()), tok)
        return base

    def _atom(self) -> Node:
        tok = self._advance()
        if tok.kind == "NUMBER":
            return Number(tok.value)
        if tok.kind == "NAME":
            if self._peek().kind == "(":
                return self._call(tok)
            if tok.value in FUNCTIONS:
                raise self._error(f"function {tok.value!r} must be called with arguments", tok)
            return Symbol(tok.value)
        if tok.kind == "(":
            node = self._additive()
            self._expect(")")
            return node
        raise self._error(f"unexpected {self._describe(tok)}", tok)

    def _call(self, name_tok: _Token) -> Node:
        name = name_tok.value
        if name not in FUNCTIONS:
            raise self._error(f"unknown function {name!r}", name_tok)
        self._expect("(")
        args = []
        if self._peek().kind != ")":
            args.append(self._additive())
            while self._peek().kind == ",":
                self._advance()
                args.append(self._additive())
        self._expect(")")
        min_args, max_args, _ = FUNCTIONS[name]
        if len(args) < min_args or (max_args is not None and len(args) > max_args):
            expected = min_args if min_args == max_args else f"{min_args} to {max_args or 'any'}"
            raise self._error(
                f"function {name!r} takes {expected} argument(s), got {len(args)}", name_tok
            )
        return self._checked(Call(name, args), name_tok)


def _collect_symbols(node, seen: list):
    if node is None:
        return
    if isinstance(node, Symbol):
        if node.name not in CONSTANTS and node.name not in seen:
            seen.append(node.name)
    elif isinstance(node, UnaryOp):
        _collect_symbols(node.operand, seen)
    elif isinstance(node, BinaryOp):
        _collect_symbols(node.left, seen)
        _collect_symbols(node.right, seen)
    elif isinstance(node, Call):
        for arg in node.args:
            _collect_symbols(arg, seen)


class CompiledExpression:
    """A parsed formula: reusable, holds no per-call state."""

    def __init__(self, expression: str, root):
        self.expression = expression
        self.root = root
        symbols = []
        _collect_symbols(root, symbols)
        self.symbols = tuple(symbols)

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def evaluate(self, values: dict) -> Decimal:
        """
        Evaluate against a name -> Decimal mapping.
        Raises EvaluationError for arithmetic failures (division by zero,
        domain errors, overflow) and for non-finite results.
        """
        if self.root is None:
            raise EvaluationError("Expression is empty", self.expression)
        with decimal.localcontext() as ctx:
            ctx.prec = settings.DECIMAL_PRECISION
            try:
                result = self.root.evaluate(values)
            except MissingVariablesError:
                raise
            except RecursionError as e:
                raise EvaluationError(
                    f"Expression {self.expression!r} is nested too deeply to evaluate",
                    self.expression,
                ) from e
            except (ArithmeticError, ValueError) as e:
                raise EvaluationError(
                    f"Error evaluating {self.expression!r}: {_describe_error(e)}",
                    self.expression,
                ) from e
            result = +result
        if not result.is_finite():
            raise EvaluationError(
                f"Expression {self.expression!r} produced a non-finite result",
                self.expression,
            )
        return result


def _describe_error(error: Exception) -> str:
    if isinstance(error, decimal.DivisionByZero):
        return "division by zero"
    if isinstance(error, decimal.Overflow):
        return "numeric overflow"
    if isinstance(error, decimal.InvalidOperation):
        return "invalid operation (e.g. square root or power of a negative number)"
    return str(error) or error.__class__.__name__


def compile_expression(expression: str) -> CompiledExpression:
    """Parse an expression string. Raises FormulaSyntaxError on malformed input."""
    # unhashable input must not reach the cache
    if not isinstance(expression, str):
        raise FormulaSyntaxError(
            f"Invalid formula syntax: expression must be a string, got {type(expression).__name__}"
        )
    return _compile(expression)


@functools.lru_cache(maxsize=settings.EXPRESSION_CACHE_SIZE)
def _compile(expression: str) -> CompiledExpression:
    return CompiledExpression(expression, _Parser(expression).parse())


def to_decimal(name: str, value) -> Decimal:
    """Convert a context value to Decimal without going through binary float noise."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        result = Decimal(int(value))
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except decimal.InvalidOperation as e:
            raise EvaluationError(f"Variable {name!r} is not numeric: {value!r}") from e
    else:
        raise EvaluationError(
            f"Variable {name!r} has unsupported type {type(value).__name__}"
        )
    if not result.is_finite():
        raise EvaluationError(f"Variable {name!r} is not finite: {value!r}")
    return result
