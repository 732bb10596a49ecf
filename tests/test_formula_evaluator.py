"""
Formula evaluator tests.

Tests:
1-11.  Arithmetic, precedence, constants and functions
12-19. Syntax validation, nesting limits and variable extraction
20-26. Variable resolution, density and failure modes
27-29. Expected-range warnings
30-32. Authoring checks
"""

import decimal
import logging
import math

import pytest

from shape_engine.calculators.expression import compile_expression
from shape_engine.calculators.formula_evaluator import (
    check_formula,
    evaluate,
    extract_variables,
    validate_syntax,
)
from shape_engine.errors import (
    EvaluationError,
    FormulaError,
    FormulaSyntaxError,
    MissingVariablesError,
)
from shape_engine.schemas import ExpectedRange, FormulaDefinition


def _eval(expression, context=None, density=None, **kwargs):
    context = context or {}
    formula = FormulaDefinition(
        expression=expression,
        variables=list(context.keys()),
        unit=kwargs.pop("unit", ""),
        **kwargs,
    )
    return evaluate(formula, context, density).result


# ============================================================
# Arithmetic
# ============================================================

def test_plate_volume_is_exact():
    assert _eval("L * W * t", {"L": 1000, "W": 1000, "t": 10}) == 10_000_000


def test_decimal_arithmetic_has_no_binary_float_noise():
    """0.1 + 0.2 is exactly 0.3 when evaluated in Decimal."""
    assert _eval("a + b", {"a": 0.1, "b": 0.2}) == 0.3


def test_power_is_right_associative_and_binds_tighter_than_unary_minus():
    assert _eval("2^3^2") == 512
    assert _eval("-2^2") == -4
    assert _eval("2^-1") == 0.5
    assert _eval("2 ** 3") == 8


def test_operator_precedence():
    assert _eval("2 + 3 * 4") == 14
    assert _eval("(2 + 3) * 4") == 20
    assert _eval("10 - 4 - 3") == 3
    assert _eval("24 / 4 / 2") == 3


def test_scientific_notation():
    assert _eval("1e9 / 1e6") == 1000
    assert _eval("2.5E-3 * 1000") == 2.5


def test_constants():
    assert _eval("pi") == pytest.approx(math.pi)
    assert _eval("PI") == pytest.approx(math.pi)
    assert _eval("e") == pytest.approx(math.e)
    assert _eval("E") == pytest.approx(math.e)


def test_rounding_and_extrema_functions():
    assert _eval("sqrt(16) + abs(-3)") == 7
    assert _eval("floor(-1.5)") == -2
    assert _eval("ceil(1.2)") == 2
    assert _eval("round(2.5)") == 3
    assert _eval("round(3.14159, 2)") == 3.14
    assert _eval("min(3, 1, 2)") == 1
    assert _eval("max(3, 1, 2)") == 3
    assert _eval("pow(2, 10)") == 1024


def test_logarithms_and_roots():
    assert _eval("log10(1000)") == 3
    assert _eval("log(100, 10)") == pytest.approx(2)
    assert _eval("ln(e)") == pytest.approx(1)
    assert _eval("exp(0)") == 1
    assert _eval("cbrt(27)") == pytest.approx(3)
    assert _eval("cbrt(-8)") == pytest.approx(-2)


def test_trigonometry():
    assert _eval("sin(pi/2)") == pytest.approx(1)
    assert _eval("cos(0)") == 1
    assert _eval("tan(pi/4)") == pytest.approx(1)
    assert _eval("atan(1) * 4") == pytest.approx(math.pi)
    assert _eval("atan2(1, 1)") == pytest.approx(math.pi / 4)
    assert _eval("acos(0)") == pytest.approx(math.pi / 2)


def test_trigonometry_reduces_large_angles_exactly():
    # 2*pi*10^30 is a whole number of turns
    assert _eval("sin(2 * pi * 10^30 + 0.5)") == pytest.approx(math.sin(0.5))
    assert _eval("cos(2 * pi * 10^30 + 0.5)") == pytest.approx(math.cos(0.5))
    assert _eval("sin(x)^2 + cos(x)^2", {"x": 1e60}) == pytest.approx(1)


def test_astronomical_angles_raise_evaluation_error():
    with pytest.raises(EvaluationError) as exc:
        _eval("sin(x)", {"x": "1e2000"})
    assert "too large" in str(exc.value)


# ============================================================
# Syntax and variables
# ============================================================

@pytest.mark.parametrize("expression", [
    "L * (W + 2",
    "L W",
    "2 +* 3",
    "L $ W",
    "foo(1)",
    "sqrt(1, 2)",
    "sqrt",
    "()",
])
def test_malformed_expressions_raise_syntax_error(expression):
    with pytest.raises(FormulaSyntaxError) as exc:
        validate_syntax(expression)
    assert str(exc.value).startswith("Invalid formula syntax")


def test_syntax_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_syntax("1 +")


def test_valid_expression_returns_true():
    assert validate_syntax("pi * (D/2)^2 * t") is True


def test_empty_expression_is_valid_syntax_but_fails_evaluation():
    assert validate_syntax("") is True
    assert validate_syntax("   ") is True
    with pytest.raises(EvaluationError):
        _eval("")


def test_extract_variables_dedupes_in_first_seen_order():
    assert extract_variables("pi * (D/2)^2 * t + D") == ["D", "t"]
    assert extract_variables("sqrt(L^2 + W^2) * L") == ["L", "W"]
    assert extract_variables("e * E + PI") == []


def test_compile_is_cached():
    assert compile_expression("x + 1") is compile_expression("x + 1")


@pytest.mark.parametrize("expression", [
    "(" * 2000 + "a" + ")" * 2000,
    "-" * 5000 + "1",
    "2^" * 3000 + "2",
    "sqrt(" * 1000 + "4" + ")" * 1000,
    " + ".join(["a"] * 500),
])
def test_deeply_nested_expressions_raise_syntax_error(expression):
    with pytest.raises(FormulaSyntaxError) as exc:
        validate_syntax(expression)
    assert "nested deeper than 100 levels" in str(exc.value)
    assert exc.value.position is not None


def test_moderately_nested_expressions_still_evaluate():
    assert _eval("(" * 50 + "a" + ")" * 50, {"a": 3}) == 3
    assert _eval(" + ".join(["1"] * 90)) == 90
    assert _eval("-" * 40 + "2") == 2


@pytest.mark.parametrize("expression", [None, 42, ["a"], {"a": 1}])
def test_non_string_expressions_raise_syntax_error(expression):
    with pytest.raises(FormulaSyntaxError) as exc:
        validate_syntax(expression)
    assert "expression must be a string" in str(exc.value)


# ============================================================
# Variable resolution and failures
# ============================================================

def test_missing_declared_variable_is_named():
    formula = FormulaDefinition(expression="a + b", variables=["a", "b"])
    with pytest.raises(MissingVariablesError) as exc:
        evaluate(formula, {"a": 1})
    assert exc.value.missing == ["b"]
    assert str(exc.value) == "Missing required variables: b"


def test_missing_undeclared_symbol_is_named():
    formula = FormulaDefinition(expression="a + c", variables=["a"])
    with pytest.raises(MissingVariablesError) as exc:
        evaluate(formula, {"a": 1})
    assert exc.value.missing == ["c"]


def test_missing_density_is_named():
    formula = FormulaDefinition(expression="V * density", variables=["V"], requires_density=True)
    with pytest.raises(MissingVariablesError) as exc:
        evaluate(formula, {})
    assert exc.value.missing == ["V", "density"]


def test_explicit_density_overrides_context():
    formula = FormulaDefinition(expression="V * density", variables=["V"], requires_density=True)
    result = evaluate(formula, {"V": 2, "density": 1000}, density=7850)
    assert result.result == 15700
    assert result.variables == {"V": 2.0, "density": 7850.0}


def test_division_by_zero_raises_evaluation_error_with_cause():
    with pytest.raises(EvaluationError) as exc:
        _eval("a / b", {"a": 1, "b": 0})
    assert isinstance(exc.value.__cause__, decimal.DivisionByZero)


def test_domain_errors_raise_evaluation_error():
    with pytest.raises(EvaluationError):
        _eval("sqrt(x)", {"x": -1})
    with pytest.raises(EvaluationError):
        _eval("ln(0)")
    with pytest.raises(EvaluationError):
        _eval("x ^ 0.5", {"x": -4})


def test_non_numeric_context_value_is_rejected():
    with pytest.raises(EvaluationError):
        _eval("a * 2", {"a": "abc"})
    with pytest.raises(FormulaError):
        _eval("a * 2", {"a": float("nan")})


# ============================================================
# Expected ranges
# ============================================================

def test_value_inside_range_has_no_warning():
    formula = FormulaDefinition(
        expression="x", variables=["x"], unit="kg", expected_range=ExpectedRange(min=0, max=10),
    )
    assert evaluate(formula, {"x": 5}).range_warning is None


def test_value_outside_range_still_succeeds_and_logs_warning(caplog):
    formula = FormulaDefinition(
        expression="x", variables=["x"], unit="kg", expected_range=ExpectedRange(min=0, max=10),
    )
    with caplog.at_level(logging.WARNING, logger="shape_engine.calculators.formula_evaluator"):
        result = evaluate(formula, {"x": 78.5})
    assert result.result == 78.5
    assert result.range_warning == "Result 78.5 kg outside expected range [0.0, 10.0]"
    assert "outside expected range" in caplog.text


def test_range_warning_includes_catalog_message():
    formula = FormulaDefinition(
        expression="x", variables=["x"], unit="%",
        expected_range=ExpectedRange(min=20, max=100, warning="Check tube count"),
    )
    assert evaluate(formula, {"x": 5}).range_warning.endswith(": Check tube count")


# ============================================================
# Authoring checks
# ============================================================

def test_check_formula_clean():
    formula = FormulaDefinition(
        expression="L * W * t * density / 1e9", variables=["L", "W", "t"], requires_density=True,
    )
    assert check_formula(formula) == []


def test_check_formula_reports_undeclared_and_unused():
    formula = FormulaDefinition(expression="a + b", variables=["a", "c"])
    problems = check_formula(formula)
    assert any("undeclared variable 'b'" in p for p in problems)
    assert any("unused variable 'c'" in p for p in problems)


def test_check_formula_reports_density_mismatch():
    uses_density = FormulaDefinition(expression="V * density", variables=["V"])
    assert any("requires_density" in p for p in check_formula(uses_density))

    never_uses = FormulaDefinition(expression="V", variables=["V"], requires_density=True)
    assert any("never uses density" in p for p in check_formula(never_uses))
