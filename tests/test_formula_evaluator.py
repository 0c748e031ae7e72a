import math

import pytest

from calculator_errors import (
    DivisionByZeroError,
    ExpressionSyntaxError,
    InputTooLargeError,
    OperandTypeError,
    UnknownIdentifierError,
)
from formula_evaluator import FormulaEvaluator, tokenize
from math_provider import AngleMode

DEG = AngleMode.DEGREES
RAD = AngleMode.RADIANS


@pytest.fixture
def evaluator():
    return FormulaEvaluator()


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("3+4*2", 11),
        ("(3+4)*2", 14),
        ("2^3^2", 512),
        ("-2^2", 4),
        ("2^-1", 0.5),
        ("10-4-3", 3),
        ("100/10/5", 2),
        ("7%3", 1),
        ("-7%3", -1),
        ("--3", 3),
        ("+5", 5),
        ("2*3**2", 18),
        ("10/05", 2),
        (".5+.5", 1),
        ("1E+21*2", 2e21),
    ],
)
def test_arithmetic_precedence(evaluator, expr, expected):
    assert evaluator.evaluate(expr) == expected


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("2π", 2 * math.pi),
        ("2e", 2 * math.e),
        ("2(3)", 6),
        ("(1+1)(2+2)", 8),
        ("(2)3", 6),
        ("2^2(3)", 12),
    ],
)
def test_implicit_multiplication(evaluator, expr, expected):
    assert evaluator.evaluate(expr) == pytest.approx(expected)


def test_trig_in_both_modes(evaluator):
    assert evaluator.evaluate("sin(30)", DEG) == pytest.approx(0.5)
    assert evaluator.evaluate("sin(30)", RAD) == pytest.approx(-0.988031624092862)
    assert evaluator.evaluate("cos(60)", DEG) == pytest.approx(0.5)
    assert evaluator.evaluate("tan(45)", DEG) == pytest.approx(1)
    assert evaluator.evaluate("arcsin(1)", DEG) == pytest.approx(90)
    assert evaluator.evaluate("arctan(1)", RAD) == pytest.approx(math.pi / 4)
    assert evaluator.evaluate("sin(arcsin(0.5))", DEG) == pytest.approx(0.5)
    assert evaluator.evaluate("3sin(90)", DEG) == pytest.approx(3)


def test_logs_roots_and_powers(evaluator):
    assert evaluator.evaluate("log(1000)") == pytest.approx(3)
    assert evaluator.evaluate("ln(e)") == pytest.approx(1)
    assert evaluator.evaluate("sqrt(16)") == 4
    assert evaluator.evaluate("pow10(2)") == pytest.approx(100)
    assert evaluator.evaluate("powE(1)") == pytest.approx(math.e)


def test_answer_substitution(evaluator):
    assert evaluator.evaluate("ans*3", last_answer=4.0) == 12
    assert evaluator.evaluate("2ans", last_answer=4.0) == 8
    assert evaluator.evaluate("ans^2", last_answer=-4.0) == 16
    assert math.isnan(evaluator.evaluate("ans+1", last_answer=math.nan))


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("ln(0)", -math.inf),
        ("pow10(400)", math.inf),
        ("0^-1", math.inf),
        ("-Infinity*2", -math.inf),
        ("Infinity+1", math.inf),
    ],
)
def test_infinite_results_are_values(evaluator, expr, expected):
    assert evaluator.evaluate(expr) == expected


@pytest.mark.parametrize(
    "expr",
    ["sqrt(-1)", "arcsin(2)", "(-8)^(1/3)", "Infinity-Infinity", "NaN+1", "ln(-1)"],
)
def test_nan_results_are_values(evaluator, expr):
    assert math.isnan(evaluator.evaluate(expr))


@pytest.mark.parametrize("expr", ["5/0", "5/(3-3)", "0/0", "5%0", "1/(2-2)*3", "1/0.0"])
def test_division_by_zero_is_detected_at_evaluation(evaluator, expr):
    with pytest.raises(DivisionByZeroError):
        evaluator.evaluate(expr)


def test_division_by_zero_has_no_textual_false_positive(evaluator):
    assert evaluator.evaluate("10/05") == 2
    assert evaluator.evaluate("1/0.5") == 2


@pytest.mark.parametrize(
    "expr",
    ["(1+2", "1+2)", "3+", "*3", "1..2", "()", "2 3", "#", "", "sin(30", "pow10()"],
)
def test_malformed_expressions(evaluator, expr):
    with pytest.raises(ExpressionSyntaxError):
        evaluator.evaluate(expr, DEG)


@pytest.mark.parametrize("expr", ["foo(2)", "x+1", "mean(2)"])
def test_unknown_identifiers(evaluator, expr):
    with pytest.raises(UnknownIdentifierError):
        evaluator.evaluate(expr)


@pytest.mark.parametrize("expr", ["sqrt+1", "NaN(2)", "sqrt(1,2)", "2*log10"])
def test_operands_of_the_wrong_kind(evaluator, expr):
    with pytest.raises(OperandTypeError):
        evaluator.evaluate(expr)


def test_long_expression_is_rejected(evaluator):
    with pytest.raises(InputTooLargeError):
        evaluator.evaluate("1+" * 600 + "1")


@pytest.mark.parametrize(
    "expr",
    ["(" * 150 + "1" + ")" * 150, "-" * 150 + "1", "2^" * 150 + "2", "sqrt(" * 120 + "1" + ")" * 120],
)
def test_deep_nesting_is_rejected(evaluator, expr):
    with pytest.raises(InputTooLargeError):
        evaluator.evaluate(expr)


def test_moderate_nesting_is_fine(evaluator):
    assert evaluator.evaluate("(" * 50 + "1" + ")" * 50) == 1


def test_canonicalize_shows_evaluator_form(evaluator):
    assert evaluator.canonicalize("sin(30)^2", DEG) == "sin(radians(30))**2"


def test_tokenize_kinds():
    kinds = [tok.kind for tok in tokenize("pow(10, 2.5E-3)**-x")]
    assert kinds == [
        "name", "op", "number", "op", "number", "op", "op", "op", "name", "end",
    ]
