import math

import pytest

from formula_normalizer import normalize, number_literal
from math_provider import AngleMode

PI = "(3.141592653589793)"
E = "(2.718281828459045)"

DEG = AngleMode.DEGREES
RAD = AngleMode.RADIANS


def test_circle_constant_is_replaced():
    assert normalize("2π", RAD) == f"2{PI}"


def test_euler_substitution_leaves_function_names_intact():
    assert normalize("mean(2)+e", RAD) == f"mean(2)+{E}"
    assert normalize("e*sec(1)", RAD) == f"{E}*sec(1)"


def test_euler_substitution_keeps_scientific_literals():
    assert normalize("1E+21*2", RAD) == "1E+21*2"
    assert normalize("2.5E-3", RAD) == "2.5E-3"
    assert normalize("2e", RAD) == f"2{E}"


def test_lowercase_e_is_always_the_constant():
    assert normalize("2e+3", RAD) == f"2{E}+3"
    assert normalize("2e5", RAD) == f"2{E}5"


def test_answer_is_parenthesized():
    assert normalize("ans*3", RAD, 4.0) == "(4.0)*3"
    assert normalize("2^ans", RAD, -4.0) == "2**(-4.0)"
    assert normalize("ans", RAD, math.nan) == "(NaN)"
    assert normalize("ans", RAD, -math.inf) == "(-Infinity)"


def test_answer_value_is_not_touched_by_euler_step():
    assert normalize("ans", RAD, 1e21) == "(1E+21)"


def test_caret_becomes_power_operator():
    assert normalize("2^3^2", RAD) == "2**3**2"


def test_trig_in_degrees_wraps_argument_and_result():
    assert normalize("sin(30)", DEG) == "sin(radians(30))"
    assert normalize("arcsin(0.5)", DEG) == "degrees(asin(0.5))"
    assert normalize("sin(30+cos(60))*2", DEG) == "sin(radians(30+cos(radians(60))))*2"
    assert normalize("sin(arcsin(0.5))", DEG) == "sin(radians(degrees(asin(0.5))))"


def test_trig_in_radians_is_a_direct_call():
    assert normalize("sin(30)", RAD) == "sin(30)"
    assert normalize("arccos(1)+arctan(1)", RAD) == "acos(1)+atan(1)"


def test_unclosed_trig_call_stays_unclosed():
    assert normalize("sin(30", DEG) == "sin(radians(30"


def test_logs_are_rewritten_in_one_pass():
    assert normalize("ln(2)+log(3)", RAD) == "log(2)+log10(3)"


def test_fixed_base_powers():
    assert normalize("pow10(2)", RAD) == "pow(10, 2)"
    assert normalize("powE(1)", RAD) == f"pow({E}, 1)"


@pytest.mark.parametrize(
    "value, expected",
    [(4.0, "4.0"), (0.1, "0.1"), (1e21, "1E+21"), (math.inf, "Infinity"), (math.nan, "NaN")],
)
def test_number_literal(value, expected):
    assert number_literal(value) == expected
