import pytest

from calculator_errors import (
    CalculatorError,
    DivisionByZeroError,
    EvaluationError,
    ExpressionSyntaxError,
    InputTooLargeError,
    OperandTypeError,
    UnknownIdentifierError,
    ensure_calculator_error,
)


@pytest.mark.parametrize(
    "error, message",
    [
        (DivisionByZeroError("1 / 0"), "Division by zero is not allowed."),
        (ExpressionSyntaxError("expected ')'"), "Invalid expression"),
        (UnknownIdentifierError("x is not defined"), "Invalid expression"),
        (OperandTypeError("sqrt is a function"), "Invalid input"),
        (InputTooLargeError(), "Expression is too large"),
        (EvaluationError("math range error"), "math range error"),
    ],
)
def test_display_messages(error, message):
    assert error.display_message == message


def test_errors_keep_builtin_families():
    assert isinstance(DivisionByZeroError(), ZeroDivisionError)
    assert isinstance(ExpressionSyntaxError(), ValueError)
    assert str(ExpressionSyntaxError()) == "Invalid expression"
    assert ExpressionSyntaxError("expected ')'").detail == "expected ')'"


def test_ensure_calculator_error():
    original = OperandTypeError("bad")
    assert ensure_calculator_error(original) is original
    assert isinstance(ensure_calculator_error(RecursionError()), InputTooLargeError)
    assert isinstance(ensure_calculator_error(ZeroDivisionError("x")), DivisionByZeroError)

    wrapped = ensure_calculator_error(OverflowError("math range error"))
    assert isinstance(wrapped, EvaluationError)
    assert wrapped.display_message == "math range error"
    assert isinstance(wrapped, CalculatorError)
