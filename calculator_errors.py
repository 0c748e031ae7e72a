"""Errores de evaluación de la calculadora y sus mensajes para pantalla."""


class CalculatorError(ValueError):
    """Error base; ``display_message`` es el texto que ve el usuario."""

    display_message = "Error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(detail or self.display_message)


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    display_message = "Division by zero is not allowed."


class ExpressionSyntaxError(CalculatorError):
    """Expresión mal formada o paréntesis desbalanceados."""

    display_message = "Invalid expression"


class UnknownIdentifierError(CalculatorError):
    """Nombre de función o constante que no existe en el registro."""

    display_message = "Invalid expression"


class OperandTypeError(CalculatorError):
    """Un valor de tipo incorrecto participa en una operación."""

    display_message = "Invalid input"


class InputTooLargeError(CalculatorError):
    display_message = "Expression is too large"


class EvaluationError(CalculatorError):
    """Cualquier otro fallo; se muestra su propio mensaje."""

    @property
    def display_message(self) -> str:
        return self.detail or "Error"


def ensure_calculator_error(error: Exception) -> CalculatorError:
    """Convierte excepciones arbitrarias en :class:`CalculatorError`."""
    if isinstance(error, CalculatorError):
        return error
    if isinstance(error, RecursionError):
        return InputTooLargeError("nesting exceeds the interpreter limit")
    if isinstance(error, ZeroDivisionError):
        return DivisionByZeroError(str(error))
    return EvaluationError(str(error) or type(error).__name__)
