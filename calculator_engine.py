"""
Motor de la calculadora científica.

Este módulo provee la clase CalculatorEngine, dueña de todo el estado de
una sesión: expresión en edición, memoria, última respuesta, modo angular
y la marca de cálculo terminado. La capa de presentación solo llama a
``press`` y lee los dos textos resultantes.

Contrato de interfaz:
    - press(token: str) -> None
    - expression: texto de la expresión en edición
    - result: resultado formateado, mensaje de error o cadena vacía
    - angle_mode: propiedad AngleMode.DEGREES | AngleMode.RADIANS
"""

import enum
import logging
import math
import re
from dataclasses import dataclass

from calculator_errors import CalculatorError, ensure_calculator_error
from formula_evaluator import FormulaEvaluator
from math_provider import SURFACE_FUNCTIONS, AngleMode, factorial

logger = logging.getLogger(__name__)

_HANDLED_ERRORS = (CalculatorError, RecursionError, ArithmeticError, ValueError)

# Prefijo numérico de la expresión, como lo leería parseFloat
_LEADING_NUMBER_RE = re.compile(
    r"\s*([+\-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:E[+\-]?\d+)?))"
)
_DIGIT_RE = re.compile(r"\d")


class CalculatorState(enum.Enum):
    EDITING = "editing"
    FINISHED = "finished"


def format_result(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if value == math.inf:
        return "Infinity"
    if value == -math.inf:
        return "-Infinity"
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return f"{value:.15G}"


@dataclass(frozen=True)
class EvaluationResult:
    """Resultado discriminado: un valor numérico o un error clasificado."""

    value: float | None = None
    error: CalculatorError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display(self) -> str:
        if self.error is not None:
            return self.error.display_message
        return format_result(self.value)


class CalculatorEngine:
    """Máquina de estados de la calculadora (EDITING / FINISHED)."""

    LITERAL_TOKENS = frozenset("0123456789.+-*/%()^πe")

    def __init__(self, angle_mode: AngleMode = AngleMode.DEGREES, evaluator=None):
        self._evaluator = evaluator if evaluator is not None else FormulaEvaluator()
        self._angle_mode = angle_mode
        self._expression = ""
        self._result = ""
        self._memory = 0.0
        self._last_answer = 0.0
        self._state = CalculatorState.EDITING

        self._actions = {
            "AC": self.clear_all,
            "Escape": self.clear_all,
            "del": self.delete_last,
            "Backspace": self.delete_last,
            "=": self.evaluate,
            "Enter": self.evaluate,
            "factorial": self.factorial,
            "mode": self.toggle_angle_mode,
            "M+": self.memory_add,
            "MC": self.memory_clear,
            "MR": self.memory_recall,
            "ans": lambda: self.append("ans"),
        }

    # ── Estado visible ───────────────────────────────────────────

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def result(self) -> str:
        return self._result

    @property
    def memory(self) -> float:
        return self._memory

    @property
    def last_answer(self) -> float:
        return self._last_answer

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state is CalculatorState.FINISHED

    @property
    def angle_mode(self) -> AngleMode:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: AngleMode):
        self._angle_mode = AngleMode(mode)

    # ── Entrada de tokens ────────────────────────────────────────

    def press(self, token: str):
        """Despacha un token lógico de la capa de entrada.

        Raises:
            KeyError: el token no corresponde a ninguna operación.
        """
        action = self._actions.get(token)
        if action is not None:
            action()
        elif token in SURFACE_FUNCTIONS:
            self.append(f"{token}(")
        elif token in self.LITERAL_TOKENS:
            self.append(token)
        else:
            raise KeyError(token)

    def append(self, token: str):
        # Tras un resultado, un token con dígitos (también "-7" de MR) o "("
        # empieza una expresión nueva; un operador sigue sobre el resultado
        if self.finished and (_DIGIT_RE.search(token) or token == "("):
            self._expression = ""
            self._result = ""
        self._expression += token
        self._state = CalculatorState.EDITING

    def delete_last(self):
        self._expression = self._expression[:-1]

    def clear_all(self):
        self._expression = ""
        self._result = ""
        self._state = CalculatorState.EDITING

    def toggle_angle_mode(self):
        self._angle_mode = self._angle_mode.toggled()

    # ── Evaluación ───────────────────────────────────────────────

    def evaluate(self):
        """Evalúa la expresión actual; nunca lanza errores de evaluación.

        Devuelve un EvaluationResult, o None si la expresión está vacía.
        """
        expression = self._expression
        if not expression.strip():
            return None

        try:
            value = self._evaluate(expression)
        except _HANDLED_ERRORS as exc:
            error = ensure_calculator_error(exc)
            logger.info("evaluation of %r failed: %s", expression, error)
            self._result = error.display_message
            self._expression = ""
            self._state = CalculatorState.EDITING
            return EvaluationResult(error=error)

        self._finish_with(value)
        logger.debug("evaluated %r -> %s", expression, self._result)
        return EvaluationResult(value=value)

    def factorial(self):
        match = _LEADING_NUMBER_RE.match(self._expression)
        if match is None:
            return None

        value = factorial(float(match.group(1)))
        self._finish_with(value)
        return EvaluationResult(value=value)

    def _evaluate(self, expression: str) -> float:
        return self._evaluator.evaluate(
            expression,
            angle_mode=self._angle_mode,
            last_answer=self._last_answer,
        )

    def _finish_with(self, value: float):
        text = format_result(value)
        self._last_answer = value
        self._result = text
        self._expression = text
        self._state = CalculatorState.FINISHED

    # ── Memoria ──────────────────────────────────────────────────

    def memory_add(self):
        expression = self._expression
        if expression.strip():
            try:
                value = self._evaluate(expression)
            except _HANDLED_ERRORS as exc:
                logger.info("memory add of %r failed: %s", expression, exc)
                self._result = CalculatorError.display_message
            else:
                total = self._memory + value
                if not math.isnan(total):
                    self._memory = total
                    self._result = format_result(self._memory)

        self._expression = ""
        self._state = CalculatorState.FINISHED

    def memory_clear(self):
        self._memory = 0.0
        self._result = "0"
        self._expression = ""
        self._state = CalculatorState.FINISHED

    def memory_recall(self):
        self.append(format_result(self._memory))
