"""Parseo y evaluación de expresiones para la calculadora científica.

La forma canónica producida por :mod:`formula_normalizer` se evalúa con un
parser descendente recursivo sobre una gramática cerrada: números,
operadores ``+ - * / % **``, paréntesis y las funciones del registro.
"""

import contextlib
import logging
import math
import re
from typing import NamedTuple

from calculator_errors import (
    DivisionByZeroError,
    ExpressionSyntaxError,
    InputTooLargeError,
    OperandTypeError,
    UnknownIdentifierError,
)
from formula_normalizer import normalize
from math_provider import PRIMITIVE_ARITY, AngleMode, MathProvider, power

logger = logging.getLogger(__name__)


class Token(NamedTuple):
    kind: str       # "number", "name", "op" o "end"
    text: str
    position: int


_TOKEN_RE = re.compile(
    r"""
    (?P<number>(?:\d+\.?\d*|\.\d+)(?:E[+\-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<op>\*\*|[-+*/%(),])
    """,
    re.VERBOSE,
)


def tokenize(text: str) -> list:
    tokens = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ExpressionSyntaxError(f"unexpected character {text[pos]!r} at {pos}")
        tokens.append(Token(match.lastgroup, match.group(), pos))
        pos = match.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


class _Parser:
    """Descenso recursivo que evalúa mientras reduce.

    Precedencia, de menor a mayor: ``+ -``, ``* / %`` (y multiplicación
    implícita), ``**`` (asociativo a la derecha), signo unario y llamadas.
    """

    def __init__(self, tokens, functions, constants, max_depth):
        self._tokens = tokens
        self._pos = 0
        self._functions = functions
        self._constants = constants
        self._max_depth = max_depth
        self._depth = 0

    def parse(self) -> float:
        if self._peek().kind == "end":
            raise ExpressionSyntaxError("empty expression")
        value = self._expression()
        tok = self._peek()
        if tok.kind != "end":
            raise ExpressionSyntaxError(f"unexpected {tok.text!r} at {tok.position}")
        return value

    # ── Navegación ───────────────────────────────────────────────

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _at_op(self, *ops) -> bool:
        tok = self._peek()
        return tok.kind == "op" and tok.text in ops

    def _expect(self, op: str):
        if not self._at_op(op):
            tok = self._peek()
            found = tok.text or "end of expression"
            raise ExpressionSyntaxError(f"expected {op!r}, found {found!r}")
        self._advance()

    @contextlib.contextmanager
    def _nested(self):
        self._depth += 1
        if self._depth > self._max_depth:
            raise InputTooLargeError(f"nesting deeper than {self._max_depth}")
        try:
            yield
        finally:
            self._depth -= 1

    # ── Gramática ────────────────────────────────────────────────

    def _expression(self) -> float:
        left = self._term()
        while self._at_op("+", "-"):
            op = self._advance().text
            right = self._term()
            left = left + right if op == "+" else left - right
        return left

    def _term(self) -> float:
        left = self._power()
        while True:
            if self._at_op("*", "/", "%"):
                op = self._advance().text
                right = self._power()
                left = _apply_multiplicative(op, left, right)
            elif self._starts_implicit_factor():
                left = left * self._power()
            else:
                return left

    def _starts_implicit_factor(self) -> bool:
        tok = self._peek()
        if tok.kind == "name" or (tok.kind == "op" and tok.text == "("):
            return True
        # "(2)3" sí; "1.2 .3" no
        previous = self._tokens[self._pos - 1]
        return tok.kind == "number" and previous.text == ")"

    def _power(self) -> float:
        base = self._unary()
        if self._at_op("**"):
            self._advance()
            with self._nested():
                exponent = self._power()
            return power(base, exponent)
        return base

    def _unary(self) -> float:
        if self._at_op("-", "+"):
            op = self._advance().text
            with self._nested():
                value = self._unary()
            return -value if op == "-" else value
        return self._primary()

    def _primary(self) -> float:
        tok = self._advance()

        if tok.kind == "number":
            return float(tok.text)

        if tok.kind == "op" and tok.text == "(":
            with self._nested():
                value = self._expression()
            self._expect(")")
            return value

        if tok.kind == "name":
            return self._name(tok)

        found = tok.text or "end of expression"
        raise ExpressionSyntaxError(f"unexpected {found!r} at {tok.position}")

    def _name(self, tok: Token) -> float:
        name = tok.text

        if name in self._functions:
            if not self._at_op("("):
                raise OperandTypeError(f"{name} is a function, not a value")
            self._advance()
            with self._nested():
                args = self._arguments()
            arity = PRIMITIVE_ARITY.get(name, 1)
            if len(args) != arity:
                raise OperandTypeError(
                    f"{name} takes {arity} argument(s), got {len(args)}"
                )
            return self._functions[name](*args)

        if name in self._constants:
            if self._at_op("("):
                raise OperandTypeError(f"{name} is not a function")
            return self._constants[name]

        raise UnknownIdentifierError(f"{name} is not defined")

    def _arguments(self) -> list:
        args = []
        if self._at_op(")"):
            self._advance()
            return args
        args.append(self._expression())
        while self._at_op(","):
            self._advance()
            args.append(self._expression())
        self._expect(")")
        return args


def _apply_multiplicative(op: str, left: float, right: float) -> float:
    if op == "*":
        return left * right
    if right == 0:
        raise DivisionByZeroError(f"{left!r} {op} 0")
    if op == "/":
        return left / right
    try:
        return math.fmod(left, right)
    except ValueError:
        return math.nan


class FormulaEvaluator:
    """Transforma expresiones de UI y evalúa su valor numérico."""

    MAX_EXPRESSION_LENGTH = 1000
    MAX_NESTING_DEPTH = 64

    def __init__(self, provider: MathProvider = None):
        self._provider = provider if provider is not None else MathProvider()
        self._functions = self._provider.build_namespace()
        self._constants = self._provider.build_constants()

    def canonicalize(
        self,
        expression: str,
        angle_mode: AngleMode = AngleMode.RADIANS,
        last_answer: float = 0.0,
    ) -> str:
        self._check_size(expression)
        return normalize(expression, angle_mode, last_answer)

    def evaluate(
        self,
        expression: str,
        angle_mode: AngleMode = AngleMode.RADIANS,
        last_answer: float = 0.0,
    ) -> float:
        """Evalúa la expresión de UI y devuelve un ``float``.

        NaN e infinitos son resultados válidos.

        Raises:
            DivisionByZeroError: divisor nulo durante la evaluación.
            ExpressionSyntaxError: expresión mal formada.
            UnknownIdentifierError: función o constante desconocida.
            OperandTypeError: operando de tipo incorrecto.
            InputTooLargeError: expresión demasiado larga o anidada.
        """
        canonical = self.canonicalize(expression, angle_mode, last_answer)
        logger.debug("canonical form of %r: %r", expression, canonical)
        return self.evaluate_canonical(canonical)

    def evaluate_canonical(self, text: str) -> float:
        parser = _Parser(
            tokenize(text),
            self._functions,
            self._constants,
            self.MAX_NESTING_DEPTH,
        )
        return parser.parse()

    def _check_size(self, expression: str):
        if len(expression) > self.MAX_EXPRESSION_LENGTH:
            raise InputTooLargeError(
                f"expression longer than {self.MAX_EXPRESSION_LENGTH} characters"
            )
