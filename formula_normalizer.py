"""Normalización de expresiones de UI a la forma canónica del evaluador.

Los pasos se aplican en orden fijo; cada sustitución reconoce nombres
completos, de modo que una letra dentro de otro identificador (p. ej. la
``e`` de ``mean``) nunca se reemplaza.
"""

import math
import re

from math_provider import (
    CONSTANTS,
    FIXED_BASE_POWERS,
    INVERSE_TRIG_FUNCTIONS,
    LOG_FUNCTIONS,
    TRIG_FUNCTIONS,
    AngleMode,
)

_NOT_AFTER_NAME = r"(?<![A-Za-z_])"

# El exponente de la notación científica es siempre "E" (1E+21); una "e"
# minúscula suelta es siempre la constante
_E_RE = re.compile(rf"{_NOT_AFTER_NAME}e(?![A-Za-z_])")
_ANS_RE = re.compile(rf"{_NOT_AFTER_NAME}ans(?![A-Za-z_])")
_TRIG_CALL_RE = re.compile(
    rf"{_NOT_AFTER_NAME}(arcsin|arccos|arctan|sin|cos|tan)\("
)
_LOG_CALL_RE = re.compile(rf"{_NOT_AFTER_NAME}(ln|log)\(")
_POWER_CALL_RE = re.compile(rf"{_NOT_AFTER_NAME}(pow10|powE)\(")


def normalize(expression: str, angle_mode: AngleMode, last_answer: float = 0.0) -> str:
    """Devuelve la forma canónica de ``expression``."""
    expr = expression.strip()

    expr = expr.replace("π", _literal(CONSTANTS["π"]))
    expr = _replace_euler(expr)
    expr = _ANS_RE.sub(lambda _m: _literal(last_answer), expr)
    expr = expr.replace("^", "**")
    expr = _rewrite_trig_calls(expr, angle_mode)
    expr = _LOG_CALL_RE.sub(lambda m: LOG_FUNCTIONS[m.group(1)] + "(", expr)
    expr = _POWER_CALL_RE.sub(
        lambda m: f"pow({_base_literal(FIXED_BASE_POWERS[m.group(1)])}, ", expr
    )

    return expr


def number_literal(value: float) -> str:
    """Texto que el evaluador vuelve a leer como exactamente ``value``."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(float(value)).upper()


def _literal(value: float) -> str:
    return f"({number_literal(value)})"


def _base_literal(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return _literal(value)


def _replace_euler(expr: str) -> str:
    return _E_RE.sub(lambda _m: _literal(CONSTANTS["e"]), expr)


def _rewrite_trig_calls(expr: str, angle_mode: AngleMode) -> str:
    degrees = angle_mode is AngleMode.DEGREES

    # De derecha a izquierda: las posiciones de llamadas anteriores no cambian
    for match in reversed(list(_TRIG_CALL_RE.finditer(expr))):
        name = match.group(1)
        if name in TRIG_FUNCTIONS:
            primitive = TRIG_FUNCTIONS[name]
            head, tail = (f"{primitive}(radians(", ")") if degrees else (f"{primitive}(", "")
        else:
            primitive = INVERSE_TRIG_FUNCTIONS[name]
            head, tail = (f"degrees({primitive}(", ")") if degrees else (f"{primitive}(", "")

        close = _matching_paren(expr, match.end() - 1)
        if close is None:
            # Llamada sin cerrar: el envoltorio también queda abierto
            expr = expr[:match.start()] + head + expr[match.end():]
        else:
            expr = (
                expr[:match.start()]
                + head
                + expr[match.end():close + 1]
                + tail
                + expr[close + 1:]
            )

    return expr


def _matching_paren(expr: str, open_index: int):
    depth = 0
    for i in range(open_index, len(expr)):
        if expr[i] == "(":
            depth += 1
        elif expr[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    return None
