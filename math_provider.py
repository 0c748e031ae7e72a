"""Registro de funciones y constantes de la calculadora científica."""

import enum
import functools
import math

from mpmath import mp


class AngleMode(enum.Enum):
    DEGREES = "deg"
    RADIANS = "rad"

    @property
    def label(self) -> str:
        return "DEG" if self is AngleMode.DEGREES else "RAD"

    def toggled(self) -> "AngleMode":
        if self is AngleMode.DEGREES:
            return AngleMode.RADIANS
        return AngleMode.DEGREES


# ── Constantes ───────────────────────────────────────────────────

CONSTANTS = {
    "π": math.pi,
    "e": math.e,
}

# Nombres con los que se muestran los resultados no finitos; el
# evaluador los acepta para poder seguir editando un resultado.
NON_FINITE_NAMES = {
    "NaN": math.nan,
    "Infinity": math.inf,
}

# ── Funciones de superficie (las que escribe el usuario) ─────────

TRIG_FUNCTIONS = {"sin": "sin", "cos": "cos", "tan": "tan"}
INVERSE_TRIG_FUNCTIONS = {"arcsin": "asin", "arccos": "acos", "arctan": "atan"}
LOG_FUNCTIONS = {"ln": "log", "log": "log10"}
FIXED_BASE_POWERS = {"pow10": 10.0, "powE": math.e}

SURFACE_FUNCTIONS = (
    tuple(TRIG_FUNCTIONS)
    + tuple(INVERSE_TRIG_FUNCTIONS)
    + ("log", "ln", "sqrt", "pow10", "powE")
)

# Primitivas del evaluador con más de un argumento
PRIMITIVE_ARITY = {"pow": 2}

FACTORIAL_LIMIT = 170


def degrees_to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def radians_to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def _ieee(fn):
    """Devuelve NaN/∞ en lugar de lanzar, como en aritmética IEEE-754."""

    @functools.wraps(fn)
    def wrapped(x):
        try:
            return fn(x)
        except OverflowError:
            return math.inf
        except ValueError:
            return math.nan

    return wrapped


def _log_of(fn):
    def wrapped(x):
        if x == 0:
            return -math.inf
        return fn(x)

    return _ieee(wrapped)


def power(base: float, exponent: float) -> float:
    """Potencia real: desbordamiento → ±∞, dominio inválido → NaN."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # 0 elevado a exponente negativo
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def factorial(x: float) -> float:
    """Factorial real.

    Negativos y NaN dan NaN. Los enteros se calculan como producto exacto;
    los no enteros usan la generalización continua Γ(x + 1) de mpmath.
    """
    if math.isnan(x) or x < 0:
        return math.nan
    if math.isinf(x):
        return math.inf
    if x == int(x):
        if x > FACTORIAL_LIMIT:
            return math.inf
        return float(math.factorial(int(x)))
    with mp.workdps(30):
        value = mp.factorial(mp.mpf(x))
    try:
        return float(value)
    except OverflowError:
        return math.inf


class MathProvider:
    """Provee las primitivas del evaluador en un namespace cerrado."""

    def build_namespace(self) -> dict:
        return {
            "sin": _ieee(math.sin),
            "cos": _ieee(math.cos),
            "tan": _ieee(math.tan),
            "asin": _ieee(math.asin),
            "acos": _ieee(math.acos),
            "atan": _ieee(math.atan),
            "radians": degrees_to_radians,
            "degrees": radians_to_degrees,
            "log": _log_of(math.log),
            "log10": _log_of(math.log10),
            "sqrt": _ieee(math.sqrt),
            "pow": power,
        }

    def build_constants(self) -> dict:
        return dict(NON_FINITE_NAMES)

    def surface_function(self, name: str, mode: AngleMode):
        """Función tal como la ve el usuario, según el modo angular."""
        ns = self.build_namespace()

        if name in TRIG_FUNCTIONS:
            fn = ns[TRIG_FUNCTIONS[name]]
            if mode is AngleMode.DEGREES:
                return lambda x: fn(degrees_to_radians(x))
            return fn

        if name in INVERSE_TRIG_FUNCTIONS:
            fn = ns[INVERSE_TRIG_FUNCTIONS[name]]
            if mode is AngleMode.DEGREES:
                return lambda x: radians_to_degrees(fn(x))
            return fn

        if name in LOG_FUNCTIONS:
            return ns[LOG_FUNCTIONS[name]]

        if name in FIXED_BASE_POWERS:
            base = FIXED_BASE_POWERS[name]
            return lambda x: power(base, x)

        if name == "sqrt":
            return ns["sqrt"]

        raise KeyError(name)
