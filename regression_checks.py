from calculator_engine import CalculatorEngine, format_result
from calculator_errors import DivisionByZeroError, CalculatorError
from formula_evaluator import FormulaEvaluator
from math_provider import AngleMode, MathProvider
import math
import sys


def _evaluate(expr: str, mode: AngleMode = AngleMode.DEGREES, last_answer: float = 0.0) -> str:
	try:
		value = FormulaEvaluator().evaluate(expr, mode, last_answer)
	except CalculatorError as exc:
		return f"{type(exc).__name__}: {exc.display_message}"
	return format_result(value)


def _press_all(engine: CalculatorEngine, tokens) -> CalculatorEngine:
	for token in tokens:
		engine.press(token)
	return engine


def inspect_expression(expr: str, *, mode: AngleMode = AngleMode.DEGREES) -> None:
	"""Imprime la forma canónica y el resultado de una expresión."""
	evaluator = FormulaEvaluator()

	print("Expression inspection")
	print(f"expr:      {expr}")
	print(f"mode:      {mode.label}")
	try:
		print(f"canonical: {evaluator.canonicalize(expr, mode)}")
	except CalculatorError as exc:
		print(f"canonical: ({type(exc).__name__})")
	print(f"result:    {_evaluate(expr, mode)}")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	for expr, expected in (
		("3+4*2", "11"),
		("(3+4)*2", "14"),
		("2^3^2", "512"),
		("10/05", "2"),
		("sqrt(-1)", "NaN"),
		("pow10(400)", "Infinity"),
	):
		expected_actual.append((expr, expected, _evaluate(expr)))

	expected_actual.append((
		"sin(30) [DEG]",
		"0.5",
		_evaluate("sin(30)", AngleMode.DEGREES),
	))
	expected_actual.append((
		"sin(30) [RAD]",
		"-0.988031624092862",
		_evaluate("sin(30)", AngleMode.RADIANS),
	))
	expected_actual.append((
		"ans*3 with ans=4",
		"12",
		_evaluate("ans*3", last_answer=4.0),
	))

	# El evaluador debe coincidir con las funciones tal como las ve el usuario
	provider = MathProvider()
	for name, arg in (("sin", 30), ("arcsin", 1), ("cos", 60), ("log", 1000), ("pow10", 2)):
		for mode in AngleMode:
			expected_actual.append((
				f"{name}({arg}) [{mode.label}] matches registry",
				format_result(provider.surface_function(name, mode)(arg)),
				_evaluate(f"{name}({arg})", mode),
			))

	for expr in ("5/0", "5/(3-3)"):
		try:
			FormulaEvaluator().evaluate(expr)
		except DivisionByZeroError:
			caught = True
		else:
			caught = False
		checks.append((f"{expr} raises DivisionByZeroError", caught))

	canonical_mean = FormulaEvaluator().canonicalize("mean(e)+e")
	checks.append((
		"euler substitution keeps identifiers intact",
		canonical_mean.startswith("mean("),
	))

	engine = _press_all(CalculatorEngine(), ["3", "+", "4", "*", "2", "="])
	checks.append(("evaluate shows 11", engine.result == "11"))
	engine.press("5")
	checks.append(("digit after result starts a new expression", engine.expression == "5"))

	engine = CalculatorEngine()
	engine.press("del")
	checks.append(("delete on empty buffer is a no-op", engine.expression == ""))

	engine = _press_all(CalculatorEngine(), ["MC", "7", "M+", "MR"])
	checks.append(("memory add then recall", engine.memory == 7 and engine.expression == "7"))

	for digits, expected in (("5", "120"), ("0", "1")):
		engine = _press_all(CalculatorEngine(), [digits, "factorial"])
		expected_actual.append((f"{digits}!", expected, engine.result))
	engine = _press_all(CalculatorEngine(), ["-", "3", "factorial"])
	checks.append(("factorial of negative is NaN", math.isnan(engine.last_answer)))

	engine = _press_all(CalculatorEngine(), ["sin", "3", "0", ")"])
	first = engine.evaluate().value
	engine = _press_all(CalculatorEngine(), ["mode", "mode", "sin", "3", "0", ")"])
	second = engine.evaluate().value
	checks.append(("double mode toggle restores sin(30)", first == second))

	failed = [name for name, ok in checks if not ok]
	failed += [label for label, expected, actual in expected_actual if expected != actual]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_checks.py
	#   python regression_checks.py --inspect "sin(30)+2π"
	#   python regression_checks.py --inspect "arcsin(1)" --mode rad
	if "--inspect" in sys.argv:
		try:
			expr = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing expression after --inspect")

		mode = AngleMode.DEGREES
		if "--mode" in sys.argv:
			try:
				mode = AngleMode(sys.argv[sys.argv.index("--mode") + 1])
			except (ValueError, IndexError):
				raise SystemExit("Invalid value for --mode (use deg or rad)")

		inspect_expression(expr, mode=mode)
	else:
		run_regressions()
