"""Punto de entrada de la calculadora científica."""

import logging
import tkinter as tk

from calculator_engine import CalculatorEngine
from calculator_ui import CalculatorApp
from math_provider import AngleMode


DEFAULT_ANGLE_MODE = AngleMode.DEGREES
LOG_LEVEL = logging.WARNING
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    root = tk.Tk()
    root.geometry("420x620")
    root.minsize(380, 580)
    engine = CalculatorEngine(angle_mode=DEFAULT_ANGLE_MODE)
    CalculatorApp(root, engine=engine)
    root.mainloop()


if __name__ == "__main__":
    main()
