"""
Interfaz gráfica de la calculadora científica.

Usa tkinter. Cada botón o tecla se traduce a un token lógico que se
entrega a CalculatorEngine.press; después se refrescan los dos campos.
"""

import tkinter as tk
from tkinter import font as tkfont

from calculator_engine import CalculatorEngine


# Teclas que se envían tal cual al motor
_CHAR_KEYS = frozenset("0123456789.+-*/%()^")

_KEYSYM_TOKENS = {
    "Return": "Enter",
    "KP_Enter": "Enter",
    "Escape": "Escape",
    "BackSpace": "Backspace",
}


def token_for_key(char: str, keysym: str):
    """Token lógico para una pulsación de teclado, o None si se ignora."""
    if keysym in _KEYSYM_TOKENS:
        return _KEYSYM_TOKENS[keysym]
    if char in _CHAR_KEYS and char:
        return char
    return None


class CalculatorApp:
    """Ventana principal de la calculadora científica."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "toggle_on":  "#A6E3A1",
        "toggle_off": "#585B70",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
    }

    # ── Botones científicos ──────────────────────────────────────
    #  (texto_normal, token_normal, texto_inv, token_inv)

    SCIENCE_BUTTONS = [
        ("\u221A",   "sqrt",  "n!",              "factorial"),  # √   / n!
        ("sin",      "sin",   "sin\u207B\u00B9", "arcsin"),     # sin / asin
        ("cos",      "cos",   "cos\u207B\u00B9", "arccos"),     # cos / acos
        ("tan",      "tan",   "tan\u207B\u00B9", "arctan"),     # tan / atan
        ("ln",       "ln",    "e\u02E3",       "powE"),       # ln  / eˣ
        ("log",      "log",   "10\u02E3",      "pow10"),      # log / 10ˣ
    ]

    MEMORY_BUTTONS = ["MC", "MR", "M+"]

    # ── Teclado principal ────────────────────────────────────────
    #  Cada fila es una lista de (texto, token, tipo_color)

    KEYPAD = [
        [("^",  "^",  "func"), ("\u03C0", "\u03C0", "func"),
         ("e",  "e",  "func"), ("(", "(", "func"), (")", ")", "func")],

        [("AC", "AC", "special"), ("\u232B", "del", "special"),
         ("%",  "%",  "func"),    ("\u00F7", "/", "op")],

        [("7",  "7",  "num"), ("8", "8", "num"),
         ("9",  "9",  "num"), ("\u00D7", "*", "op")],

        [("4",  "4",  "num"), ("5", "5", "num"),
         ("6",  "6",  "num"), ("\u2212", "-", "op")],

        [("1",  "1",  "num"), ("2", "2", "num"),
         ("3",  "3",  "num"), ("+", "+", "op")],

        [("0",  "0",  "num"), (".", ".", "num"),
         ("ans", "ans", "func"), ("=", "=", "equals")],
    ]

    def __init__(self, root: tk.Tk, engine=None):
        self.root = root
        self.root.title("Calculadora Cient\u00EDfica")
        self.root.configure(bg=self.C["bg"])
        self.root.resizable(False, False)

        self.engine = engine if engine is not None else CalculatorEngine()
        self._inv_mode = False

        self._init_fonts()
        self._create_display()
        self._create_toggle_bar()
        self._create_science_panel()
        self._create_keypad()
        self._bind_keyboard()
        self._refresh()

    def _init_fonts(self):
        self._f_expr   = tkfont.Font(family="Consolas", size=16)
        self._f_result = tkfont.Font(family="Consolas", size=22, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_func   = tkfont.Font(family="Segoe UI", size=12)
        self._f_small  = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        self.expr_var = tk.StringVar()
        self.result_var = tk.StringVar()

        for var, fnt, fg in (
            (self.expr_var, self._f_expr, self.C["expr_fg"]),
            (self.result_var, self._f_result, self.C["result_fg"]),
        ):
            tk.Entry(
                frame, textvariable=var, state="readonly",
                font=fnt, fg=fg, readonlybackground=self.C["display_bg"],
                relief="flat", justify="right", bd=0,
            ).pack(fill="x", pady=(2, 2))

    # ── Barra de toggles (DEG/RAD · INV · memoria) ──────────────

    def _create_toggle_bar(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=(2, 2))

        self.angle_btn = tk.Button(
            frame, font=self._f_small, width=6,
            bg=self.C["toggle_on"], fg=self.C["bg"],
            activebackground=self.C["toggle_on"], relief="flat",
            command=lambda: self._press("mode"),
        )
        self.angle_btn.pack(side="left", padx=(0, 4))

        self.inv_btn = tk.Button(
            frame, text="INV", font=self._f_small, width=6,
            bg=self.C["toggle_off"], fg=self.C["special_fg"],
            activebackground=self.C["toggle_off"], relief="flat",
            command=self._toggle_inv,
        )
        self.inv_btn.pack(side="left")

        for token in reversed(self.MEMORY_BUTTONS):
            tk.Button(
                frame, text=token, font=self._f_small, width=4,
                bg=self.C["special"], fg=self.C["special_fg"],
                activebackground=self.C["func"], relief="flat",
                command=lambda t=token: self._press(t),
            ).pack(side="right", padx=(4, 0))

    # ── Panel de funciones científicas ───────────────────────────

    def _create_science_panel(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=2)
        for col in range(len(self.SCIENCE_BUTTONS)):
            frame.columnconfigure(col, weight=1, uniform="sci")

        self._sci_buttons: list[tk.Button] = []

        for col, spec in enumerate(self.SCIENCE_BUTTONS):
            btn = tk.Button(
                frame, text=spec[0], font=self._f_func,
                bg=self.C["func"], fg=self.C["func_fg"],
                activebackground=self.C["special"], relief="flat",
                command=lambda c=col: self._on_science(c),
            )
            btn.grid(row=0, column=col, sticky="nsew", padx=2, pady=2,
                     ipady=6)
            self._sci_buttons.append(btn)

    # ── Teclado numérico / operadores ────────────────────────────

    def _create_keypad(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, token, kind) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_btn,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda t=token: self._press(t),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        # Asignar columnas extra al último botón (generalmente '=')
        spans[-1] += extra
        return spans

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keypress)

    def _on_keypress(self, event):
        token = token_for_key(event.char, event.keysym)
        if token is None:
            return None
        self._press(token)
        return "break"

    # ── Acciones ─────────────────────────────────────────────────

    def _press(self, token: str):
        self.engine.press(token)
        self._refresh()

    def _on_science(self, col: int):
        spec = self.SCIENCE_BUTTONS[col]
        self._press(spec[3] if self._inv_mode else spec[1])

    def _toggle_inv(self):
        self._inv_mode = not self._inv_mode
        if self._inv_mode:
            self.inv_btn.config(bg=self.C["toggle_on"], fg=self.C["bg"])
        else:
            self.inv_btn.config(bg=self.C["toggle_off"],
                                fg=self.C["special_fg"])
        for col, spec in enumerate(self.SCIENCE_BUTTONS):
            self._sci_buttons[col].config(text=spec[2] if self._inv_mode else spec[0])

    def _refresh(self):
        self.expr_var.set(self.engine.expression)
        self.result_var.set(self.engine.result)
        self.angle_btn.config(text=self.engine.angle_mode.label)
