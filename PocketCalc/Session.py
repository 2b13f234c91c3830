# Session.py
"""""
Calculator session: everything the keypad changes between two evaluations.

- CalculatorState is an immutable snapshot (expression, display value, overwrite flag, open '(' count)
- Undo / redo are tuples of snapshots, newest first; every state-changing key pushes one
- History holds "<expression> = <result>" entries, newest first
- While the display shows an error text only 'AC' is accepted

The UI only forwards key labels to press() and renders the session afterwards.
"""""

import logging
import math
import re
from collections import namedtuple

from . import CurrencyEngine
from . import Formatter
from . import MathEngine
from . import ScientificEngine
from . import UnitEngine
from . import config_manager as config_manager
from . import error as E
from .ScientificEngine import AngleMode

logger = logging.getLogger(__name__)


CalculatorState = namedtuple("CalculatorState", ["expression", "display_value", "overwrite", "open_paren_count"])

INITIAL_STATE = CalculatorState(expression="", display_value="0", overwrite=True, open_paren_count=0)

MODES = ["simple", "scientific", "currency", "units"]

DIGITS = ["0", "1", "2", "3", "4", "5", "6", "7", "8", "9"]
OPERATOR_KEYS = {"+": "+", "-": "-", "×": "×", "÷": "÷", "xʸ": "^"}
FUNCTION_KEYS = {
    "sin": "sin", "cos": "cos", "tan": "tan",
    "csc": "csc", "sec": "sec", "cot": "cot",
    "log": "log", "ln": "ln",
    "√": "√", "|x|": "abs",
}
CONSTANT_KEYS = {
    "π": ScientificEngine.CONSTANTS["PI"],
    "e": ScientificEngine.CONSTANTS["E"],
    "φ": ScientificEngine.CONSTANTS["PHI"],
}

KEYS = (
    ["AC", "DEL", "+/-", "=", "%", ".", "!", "x²", "1/x", "(", ")"]
    + DIGITS + list(OPERATOR_KEYS) + list(FUNCTION_KEYS) + list(CONSTANT_KEYS)
)

TRAILING_OPERATOR = re.compile(r"\s[+\-×÷^]\s$")
LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
SIMPLE_FRACTION = re.compile(r"^\d+/\d+$", re.ASCII)


def parse_display(text):
    """Numeric value of a display text ('1,234.5', '1/3', '2e5', '12abc' -> 12), or None."""
    text = text.replace(",", "").strip()
    if "/" in text:
        numerator, _, denominator = text.partition("/")
        try:
            numerator, denominator = float(numerator), float(denominator)
        except ValueError:
            return None
        if denominator == 0:
            return None
        return numerator / denominator

    match = LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(0))


class CalculatorSession:

    def __init__(self, angle_mode=AngleMode.DEG, undo_limit=50, history_limit=None, fractions=True):
        self.state = INITIAL_STATE
        self.angle_mode = AngleMode(angle_mode)
        self.mode = "simple"
        self.fractions = fractions
        self.undo_limit = undo_limit
        self.history_limit = history_limit
        self.history = []
        self.undo_stack = ()
        self.redo_stack = ()

        # Converter selections
        self.currency_from = "USD"
        self.currency_to = "EUR"
        self.unit_category = "length"
        self.unit_from = "m"
        self.unit_to = "ft"

    @classmethod
    def from_settings(cls, settings=None):
        if settings is None:
            settings = config_manager.load_setting_value("all")
        return cls(
            angle_mode=settings.get("angle_mode", "deg"),
            undo_limit=settings.get("undo_limit", 50),
            history_limit=settings.get("history_limit") or None,
            fractions=settings.get("fractions", True),
        )

    # --- Snapshot accessors ---
    @property
    def expression(self):
        return self.state.expression

    @property
    def display_value(self):
        return self.state.display_value

    @property
    def overwrite(self):
        return self.state.overwrite

    @property
    def open_paren_count(self):
        return self.state.open_paren_count

    @property
    def is_error(self):
        return E.is_error_text(self.state.display_value)

    def _update(self, **changes):
        self.state = self.state._replace(**changes)

    # --- Undo / Redo ---
    def _save_state(self):
        self.undo_stack = ((self.state,) + self.undo_stack)[:self.undo_limit]
        self.redo_stack = ()

    def undo(self):
        if not self.undo_stack:
            return False
        self.redo_stack = (self.state,) + self.redo_stack
        self.state = self.undo_stack[0]
        self.undo_stack = self.undo_stack[1:]
        return True

    def redo(self):
        if not self.redo_stack:
            return False
        self.undo_stack = (self.state,) + self.undo_stack
        self.state = self.redo_stack[0]
        self.redo_stack = self.redo_stack[1:]
        return True

    # --- Helpers ---
    def _pending_operand(self):
        """The display value still waiting to be appended to the expression.

        Right after ')' the display shows a number that is already part of the
        group, so nothing is pending. A fraction (from 1/x, a paste or the
        history) is bracketed so that 2 ÷ 1/3 stays 2 ÷ (1/3).
        """
        if self.overwrite and self.expression.endswith(")"):
            return ""
        if "/" in self.display_value:
            return f"({self.display_value})"
        return self.display_value

    def _record(self, equation, result):
        self.history.insert(0, f"{''.join(equation.split())} = {result}")
        if self.history_limit:
            del self.history[self.history_limit:]

    def _format(self, value):
        return Formatter.format_result(value, fractions=self.fractions)

    # --- Keypad ---
    def press(self, value):
        """Apply one key. Returns False when the key was ignored."""

        # Only AC clears an error
        if self.is_error and value != "AC":
            return False

        if value == "DEG" or value == "RAD":
            self.toggle_angle_mode()
            return True

        if value not in KEYS:
            logger.warning("Unknown key: %r", value)
            return False

        # Save state before any modification
        self._save_state()

        if value == "AC":
            self.state = INITIAL_STATE

        elif value == "DEL":
            if self.display_value != "0":
                new_value = self.display_value[:-1]
                if new_value == "" or new_value == "-":
                    new_value = "0"
                self._update(display_value=new_value)
                if new_value == "0":
                    self._update(overwrite=True)

        elif value == "+/-":
            if self.display_value == "0":
                return True
            if self.display_value.startswith("-"):
                self._update(display_value=self.display_value[1:])
            else:
                self._update(display_value="-" + self.display_value)

        elif value == "=":
            self._evaluate()

        elif value == "%":
            self._percent()

        elif value in OPERATOR_KEYS:
            operator = OPERATOR_KEYS[value]
            if self.overwrite and TRAILING_OPERATOR.search(self.expression):
                # Replace the operator that was just entered
                self._update(expression=self.expression[:-3] + f" {operator} ")
            else:
                self._update(expression=self.expression + self._pending_operand() + f" {operator} ")
            self._update(overwrite=True)

        elif value == ".":
            if "." not in self.display_value:
                if self.overwrite:
                    self._update(display_value="0.", overwrite=False)
                else:
                    self._update(display_value=self.display_value + ".")

        elif value in FUNCTION_KEYS:
            # A typed number in front of the function multiplies it: 2sin( -> 2*sin(
            prefix = "" if self.overwrite else self.display_value.lstrip("0")
            self._update(
                expression=self.expression + prefix + FUNCTION_KEYS[value] + "(",
                display_value="0",
                overwrite=True,
                open_paren_count=self.open_paren_count + 1,
            )

        elif value == "!":
            number = parse_display(self.display_value)
            result = ScientificEngine.factorial(number) if number is not None else float("nan")
            if result != result or result in (float("inf"), float("-inf")):
                self._update(display_value=E.DISPLAY_MESSAGES[E.ErrorKind.INVALID_INPUT])
            else:
                self._update(display_value=Formatter.format_result(result))
            self._update(overwrite=True)

        elif value == "x²":
            operand = self._pending_operand()
            if operand.startswith("-"):
                operand = f"({operand})"
            self._update(expression=self.expression + operand + "^(2)", overwrite=True)

        elif value == "1/x":
            number = parse_display(self.display_value)
            if number == 0:
                self._update(display_value=E.DISPLAY_MESSAGES[E.ErrorKind.DIVISION_BY_ZERO], overwrite=True)
            elif number is not None:
                self._update(display_value=self._format(1 / number), overwrite=True)

        elif value == "(":
            if self.overwrite:
                self._update(expression=self.expression + "(")
            else:
                self._update(expression=self.expression + self.display_value.lstrip("0") + "*(")
            self._update(display_value="0", overwrite=True, open_paren_count=self.open_paren_count + 1)

        elif value == ")":
            if self.open_paren_count > 0:
                self._update(
                    expression=self.expression + self._pending_operand() + ")",
                    overwrite=True,
                    open_paren_count=self.open_paren_count - 1,
                )

        elif value in CONSTANT_KEYS:
            self._update(display_value=repr(CONSTANT_KEYS[value]), overwrite=True)

        else:  # digits
            if self.overwrite:
                self._update(display_value=value, overwrite=False)
            else:
                self._update(display_value=value if self.display_value == "0" else self.display_value + value)

        return True

    def _evaluate(self):
        final_expression = self.expression + self._pending_operand()
        if self.open_paren_count > 0:
            final_expression += ")" * self.open_paren_count

        result = MathEngine.evaluate(final_expression, self.angle_mode)
        formatted_result = self._format(result)

        # Only successful results go to the history
        if not result.is_error:
            self._record(final_expression, formatted_result)

        self.state = CalculatorState(expression="", display_value=formatted_result, overwrite=True, open_paren_count=0)

    def _percent(self):
        percent_value = parse_display(self.display_value)
        if percent_value is None:
            return

        trimmed_expression = self.expression.strip()
        if trimmed_expression == "":
            self._update(display_value=Formatter.format_result(percent_value / 100, fractions=False), overwrite=True)
            return

        operator = trimmed_expression[-1]
        base_expression = trimmed_expression[:-1].strip()

        if operator not in ("+", "-", "×", "÷"):
            self._update(display_value=Formatter.format_result(percent_value / 100, fractions=False), overwrite=True)
            return

        base_result = MathEngine.evaluate(base_expression, self.angle_mode)
        if base_result.is_error:
            self._update(expression="", display_value=Formatter.format_result(base_result), overwrite=True)
            return

        base_value = base_result.value
        if operator == "+" or operator == "-":
            percentage_amount = (percent_value / 100) * base_value
            percent_result = base_value + percentage_amount if operator == "+" else base_value - percentage_amount
        else:
            percentage_decimal = percent_value / 100
            percent_result = base_value * percentage_decimal if operator == "×" else ScientificEngine.divide(base_value, percentage_decimal)

        result_string = self._format(percent_result)
        if not E.is_error_text(result_string):
            self._record(f"{base_expression} {operator} {self.display_value}%", result_string)
        self.state = CalculatorState(expression="", display_value=result_string, overwrite=True, open_paren_count=0)

    # --- Other session actions ---
    def toggle_angle_mode(self):
        self.angle_mode = AngleMode.RAD if self.angle_mode == AngleMode.DEG else AngleMode.DEG
        return self.angle_mode

    def paste(self, text):
        """Put a pasted number ('1,234', '1.2e5', '3/4') on the display. Refused in error state."""
        if self.is_error:
            return False

        sanitized = text.replace(",", "").strip()
        if sanitized == "":
            return False

        # Only what the tokenizer reads back as one number; float() would also take '1_000' or 'inf'
        if LEADING_NUMBER.fullmatch(sanitized):
            is_number = math.isfinite(float(sanitized))
        else:
            is_number = SIMPLE_FRACTION.match(sanitized) is not None

        if not is_number:
            return False

        self._save_state()
        self._update(display_value=sanitized, overwrite=False)
        return True

    def select_history(self, entry):
        """Load the result part of a history entry onto the display."""
        self._save_state()
        _, separator, result = entry.partition(" = ")
        if not separator or not result:
            return False
        self.state = CalculatorState(expression="", display_value=result, overwrite=True, open_paren_count=self.open_paren_count)
        return True

    def clear_history(self):
        self.history = []

    def toggle_mode(self):
        """simple <-> scientific; from a converter it goes back to simple."""
        self.mode = "scientific" if self.mode == "simple" else "simple"
        return self.mode

    def toggle_currency_mode(self):
        self.mode = "simple" if self.mode == "currency" else "currency"
        return self.mode

    def toggle_units_mode(self):
        self.mode = "simple" if self.mode == "units" else "units"
        return self.mode

    def mode_label(self):
        """Text for the mode button: the mode it switches to."""
        if self.mode == "currency" or self.mode == "units":
            return "Calculator"
        if self.mode == "simple":
            return "Scientific"
        return "Simple"

    # --- Converters ---
    def display_amount(self):
        """Display value as a number for the converters; 0 for errors and unparsable text."""
        if self.is_error:
            return 0
        amount = parse_display(self.display_value)
        return 0 if amount is None else amount

    def swap_currencies(self):
        self.currency_from, self.currency_to = self.currency_to, self.currency_from

    def swap_units(self):
        self.unit_from, self.unit_to = self.unit_to, self.unit_from

    def change_unit_category(self, category):
        self.unit_category = category
        units = list(UnitEngine.UNITS[category])
        self.unit_from = units[0]
        self.unit_to = units[1] if len(units) > 1 else units[0]

    def converted_currency(self, rates=None):
        return CurrencyEngine.convert_currency(self.display_amount(), self.currency_from, self.currency_to, rates)

    def converted_unit(self):
        return UnitEngine.convert_unit(self.display_amount(), self.unit_from, self.unit_to, self.unit_category)
