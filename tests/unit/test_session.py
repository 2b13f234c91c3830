"""
Tests for CalculatorSession

Checks:
1. Keypad semantics (digits, operators, parentheses, functions, special keys)
2. Error state: only AC is accepted
3. Undo / redo restore exact snapshots
4. History only records successful results
5. Paste, history selection, modes and converter helpers
"""

import pytest

from PocketCalc.ScientificEngine import AngleMode
from PocketCalc.Session import CalculatorSession, CalculatorState, INITIAL_STATE, parse_display


def press_all(session, keys):
    for key in keys:
        session.press(key)
    return session


@pytest.fixture
def session():
    return CalculatorSession()


class TestKeypad:
    """Expression building through press()"""

    def test_digits(self, session) -> None:
        press_all(session, ["1", "2"])
        assert session.display_value == "12"
        assert session.overwrite is False

    def test_leading_zero_replaced(self, session) -> None:
        press_all(session, ["0", "0", "7"])
        assert session.display_value == "7"

    def test_simple_sum(self, session) -> None:
        press_all(session, ["2", "+", "3", "="])
        assert session.display_value == "5"
        assert session.expression == ""
        assert session.history == ["2+3 = 5"]

    def test_operator_replaced(self, session) -> None:
        press_all(session, ["2", "+", "×"])
        assert session.expression == "2 × "

    def test_parentheses(self, session) -> None:
        press_all(session, ["2", "×", "(", "3", "+", "4", ")", "="])
        assert session.display_value == "14"
        assert session.history[0] == "2×(3+4) = 14"

    def test_open_parentheses_closed_on_equals(self, session) -> None:
        press_all(session, ["(", "2", "+", "3"])
        assert session.open_paren_count == 1
        session.press("=")
        assert session.display_value == "5"
        assert session.open_paren_count == 0

    def test_implicit_multiplication_before_paren(self, session) -> None:
        press_all(session, ["2", "(", "3", "="])
        assert session.display_value == "6"

    def test_unmatched_close_paren_ignored(self, session) -> None:
        press_all(session, ["5", ")"])
        assert session.expression == ""
        assert session.open_paren_count == 0

    def test_power_key(self, session) -> None:
        press_all(session, ["2", "xʸ", "1", "0", "="])
        assert session.display_value == "1024"

    def test_decimal_point(self, session) -> None:
        press_all(session, [".", "5"])
        assert session.display_value == "0.5"
        session.press(".")
        assert session.display_value == "0.5"

    def test_delete(self, session) -> None:
        press_all(session, ["1", "2", "3", "DEL"])
        assert session.display_value == "12"
        press_all(session, ["DEL", "DEL"])
        assert session.display_value == "0"
        assert session.overwrite is True

    def test_delete_negative_single_digit(self, session) -> None:
        press_all(session, ["5", "+/-", "DEL"])
        assert session.display_value == "0"

    def test_sign_toggle(self, session) -> None:
        press_all(session, ["5", "+/-"])
        assert session.display_value == "-5"
        session.press("+/-")
        assert session.display_value == "5"

    def test_sign_toggle_on_zero(self, session) -> None:
        session.press("+/-")
        assert session.display_value == "0"

    def test_all_clear(self, session) -> None:
        press_all(session, ["(", "1", "+", "AC"])
        assert session.state == INITIAL_STATE

    def test_unknown_key(self, session) -> None:
        assert session.press("foo") is False
        assert session.undo_stack == ()


class TestScientificKeys:

    def test_function_key(self, session) -> None:
        press_all(session, ["sin", "9", "0", "="])
        assert session.display_value == "1"

    def test_function_after_number_multiplies(self, session) -> None:
        press_all(session, ["2", "sin", "3", "0", "="])
        assert session.display_value == "1"

    def test_radians(self) -> None:
        session = CalculatorSession(fractions=False)
        session.press("RAD")
        assert session.angle_mode == AngleMode.RAD
        press_all(session, ["sin", "9", "0", "="])
        assert session.display_value == "0.893996663600558"

    def test_angle_toggle_does_not_touch_undo(self, session) -> None:
        session.press("DEG")
        assert session.angle_mode == AngleMode.RAD
        assert session.undo_stack == ()

    def test_square(self, session) -> None:
        press_all(session, ["5", "x²", "="])
        assert session.display_value == "25"

    def test_square_negative(self, session) -> None:
        press_all(session, ["3", "+/-", "x²", "="])
        assert session.display_value == "9"

    def test_square_group(self, session) -> None:
        press_all(session, ["(", "2", "+", "3", ")", "x²", "="])
        assert session.display_value == "25"

    def test_factorial_key(self, session) -> None:
        press_all(session, ["5", "!"])
        assert session.display_value == "120"
        assert session.overwrite is True

    def test_factorial_key_invalid(self, session) -> None:
        press_all(session, ["2", ".", "5", "!"])
        assert session.display_value == "Invalid Input"

    def test_factorial_key_overflow(self, session) -> None:
        press_all(session, ["1", "7", "1", "!"])
        assert session.display_value == "Invalid Input"

    def test_reciprocal(self, session) -> None:
        press_all(session, ["4", "1/x"])
        assert session.display_value == "1/4"

    def test_reciprocal_of_zero(self, session) -> None:
        press_all(session, ["0", "1/x"])
        assert session.display_value == "Can't divide by 0"

    def test_reciprocal_as_divisor(self, session) -> None:
        press_all(session, ["2", "÷", "3", "1/x", "="])
        assert session.display_value == "6"
        assert session.history[0] == "2÷(1/3) = 6"

    def test_reciprocal_squared(self, session) -> None:
        press_all(session, ["4", "1/x", "x²", "="])
        assert session.display_value == "1/16"

    def test_constant(self, session) -> None:
        session.press("π")
        assert session.display_value == "3.141592653589793"
        assert session.overwrite is True

    def test_abs_key(self, session) -> None:
        press_all(session, ["|x|", "5", "+/-", "="])
        assert session.display_value == "5"


class TestPercent:

    def test_plain_percent(self, session) -> None:
        press_all(session, ["5", "0", "%"])
        assert session.display_value == "0.5"

    def test_percent_add(self, session) -> None:
        press_all(session, ["2", "0", "0", "+", "1", "0", "%"])
        assert session.display_value == "220"
        assert session.history[0] == "200+10% = 220"

    def test_percent_subtract(self, session) -> None:
        press_all(session, ["2", "0", "0", "-", "1", "0", "%"])
        assert session.display_value == "180"

    def test_percent_multiply(self, session) -> None:
        press_all(session, ["2", "0", "0", "×", "1", "0", "%"])
        assert session.display_value == "20"

    def test_percent_divide(self, session) -> None:
        press_all(session, ["5", "0", "÷", "1", "0", "%"])
        assert session.display_value == "500"


class TestErrorState:

    def test_input_blocked_after_error(self, session) -> None:
        press_all(session, ["5", "÷", "0", "="])
        assert session.display_value == "Can't divide by 0"
        assert session.is_error

        assert session.press("1") is False
        assert session.display_value == "Can't divide by 0"

    def test_errors_not_in_history(self, session) -> None:
        press_all(session, ["5", "÷", "0", "="])
        assert session.history == []

    def test_all_clear_resets_error(self, session) -> None:
        press_all(session, ["5", "÷", "0", "=", "AC"])
        assert session.display_value == "0"
        assert not session.is_error

    def test_paste_refused_in_error_state(self, session) -> None:
        press_all(session, ["5", "÷", "0", "="])
        assert session.paste("12") is False


class TestUndoRedo:

    def test_undo_and_redo(self, session) -> None:
        press_all(session, ["1", "2"])
        assert session.undo() is True
        assert session.display_value == "1"
        assert session.redo() is True
        assert session.display_value == "12"

    def test_undo_restores_exact_snapshot(self, session) -> None:
        press_all(session, ["2", "+", "3"])
        before = session.state
        session.press("=")
        session.undo()
        assert session.state == before
        assert session.state == CalculatorState("2 + ", "3", False, 0)

    def test_new_input_clears_redo(self, session) -> None:
        press_all(session, ["1", "2"])
        session.undo()
        session.press("3")
        assert session.redo_stack == ()
        assert session.redo() is False

    def test_empty_stacks(self, session) -> None:
        assert session.undo() is False
        assert session.redo() is False

    def test_undo_limit(self) -> None:
        session = CalculatorSession(undo_limit=3)
        press_all(session, ["1", "2", "3", "4", "5"])
        assert len(session.undo_stack) == 3

    def test_undo_out_of_error(self, session) -> None:
        press_all(session, ["5", "÷", "0", "="])
        session.undo()
        assert session.display_value == "0"
        assert session.expression == "5 ÷ "


class TestHistory:

    def test_newest_first(self, session) -> None:
        press_all(session, ["1", "+", "1", "=", "AC", "2", "+", "2", "="])
        assert session.history == ["2+2 = 4", "1+1 = 2"]

    def test_history_limit(self) -> None:
        session = CalculatorSession(history_limit=2)
        for digit in ["1", "2", "3"]:
            press_all(session, [digit, "+", digit, "=", "AC"])
        assert session.history == ["3+3 = 6", "2+2 = 4"]

    def test_select_history(self, session) -> None:
        press_all(session, ["2", "+", "3", "=", "AC"])
        assert session.select_history(session.history[0]) is True
        assert session.display_value == "5"
        assert session.overwrite is True

    def test_select_malformed_entry(self, session) -> None:
        assert session.select_history("nonsense") is False

    def test_clear_history(self, session) -> None:
        press_all(session, ["2", "+", "3", "="])
        session.clear_history()
        assert session.history == []


class TestPaste:

    def test_paste_number(self, session) -> None:
        assert session.paste("1,234.5") is True
        assert session.display_value == "1234.5"
        assert session.overwrite is False

    def test_paste_scientific_and_fraction(self, session) -> None:
        assert session.paste("1.5e3") is True
        assert session.paste("3/4") is True
        assert session.display_value == "3/4"

    @pytest.mark.parametrize("text", ["abc", "", "inf", "nan", "1/0/2", "1_000", "1e999", "²", "٣"])
    def test_paste_rejected(self, session, text) -> None:
        assert session.paste(text) is False
        assert session.display_value == "0"

    def test_paste_is_undoable(self, session) -> None:
        session.paste("42")
        session.undo()
        assert session.display_value == "0"

    def test_pasted_fraction_as_divisor(self, session) -> None:
        press_all(session, ["2", "÷"])
        session.paste("1/2")
        session.press("=")
        assert session.display_value == "4"
        assert session.history[0] == "2÷(1/2) = 4"


class TestModes:

    def test_toggle_mode(self, session) -> None:
        assert session.toggle_mode() == "scientific"
        assert session.toggle_mode() == "simple"

    def test_converter_modes(self, session) -> None:
        assert session.toggle_currency_mode() == "currency"
        assert session.mode_label() == "Calculator"
        assert session.toggle_units_mode() == "units"
        assert session.toggle_units_mode() == "simple"

    def test_mode_button_leaves_converter(self, session) -> None:
        session.toggle_currency_mode()
        assert session.toggle_mode() == "simple"

    def test_mode_label(self, session) -> None:
        assert session.mode_label() == "Scientific"
        session.toggle_mode()
        assert session.mode_label() == "Simple"


class TestConverters:

    def test_display_amount(self, session) -> None:
        session.paste("3/4")
        assert session.display_amount() == 0.75

    def test_display_amount_error_is_zero(self, session) -> None:
        press_all(session, ["5", "÷", "0", "="])
        assert session.display_amount() == 0

    def test_converted_unit(self, session) -> None:
        press_all(session, ["1", "0", "0", "0"])
        session.unit_to = "km"
        assert session.converted_unit() == pytest.approx(1.0)

    def test_change_unit_category(self, session) -> None:
        session.change_unit_category("temperature")
        assert (session.unit_from, session.unit_to) == ("C", "F")
        press_all(session, ["1", "0", "0"])
        assert session.converted_unit() == pytest.approx(212.0)

    def test_swap_units(self, session) -> None:
        session.swap_units()
        assert (session.unit_from, session.unit_to) == ("ft", "m")

    def test_converted_currency(self, session) -> None:
        press_all(session, ["1", "0"])
        assert session.converted_currency({"USD": 1.0, "EUR": 0.5}) == pytest.approx(5.0)

    def test_swap_currencies(self, session) -> None:
        session.swap_currencies()
        assert (session.currency_from, session.currency_to) == ("EUR", "USD")


class TestSettingsAndParsing:

    def test_from_settings(self) -> None:
        session = CalculatorSession.from_settings({
            "angle_mode": "rad",
            "undo_limit": 5,
            "history_limit": 10,
            "fractions": False,
        })
        assert session.angle_mode == AngleMode.RAD
        assert session.undo_limit == 5
        assert session.history_limit == 10
        assert session.fractions is False

    def test_parse_display(self) -> None:
        assert parse_display("1,234.5") == 1234.5
        assert parse_display("1/4") == 0.25
        assert parse_display("12abc") == 12.0
        assert parse_display("2e3") == 2000.0
        assert parse_display("1/0") is None
        assert parse_display("Format Error") is None
