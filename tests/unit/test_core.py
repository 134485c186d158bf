"""Unit tests for the input state machine."""

from dataclasses import replace

import pytest

from calcengine import (
    CalculatorState,
    ErrorKind,
    InvalidInputError,
    Operator,
    ParseError,
    apply_function,
    apply_negate,
    apply_percentage,
    begin_power,
    clear_all,
    clear_entry,
    input_decimal,
    input_digit,
    input_operator,
    load_value,
    perform_equals,
    step,
)


def run(*tokens, state=None):
    """Feed tokens from the idle state (or the given one)."""
    state = state if state is not None else clear_all()
    for token in tokens:
        state = step(state, token)
    return state


def entry(display: str) -> CalculatorState:
    """A state with ``display`` typed in as the current entry."""
    return CalculatorState(display=display, waiting_for_operand=False, has_decimal="." in display)


class TestClear:
    def test_clear_all_is_idle(self):
        state = clear_all()
        assert state.display == "0"
        assert state.previous_value is None
        assert state.operator is None
        assert state.waiting_for_operand is True
        assert state.has_decimal is False
        assert state.error is None

    def test_clear_all_discards_pending(self):
        assert run("5", "+", "3", "clear") == clear_all()

    def test_clear_entry_keeps_pending_operation(self):
        state = CalculatorState(
            display="99", previous_value="5", operator=Operator.ADD, waiting_for_operand=False
        )
        cleared = clear_entry(state)
        assert cleared.display == "0"
        assert cleared.previous_value == "5"
        assert cleared.operator is Operator.ADD
        assert cleared.waiting_for_operand is True

    def test_clear_entry_then_redo_operand(self):
        assert run("5", "+", "9", "9", "C", "1", "=").display == "6"

    def test_clear_entry_clears_error(self):
        state = run("1", "÷", "0", "=", "C")
        assert state.display == "0"
        assert state.error is None


class TestInputDigit:
    def test_first_digit(self, idle):
        state = input_digit(idle, "5")
        assert state.display == "5"
        assert state.waiting_for_operand is False

    def test_appends(self):
        assert input_digit(entry("12"), "3").display == "123"

    def test_starts_fresh_when_waiting(self):
        state = CalculatorState(display="5", waiting_for_operand=True, has_decimal=True)
        result = input_digit(state, "7")
        assert result.display == "7"
        assert result.has_decimal is False

    def test_starts_fresh_after_error(self):
        state = CalculatorState(display="Error", error=ErrorKind.GENERIC, waiting_for_operand=False)
        result = input_digit(state, "5")
        assert result.display == "5"
        assert result.error is None

    def test_suppresses_leading_zeros(self):
        state = run("0", "0")
        assert state.display == "0"
        assert input_digit(state, "7").display == "7"

    def test_rejects_digits_beyond_display_length(self):
        state = entry("1234567890123456")
        assert input_digit(state, "7") is state

    def test_rejects_non_digits(self, idle):
        with pytest.raises(InvalidInputError):
            input_digit(idle, "a")


class TestInputDecimal:
    def test_adds_point(self):
        state = input_decimal(entry("5"))
        assert state.display == "5."
        assert state.has_decimal is True

    def test_second_point_ignored(self):
        state = input_decimal(entry("5"))
        assert input_decimal(state) is state

    def test_starts_with_zero_when_waiting(self, idle):
        state = input_decimal(idle)
        assert state.display == "0."
        assert state.waiting_for_operand is False

    def test_after_error(self):
        state = input_decimal(run("1", "÷", "0", "="))
        assert state.display == "0."
        assert state.error is None

    def test_chained_decimal_inputs(self):
        assert run("1", ".", "2", ".", "3").display == "1.23"


class TestInputOperator:
    def test_stores_operand(self):
        state = run("5", "+")
        assert state.previous_value == "5"
        assert state.operator is Operator.ADD
        assert state.waiting_for_operand is True

    def test_evaluates_pending_operation(self):
        state = run("5", "+", "3", "×")
        assert state.display == "8"
        assert state.previous_value == "8"
        assert state.operator is Operator.MULTIPLY

    def test_repeated_operator_replaces_pending(self):
        state = run("5", "+", "-", "×")
        assert state.previous_value == "5"
        assert state.operator is Operator.MULTIPLY
        assert run("5", "+", "-", "3", "=").display == "2"

    def test_error_resets_and_drops_operator(self):
        state = input_operator(run("1", "÷", "0", "="), "+")
        assert state == clear_all()

    def test_failing_chain_shows_error(self):
        state = run("5", "÷", "0", "+")
        assert state.display == "Error: Division by zero"
        assert state.error is ErrorKind.DIVISION_BY_ZERO
        assert state.previous_value is None
        assert state.operator is None


class TestPerformEquals:
    def test_addition(self):
        assert run("5", "+", "3", "=").display == "8"

    def test_no_precedence(self):
        assert run("5", "+", "3", "×", "2", "=").display == "16"

    def test_result_state(self):
        state = run("7", "÷", "2", "=")
        assert state.display == "3.5"
        assert state.previous_value is None
        assert state.operator is None
        assert state.waiting_for_operand is True
        assert state.has_decimal is True

    def test_floating_point_precision(self):
        assert run("0", ".", "1", "+", "0", ".", "2", "=").display == "0.3"

    def test_division_by_zero(self):
        state = run("1", "0", "÷", "0", "=")
        assert state.display == "Error: Division by zero"
        assert state.error is ErrorKind.DIVISION_BY_ZERO

    def test_nothing_pending_keeps_display(self):
        state = run("5", "=")
        assert state.display == "5"
        assert state.waiting_for_operand is True

    def test_error_is_kept(self):
        state = perform_equals(run("1", "÷", "0", "="))
        assert state.display == "Error: Division by zero"

    def test_operations_with_zero(self):
        assert run("0", "+", "5", "=").display == "5"
        assert run("5", "×", "0", "=").display == "0"

    def test_large_results(self):
        state = run(*"99999999", "×", *"99999999", "×", *"99999999", "=")
        assert len(state.display) <= 16
        assert state.display == "9.999999700e+23"


class TestPowerEntry:
    def test_two_phase(self):
        state = run("2", "xⁿ")
        assert state.expecting_exponent
        assert state.previous_value == "2"
        assert run("3", "=", state=state).display == "8"

    def test_negative_exponent(self):
        state = run("2", "xⁿ", "-")
        assert state.display == "-0"
        assert state.operator is Operator.POWER
        assert run("3", "=", state=state).display == "0.125"

    def test_minus_twice_restores_positive_exponent(self):
        assert run("2", "xⁿ", "-", "-", "3", "=").display == "8"

    def test_fractional_exponent(self):
        assert run("9", "xⁿ", "0", ".", "5", "=").display == "3"

    def test_chains_with_operators(self):
        assert run("2", "xⁿ", "3", "+", "1", "=").display == "9"
        assert run("2", "xⁿ", "3", "-", "1", "=").display == "7"

    def test_completes_pending_operation_first(self):
        assert run("2", "+", "3", "xⁿ", "2", "=").display == "25"

    def test_equals_without_exponent_squares(self):
        assert run("2", "xⁿ", "=").display == "4"

    def test_undefined_power(self):
        state = run("0", "xⁿ", "-", "1", "=")
        assert state.display == "Error"
        assert state.error is ErrorKind.GENERIC

    def test_operator_after_bare_exponent_sign_swaps(self):
        state = run("2", "xⁿ", "-", "+")
        assert state.display == "2"
        assert state.previous_value == "2"
        assert state.operator is Operator.ADD
        assert state.waiting_for_operand is True
        assert run("3", "=", state=state).display == "5"

    def test_after_error_resets(self):
        assert begin_power(run("1", "÷", "0", "=")) == clear_all()


class TestFunctions:
    def test_applies_to_display(self):
        state = run("9", "√")
        assert state.display == "3"
        assert state.waiting_for_operand is True

    def test_keeps_pending_operation(self):
        assert run("5", "+", "9", "√", "=").display == "8"

    def test_domain_error(self):
        state = run("4", "negate", "√")
        assert state.display == "Error: Invalid input"
        assert state.error is ErrorKind.INVALID_INPUT

    def test_no_op_on_error(self):
        state = run("1", "÷", "0", "=")
        assert apply_function(state, "sin") is state

    def test_unknown_function(self, idle):
        with pytest.raises(InvalidInputError):
            apply_function(idle, "cosh")


class TestNegate:
    def test_keeps_partial_entry(self):
        state = run("5", ".", "negate")
        assert state.display == "-5."
        assert state.has_decimal is True
        assert run("2", state=state).display == "-5.2"

    def test_toggles_back(self):
        assert run("5", "negate", "negate").display == "5"

    def test_result(self):
        state = run("2", "+", "3", "=", "negate")
        assert state.display == "-5"
        assert state.waiting_for_operand is True

    def test_zero_unchanged(self):
        state = run("0")
        assert apply_negate(state) is state

    def test_full_entry_falls_back_to_formatting(self):
        state = apply_negate(entry("1234567890123456"))
        assert state.display == "-1.234567890e+15"
        assert state.waiting_for_operand is True

    def test_error_unchanged(self):
        state = run("1", "÷", "0", "=")
        assert apply_negate(state) is state


class TestPercentage:
    def test_percentage(self):
        state = run("5", "0", "%")
        assert state.display == "0.5"
        assert state.waiting_for_operand is True

    def test_no_op_on_error(self):
        state = run("1", "÷", "0", "=")
        assert apply_percentage(state) is state


class TestLoadValue:
    def test_formats_value(self, idle):
        state = load_value(idle, "12.50")
        assert state.display == "12.5"
        assert state.has_decimal is True
        assert state.waiting_for_operand is True

    def test_clears_error(self):
        state = load_value(run("1", "÷", "0", "="), "3")
        assert state.display == "3"
        assert state.error is None

    def test_rejects_non_numbers(self, idle):
        with pytest.raises(ParseError):
            load_value(idle, "abc")


class TestStep:
    def test_aliases(self):
        assert run("6", "*", "7", "Enter").display == "42"

    def test_memory_commands_need_a_session(self, idle):
        with pytest.raises(InvalidInputError):
            step(idle, "M+")

    def test_unknown_token(self, idle):
        with pytest.raises(InvalidInputError):
            step(idle, "banana")

    def test_does_not_mutate(self):
        state = run("5")
        before = replace(state)
        step(state, "+")
        assert state == before

    def test_expression(self):
        assert run("5", "+", "3").expression == "5 + 3"
        assert clear_all().expression is None
