"""
Input state machine.

Every transition is a pure function from a ``CalculatorState`` (plus an
input) to a new ``CalculatorState``. Operators chain strictly left to
right; there is no precedence.

Example:
    >>> state = clear_all()
    >>> for token in ["5", "+", "3", "×", "2", "="]:
    ...     state = step(state, token)
    >>> state.display
    '16'
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

from calcengine.config import settings
from calcengine.exceptions import ErrorKind, InvalidInputError
from calcengine.formatting import format_display
from calcengine.numeric import parse_decimal
from calcengine.operations import (
    calculate_percentage_result,
    calculate_power_result,
    calculate_result,
    evaluate_function_result,
    negate_result,
)
from calcengine.result import Err, Result
from calcengine.tokens import Command, Digit, Function, Operator, Token, parse_token

IDLE_DISPLAY = "0"
NEGATIVE_ZERO = "-0"


@dataclass(frozen=True)
class CalculatorState:
    """Immutable snapshot of the calculator between two inputs."""

    display: str = IDLE_DISPLAY
    previous_value: str | None = None
    operator: Operator | None = None
    waiting_for_operand: bool = True
    has_decimal: bool = False
    error: ErrorKind | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def expecting_exponent(self) -> bool:
        """True while the base of a power is stored and the exponent is being entered."""
        return self.operator is Operator.POWER

    @property
    def expression(self) -> str | None:
        """The pending calculation as ``"<previous> <operator> <display>"``."""
        if self.previous_value is None or self.operator is None:
            return None
        return f"{self.previous_value} {self.operator.value} {self.display}"

    def __str__(self) -> str:
        return self.display


def _show(state: CalculatorState, result: Result, **changes) -> CalculatorState:
    """Put a computed result on the display, tagging errors."""
    error = result.kind if isinstance(result, Err) else None
    return replace(state, display=result.display, error=error, **changes)


def _pending_result(state: CalculatorState) -> Result:
    if state.operator is Operator.POWER:
        return calculate_power_result(state.previous_value, state.display)
    return calculate_result(state.previous_value, state.display, state.operator)


def clear_all() -> CalculatorState:
    """The idle state (AC)."""
    return CalculatorState()


def clear_entry(state: CalculatorState) -> CalculatorState:
    """Reset the current entry (C), keeping any pending operation."""
    return replace(
        state,
        display=IDLE_DISPLAY,
        waiting_for_operand=True,
        has_decimal=False,
        error=None,
    )


def input_digit(state: CalculatorState, digit: str | Digit) -> CalculatorState:
    """
    Enter one digit.

    A digit after an operator, equals or error starts a new number. Leading
    zeros are suppressed, and digits beyond the display length are ignored.
    """
    digit = Digit(str(digit)).value

    if state.waiting_for_operand or state.is_error:
        return replace(
            state,
            display=digit,
            waiting_for_operand=False,
            has_decimal=False,
            error=None,
        )

    if state.display in (IDLE_DISPLAY, NEGATIVE_ZERO):
        if digit == "0":
            return state
        return replace(state, display=state.display[:-1] + digit)

    if len(state.display) >= settings.max_display_length:
        return state

    return replace(state, display=state.display + digit)


def input_decimal(state: CalculatorState) -> CalculatorState:
    """Enter the decimal point; a second point in the same number is ignored."""
    if state.waiting_for_operand or state.is_error:
        return replace(
            state,
            display="0.",
            waiting_for_operand=False,
            has_decimal=True,
            error=None,
        )

    if state.has_decimal or len(state.display) >= settings.max_display_length:
        return state

    return replace(state, display=state.display + ".", has_decimal=True)


def _exponent_sign_pending(state: CalculatorState) -> bool:
    return state.expecting_exponent and (
        state.waiting_for_operand or state.display in (IDLE_DISPLAY, NEGATIVE_ZERO)
    )


def _toggle_exponent_sign(state: CalculatorState) -> CalculatorState:
    negative = state.waiting_for_operand or state.display != NEGATIVE_ZERO
    return replace(
        state,
        display=NEGATIVE_ZERO if negative else IDLE_DISPLAY,
        waiting_for_operand=False,
        has_decimal=False,
    )


def input_operator(state: CalculatorState, operator: Operator | str) -> CalculatorState:
    """
    Press a binary operator.

    With an operand already entered since the previous operator, the
    pending operation is evaluated first and its result becomes the new
    left operand. Pressing operators back to back just swaps the pending
    one. After an error the calculator resets and the operator is dropped.
    """
    operator = Operator(operator)
    if not operator.is_binary:
        return begin_power(state)

    if state.is_error:
        return clear_all()

    if state.previous_value is None:
        return replace(
            state,
            previous_value=state.display,
            operator=operator,
            waiting_for_operand=True,
            has_decimal=False,
        )

    if operator is Operator.SUBTRACT and _exponent_sign_pending(state):
        return _toggle_exponent_sign(state)

    if state.expecting_exponent and state.display == NEGATIVE_ZERO:
        # Only the exponent sign was typed
        return replace(
            state,
            display=state.previous_value,
            operator=operator,
            waiting_for_operand=True,
            has_decimal=False,
        )

    if not state.waiting_for_operand:
        result = _pending_result(state)
        if isinstance(result, Err):
            return _show(
                state,
                result,
                previous_value=None,
                operator=None,
                waiting_for_operand=True,
                has_decimal=False,
            )
        return replace(
            state,
            display=result.display,
            previous_value=result.display,
            operator=operator,
            waiting_for_operand=True,
            has_decimal=False,
            error=None,
        )

    return replace(state, operator=operator)


def perform_equals(state: CalculatorState) -> CalculatorState:
    """Evaluate the pending operation, power included."""
    if state.is_error or state.previous_value is None or state.operator is None:
        return replace(
            state,
            previous_value=None,
            operator=None,
            waiting_for_operand=True,
            has_decimal=False,
        )

    result = _pending_result(state)
    return _show(
        state,
        result,
        previous_value=None,
        operator=None,
        waiting_for_operand=True,
        has_decimal="." in result.display,
    )


def begin_power(state: CalculatorState) -> CalculatorState:
    """
    Store the display as the base of a power and wait for the exponent.

    An operation still pending with an entered operand is evaluated first,
    so ``2 + 3 xⁿ 2 =`` gives 25.
    """
    if state.is_error:
        return clear_all()

    if state.operator is not None and not state.waiting_for_operand:
        result = _pending_result(state)
        if isinstance(result, Err):
            return _show(
                state,
                result,
                previous_value=None,
                operator=None,
                waiting_for_operand=True,
                has_decimal=False,
            )
        state = replace(state, display=result.display, error=None)

    return replace(
        state,
        previous_value=state.display,
        operator=Operator.POWER,
        waiting_for_operand=True,
        has_decimal=False,
    )


def apply_function(state: CalculatorState, func: Function | str) -> CalculatorState:
    """Apply a scientific function to the display, leaving any pending operation in place."""
    try:
        func = Function(func)
    except ValueError as exc:
        raise InvalidInputError(func, "Unknown function") from exc

    if state.is_error:
        return state

    result = evaluate_function_result(state.display, func)
    return _show(
        state,
        result,
        waiting_for_operand=True,
        has_decimal="." in result.display,
    )


def apply_negate(state: CalculatorState) -> CalculatorState:
    """
    Flip the sign of the display.

    While a number is being typed the sign is toggled on the text itself, so
    an entry such as ``5.`` stays editable.
    """
    if state.is_error:
        return state

    if not state.waiting_for_operand:
        if parse_decimal(state.display).is_zero():
            return state
        display = state.display
        toggled = display[1:] if display.startswith("-") else f"-{display}"
        if len(toggled) <= settings.max_display_length:
            return replace(state, display=toggled)

    result = negate_result(state.display)
    return _show(
        state,
        result,
        waiting_for_operand=True,
        has_decimal="." in result.display,
    )


def apply_percentage(state: CalculatorState) -> CalculatorState:
    if state.is_error:
        return state

    result = calculate_percentage_result(state.display)
    return _show(
        state,
        result,
        waiting_for_operand=True,
        has_decimal="." in result.display,
    )


def load_value(state: CalculatorState, value: str) -> CalculatorState:
    """
    Show a value supplied by the host (memory recall, history, paste).

    Raises:
        ParseError: If the value is not a decimal number
    """
    display = format_display(parse_decimal(value))
    return replace(
        state,
        display=display,
        waiting_for_operand=True,
        has_decimal="." in display,
        error=None,
    )


_COMMANDS: dict[Command, Callable[[CalculatorState], CalculatorState]] = {
    Command.DECIMAL: input_decimal,
    Command.EQUALS: perform_equals,
    Command.CLEAR_ALL: lambda _state: clear_all(),
    Command.CLEAR_ENTRY: clear_entry,
    Command.NEGATE: apply_negate,
    Command.PERCENTAGE: apply_percentage,
    Command.POWER: begin_power,
}


def step(state: CalculatorState, token: str | Token) -> CalculatorState:
    """
    Apply one input token.

    Raises:
        InvalidInputError: For unknown tokens and for memory commands,
            which need a session
    """
    token = parse_token(token)

    if isinstance(token, Digit):
        return input_digit(state, token)
    if isinstance(token, Operator):
        return input_operator(state, token)
    if isinstance(token, Function):
        return apply_function(state, token)

    handler = _COMMANDS.get(token)
    if handler is None:
        raise InvalidInputError(token.value, "Memory commands need a session")
    return handler(state)
