"""
Arithmetic operations for the calculator display.

Every operation comes in two forms: ``*_result`` returns a tagged
``Ok``/``Err`` result, and the plain form returns the display string.
Numeric failures never propagate past this module.
"""

from collections.abc import Callable
from decimal import Decimal

import structlog

from calcengine import numeric
from calcengine.exceptions import CalculatorError, ErrorKind
from calcengine.numeric import parse_decimal
from calcengine.result import Err, Ok, Result
from calcengine.tokens import Function, Operator

logger = structlog.get_logger()

HUNDRED = Decimal(100)

_BINARY: dict[Operator, Callable[[Decimal, Decimal], Decimal]] = {
    Operator.ADD: numeric.add,
    Operator.SUBTRACT: numeric.subtract,
    Operator.MULTIPLY: numeric.multiply,
    Operator.DIVIDE: numeric.divide,
}

_UNARY: dict[Function, Callable[[Decimal], Decimal]] = {
    Function.SIN: numeric.sin,
    Function.COS: numeric.cos,
    Function.TAN: numeric.tan,
    Function.LN: numeric.ln,
    Function.LOG: numeric.log10,
    Function.SQRT: numeric.sqrt,
    Function.SQUARE: lambda value: numeric.power(value, Decimal(2)),
    Function.RECIPROCAL: lambda value: numeric.divide(Decimal(1), value),
}


def _evaluate(operation: str, compute: Callable[[], Decimal]) -> Result:
    """Run a computation, converting any failure into an ``Err``."""
    try:
        return Ok(compute())
    except CalculatorError as exc:
        logger.debug("Operation failed", operation=operation, kind=exc.kind.name, error=str(exc))
        return Err(exc.kind)
    except (ArithmeticError, ValueError) as exc:
        logger.debug("Operation failed", operation=operation, kind=ErrorKind.GENERIC.name, error=str(exc))
        return Err(ErrorKind.GENERIC)


def calculate_result(a: str, b: str, operator: Operator | str) -> Result:
    """
    Combine two display values with a binary operator.

    Properties:
        - Exact for finite decimal inputs: calculate("0.1", "0.2", "+") == "0.3"
        - Inverse: calculate(calculate(a, b, "+"), b, "-") == format_display(a)
          while both fit the display

    Args:
        a: Left operand
        b: Right operand
        operator: One of ``+ - × ÷``; the power marker ``^`` delegates to
            ``calculate_power_result``

    Returns:
        ``Ok`` with the result, ``Err(DIVISION_BY_ZERO)`` for a zero divisor,
        ``Err(GENERIC)`` for unparseable operands or other numeric failures.
        An unknown operator yields ``b``.
    """
    try:
        operator = Operator(operator)
    except ValueError:
        return _evaluate("identity", lambda: parse_decimal(b))

    if operator is Operator.POWER:
        return calculate_power_result(a, b)

    combine = _BINARY[operator]
    return _evaluate(operator.name.lower(), lambda: combine(parse_decimal(a), parse_decimal(b)))


def calculate(a: str, b: str, operator: Operator | str) -> str:
    """Display string for ``calculate_result``."""
    return calculate_result(a, b, operator).display


def evaluate_function_result(value: str, func: Function | str) -> Result:
    """
    Apply a unary scientific function.

    Domain violations are distinguished from generic failures: ``ln`` and
    ``log`` of a non-positive value and ``√`` of a negative value give
    ``Err(INVALID_INPUT)``; ``1/x`` of zero gives ``Err(DIVISION_BY_ZERO)``.
    Trigonometric functions accept any value, in the configured angle unit.
    """
    try:
        func = Function(func)
    except ValueError:
        return _evaluate("identity", lambda: parse_decimal(value))

    apply = _UNARY[func]
    return _evaluate(func.name.lower(), lambda: apply(parse_decimal(value)))


def evaluate_function(value: str, func: Function | str) -> str:
    """Display string for ``evaluate_function_result``; unknown functions leave the value as is."""
    try:
        Function(func)
    except ValueError:
        return value
    return evaluate_function_result(value, func).display


def calculate_power_result(base: str, exponent: str) -> Result:
    """
    Raise base to exponent.

    Fractional and negative exponents are passed straight to the decimal
    layer; whatever it cannot compute (a negative base with a fractional
    exponent, zero to a negative power) is a generic error.
    """
    return _evaluate("power", lambda: numeric.power(parse_decimal(base), parse_decimal(exponent)))


def calculate_power(base: str, exponent: str) -> str:
    return calculate_power_result(base, exponent).display


def calculate_percentage_result(value: str) -> Result:
    return _evaluate("percentage", lambda: numeric.divide(parse_decimal(value), HUNDRED))


def calculate_percentage(value: str) -> str:
    """Value divided by 100."""
    return calculate_percentage_result(value).display


def negate_result(value: str) -> Result:
    return _evaluate("negation", lambda: numeric.negate(parse_decimal(value)))


def negate(value: str) -> str:
    """
    Flip the sign of a display value.

    ``"0"`` and error strings are returned unchanged.
    """
    if value == "0" or value.startswith(ErrorKind.GENERIC.value):
        return value
    return negate_result(value).display
