"""
Decimal arithmetic layer.

Every number the engine touches passes through here as a ``Decimal`` so that
results match pencil-and-paper arithmetic (``0.1 + 0.2`` is exactly ``0.3``).
Trigonometric functions, which ``decimal`` does not provide, are evaluated
with mpmath and rounded back to the working precision.

Failures surface only as ``CalculatorError`` subclasses.
"""

import re
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DecimalException,
    InvalidOperation,
    Overflow,
    localcontext,
)

from mpmath import mp

from calcengine.config import AngleUnit, settings
from calcengine.exceptions import (
    CalculatorError,
    DivisionByZeroError,
    InvalidInputError,
    OverflowError,
    ParseError,
)

# Optional sign, digits with at most one point, optional exponent
_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Extra digits mpmath carries before rounding back to the working precision
GUARD_DIGITS = 10

# Largest trigonometric argument; reducing beyond this needs thousands of digits of pi
TRIG_ARGUMENT_LIMIT = Decimal("1e100")


def working_context() -> Context:
    """Decimal context for engine arithmetic; traps invalid operations and overflow."""
    return Context(prec=settings.precision, rounding=ROUND_HALF_UP)


def parse_decimal(value: str | Decimal) -> Decimal:
    """
    Read a display string as a finite decimal.

    Args:
        value: Text such as ``"12"``, ``"-0.5"``, ``"5."`` or
            ``"1.234567890e+21"``, or a ``Decimal``

    Returns:
        The parsed value

    Raises:
        ParseError: If the value is not a finite decimal number
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ParseError(value)
        return value

    if not isinstance(value, str):
        raise ParseError(value)

    text = value.strip()
    if not _NUMBER.fullmatch(text):
        raise ParseError(value)

    try:
        return Decimal(text)
    except InvalidOperation as exc:
        # Exponent beyond what decimal can represent
        raise ParseError(value) from exc


@contextmanager
def _arithmetic(operation: str, *operands: Decimal) -> Iterator[None]:
    with localcontext(working_context()):
        try:
            yield
        except Overflow as exc:
            raise OverflowError(operation, *operands) from exc
        except DecimalException as exc:
            raise CalculatorError(f"{operation} is undefined", operands) from exc


def add(a: Decimal, b: Decimal) -> Decimal:
    """Sum of a and b at the working precision."""
    with _arithmetic("addition", a, b):
        return a + b


def subtract(a: Decimal, b: Decimal) -> Decimal:
    """Difference of a and b at the working precision."""
    with _arithmetic("subtraction", a, b):
        return a - b


def multiply(a: Decimal, b: Decimal) -> Decimal:
    """Product of a and b at the working precision."""
    with _arithmetic("multiplication", a, b):
        return a * b


def divide(a: Decimal, b: Decimal) -> Decimal:
    """
    Divide a by b.

    Raises:
        DivisionByZeroError: If b is zero
        OverflowError: If the quotient exceeds the exponent range
    """
    if b.is_zero():
        raise DivisionByZeroError(a)

    with _arithmetic("division", a, b):
        return a / b


def negate(a: Decimal) -> Decimal:
    with _arithmetic("negation", a):
        return -a


def absolute(a: Decimal) -> Decimal:
    with _arithmetic("absolute value", a):
        return abs(a)


def sqrt(a: Decimal) -> Decimal:
    """
    Square root.

    Raises:
        InvalidInputError: If a is negative
    """
    if a < 0:
        raise InvalidInputError(a, "Square root of a negative number")

    with _arithmetic("square root", a):
        return a.sqrt()


def ln(a: Decimal) -> Decimal:
    """
    Natural logarithm.

    Raises:
        InvalidInputError: If a is zero or negative
    """
    if a <= 0:
        raise InvalidInputError(a, "Logarithm of a non-positive number")

    with _arithmetic("natural logarithm", a):
        return a.ln()


def log10(a: Decimal) -> Decimal:
    """
    Base-10 logarithm.

    Raises:
        InvalidInputError: If a is zero or negative
    """
    if a <= 0:
        raise InvalidInputError(a, "Logarithm of a non-positive number")

    with _arithmetic("common logarithm", a):
        return a.log10()


def power(base: Decimal, exponent: Decimal) -> Decimal:
    """
    Raise base to exponent.

    No domain checks are made here: a negative base with a fractional
    exponent, or zero to a negative power, fails as a plain
    ``CalculatorError``.

    Raises:
        CalculatorError: If the power is undefined
        OverflowError: If the result exceeds the exponent range
    """
    if base.is_zero() and exponent.is_zero():
        return Decimal(1)

    with _arithmetic("exponentiation", base, exponent):
        result = base**exponent
        if not result.is_finite():
            raise CalculatorError("exponentiation is undefined", (base, exponent))
        return result


def _from_mpf(value) -> Decimal:
    result = Decimal(mp.nstr(value, settings.precision))
    if not result.is_finite():
        raise CalculatorError("Non-finite result", value)
    return result


def _trigonometric(name: str, value: Decimal) -> Decimal:
    degrees = settings.angle_unit is AngleUnit.DEGREES

    if value.copy_abs() >= TRIG_ARGUMENT_LIMIT:
        raise CalculatorError(f"{name} argument too large", value)

    with mp.workdps(settings.precision + GUARD_DIGITS):
        argument = mp.mpf(str(value))

        if degrees:
            if name == "tan" and mp.fmod(abs(argument), 180) == 90:
                raise InvalidInputError(value, "Tangent is undefined at odd multiples of 90 degrees")
            argument = mp.radians(argument)

        result = getattr(mp, name)(argument)

        # pi is inexact, so sin(180 deg) comes back as rounding noise
        if degrees and abs(result) < mp.mpf(10) ** -settings.precision:
            result = mp.mpf(0)

        return _from_mpf(result)


def sin(a: Decimal) -> Decimal:
    return _trigonometric("sin", a)


def cos(a: Decimal) -> Decimal:
    return _trigonometric("cos", a)


def tan(a: Decimal) -> Decimal:
    return _trigonometric("tan", a)


def to_plain_string(value: Decimal) -> str:
    """
    Fixed-notation string with trailing fractional zeros removed.

    Magnitudes far outside what the display can show keep exponent notation.
    """
    if value.is_zero():
        return "0"
    if abs(value.adjusted()) > settings.precision + settings.max_display_length:
        return str(value.normalize(working_context()))
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
