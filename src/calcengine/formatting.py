"""Conversion of decimal values to the bounded-length display string."""

from decimal import Decimal

from calcengine.config import settings
from calcengine.exceptions import ErrorKind, ParseError
from calcengine.numeric import parse_decimal


def _trim(text: str) -> str:
    """Strip trailing fractional zeros and a then-trailing point."""
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _scientific(value: Decimal, width: int) -> str:
    """Scientific notation, shortening the mantissa (never the exponent) to fit."""
    digits = settings.scientific_digits
    text = format(value, f".{digits}e")
    while len(text) > width and digits > 0:
        digits -= 1
        text = format(value, f".{digits}e")

    if digits < settings.scientific_digits:
        mantissa, _, exponent = text.partition("e")
        text = f"{_trim(mantissa)}e{exponent}"
    return text


def format_display(value: str | Decimal) -> str:
    """
    Render a value for the calculator display.

    Magnitudes at or beyond ``10**(width + 5)``, and non-zero magnitudes
    below ``10**-(width + 5)``, use scientific notation. Everything else is
    shown in plain notation without redundant zeros; when that is too long
    the fractional part is cut, unless the integer part alone fills the
    display, in which case scientific notation is used instead.

    Args:
        value: A ``Decimal`` or a decimal string

    Returns:
        At most ``settings.max_display_length`` characters, or ``"Error"``
        for unparseable or non-finite input

    Example:
        >>> format_display("100.00")
        '100'
        >>> format_display("0.1234567890123456789")
        '0.12345678901234'
    """
    try:
        number = parse_decimal(value)
    except ParseError:
        return ErrorKind.GENERIC.value

    if number.is_zero():
        return "0"

    width = settings.max_display_length
    magnitude = number.copy_abs()
    if magnitude >= Decimal(1).scaleb(width + 5) or magnitude < Decimal(1).scaleb(-(width + 5)):
        return _scientific(number, width)

    text = _trim(format(number, "f"))
    if len(text) <= width:
        return text

    integer_part, _, fraction = text.partition(".")
    if len(integer_part) >= width:
        return _scientific(number, width)

    text = _trim(f"{integer_part}.{fraction[: width - len(integer_part) - 1]}")
    if text.lstrip("-") == "0":
        # Everything significant was cut away
        return _scientific(number, width)

    return text
