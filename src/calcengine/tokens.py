"""
Input tokens.

The host maps pointer clicks and key presses onto this vocabulary; the
engine never sees input devices.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from calcengine.exceptions import InvalidInputError

DIGITS = "0123456789"

_NUMERIC_CHUNK = re.compile(r"[0-9.]+")


class Operator(str, Enum):
    """Pending operators. ``POWER`` marks an exponent being entered."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"
    POWER = "^"

    @property
    def is_binary(self) -> bool:
        return self is not Operator.POWER


class Function(str, Enum):
    """Unary scientific functions."""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    LN = "ln"
    LOG = "log"
    SQRT = "√"
    SQUARE = "x²"
    RECIPROCAL = "1/x"


class Command(str, Enum):
    DECIMAL = "."
    EQUALS = "="
    CLEAR_ALL = "clear"
    CLEAR_ENTRY = "C"
    NEGATE = "negate"
    PERCENTAGE = "percentage"
    POWER = "xⁿ"
    MEMORY_ADD = "M+"
    MEMORY_SUBTRACT = "M-"
    MEMORY_RECALL = "MR"
    MEMORY_CLEAR = "MC"


MEMORY_COMMANDS = frozenset(
    {
        Command.MEMORY_ADD,
        Command.MEMORY_SUBTRACT,
        Command.MEMORY_RECALL,
        Command.MEMORY_CLEAR,
    }
)


@dataclass(frozen=True)
class Digit:
    """A single decimal digit key."""

    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 1 or self.value not in DIGITS:
            raise InvalidInputError(self.value, "Not a decimal digit")

    def __str__(self) -> str:
        return self.value


Token = Union[Digit, Operator, Function, Command]

# Keyboard names and ASCII spellings
ALIASES: dict[str, Token] = {
    "*": Operator.MULTIPLY,
    "x": Operator.MULTIPLY,
    "X": Operator.MULTIPLY,
    "/": Operator.DIVIDE,
    ",": Command.DECIMAL,
    "Enter": Command.EQUALS,
    "Escape": Command.CLEAR_ALL,
    "Delete": Command.CLEAR_ALL,
    "AC": Command.CLEAR_ALL,
    "ac": Command.CLEAR_ALL,
    "CE": Command.CLEAR_ENTRY,
    "ce": Command.CLEAR_ENTRY,
    "±": Command.NEGATE,
    "+/-": Command.NEGATE,
    "neg": Command.NEGATE,
    "%": Command.PERCENTAGE,
    "^": Command.POWER,
    "xn": Command.POWER,
    "pow": Command.POWER,
    "sqrt": Function.SQRT,
    "sq": Function.SQUARE,
    "x^2": Function.SQUARE,
    "inv": Function.RECIPROCAL,
}


def parse_token(raw: Union[str, Token]) -> Token:
    """
    Resolve a key name or token label to a token.

    Args:
        raw: A token, a canonical label (``"7"``, ``"×"``, ``"sin"``,
            ``"M+"``) or an alias (``"*"``, ``"Enter"``, ``"sqrt"``)

    Returns:
        The matching token

    Raises:
        InvalidInputError: If the label names no token
    """
    if isinstance(raw, (Digit, Operator, Function, Command)):
        return raw

    if not isinstance(raw, str):
        raise InvalidInputError(raw, f"Expected token label, got {type(raw).__name__}")

    text = raw.strip()
    if text in ALIASES:
        return ALIASES[text]
    if len(text) == 1 and text in DIGITS:
        return Digit(text)

    for vocabulary in (Operator, Function, Command):
        try:
            return vocabulary(text)
        except ValueError:
            continue

    raise InvalidInputError(raw, "Unknown token")


def tokenize(text: str) -> list[Token]:
    """Split whitespace-separated labels into tokens, expanding numbers such as ``12.5`` key by key."""
    tokens: list[Token] = []
    for chunk in text.split():
        if _NUMERIC_CHUNK.fullmatch(chunk):
            tokens.extend(parse_token(char) for char in chunk)
        else:
            tokens.append(parse_token(chunk))
    return tokens
