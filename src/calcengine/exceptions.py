"""Error kinds and exceptions for the calculator engine."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Error categories, valued by the text shown on the display."""

    GENERIC = "Error"
    DIVISION_BY_ZERO = "Error: Division by zero"
    INVALID_INPUT = "Error: Invalid input"


class CalculatorError(Exception):
    """Base exception for all calculator errors."""

    kind = ErrorKind.GENERIC

    def __init__(self, message: str, value: Any = None) -> None:
        self.message = message
        self.value = value
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.message}: {self.value}"
        return self.message


class ParseError(CalculatorError):
    """Raised when text cannot be read as a decimal number."""

    def __init__(self, text: Any) -> None:
        super().__init__("Not a decimal number", text)
        self.text = text


class DivisionByZeroError(CalculatorError):
    """Raised when attempting to divide by zero."""

    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self, numerator: Any) -> None:
        super().__init__("Division by zero", numerator)
        self.numerator = numerator


class OverflowError(CalculatorError):
    """Raised when a calculation exceeds the decimal exponent range."""

    def __init__(self, operation: str, *operands: Any) -> None:
        super().__init__(f"Overflow in {operation}", operands)
        self.operation = operation
        self.operands = operands


class InvalidInputError(CalculatorError):
    """Raised when input is outside a function's domain or not a known token."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, value: Any, reason: str = "invalid input") -> None:
        super().__init__(reason, value)
        self.reason = reason
