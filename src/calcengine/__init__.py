"""
Calculator engine with exact decimal arithmetic.

This package provides:
- A pure input state machine for keypad-driven calculators
- Decimal arithmetic that avoids binary floating-point artifacts
- Bounded-length display formatting with scientific-notation fallback
- Memory and history collaborators behind a session object
"""

from calcengine.config import AngleUnit, Settings, settings
from calcengine.core import (
    CalculatorState,
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
from calcengine.exceptions import (
    CalculatorError,
    DivisionByZeroError,
    ErrorKind,
    InvalidInputError,
    OverflowError,
    ParseError,
)
from calcengine.formatting import format_display
from calcengine.history import History, HistoryEntry
from calcengine.memory import Memory, MemoryState
from calcengine.operations import (
    calculate,
    calculate_percentage,
    calculate_power,
    evaluate_function,
    negate,
)
from calcengine.result import Err, Ok, Result
from calcengine.session import Calculator
from calcengine.tokens import Command, Digit, Function, Operator, Token, parse_token, tokenize

__all__ = [
    "AngleUnit",
    "Calculator",
    "CalculatorError",
    "CalculatorState",
    "Command",
    "Digit",
    "DivisionByZeroError",
    "Err",
    "ErrorKind",
    "Function",
    "History",
    "HistoryEntry",
    "InvalidInputError",
    "Memory",
    "MemoryState",
    "Ok",
    "Operator",
    "OverflowError",
    "ParseError",
    "Result",
    "Settings",
    "Token",
    "apply_function",
    "apply_negate",
    "apply_percentage",
    "begin_power",
    "calculate",
    "calculate_percentage",
    "calculate_power",
    "clear_all",
    "clear_entry",
    "evaluate_function",
    "format_display",
    "input_decimal",
    "input_digit",
    "input_operator",
    "load_value",
    "negate",
    "parse_token",
    "perform_equals",
    "settings",
    "step",
    "tokenize",
]

__version__ = "0.1.0"
