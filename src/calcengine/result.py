"""Tagged result type for arithmetic operations."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from calcengine.exceptions import ErrorKind
from calcengine.formatting import format_display


@dataclass(frozen=True)
class Ok:
    """A successful computation."""

    value: Decimal

    @property
    def display(self) -> str:
        return format_display(self.value)

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Err:
    """A failed computation, tagged with its kind."""

    kind: ErrorKind

    @property
    def display(self) -> str:
        return self.kind.value

    @property
    def is_error(self) -> bool:
        return True


Result = Union[Ok, Err]
