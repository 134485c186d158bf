"""Memory register behind the M+, M-, MR and MC keys."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from calcengine import numeric
from calcengine.exceptions import ParseError
from calcengine.numeric import parse_decimal

logger = structlog.get_logger()


class MemoryState(BaseModel):
    """Stored memory value; ``has_value`` is false until the first M+ or M-."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: str = "0"
    has_value: bool = Field(default=False, alias="hasValue")

    @field_validator("value")
    @classmethod
    def _decimal_string(cls, value: str) -> str:
        try:
            parse_decimal(value)
        except ParseError as exc:
            raise ValueError(str(exc)) from exc
        return value


class Memory:
    """
    A single accumulating memory register.

    Values go in and come out as decimal strings, so the register can be
    fed straight from the display.

    Example:
        >>> memory = Memory()
        >>> memory.add("2.5")
        >>> memory.subtract("0.5")
        >>> memory.recall()
        '2'
    """

    def __init__(self, state: MemoryState | None = None) -> None:
        self._state = state if state is not None else MemoryState()

    @property
    def state(self) -> MemoryState:
        return self._state

    @property
    def has_value(self) -> bool:
        return self._state.has_value

    def add(self, value: str) -> None:
        """
        Add value to the register (M+).

        Raises:
            ParseError: If value is not a decimal number
        """
        total = numeric.add(parse_decimal(self._state.value), parse_decimal(value))
        self._state = MemoryState(value=numeric.to_plain_string(total), has_value=True)

    def subtract(self, value: str) -> None:
        """
        Subtract value from the register (M-).

        Raises:
            ParseError: If value is not a decimal number
        """
        total = numeric.subtract(parse_decimal(self._state.value), parse_decimal(value))
        self._state = MemoryState(value=numeric.to_plain_string(total), has_value=True)

    def recall(self) -> str:
        """Stored value, or ``"0"`` when nothing has been stored."""
        return self._state.value if self._state.has_value else "0"

    def clear(self) -> None:
        self._state = MemoryState()

    def to_dict(self) -> dict[str, Any]:
        return self._state.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Any) -> Memory:
        """Rebuild a register from saved data, starting empty if the data is unusable."""
        try:
            state = MemoryState.model_validate(data)
        except ValidationError as exc:
            logger.warning("Discarding saved memory", error=str(exc))
            state = MemoryState()
        return cls(state)

    def __repr__(self) -> str:
        return f"Memory(value={self._state.value!r}, has_value={self._state.has_value})"
