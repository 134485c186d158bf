"""Calculation history, newest first."""

from __future__ import annotations

import time
from collections.abc import Iterator
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from calcengine.config import settings

logger = structlog.get_logger()


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryEntry(BaseModel):
    """One completed calculation."""

    model_config = ConfigDict(frozen=True)

    expression: str
    result: str
    timestamp: int = Field(default_factory=_now_ms)  # epoch milliseconds

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


_ENTRIES = TypeAdapter(list[HistoryEntry])


class History:
    """Bounded list of completed calculations, most recent first."""

    def __init__(self, limit: int | None = None, entries: list[HistoryEntry] | None = None) -> None:
        self.limit = limit if limit is not None else settings.history_limit
        self._entries: list[HistoryEntry] = list(entries or [])[: self.limit]

    @property
    def entries(self) -> list[HistoryEntry]:
        """Copy of the stored entries."""
        return self._entries.copy()

    def record(self, expression: str, result: str) -> HistoryEntry:
        """Prepend a calculation, dropping the oldest entries beyond the limit."""
        entry = HistoryEntry(expression=expression, result=result)
        self._entries = [entry, *self._entries][: self.limit]
        logger.info("Calculation recorded", expression=expression, result=result)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def to_list(self) -> list[dict[str, Any]]:
        return [entry.model_dump() for entry in self._entries]

    @classmethod
    def from_list(cls, data: Any, limit: int | None = None) -> History:
        """Rebuild a history from saved data, starting empty if the data is unusable."""
        try:
            entries = _ENTRIES.validate_python(data)
        except ValidationError as exc:
            logger.warning("Discarding saved history", error=str(exc))
            entries = []
        return cls(limit=limit, entries=entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries.copy())

    def __repr__(self) -> str:
        return f"History(entries={len(self._entries)}, limit={self.limit})"
