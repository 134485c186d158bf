"""Stateful calculator session wiring the state machine to memory and history."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import structlog

from calcengine.core import CalculatorState, clear_all, load_value, step
from calcengine.exceptions import CalculatorError, ParseError
from calcengine.history import History
from calcengine.memory import Memory
from calcengine.tokens import MEMORY_COMMANDS, Command, Token, parse_token, tokenize

logger = structlog.get_logger()

CommitHook = Callable[[dict[str, Any]], None]


class Calculator:
    """
    A calculator as a host UI sees it.

    Feeds tokens through the pure state machine, handles the memory keys,
    records completed calculations in the history and lets the host persist
    memory and history through commit hooks.

    Example:
        >>> calc = Calculator()
        >>> calc.feed_text("0.1 + 0.2 =").display
        '0.3'
        >>> calc.history[0].expression
        '0.1 + 0.2'
    """

    def __init__(self, memory: Memory | None = None, history: History | None = None) -> None:
        self._state = clear_all()
        self.memory = memory if memory is not None else Memory()
        self.history = history if history is not None else History()
        self._commit_hooks: list[CommitHook] = []
        self._dirty = False

    @property
    def state(self) -> CalculatorState:
        """Current state."""
        return self._state

    @property
    def display(self) -> str:
        return self._state.display

    def press(self, token: str | Token) -> CalculatorState:
        """
        Apply one token.

        Raises:
            InvalidInputError: If the token is unknown
        """
        token = parse_token(token)
        logger.debug("Key pressed", token=token.value, display=self._state.display)

        if isinstance(token, Command) and token in MEMORY_COMMANDS:
            self._state = self._memory_command(token)
            return self._state

        before = self._state
        after = step(before, token)

        if token is Command.EQUALS and before.expression is not None and not before.is_error:
            if not after.is_error:
                self.history.record(before.expression, after.display)
                self._dirty = True

        self._state = after
        return after

    def feed(self, tokens: Iterable[str | Token]) -> CalculatorState:
        """Apply tokens in order and return the final state."""
        for token in tokens:
            self.press(token)
        return self._state

    def feed_text(self, text: str) -> CalculatorState:
        """Apply whitespace-separated tokens, e.g. ``"12.5 × 4 ="``."""
        return self.feed(tokenize(text))

    def _memory_command(self, command: Command) -> CalculatorState:
        state = self._state

        if command is Command.MEMORY_RECALL:
            return load_value(state, self.memory.recall())

        if command is Command.MEMORY_CLEAR:
            self.memory.clear()
            self._dirty = True
            return state

        if state.is_error:
            logger.warning("Memory update ignored", command=command.value, display=state.display)
            return state

        try:
            if command is Command.MEMORY_ADD:
                self.memory.add(state.display)
            else:
                self.memory.subtract(state.display)
        except CalculatorError as exc:
            logger.warning("Memory update failed", command=command.value, error=str(exc))
            return state

        logger.info("Memory updated", command=command.value, value=self.memory.state.value)
        self._dirty = True
        return state

    def select_history(self, index: int) -> CalculatorState:
        """Show the result of a history entry (0 is the most recent)."""
        self._state = load_value(self._state, self.history[index].result)
        return self._state

    def paste(self, text: str) -> bool:
        """
        Show pasted text if it is a number.

        Returns:
            Whether the text was accepted
        """
        try:
            self._state = load_value(self._state, text)
        except ParseError:
            logger.warning("Ignoring pasted text", text=text)
            return False
        return True

    def clear_history(self) -> None:
        self.history.clear()
        self._dirty = True

    def reset(self) -> CalculatorState:
        """Clear the calculator (AC); memory and history are kept."""
        self._state = clear_all()
        return self._state

    def snapshot(self) -> dict[str, Any]:
        """Memory and history as plain data for persistence."""
        return {
            "memory": self.memory.to_dict(),
            "history": self.history.to_list(),
        }

    @classmethod
    def restore(cls, snapshot: dict[str, Any]) -> Calculator:
        """Rebuild a session from ``snapshot()`` output; unusable parts start empty."""
        return cls(
            memory=Memory.from_dict(snapshot.get("memory") or {}),
            history=History.from_list(snapshot.get("history", [])),
        )

    def add_commit_hook(self, hook: CommitHook) -> None:
        """Register a callable that receives ``snapshot()`` on each commit."""
        self._commit_hooks.append(hook)

    def commit(self) -> bool:
        """
        Hand the snapshot to the commit hooks if memory or history changed.

        The host calls this after a transition; nothing is saved implicitly.

        Returns:
            Whether the hooks were called
        """
        if not self._dirty:
            return False

        snapshot = self.snapshot()
        for hook in self._commit_hooks:
            hook(snapshot)
        self._dirty = False
        logger.debug("Session committed", hooks=len(self._commit_hooks))
        return True

    def __repr__(self) -> str:
        return f"Calculator(display={self.display!r}, history_len={len(self.history)})"
