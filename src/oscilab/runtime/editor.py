"""
Editing boundary between raw user input and a TrajectorySession.

Text is parsed and validated here; only valid values ever reach the session.
Each field keeps a bounded undo history of the values it replaced.
"""
from __future__ import annotations

from collections import deque
from typing import Optional

from .params import canonical_key, parse_value
from .session import TrajectorySession

__all__ = ["ParameterHistory", "ParameterEditor"]


class ParameterHistory:
    """Bounded stack of previous values for one field."""

    def __init__(self, maxlen: int = 32) -> None:
        if maxlen < 1:
            raise ValueError("maxlen must be >= 1")
        self._items: deque[float] = deque(maxlen=maxlen)

    def push(self, value: float) -> None:
        # Consecutive duplicates carry no information for undo.
        if self._items and self._items[-1] == value:
            return
        self._items.append(value)

    def undo(self) -> Optional[float]:
        """Pop and return the most recent previous value, or None when empty."""
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> Optional[float]:
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)


class ParameterEditor:
    """
    Apply raw text edits to a session with validation and per-field undo.

    Keys are Parameters field names (or their aliases such as 'ε') and
    initial-state component names of the session's system ('x', 'u1', ...).
    """

    # Lower bounds enforced while parsing, matching the input forms.
    MIN_VALUES = {"int_time": 0.0, "step_count": 0.0}

    def __init__(self, session: TrajectorySession, *, history_size: int = 32) -> None:
        self.session = session
        self.history_size = history_size
        self._histories: dict[str, ParameterHistory] = {}
        self._seen_reset_key = session.reset_key

    def _key(self, key: str) -> str:
        if key in self.session.system.state_names:
            return key
        return canonical_key(key)

    def _sync(self) -> None:
        if self.session.reset_key != self._seen_reset_key:
            for history in self._histories.values():
                history.clear()
            self._seen_reset_key = self.session.reset_key

    def history(self, key: str) -> ParameterHistory:
        self._sync()
        name = self._key(key)
        if name not in self._histories:
            self._histories[name] = ParameterHistory(self.history_size)
        return self._histories[name]

    def _apply(self, name: str, value: float) -> None:
        if name in self.session.system.state_names:
            self.session.update_initial(name, value)
        else:
            self.session.update_parameter(name, value)

    def edit(self, key: str, raw: str) -> float:
        """
        Parse `raw` and apply it to field `key`.

        Returns the applied value. Raises InvalidParameterError (and leaves the
        session untouched) on malformed or out-of-range input.
        """
        name = self._key(key)
        value = parse_value(raw, key=name, min_value=self.MIN_VALUES.get(name))
        previous = self.session.value_of(name)
        self._apply(name, value)
        if previous is not None:
            self.history(name).push(previous)
        return value

    def can_undo(self, key: str) -> bool:
        return bool(self.history(key))

    def undo(self, key: str) -> Optional[float]:
        """
        Restore the most recent previous value of `key`.
        Returns the restored value, or None when there is nothing to undo.
        """
        history = self.history(key)
        name = self._key(key)
        value = history.undo()
        if value is not None:
            self._apply(name, value)
        return value
