# src/todozen/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .ports import TaskRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any
    store: TaskRepo

    # Day currently shown (date key).
    current_date: str

    # Rows already copied to another day, per date key (display marker only, not persisted).
    copied: dict[str, set[int]] = field(default_factory=dict)

    def mark_copied(self, date_key: str, index: int) -> None:
        self.copied.setdefault(date_key, set()).add(index)

    def is_copied(self, date_key: str, index: int) -> bool:
        return index in self.copied.get(date_key, set())

    def clear_copied(self, date_key: str, index: int) -> None:
        rows = self.copied.get(date_key)
        if rows is None:
            return
        rows.discard(index)
        if not rows:
            del self.copied[date_key]

    def shift_copied_after_delete(self, date_key: str, index: int) -> None:
        """Keep markers attached to the same tasks once row `index` is gone."""
        rows = self.copied.get(date_key)
        if rows is None:
            return
        shifted = {r - 1 if r > index else r for r in rows if r != index}
        if shifted:
            self.copied[date_key] = shifted
        else:
            del self.copied[date_key]

    def shift_copied_after_move(self, date_key: str, source: int, dest: int) -> None:
        rows = self.copied.get(date_key)
        if rows is None:
            return
        out: set[int] = set()
        for r in rows:
            if r == source:
                out.add(dest)
            elif source < r <= dest:
                out.add(r - 1)
            elif dest <= r < source:
                out.add(r + 1)
            else:
                out.add(r)
        self.copied[date_key] = out
