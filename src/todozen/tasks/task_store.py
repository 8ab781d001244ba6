# src/todozen/tasks/task_store.py

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

from ..core.ports import KeyValueStore
from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"


class TaskStore:
    """
    Date-partitioned, ordered task store persisted as one JSON blob.

    Layout of the blob (UTF-8 JSON):
      {"2025-04-24": [{"id": "...", "description": "...", "completed": false}, ...]}

    Invariants:
    - a date key present in the mapping always has at least one task
    - task ids are unique across the whole store (copy mints a new id)

    Error policy:
    - out-of-range indices make every mutator a no-op (UI may hold stale rows)
    - an undecodable blob loads as an empty store
    - a failed write is logged and swallowed; memory stays the source of truth
    """

    def __init__(self, kv: KeyValueStore, *, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        self._kv = kv
        self._storage_key = storage_key
        self._entries: dict[str, list[Task]] = {}

    @property
    def storage_key(self) -> str:
        return self._storage_key

    # ---- persistence ----

    def load(self) -> None:
        try:
            raw = self._kv.get(self._storage_key)
        except Exception:
            logger.exception("TaskStore read failed key=%s; starting empty.", self._storage_key)
            self._entries = {}
            return

        if raw is None:
            self._entries = {}
            logger.info("TaskStore: no saved data under key=%s", self._storage_key)
            return

        try:
            self._entries = self._decode(raw)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError; very deep nesting overflows the decoder.
            logger.warning("TaskStore: discarding unreadable data key=%s (%s)", self._storage_key, e)
            self._entries = {}
            return

        logger.info(
            "TaskStore loaded key=%s dates=%d tasks=%d",
            self._storage_key,
            len(self._entries),
            sum(len(v) for v in self._entries.values()),
        )

    def save(self) -> None:
        try:
            blob = self._encode(self._entries)
            self._kv.set(self._storage_key, blob)
        except Exception:
            logger.exception("TaskStore save failed key=%s; keeping in-memory state.", self._storage_key)

    def flush(self) -> None:
        """Shutdown hook for the host; writes the current state one last time."""
        self.save()

    @staticmethod
    def _encode(entries: dict[str, list[Task]]) -> bytes:
        data = {key: [t.to_dict() for t in items] for key, items in entries.items()}
        return json.dumps(data, ensure_ascii=False).encode("utf-8")

    @staticmethod
    def _decode(raw: bytes) -> dict[str, list[Task]]:
        data: Any = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top level must be an object")

        out: dict[str, list[Task]] = {}
        seen: set[str] = set()
        for key, items in data.items():
            if not isinstance(items, list):
                raise ValueError(f"value for {key!r} must be a list")
            tasks = [Task.from_dict(item) for item in items]
            for t in tasks:
                norm = t.id.lower()
                if norm in seen:
                    raise ValueError(f"duplicate task id {t.id}")
                seen.add(norm)
            if tasks:
                out[key] = tasks
        return out

    # ---- bounds ----

    def _items_in_range(self, date_key: str, *indices: int) -> list[Task] | None:
        items = self._entries.get(date_key)
        if not items:
            return None
        for i in indices:
            if i < 0 or i >= len(items):
                logger.debug("Index %s out of range for %s (len=%d)", i, date_key, len(items))
                return None
        return items

    # ---- mutations ----

    def add(self, date_key: str, text: str) -> Task:
        task = Task(description=text)
        self._entries.setdefault(date_key, []).append(task)
        logger.debug("Task added id=%s date=%s", task.id, date_key)
        self.save()
        return task

    def edit(self, date_key: str, index: int, text: str) -> None:
        items = self._items_in_range(date_key, index)
        if items is None:
            return
        items[index].description = text
        self.save()

    def toggle_completion(self, date_key: str, index: int) -> None:
        items = self._items_in_range(date_key, index)
        if items is None:
            return
        items[index].completed = not items[index].completed
        self.save()

    def delete(self, date_key: str, index: int) -> None:
        items = self._items_in_range(date_key, index)
        if items is None:
            return
        removed = items.pop(index)
        if not items:
            del self._entries[date_key]
        logger.debug("Task deleted id=%s date=%s", removed.id, date_key)
        self.save()

    def move(self, date_key: str, source_index: int, dest_index: int) -> None:
        items = self._items_in_range(date_key, source_index, dest_index)
        if items is None:
            return
        items.insert(dest_index, items.pop(source_index))
        self.save()

    def copy(self, source_date_key: str, index: int, target_date_key: str) -> Task | None:
        items = self._items_in_range(source_date_key, index)
        if items is None:
            return None
        task = Task(description=items[index].description)
        self._entries.setdefault(target_date_key, []).append(task)
        logger.debug(
            "Task copied id=%s %s -> %s new_id=%s",
            items[index].id,
            source_date_key,
            target_date_key,
            task.id,
        )
        self.save()
        return task

    # ---- reads ----

    def tasks_for(self, date_key: str) -> list[Task]:
        return list(self._entries.get(date_key, []))

    def count(self, date_key: str) -> int:
        return len(self._entries.get(date_key, []))

    def has_tasks(self, date_key: str) -> bool:
        return date_key in self._entries

    def dates(self) -> list[str]:
        return sorted(self._entries)

    def snapshot(self) -> dict[str, list[Task]]:
        return {key: [replace(t) for t in items] for key, items in self._entries.items()}
