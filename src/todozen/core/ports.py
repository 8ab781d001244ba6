# src/todozen/core/ports.py

"""
Ports (interfaces) used by the core.

The store and the console depend on Protocols instead of concrete
implementations, so the persistence provider stays swappable and tests can
plug in in-memory or failing fakes.
"""

from __future__ import annotations

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Host-provided persistence: one opaque byte blob per key.

    get() returns None for a missing key. set()/delete() may raise; callers
    decide whether a failure matters.
    """

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...
    def delete(self, key: str) -> None: ...


class TaskRepo(Protocol):
    @property
    def storage_key(self) -> str: ...

    # Persistence cycle
    def load(self) -> None: ...
    def save(self) -> None: ...
    def flush(self) -> None: ...

    # Mutations (indices are 0-based; out of range is a no-op)
    def add(self, date_key: str, text: str) -> Any: ...
    def edit(self, date_key: str, index: int, text: str) -> None: ...
    def toggle_completion(self, date_key: str, index: int) -> None: ...
    def delete(self, date_key: str, index: int) -> None: ...
    def move(self, date_key: str, source_index: int, dest_index: int) -> None: ...
    def copy(self, source_date_key: str, index: int, target_date_key: str) -> Any | None: ...

    # Reads
    def tasks_for(self, date_key: str) -> list[Any]: ...
    def count(self, date_key: str) -> int: ...
    def has_tasks(self, date_key: str) -> bool: ...
    def dates(self) -> list[str]: ...
