# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todozen.cli.bootstrap import create_initial_state
from todozen.core.state import AppState
from todozen.storage.kv_store import SQLiteKeyValueStore
from todozen.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="todozen-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        kv_db_path=tmp_path / "todozen.sqlite3",
        storage_key="todos",
        timezone="UTC",
    )


@pytest.fixture()
def kv(settings: SimpleNamespace) -> SQLiteKeyValueStore:
    return SQLiteKeyValueStore(settings.kv_db_path)


@pytest.fixture()
def store(kv: SQLiteKeyValueStore) -> TaskStore:
    s = TaskStore(kv)
    s.load()
    return s


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired through the real composition root.

    NOTE: We keep the real SQLite provider here because the persisted
    blob is part of what we want to test. The day is pinned for determinism.
    """
    st = create_initial_state(settings=settings)
    st.current_date = "2025-04-24"
    return st
