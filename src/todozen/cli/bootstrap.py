# src/todozen/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the key-value provider into a TaskStore and the store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStore
from ..core.state import AppState
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.dates import resolve_tz, today_key
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.kv_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, kv: KeyValueStore | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the provider) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to
    get_settings(); if kv is None, the SQLite provider at settings.kv_db_path is used.
    """
    if settings is None:
        settings = get_settings()

    # Fail fast on a bad zone before anything touches storage.
    tz = resolve_tz(settings.timezone)

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SQLiteKeyValueStore(settings.kv_db_path)

    store = TaskStore(kv, storage_key=settings.storage_key)
    store.load()

    state = AppState(
        settings=settings,
        store=store,
        current_date=today_key(tz),
    )
    logger.info("State ready day=%s tz=%s", state.current_date, settings.timezone)
    return state
