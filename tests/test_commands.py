# tests/test_commands.py

from __future__ import annotations

import json

from todozen.cli.commands import CommandRegistry, registry
from todozen.connectors.console_connector import handle_line
from todozen.storage.kv_store import SQLiteKeyValueStore
from todozen.tasks.task_store import TaskStore

from .fakes import CapturingEmitter


def _descriptions(state, day: str | None = None) -> list[str]:
    return [t.description for t in state.store.tasks_for(day or state.current_date)]


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bb"])

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/BB y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_plain_text_adds_task_to_current_day(state) -> None:
    out = handle_line(state, "Buy milk")
    assert "1. [ ] Buy milk" in out
    assert _descriptions(state) == ["Buy milk"]


def test_add_edit_done_del(state) -> None:
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/add Walk the dog")
    registry.handle(state, "/edit 2 Walk the cat")
    out = registry.handle(state, "/done 1")

    assert _descriptions(state) == ["Buy milk", "Walk the cat"]
    assert "1. [x] Buy milk" in (out or "")

    registry.handle(state, "/del 1")
    registry.handle(state, "/del 1")
    assert not state.store.has_tasks(state.current_date)


def test_bad_rows_and_usage(state) -> None:
    registry.handle(state, "/add only")
    assert registry.handle(state, "/done 5") == "No task #5 on 2025-04-24."
    assert registry.handle(state, "/del 0") == "No task #0 on 2025-04-24."
    assert (registry.handle(state, "/edit x text") or "").startswith("Usage")
    assert (registry.handle(state, "/add") or "").startswith("Usage")
    assert (registry.handle(state, "/move 1") or "").startswith("Usage")
    assert _descriptions(state) == ["only"]


def test_move_reorders_and_keeps_copied_marker(state) -> None:
    for text in ("a", "b", "c"):
        registry.handle(state, f"/add {text}")
    registry.handle(state, "/copy 1")

    out = registry.handle(state, "/move 1 3")

    assert _descriptions(state) == ["b", "c", "a"]
    assert "3. [ ] a  (copied)" in (out or "")
    assert state.copied == {"2025-04-24": {2}}


def test_copy_defaults_to_next_day(state) -> None:
    registry.handle(state, "/add Buy milk")
    registry.handle(state, "/done 1")
    emitter = CapturingEmitter()

    registry.handle(state, "/copy 1", emit=emitter)

    copied = state.store.tasks_for("2025-04-25")
    assert [(t.description, t.completed) for t in copied] == [("Buy milk", False)]
    assert emitter.lines == ["Copied to 2025-04-25: Buy milk"]
    assert state.is_copied("2025-04-24", 0)

    # Editing the source row clears the marker.
    registry.handle(state, "/edit 1 Buy oat milk")
    assert not state.is_copied("2025-04-24", 0)


def test_copy_to_explicit_day_and_bad_day(state) -> None:
    registry.handle(state, "/add report")
    registry.handle(state, "/copy 1 2025-05-01")
    assert _descriptions(state, "2025-05-01") == ["report"]
    assert (registry.handle(state, "/copy 1 tomorrow") or "").startswith("Usage")
    assert registry.handle(state, "/copy 9") == "No task #9 on 2025-04-24."


def test_delete_shifts_copied_markers(state) -> None:
    for text in ("a", "b", "c"):
        registry.handle(state, f"/add {text}")
    registry.handle(state, "/copy 3")
    registry.handle(state, "/del 1")
    assert state.copied == {"2025-04-24": {1}}
    registry.handle(state, "/del 2")
    assert state.copied == {}


def test_day_navigation(state) -> None:
    registry.handle(state, "/next")
    assert state.current_date == "2025-04-25"
    registry.handle(state, "/prev")
    registry.handle(state, "/prev")
    assert state.current_date == "2025-04-23"
    registry.handle(state, "/day 2025-12-31")
    assert state.current_date == "2025-12-31"
    assert (registry.handle(state, "/day 31-12-2025") or "").startswith("Usage")
    assert state.current_date == "2025-12-31"


def test_days_lists_counts(state) -> None:
    assert registry.handle(state, "/days") == "No tasks on any day."
    registry.handle(state, "/add a")
    registry.handle(state, "/add b")
    registry.handle(state, "/copy 1 2025-04-20")

    out = registry.handle(state, "/days") or ""

    assert "2025-04-20: 1" in out
    assert "2025-04-24: 2 <" in out


def test_commands_persist_through_store(state, settings) -> None:
    registry.handle(state, "/add persisted")

    blob = SQLiteKeyValueStore(settings.kv_db_path).get("todos")
    assert blob is not None
    assert [t["description"] for t in json.loads(blob)["2025-04-24"]] == ["persisted"]

    reopened = TaskStore(SQLiteKeyValueStore(settings.kv_db_path))
    reopened.load()
    assert [t.description for t in reopened.tasks_for("2025-04-24")] == ["persisted"]


def test_help_lists_commands(state) -> None:
    out = registry.handle(state, "/help") or ""
    for name in ("/add", "/edit", "/done", "/del", "/move", "/copy", "/days", "/today"):
        assert name in out
