# src/todozen/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.dates import is_date_key, next_day, previous_day, resolve_tz, today_key

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _row(arg: str) -> int | None:
    """1-based row number typed by the user -> 0-based index."""
    try:
        n = int(arg)
    except ValueError:
        return None
    return n - 1


def _no_task(state: AppState, index: int) -> str | None:
    if 0 <= index < state.store.count(state.current_date):
        return None
    return f"No task #{index + 1} on {state.current_date}."


def render_day(state: AppState) -> str:
    day = state.current_date
    tasks = state.store.tasks_for(day)
    if not tasks:
        return f"{day}: no tasks. Type a line to add one."
    lines = [f"{day}:"]
    for i, t in enumerate(tasks):
        box = "[x]" if t.completed else "[ ]"
        copied = "  (copied)" if state.is_copied(day, i) else ""
        lines.append(f"  {i + 1}. {box} {t.description}{copied}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Day: {state.current_date}\n"
        f"  Time zone: {getattr(settings, 'timezone', 'UTC')}\n"
        f"  Storage: {getattr(settings, 'kv_db_path', '?')} (key={state.store.storage_key})\n"
        f"  Days with tasks: {len(state.store.dates())}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_day(state)


def cmd_today(state: AppState, args: list[str]) -> str:
    tz = resolve_tz(getattr(state.settings, "timezone", None))
    state.current_date = today_key(tz)
    return render_day(state)


def cmd_next(state: AppState, args: list[str]) -> str:
    state.current_date = next_day(state.current_date)
    return render_day(state)


def cmd_prev(state: AppState, args: list[str]) -> str:
    state.current_date = previous_day(state.current_date)
    return render_day(state)


def cmd_day(state: AppState, args: list[str]) -> str:
    if len(args) != 1 or not is_date_key(args[0]):
        return "Usage: /day YYYY-MM-DD"
    state.current_date = args[0]
    return render_day(state)


def cmd_days(state: AppState, args: list[str]) -> str:
    days = state.store.dates()
    if not days:
        return "No tasks on any day."
    lines = ["Days with tasks:"]
    for d in days:
        marker = " <" if d == state.current_date else ""
        lines.append(f"  {d}: {state.store.count(d)}{marker}")
    return "\n".join(lines)


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add TEXT"
    state.store.add(state.current_date, text)
    return render_day(state)


def cmd_edit(state: AppState, args: list[str]) -> str:
    index = _row(args[0]) if args else None
    text = " ".join(args[1:]).strip()
    if index is None or not text:
        return "Usage: /edit N TEXT"
    missing = _no_task(state, index)
    if missing:
        return missing
    state.store.edit(state.current_date, index, text)
    state.clear_copied(state.current_date, index)
    return render_day(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    index = _row(args[0]) if len(args) == 1 else None
    if index is None:
        return "Usage: /done N"
    missing = _no_task(state, index)
    if missing:
        return missing
    state.store.toggle_completion(state.current_date, index)
    return render_day(state)


def cmd_del(state: AppState, args: list[str]) -> str:
    index = _row(args[0]) if len(args) == 1 else None
    if index is None:
        return "Usage: /del N"
    missing = _no_task(state, index)
    if missing:
        return missing
    state.store.delete(state.current_date, index)
    state.shift_copied_after_delete(state.current_date, index)
    return render_day(state)


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /move FROM TO"
    source, dest = _row(args[0]), _row(args[1])
    if source is None or dest is None:
        return "Usage: /move FROM TO"
    missing = _no_task(state, source) or _no_task(state, dest)
    if missing:
        return missing
    state.store.move(state.current_date, source, dest)
    state.shift_copied_after_move(state.current_date, source, dest)
    return render_day(state)


def cmd_copy(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /copy N              -> copy task N to the next day
    /copy N YYYY-MM-DD   -> copy task N to the given day
    """
    index = _row(args[0]) if args else None
    if index is None or len(args) > 2:
        return "Usage: /copy N [YYYY-MM-DD]"
    if len(args) == 2:
        if not is_date_key(args[1]):
            return "Usage: /copy N [YYYY-MM-DD]"
        target = args[1]
    else:
        target = next_day(state.current_date)

    task = state.store.copy(state.current_date, index, target)
    if task is None:
        return f"No task #{index + 1} on {state.current_date}."

    state.mark_copied(state.current_date, index)
    if emit:
        with contextlib.suppress(Exception):
            emit(f"Copied to {target}: {task.description}")
    logger.debug("Copy requested %s#%d -> %s", state.current_date, index, target)
    return render_day(state)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current day, time zone and storage.")
registry.register("list", cmd_list, help_text="Show tasks of the current day.", aliases=["ls"])
registry.register("today", cmd_today, help_text="Go to today.")
registry.register("next", cmd_next, help_text="Go to the next day.", aliases=["n"])
registry.register("prev", cmd_prev, help_text="Go to the previous day.", aliases=["p"])
registry.register("day", cmd_day, help_text="Go to a day: /day YYYY-MM-DD.")
registry.register("days", cmd_days, help_text="List days that have tasks.")
registry.register("add", cmd_add, help_text="Add a task: /add TEXT (plain text works too).", aliases=["a"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit N TEXT.", aliases=["e"])
registry.register("done", cmd_done, help_text="Toggle completion: /done N.", aliases=["x"])
registry.register("del", cmd_del, help_text="Delete a task: /del N.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Reorder: /move FROM TO.", aliases=["mv"])
registry.register(
    "copy", cmd_copy, help_text="Copy a task: /copy N [YYYY-MM-DD] (default: next day).", aliases=["cp"]
)
