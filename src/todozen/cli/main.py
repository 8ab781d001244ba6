# src/todozen/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the console REPL in the main
thread and flushes the store on the way out.
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.store.flush()
    except Exception:
        logger.exception("Failed to flush task store.")


def _make_signal_handler(stop_main: threading.Event, shutting_down: threading.Event):
    def _handle_signal(signum, _frame) -> None:
        if shutting_down.is_set():
            logger.info("Signal %s ignored, already flushing.", signum)
            return
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()
        # Unblocks input() in the console loop; the flush happens in finally.
        raise KeyboardInterrupt

    return _handle_signal


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/todozen")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todozen"))

    state = create_initial_state(settings=settings)

    stop_main = threading.Event()
    shutting_down = threading.Event()
    _handle_signal = _make_signal_handler(stop_main, shutting_down)

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError, AttributeError):
        # Not in the main thread, or the platform lacks SIGTERM.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled. Nothing to do; press Ctrl+C to stop.")
            stop_main.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    finally:
        shutting_down.set()
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
