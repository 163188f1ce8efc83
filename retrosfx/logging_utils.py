"""Logging setup for the library and the ``retrosfx`` command.

Console output goes through rich. Every record also lands in a debug log
file, tagged with the CLI command that was running when it was emitted.
"""

from __future__ import annotations

import logging
import os
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_LOGGER = logging.getLogger("retrosfx.logging")
LOG_DIR_ENV = "RETROSFX_LOG_DIR"
DEBUG_ENV = "RETROSFX_DEBUG"
_LOG_FILE = "retrosfx.log"
_FILE_FORMAT = "%(asctime)s %(levelname)-7s [%(command)s] %(name)s: %(message)s"
_NO_COMMAND = "-"

_current_command: ContextVar[str] = ContextVar("retrosfx_command", default=_NO_COMMAND)
_logging_configured = False


class _CommandFilter(logging.Filter):
    """Stamp each record with the running CLI command."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.command = _current_command.get()
        return True


def debug_enabled() -> bool:
    return bool(os.environ.get(DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "retrosfx" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def current_command() -> str:
    return _current_command.get()


@contextmanager
def command_context(command: str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``command``."""
    token = _current_command.set(command)
    _LOGGER.debug("Starting command %s", command)
    try:
        yield
    finally:
        _LOGGER.debug("Finished command %s", command)
        _current_command.reset(token)


def _console_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=debug_enabled(),
        rich_tracebacks=debug_enabled(),
    )
    handler.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    return handler


def _file_handler() -> logging.Handler | None:
    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(get_log_path(), encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("File logging disabled: %s", exc)
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach console and file handlers to the ``retrosfx`` logger once.

    The console handler is skipped when the host application already
    configured the root logger. ``force`` replaces any earlier handlers.
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    logger = logging.getLogger("retrosfx")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = []
    if force or not logging.getLogger().handlers:
        handlers.append(_console_handler())
    file_handler = _file_handler()
    if file_handler is not None:
        handlers.append(file_handler)

    command_filter = _CommandFilter()
    for handler in handlers:
        handler.addFilter(command_filter)
        logger.addHandler(handler)

    logger.propagate = True
    _logging_configured = True


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append a full traceback for ``exc`` to the log file."""
    path = get_log_path()
    stamp = datetime.now().isoformat(timespec="seconds")
    lines = [
        f"[{stamp}] [{current_command()}] {context} failed: {type(exc).__name__}: {exc}\n",
        *traceback.format_exception(type(exc), exc, exc.__traceback__),
        "\n",
    ]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.writelines(lines)
    except OSError as log_exc:
        _LOGGER.warning("Could not write traceback to %s: %s", path, log_exc)
        return None
    return path
