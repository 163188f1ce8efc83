from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from retrosfx.logging_utils import (
    DEBUG_ENV,
    LOG_DIR_ENV,
    command_context,
    configure_logging,
    current_command,
    get_log_dir,
    get_log_path,
    log_exception,
)


def test_log_dir_uses_env_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "retrosfx.log"


def test_log_dir_default(monkeypatch) -> None:
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    assert get_log_dir().parts[-2:] == ("retrosfx", "logs")


def test_log_exception_appends_traceback(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    try:
        raise ValueError("boom")
    except ValueError as exc:
        with command_context("render"):
            path = log_exception("render", exc)
    assert path == tmp_path / "retrosfx.log"
    text = path.read_text(encoding="utf-8")
    assert "[render] render failed: ValueError: boom" in text
    assert "Traceback" in text


def test_configure_logging_adds_file_handler(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging(force=True)
    logger = logging.getLogger("retrosfx")
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert file_handlers
    assert Path(file_handlers[-1].baseFilename) == tmp_path / "retrosfx.log"
    configure_logging(force=True)
    assert len([h for h in logger.handlers if isinstance(h, logging.FileHandler)]) == 1


def test_command_context_tags_file_records(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging(force=True)
    logger = logging.getLogger("retrosfx.test")
    with command_context("render"):
        assert current_command() == "render"
        logger.info("inside")
    logger.info("outside")
    assert current_command() == "-"
    for handler in logging.getLogger("retrosfx").handlers:
        handler.flush()
    text = (tmp_path / "retrosfx.log").read_text(encoding="utf-8")
    assert "[render] retrosfx.test: inside" in text
    assert "[-] retrosfx.test: outside" in text


def test_console_handler_uses_rich(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    configure_logging(force=True)
    consoles = [h for h in logging.getLogger("retrosfx").handlers if isinstance(h, RichHandler)]
    assert len(consoles) == 1
    assert consoles[0].level == logging.INFO
