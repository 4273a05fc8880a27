"""Per-run session log: timestamped file plus console echo.

The log file receives private keys in cleartext. It is created owner-only
(0o600) inside the configured log directory.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

SESSION_LOGGER_NAME = "address_creator.session"
LOG_FILE_MODE = 0o600


class SessionFileFormatter(logging.Formatter):
    """``[<ISO-8601 UTC>] <LEVEL: >message`` with the level shown for warnings and up."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{self.formatTime(record)}] {_with_level(record)}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = _with_level(record)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class _BelowError(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


@dataclass
class SessionLog:
    logger: logging.Logger
    path: Path

    def close(self) -> None:
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)


def session_log_path(log_dir: Path, started_at: datetime) -> Path:
    stamp = started_at.strftime("%Y-%m-%dT%H-%M-%S")
    return log_dir / f"address-creator-{stamp}.log"


def open_session_log(
    log_dir: Path,
    started_at: Optional[datetime] = None,
    console: bool = True,
) -> SessionLog:
    path = session_log_path(log_dir, started_at or datetime.now(timezone.utc))
    log_dir.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, LOG_FILE_MODE)
    os.close(fd)
    os.chmod(path, LOG_FILE_MODE)

    logger = logging.getLogger(SESSION_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    file_handler.setFormatter(SessionFileFormatter())
    logger.addHandler(file_handler)

    if console:
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.addFilter(_BelowError())
        stdout_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(stdout_handler)

        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(stderr_handler)

    return SessionLog(logger=logger, path=path)


def _with_level(record: logging.LogRecord) -> str:
    message = record.getMessage()
    if record.levelno >= logging.WARNING:
        return f"{record.levelname}: {message}"
    return message
