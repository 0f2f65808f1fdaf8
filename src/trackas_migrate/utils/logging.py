"""
Logging configuration for trackas-migrate.

Everything logs under the ``trackas_migrate`` logger. Console output goes
to stderr so stdout stays reserved for command results; an optional log
file records the full run at DEBUG.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "trackas_migrate"
DEFAULT_LOG_FILE = "logs/trackas-migrate.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogFileFormatter(logging.Formatter):
    """One parseable line per record; tracebacks follow on their own lines."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s", datefmt=DATE_FORMAT)


class PlainConsoleFormatter(logging.Formatter):
    """``LEVEL: timestamp - message``; errors also name the source line."""

    def __init__(self) -> None:
        super().__init__(datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{record.levelname}: {self.formatTime(record, self.datefmt)}"
        if record.levelno >= logging.ERROR:
            prefix += f" - {Path(record.pathname).name}:{record.lineno}"
        text = f"{prefix} - {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def _parse_level(level: str | int) -> int:
    """Level name or number to a logging level; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(str(level).upper(), logging.INFO)


def _console_handler(level: int, use_rich: bool, format_string: str | None) -> logging.Handler:
    if use_rich:
        return RichHandler(
            console=Console(stderr=True),
            level=level,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            log_time_format="[%X]",
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(PlainConsoleFormatter() if format_string is None else logging.Formatter(format_string))
    return handler


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_string: str | None = None,
    file_mode: str = "a",
    console_enabled: bool = True,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure the ``trackas_migrate`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        level: Console level, by name ("DEBUG", "INFO", ...) or number
        log_file: Also log to this file (parent directories are created)
        format_string: Format for the plain console handler
        file_mode: "a" to append to ``log_file``, "w" to truncate it
        console_enabled: Log to stderr at all
        use_rich: Rich console handler instead of the plain formatter

    Returns:
        The configured logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level_int = _parse_level(level)
    logger.setLevel(level_int)

    if console_enabled:
        logger.addHandler(_console_handler(level_int, use_rich, format_string))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode=file_mode, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(LogFileFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def setup_logging_from_config(config: dict[str, Any], project_dir: Path | None = None) -> logging.Logger:
    """
    Configure logging from the ``logging`` section of config.yaml.

    Recognized keys: ``level``, ``format``, ``console_enabled``,
    ``console_type`` ("rich" or "plain"), ``file_enabled``, ``file`` and
    ``file_mode``. A relative ``file`` is placed under ``project_dir``.
    """
    section = config.get("logging") or {}

    log_file = None
    if section.get("file_enabled", False):
        log_file = Path(section.get("file") or DEFAULT_LOG_FILE)
        if project_dir is not None and not log_file.is_absolute():
            log_file = project_dir / log_file

    return setup_logging(
        level=section.get("level", logging.INFO),
        log_file=log_file,
        format_string=section.get("format"),
        file_mode=section.get("file_mode", "a"),
        console_enabled=section.get("console_enabled", True),
        use_rich=section.get("console_type", "rich") == "rich",
    )


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the ``trackas_migrate`` hierarchy (e.g. ``trackas_migrate.migrations.runner``)."""
    return logging.getLogger(name)
