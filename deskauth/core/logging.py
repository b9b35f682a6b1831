"""
Secure Logging Module
=====================

Logging setup that keeps credentials out of log output.

Features:
- Automatic redaction of password pairs and Argon2 hash strings
- Rotating log files with size limits
- One configuration entry point driven by LoggingSettings
"""

from __future__ import annotations

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Pattern

from deskauth.core.config import LoggingSettings


ROOT_LOGGER_NAME: Final[str] = "deskauth"

# Patterns for sensitive data detection
_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("password_hash", re.compile(r'\$argon2(?:id|i|d)\$[^\s"\']+')),
    ("secret", re.compile(r'(?i)(secret|private[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("token", re.compile(r'(?i)(token|bearer)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    The record is always kept. Its arguments are merged into the message
    before redaction, so the record leaves the filter with no arguments.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        # Merge arguments first so a pattern cannot swallow a placeholder
        message = record.getMessage()
        record.msg = self._sanitize(message)
        record.args = None
        return True

    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from text."""
        result = text

        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)

        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)

        return result


class SecureRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that creates its directory and refuses
    path traversal in the log file name.
    """

    def __init__(
        self,
        filename: str | Path,
        mode: str = "a",
        maxBytes: int = 10 * 1024 * 1024,
        backupCount: int = 5,
        encoding: str = "utf-8",
    ) -> None:
        if ".." in Path(filename).parts:
            raise ValueError("Log path cannot contain path traversal sequences")

        log_path = Path(filename).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            str(log_path),
            mode=mode,
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
        )


def _build_handlers(settings: LoggingSettings, file_name: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    secure_filter = SecureLogFilter()

    if settings.enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(settings.format, datefmt="%H:%M:%S"))
        handlers.append(console_handler)

    if settings.enable_file and settings.log_dir is not None:
        file_handler = SecureRotatingFileHandler(
            filename=settings.log_dir / file_name,
            maxBytes=settings.max_file_size_bytes,
            backupCount=settings.backup_count,
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s",
            datefmt=settings.date_format,
        ))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(logging.DEBUG)
        handler.addFilter(secure_filter)

    return handlers


def get_secure_logger(name: str, settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Create a standalone logger with automatic secret filtering.

    Args:
        name: Logger name (typically __name__)
        settings: Logging settings (defaults apply if not provided)

    Returns:
        Configured logger that does not propagate to the root logger
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    settings = settings or LoggingSettings()
    logger.setLevel(getattr(logging, settings.level.upper()))
    for handler in _build_handlers(settings, f"{name.replace('.', '_')}.log"):
        logger.addHandler(handler)
    logger.propagate = False

    return logger


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Configure the package logger that every deskauth module logs through.

    Call once at application startup. Calling again replaces the handlers.

    Returns:
        The configured "deskauth" logger
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(settings, "deskauth.log"):
        logger.addHandler(handler)

    return logger
