from __future__ import annotations

import logging
from pathlib import Path

import pytest

from deskauth.core.config import LoggingSettings
from deskauth.core.logging import (
    SecureLogFilter,
    SecureRotatingFileHandler,
    configure_logging,
    get_secure_logger,
)


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("deskauth.test", logging.INFO, __file__, 1, msg, args, None)


def test_filter_redacts_password_pairs() -> None:
    record = _record("login attempt password=Hunter2Pass")

    assert SecureLogFilter().filter(record) is True
    assert "Hunter2Pass" not in record.getMessage()
    assert "[REDACTED]" in record.getMessage()


def test_filter_redacts_argon2_hashes_in_args() -> None:
    encoded = "$argon2id$v=19$m=1024,t=1,p=1$c2FsdHNhbHQ$aGFzaGhhc2g"
    record = _record("stored %s", encoded)

    SecureLogFilter().filter(record)

    assert encoded not in record.getMessage()
    assert "aGFzaGhhc2g" not in record.getMessage()


def test_filter_leaves_plain_messages_alone() -> None:
    record = _record("Session started for user %d", 3)

    SecureLogFilter().filter(record)

    assert record.getMessage() == "Session started for user 3"


def test_configure_logging_writes_redacted_file(tmp_path: Path) -> None:
    settings = LoggingSettings(
        level="DEBUG",
        enable_console=False,
        enable_file=True,
        log_dir=tmp_path,
    )
    logger = configure_logging(settings)

    logging.getLogger("deskauth.core.auth.auth_service").info("password=TopSecret1")
    for handler in logger.handlers:
        handler.flush()

    contents = (tmp_path / "deskauth.log").read_text(encoding="utf-8")
    assert "TopSecret1" not in contents
    assert "[REDACTED]" in contents

    configure_logging(LoggingSettings(enable_console=False))
    assert logger.handlers == []


def test_get_secure_logger_does_not_propagate() -> None:
    logger = get_secure_logger("deskauth.tests.standalone", LoggingSettings(level="WARNING"))

    assert logger.propagate is False
    assert logger.level == logging.WARNING
    assert get_secure_logger("deskauth.tests.standalone") is logger
    assert len(logger.handlers) == 1


def test_file_handler_rejects_traversal(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        SecureRotatingFileHandler(tmp_path / ".." / "escape.log")


def test_filter_merges_arguments_before_redacting() -> None:
    record = _record("password=%s", "Hunter2")

    SecureLogFilter().filter(record)

    message = record.getMessage()
    assert "Hunter2" not in message
    assert "[REDACTED]" in message
    assert record.args is None
