"""
Brief: Tests for cococo.config.logging_config.init_logging and formatter.

Inputs:
  - None

Outputs:
  - None
"""

import logging
import re
from pathlib import Path

from cococo.config.logging_config import (
    BracketLevelFormatter,
    init_logging,
    resolve_level,
)


def test_init_logging_adds_stderr_handler():
    """
    Brief: init_logging configures root logger with stderr handler by default.

    Inputs:
      - cfg: minimal dict with level

    Outputs:
      - None: Asserts StreamHandler present and level applied
    """
    init_logging({"level": "debug"})
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(type(h) is logging.StreamHandler for h in root.handlers)


def test_init_logging_stderr_disabled_replaces_handlers():
    """
    Brief: stderr=False leaves no handlers and removes previous ones.

    Inputs:
      - None

    Outputs:
      - None
    """
    init_logging({"level": "warn", "stderr": False})
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert root.handlers == []


def test_init_logging_file_handler_writes(tmp_path):
    """
    Brief: init_logging creates file handler and writes formatted entries.

    Inputs:
      - cfg: file path and level

    Outputs:
      - None: Asserts file created and contains message
    """
    log_path = tmp_path / "nested" / "cococo.log"
    init_logging({"level": "info", "stderr": False, "file": str(log_path)})
    logging.getLogger("cococo.test").info("file message")
    for h in logging.getLogger().handlers:
        h.flush()
    content = Path(log_path).read_text()
    assert "file message" in content
    assert "[info] cococo.test:" in content


def test_bracket_formatter_tags_and_utc_timestamp():
    """
    Brief: Records render as "<UTC Z time> [tag] name: message".

    Inputs:
      - None

    Outputs:
      - None
    """
    formatter = BracketLevelFormatter(
        fmt="%(asctime)s %(level_tag)s %(name)s: %(message)s"
    )
    record = logging.LogRecord(
        "cococo.x", logging.WARNING, __file__, 1, "hi %s", ("there",), None
    )
    text = formatter.format(record)
    assert re.fullmatch(
        r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\dZ \[warn\] cococo\.x: hi there",
        text,
    )

    record.levelno = 15
    assert "[lvl15]" in formatter.format(record)


def test_resolve_level_unknown_defaults_to_info():
    """
    Brief: Unknown level names fall back to INFO.

    Inputs:
      - None

    Outputs:
      - None
    """
    assert resolve_level("crit") == logging.CRITICAL
    assert resolve_level("WARNING") == logging.WARNING
    assert resolve_level("loud") == logging.INFO
