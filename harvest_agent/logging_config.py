"""
Logging configuration for the harvester.

Console output is human readable by default; JSON output is available for
log aggregation. Both formatters mask GitLab credentials in messages.
"""

from __future__ import annotations

import logging
import re
import sys
import traceback
from datetime import datetime, timezone

from pythonjsonlogger.json import JsonFormatter

_CREDENTIAL_PATTERNS = [
    # GitLab PAT pattern: glpat-xxxxx
    (re.compile(r"glpat-[A-Za-z0-9_-]+"), "glpat-****"),
    (re.compile(r"Bearer [A-Za-z0-9._-]+"), "Bearer ****"),
    # userinfo embedded in a clone URL
    (re.compile(r"(https?://)[^/@\s]+@"), r"\1****@"),
]


def mask_credentials(text: str) -> str:
    """Mask tokens and URL userinfo in text."""
    for pattern, replacement in _CREDENTIAL_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class MaskingJsonFormatter(JsonFormatter):
    """JSON formatter that masks credentials."""

    def format(self, record: logging.LogRecord) -> str:
        record.msg = mask_credentials(record.getMessage())
        record.args = None
        return super().format(record)


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for console output.

    Colors the level name when writing to a terminal.
    """

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human reading."""
        levelname = record.levelname
        if self.use_colors:
            color = self.COLORS.get(levelname, self.COLORS["RESET"])
            levelname = f"{color}{levelname:8}{self.COLORS['RESET']}"
        else:
            levelname = f"{levelname:8}"

        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%H:%M:%S")
        message = mask_credentials(record.getMessage())

        exc_text = ""
        if record.exc_info:
            exc_text = "\n" + mask_credentials("".join(traceback.format_exception(*record.exc_info)))

        return f"{timestamp} {levelname} {record.name}: {message}{exc_text}"


def setup_logging(
    level: int = logging.INFO,
    json_format: bool = False,
    log_file: str | None = None,
) -> logging.Logger:
    """
    Setup logging for the application.

    Args:
        level: Logging level
        json_format: If True, use JSON formatter; otherwise human-readable
        log_file: Optional file path for log output

    Returns:
        Configured logger for the harvest_agent package
    """
    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = MaskingJsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
    else:
        formatter = HumanReadableFormatter(use_colors=True)

    # Logs go to stderr so stdout stays clean for target output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    # Reduce noise from libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger("harvest_agent")
    logger.setLevel(level)
    return logger
