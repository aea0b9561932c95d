"""Logging utilities for opencode-notify."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

# Global logger instance (singleton)
_logger: Optional[logging.Logger] = None

_TRUTHY = ("1", "true", "yes", "on")


def get_logger() -> logging.Logger:
    """Get or create the ocn logger."""
    global _logger
    if _logger is None:
        _logger = _setup_logger()
    return _logger


def _is_truthy(value: Optional[str]) -> bool:
    return bool(value) and value.lower() in _TRUTHY


def _setup_logger() -> logging.Logger:
    """Setup logging.

    Always logs to stderr, prefixed with "[ocn]". Debug output is only shown
    when OCN_VERBOSE is set.

    Set OCN_LOG_FILE environment variable to additionally enable file logging.
    - Set to a file path to log to that specific file.
    - Set to "1", "true", "yes", or "on" to log to the default logs directory.
    """
    logger = logging.getLogger("ocn")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(
        logging.DEBUG if _is_truthy(os.environ.get("OCN_VERBOSE")) else logging.INFO
    )
    stream_handler.setFormatter(logging.Formatter("[ocn] %(levelname)s: %(message)s"))
    logger.addHandler(stream_handler)

    log_env = os.environ.get("OCN_LOG_FILE")

    if log_env:
        log_path: Path

        if _is_truthy(log_env):
            logs_dir = Path.cwd() / "logs"
            logs_dir.mkdir(exist_ok=True)
            log_path = logs_dir / f"ocn_{datetime.now().strftime('%Y-%m-%d')}.log"
        else:
            log_path = Path(log_env)
            if log_path.parent:
                log_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)
        except Exception as e:
            # Fallback to stderr if file logging fails
            logger.warning(f"Failed to setup log file {log_path}: {e}")

    return logger
