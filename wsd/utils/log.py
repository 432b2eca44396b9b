"""
Logging utilities for the wsd engine.

Provides unified structured logging:
- pretty console output via Rich
- structured (JSON) file output when `WSD_LOG_FILE` names a path
- a process-wide level override through `WSD_LOG_LEVEL` (e.g. DEBUG to trace
  the diagnostics pipeline)
"""

import json
import logging
import os
from pathlib import Path

from rich.logging import RichHandler

LOG_FILE_ENV = "WSD_LOG_FILE"
LOG_LEVEL_ENV = "WSD_LOG_LEVEL"


class JSONFormatter(logging.Formatter):
    """
    Formatter that serializes log records to JSON.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level":     record.levelname,
            "logger":    record.name,
            "function":  record.funcName,
            "message":   record.getMessage(),
        }
        return json.dumps(log_record)


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """
    Return a configured logger for the given name.

    Attaches:
    - a RichHandler for console output
    - when `WSD_LOG_FILE` is set, a FileHandler writing JSON lines to that path

    Parameters
    ----------
    name
        Logger name (typically __name__).
    level
        Log level (int or string). Defaults to `WSD_LOG_LEVEL`, else INFO.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        # Console via Rich
        console_handler = RichHandler(rich_tracebacks=True, show_path=False)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

        # Optional JSON file output
        log_file = os.environ.get(LOG_FILE_ENV)
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    return logger
