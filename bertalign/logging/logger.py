# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for bertalign.

Every log entry is a single JSON line with a timestamp, level, the source
module and the message. Anything passed through `extra=` is merged into the
same object, which is how the tokenizer and annotator attach counts and ids:

  {"ts": "2026-...", "level": "INFO", "module": "bertalign.tokenizer.vocab.core",
   "msg": "Vocabulary loaded", "size": 30522, "sha256": "..."}

`get_logger` is the only sanctioned way to create a logger in this package.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came from
# the caller's `extra` and belongs in the JSON line.
_RECORD_ATTRS: frozenset[str] = frozenset({
    "name", "msg", "args", "created", "relativeCreated", "exc_info",
    "exc_text", "stack_info", "lineno", "funcName", "pathname", "filename",
    "module", "levelno", "levelname", "processName", "process",
    "threadName", "thread", "message", "msecs", "taskName",
})

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

PACKAGE_LOGGER = "bertalign"

# Level given to loggers created without an explicit one. Module loggers are
# created at import time, so set_package_log_level updates this as well.
_default_level_name = "INFO"


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts       ISO 8601 UTC time the record was created
      level    level name
      module   logger name (usually the dotted module path)
      msg      the formatted message

    Exceptions logged with `exc_info=True` end up under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create (or fetch) a structured JSON logger.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Defaults to
                   the level last passed to set_package_log_level (INFO).
        log_file: Optional file that receives the same JSON lines as stdout.

    Returns:
        A configured logging.Logger.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level if log_level is not None else _default_level_name)
    logger.setLevel(level)

    # Calling get_logger twice for one name must not stack handlers, but the
    # new level still applies to the ones already attached.
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def set_package_log_level(log_level: str) -> None:
    """
    Apply `log_level` to every bertalign logger, including the module loggers
    created at import time and any created later without an explicit level.

    Raises:
        ValueError: If the level name is not recognized.
    """
    global _default_level_name

    level = _resolve_log_level(log_level)
    _default_level_name = log_level.upper()

    for name in list(logging.Logger.manager.loggerDict):
        if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
