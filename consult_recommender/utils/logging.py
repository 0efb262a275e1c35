"""
Logging setup for the consult-recommender CLI.

``configure_logging(config)`` is called once per CLI command, before any
engine work. Library modules only ever do ``logging.getLogger(__name__)``.

Console output goes to **stderr**. Commands print their results on stdout
(``insights`` prints a JSON document there), so log lines must never be
interleaved with it.

With ``json_format = true`` under ``[logging]`` each line is one object::

    {"ts": "2026-02-24T15:00:00Z", "level": "INFO", "logger": "...", "msg": "...", "user_id": "u1"}

Anything passed through ``extra=`` is copied to the top level.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:
    from consult_recommender.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "asyncio")

_STANDARD_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _build_formatter(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return _JsonFormatter()
    return logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_path, encoding="utf-8")


def configure_logging(
    config: "LoggingConfig",
    stream: Optional[TextIO] = None,
) -> None:
    """Install console and optional file handlers on the root logger.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        stream: Console stream. Defaults to ``sys.stderr`` at call time.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = _build_formatter(config)

    handlers: list[logging.Handler] = [
        logging.StreamHandler(stream if stream is not None else sys.stderr)
    ]
    if config.log_file:
        handlers.append(_file_handler(config.log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
