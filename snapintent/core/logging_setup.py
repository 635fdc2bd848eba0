# snapintent/core/logging_setup.py
"""
Process-wide logging setup.

- stderr StreamHandler always; RotatingFileHandler when a log file is configured.
- RedactingFilter masks API keys in messages and args before any handler sees them.
- Idempotent: calling configure_logging twice does not stack handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler

from snapintent.config.settings import AppConfig

ROOT_LOGGER = "snapintent"
_HANDLER_TAG = "_snapintent_handler"
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class RedactingFilter(logging.Filter):
    """Replace any configured secret with [REDACTED]."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        for s in self._secrets:
            text = text.replace(s, "[REDACTED]")
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if self._secrets:
            record.msg = self.redact(record.getMessage())
            record.args = None
        return True


def configure_logging(config: AppConfig) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.getLevelName(config.logging.level.upper())
    logger.setLevel(level if isinstance(level, int) else logging.INFO)

    for h in list(logger.handlers):
        if getattr(h, _HANDLER_TAG, False):
            logger.removeHandler(h)
            h.close()

    redactor = RedactingFilter(config.secrets())
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    stream.addFilter(redactor)
    setattr(stream, _HANDLER_TAG, True)
    logger.addHandler(stream)

    if config.logging.file is not None:
        path = config.logging.file
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(formatter)
        handler.addFilter(redactor)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


__all__ = ["RedactingFilter", "configure_logging", "ROOT_LOGGER"]
