"""
Structured logging for the DC adjuster.

Uses Python's standard ``logging`` module with a JSON-structured formatter
so hook and batch logs can be shipped to any structured-log aggregator
without fragile text parsing.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Dict, Mapping, Optional, TextIO

from pwl_dc_adjuster.config import MODULE_ID

_CONTEXT_KEYS = ("batch_id", "entity_name", "entity_kind", "entity_level", "source")


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


class _JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": time.strftime(
                "%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)
            ),
            "level": record.levelname,
            "logger": record.name,
            "module_id": MODULE_ID,
            "message": record.getMessage(),
        }
        # Attach any extra fields bound via LogRecord.__dict__
        for key, value in record.__dict__.items():
            if key.startswith("ctx_") or key in _CONTEXT_KEYS:
                payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(payload, ensure_ascii=False, default=str)
        except Exception:  # noqa: BLE001
            return json.dumps({"message": str(payload)})


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------


def get_logger(
    name: str = "pwl_dc_adjuster",
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Return a logger that emits JSON-structured output to *stream* (stdout by default).

    Idempotent: repeated calls with the same *name* return the same logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(_JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    if level:
        logger.setLevel(level.upper())
    return logger


# ---------------------------------------------------------------------------
# Context-enriched log helper
# ---------------------------------------------------------------------------


class AdjusterLogger:
    """
    Thin wrapper around :class:`logging.Logger` that attaches batch / entity
    context to every log record.

    Usage::

        log = AdjusterLogger(batch_id="b-1")
        log.info("item_adjusted", entity_name="Fireball", entity_level=3)
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        **context: Any,
    ) -> None:
        self._logger = logger or logging.getLogger("pwl_dc_adjuster")
        self._ctx: Dict[str, Any] = dict(context)

    def bind(self, **context: Any) -> "AdjusterLogger":
        """Return a new logger carrying this context plus *context*."""
        return AdjusterLogger(self._logger, **{**self._ctx, **context})

    def _log(self, level: int, event: str, exc_info: bool = False, **extra: Any) -> None:
        extra.update(self._ctx)
        self._logger.log(level, event, extra=extra, exc_info=exc_info)

    def debug(self, event: str, **kw: Any) -> None:
        self._log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self._log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self._log(logging.WARNING, event, **kw)

    def error(self, event: str, **kw: Any) -> None:
        self._log(logging.ERROR, event, **kw)

    def exception(self, event: str, **kw: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(logging.ERROR, event, exc_info=True, **kw)

    def log_updates(self, updates: Mapping[str, Any]) -> None:
        """Log a compact summary of a proposed field-update map."""
        self.info(
            "updates_proposed",
            ctx_fields=sorted(updates),
            ctx_field_count=len(updates),
        )
