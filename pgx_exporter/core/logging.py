"""Contextual logger for the pool exporter.

Wraps a stdlib logger in an adapter that carries key/value context, so
components can bind their identity once and log plain messages:

    log = logger.with_context(component="metrics_server", port=9090)
    log.info("Metrics server listening")
"""

import logging
import sys
from typing import Any, MutableMapping

from pgx_exporter.core.config import settings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter that appends bound context as ``key=value`` pairs."""

    def __init__(self, logger: logging.Logger, dimensions: dict[str, Any] | None = None) -> None:
        super().__init__(logger, dimensions or {})
        self.dimensions: dict[str, Any] = dict(dimensions or {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.dimensions:
            return msg, kwargs
        context = " ".join(f"{key}={value}" for key, value in self.dimensions.items())
        return f"{msg} [{context}]", kwargs

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a new logger with ``dimensions`` merged into the current context."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})


def _configure_root_logger(name: str) -> logging.Logger:
    base = logging.getLogger(name)
    if not base.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        base.addHandler(handler)
    base.setLevel(settings.LOG_LEVEL.upper())
    return base


logger = ContextualLogger(_configure_root_logger("pgx_exporter"))
