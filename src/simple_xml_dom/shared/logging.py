"""Structured logging utilities for the XML DOM.

Every record carries the emitting component, an optional correlation ID and
any document context bound to the logger (typically the source path), so the
messages of one open/parse/save cycle can be grouped together.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that attaches component, correlation ID and bound document context."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID grouping one document operation
            component: Component name for structured logging
            context: Fields added to every record, e.g. ``{"file_path": ...}``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger for the same component with extra bound fields."""
        return CorrelationLogger(
            self.logger.name,
            self.correlation_id,
            self.component,
            {**self.context, **context},
        )

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a level would be emitted, to skip building costly extras."""
        return self.logger.isEnabledFor(level)

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]]) -> None:
        if not self.logger.isEnabledFor(level):
            return
        record_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
            **self.context,
        }
        if extra:
            record_extra.update(extra)
        self.logger.log(level, message, extra=record_extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, extra)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for the current document operation
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)
