"""Diagnostic and metric types shared by parse and save results."""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Tolerated anomalies (stray close name, dropped element)
    ERROR = auto()      # Errors that aborted the operation
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    line: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.line is not None:
            result["line"] = self.line
        if self.details:
            result["details"] = dict(self.details)
        return result


@dataclass
class PerformanceMetrics:
    """Counters collected while reading or writing a document."""

    processing_time_ms: float = 0.0
    lines_processed: int = 0
    characters_processed: int = 0
    tags_processed: int = 0
    elements_created: int = 0
    comments_skipped: int = 0

    @property
    def lines_per_second(self) -> float:
        """Calculate lines processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.lines_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "lines_processed": self.lines_processed,
            "characters_processed": self.characters_processed,
            "tags_processed": self.tags_processed,
            "elements_created": self.elements_created,
            "comments_skipped": self.comments_skipped,
        }
