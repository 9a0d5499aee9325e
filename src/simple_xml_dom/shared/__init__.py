"""Shared utilities for the XML DOM.

This module provides the error hierarchy, configuration, result types and
logging helpers used by the tree, parsing and document layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DomConfig,
)
from .errors import (
    EmptyDocumentError,
    FileAccessError,
    InvalidNameError,
    MalformedTagError,
    ReparentError,
    UnmatchedCloseError,
    XMLDomError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "DomConfig",
    "EmptyDocumentError",
    "FileAccessError",
    "InvalidNameError",
    "MalformedTagError",
    "ReparentError",
    "UnmatchedCloseError",
    "XMLDomError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
