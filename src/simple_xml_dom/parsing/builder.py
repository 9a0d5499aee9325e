"""Tree building from scanned tags.

``TreeBuilder`` drives the tree model from the tags emitted by the line
scanner: opening tags descend, closing tags climb back to the parent, and
self-closing tags attach a leaf. Any error aborts the build; no partial tree
is returned. ``ParseResult`` is the value handed to callers of the document
API, carrying either the root or the error together with diagnostics.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from simple_xml_dom.parsing.scanner import RawTag, TagScanner
from simple_xml_dom.parsing.tags import TagKind, classify_tag, parse_tag, split_tag
from simple_xml_dom.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    DomConfig,
    EmptyDocumentError,
    MalformedTagError,
    PerformanceMetrics,
    UnmatchedCloseError,
    XMLDomError,
    get_logger,
)
from simple_xml_dom.tree import XMLNode, render_node


@dataclass
class ParseResult:
    """Outcome of reading a document.

    Exactly one of ``root`` and ``error`` is set.
    """

    root: Optional[XMLNode] = None
    success: bool = True
    error: Optional[XMLDomError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    source: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Get total number of elements in the document."""
        if self.root is None:
            return 0
        return sum(1 for _ in self.root.iter())

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        line: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                line=line,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def fail(self, error: XMLDomError, component: str) -> None:
        """Record ``error`` as the reason this result has no document."""
        self.root = None
        self.success = False
        self.error = error
        self.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(error),
            component,
            line=error.line,
            details={"error_type": type(error).__name__},
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def unwrap(self) -> XMLNode:
        """Return the document root, or raise the error that prevented it."""
        if self.error is not None:
            raise self.error
        if self.root is None:
            raise EmptyDocumentError("Parse result holds no document")
        return self.root

    def render(self, indent: str = "\t") -> str:
        return render_node(self.root, indent)

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        return {
            "source": self.source,
            "success": self.success,
            "root": self.root.name if self.root is not None else None,
            "element_count": self.element_count,
            "error": str(self.error) if self.error is not None else None,
            "error_type": type(self.error).__name__ if self.error is not None else None,
            "warnings": len(self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)),
            "performance": self.performance.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


class TreeBuilder:
    """Builds a single-rooted node tree from a sequence of text lines."""

    def __init__(
        self,
        config: Optional[DomConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or DomConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")
        self._reset_state()

    def _reset_state(self) -> None:
        self.diagnostics: List[DiagnosticEntry] = []
        self.metrics = PerformanceMetrics()
        self._root: Optional[XMLNode] = None
        self._current_parent: Optional[XMLNode] = None
        self._open_depth = 0
        # Strong references keeping dropped top-level subtrees alive until they close
        self._dropped: List[XMLNode] = []

    def build(self, lines: Iterable[str]) -> XMLNode:
        """Parse ``lines`` and return the document root.

        Raises:
            UnmatchedCloseError: more closes than opens, or ``>`` without ``<``.
            MalformedTagError: a tag without name or envelope, or truncated input.
            EmptyDocumentError: the input holds no element.
        """
        self._reset_state()
        start_time = time.perf_counter()
        scanner = TagScanner(self.correlation_id)
        try:
            for raw_tag in scanner.scan(lines):
                self._process_tag(raw_tag)
        finally:
            self.metrics.lines_processed = scanner.line_number
            self.metrics.characters_processed = scanner.characters_processed
            self.metrics.comments_skipped = scanner.comments_skipped
            self.metrics.processing_time_ms = (time.perf_counter() - start_time) * 1000

        if self._root is None:
            raise EmptyDocumentError("Document contains no element")
        if self._open_depth > 0:
            self._warn(
                f"{self._open_depth} element(s) left unclosed at end of input",
                self.metrics.lines_processed,
                {"innermost": self._current_parent.name if self._current_parent is not None else None},
            )

        self.logger.debug(
            "Tree built",
            extra={
                "root": self._root.name,
                "elements": self.metrics.elements_created,
                "lines": self.metrics.lines_processed,
            },
        )
        return self._root

    def _process_tag(self, raw_tag: RawTag) -> None:
        self.metrics.tags_processed += 1
        kind = classify_tag(raw_tag.text)

        if kind is TagKind.DECLARATION:
            if not self.config.skip_declarations:
                raise MalformedTagError(
                    f'Declarations are not supported: "{raw_tag.text}"', raw_tag.line
                )
            self.logger.debug("Skipping declaration", extra={"line": raw_tag.line})
            return

        if kind is TagKind.CLOSE:
            self._close_element(raw_tag)
            return

        node = parse_tag(raw_tag.text, raw_tag.line)
        self.metrics.elements_created += 1
        self._check_depth(node, raw_tag)
        if kind is TagKind.SELF_CLOSING:
            self._add_leaf(node, raw_tag)
        else:
            self._open_element(node, raw_tag)

    def _open_element(self, node: XMLNode, raw_tag: RawTag) -> None:
        if self._current_parent is not None:
            self._current_parent.add_child(node)
        elif self._root is None:
            self._root = node
        else:
            self._drop_top_level(node, raw_tag)
        self._current_parent = node
        self._open_depth += 1

    def _add_leaf(self, node: XMLNode, raw_tag: RawTag) -> None:
        if self._current_parent is not None:
            self._current_parent.add_child(node)
        elif self._root is None:
            self._root = node
        else:
            self._drop_top_level(node, raw_tag)

    def _close_element(self, raw_tag: RawTag) -> None:
        closing = self._current_parent
        if closing is None:
            raise UnmatchedCloseError(
                f'Closing tag "{raw_tag.text}" has no matching opening tag', raw_tag.line
            )

        name, _ = split_tag(raw_tag.text, raw_tag.line)
        if name != closing.name:
            message = f"</{name}> closes <{closing.name}>"
            if self.config.mismatched_close == "error":
                raise UnmatchedCloseError(message, raw_tag.line)
            if self.config.mismatched_close == "warn":
                self._warn(message, raw_tag.line, {"expected": closing.name, "found": name})

        self._current_parent = closing.parent
        self._open_depth -= 1

    def _check_depth(self, node: XMLNode, raw_tag: RawTag) -> None:
        max_depth = self.config.max_depth
        if max_depth is not None and self._open_depth > max_depth:
            raise MalformedTagError(
                f"<{node.name}> is nested deeper than max_depth={max_depth}",
                raw_tag.line,
            )

    def _drop_top_level(self, node: XMLNode, raw_tag: RawTag) -> None:
        self._dropped.append(node)
        self._warn(
            f"<{node.name}> follows the closed document root and was dropped",
            raw_tag.line,
            {"root": self._root.name if self._root is not None else None},
        )

    def _warn(
        self,
        message: str,
        line: Optional[int],
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.logger.warning(message, extra={"line": line, **(details or {})})
        self.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.WARNING,
                message=message,
                component="tree_builder",
                line=line,
                details=details,
                correlation_id=self.correlation_id,
            )
        )
