"""Document API: read, parse, render and save XML DOM documents.

Errors are returned, not raised, at this boundary: every function hands back
a result object whose ``success`` flag and ``error`` field describe what went
wrong (``FileAccessError``, ``MalformedTagError``, ``UnmatchedCloseError``).

Progressive disclosure:
- Level 1: module functions - parse_string(), parse_lines(), open_document(),
  save_document(), render_document()
- Level 2: configured, reusable parser - XMLDomParser
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from simple_xml_dom.parsing import ParseResult, TreeBuilder
from simple_xml_dom.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    DomConfig,
    FileAccessError,
    XMLDomError,
    get_logger,
)
from simple_xml_dom.tree import XMLNode, render_node

PathType = Union[str, Path]

MS_PER_SECOND = 1000  # Milliseconds per second conversion


@dataclass
class SaveResult:
    """Outcome of writing a document to disk."""

    path: Path
    success: bool = True
    bytes_written: int = 0
    error: Optional[FileAccessError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "success": self.success,
            "bytes_written": self.bytes_written,
            "error": str(self.error) if self.error is not None else None,
        }


class XMLDomParser:
    """Configured XML DOM reader/writer, reusable across documents.

    Attributes:
        config: Parser and renderer configuration
        correlation_id: Correlation ID attached to logs and diagnostics

    Examples:
        >>> parser = XMLDomParser(DomConfig.with_spaces(2))
        >>> result = parser.parse_string('<root><item id="1"/></root>')
        >>> result.root.find("item").get_attribute("id")
        '1'
        >>> print(parser.render(result.root))
        <root>
          <item id="1"/>
        </root>
    """

    def __init__(
        self,
        config: Optional[DomConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or DomConfig.default()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "dom_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

    def parse_lines(self, lines: Iterable[str], source: Optional[str] = None) -> ParseResult:
        """Parse a sequence of text lines into a document."""
        result = ParseResult(source=source, correlation_id=self.correlation_id)
        builder = TreeBuilder(self.config, self.correlation_id)
        try:
            result.root = builder.build(lines)
        except XMLDomError as e:
            result.diagnostics.extend(builder.diagnostics)
            result.fail(e, "tree_builder")
            self.logger.warning(
                "Document rejected",
                extra={"source": source, "error": str(e), "error_type": type(e).__name__},
            )
        else:
            result.diagnostics.extend(builder.diagnostics)
        result.performance = builder.metrics

        self._record(result)
        return result

    def parse_string(self, text: str, source: Optional[str] = None) -> ParseResult:
        """Parse a whole document held in a string."""
        return self.parse_lines(text.splitlines(), source)

    def open(self, path: PathType) -> ParseResult:
        """Read and parse the document stored at ``path``.

        Missing, unreadable or undecodable files give a failed result carrying
        a ``FileAccessError``.
        """
        path_obj = Path(path)
        log = self.logger.bind(file_path=str(path_obj))
        log.info("Opening document", extra={"encoding": self.config.encoding})
        try:
            lines = read_lines(path_obj, self.config.encoding)
        except FileAccessError as e:
            result = ParseResult(source=str(path_obj), correlation_id=self.correlation_id)
            result.fail(e, "document_reader")
            log.error("Cannot open document", extra={"error": str(e)})
            self._record(result)
            return result
        return self.parse_lines(lines, source=str(path_obj))

    def render(self, node: Optional[XMLNode]) -> str:
        """Render ``node`` with the configured indentation and line ending."""
        text = render_node(node, self.config.indent)
        if text and self.config.trailing_newline:
            text += "\n"
        return text

    def save(self, node: Optional[XMLNode], path: PathType) -> SaveResult:
        """Render ``node`` and write it to ``path`` in the configured encoding."""
        path_obj = Path(path)
        result = SaveResult(path=path_obj)
        if node is None:
            result.diagnostics.append(
                DiagnosticEntry(
                    severity=DiagnosticSeverity.WARNING,
                    message="No node given; writing an empty document",
                    component="document_writer",
                    correlation_id=self.correlation_id,
                )
            )

        try:
            result.bytes_written = write_bytes(
                path_obj, self.render(node).encode(self.config.encoding)
            )
        except UnicodeEncodeError as e:
            self._fail_save(
                result, FileAccessError(f"Cannot encode document as {self.config.encoding}: {e}")
            )
        except FileAccessError as e:
            self._fail_save(result, e)
        else:
            self.logger.bind(file_path=str(path_obj)).info(
                "Document saved", extra={"bytes_written": result.bytes_written}
            )
        return result

    def _fail_save(self, result: SaveResult, error: FileAccessError) -> None:
        result.success = False
        result.error = error
        result.diagnostics.append(
            DiagnosticEntry(
                severity=DiagnosticSeverity.ERROR,
                message=str(error),
                component="document_writer",
                correlation_id=self.correlation_id,
            )
        )
        self.logger.bind(file_path=str(result.path)).error(
            "Cannot save document", extra={"error": str(error)}
        )

    def _record(self, result: ParseResult) -> None:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count if self._parse_count else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count if self._parse_count else 0.0
            ),
        }

    def reset_statistics(self) -> None:
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0


def read_lines(path: Path, encoding: str = "utf-8") -> List[str]:
    """Read ``path`` as text lines.

    Raises:
        FileAccessError: if the file cannot be opened or decoded.
    """
    start_time = time.perf_counter()
    try:
        with path.open("r", encoding=encoding) as handle:
            lines = handle.read().splitlines()
    except FileNotFoundError as e:
        raise FileAccessError(f"File not found: {path}") from e
    except IsADirectoryError as e:
        raise FileAccessError(f"Path is not a file: {path}") from e
    except PermissionError as e:
        raise FileAccessError(f"Permission denied accessing file: {path}") from e
    except UnicodeDecodeError as e:
        raise FileAccessError(f"Cannot decode {path} as {encoding}: {e.reason}") from e
    except OSError as e:
        raise FileAccessError(f"Can't open xml {path}: {e}") from e

    get_logger(__name__, component="document_reader").debug(
        "Document read",
        extra={
            "file_path": str(path),
            "line_count": len(lines),
            "read_time_ms": (time.perf_counter() - start_time) * MS_PER_SECOND,
        },
    )
    return lines


def write_bytes(path: Path, content: bytes) -> int:
    """Create or truncate ``path`` and write ``content``, flushed to disk.

    Raises:
        FileAccessError: if the file cannot be created or written.
    """
    try:
        with path.open("wb") as handle:
            handle.write(content)
            handle.flush()
    except OSError as e:
        raise FileAccessError(f"Cannot write {path}: {e}") from e
    return len(content)


def parse_lines(
    lines: Iterable[str],
    config: Optional[DomConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a sequence of text lines.

    Examples:
        >>> result = parse_lines(['<root>', '  <leaf a="1"/>', '</root>'])
        >>> result.root.children[0].name
        'leaf'
    """
    return XMLDomParser(config, correlation_id).parse_lines(lines)


def parse_string(
    text: str,
    config: Optional[DomConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse a document held in a string.

    Examples:
        >>> parse_string('<root/>').root.name
        'root'
        >>> result = parse_string('</root>')
        >>> result.success, type(result.error).__name__
        (False, 'UnmatchedCloseError')
    """
    return XMLDomParser(config, correlation_id).parse_string(text)


def open_document(
    path: PathType,
    config: Optional[DomConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Read and parse the document at ``path``."""
    return XMLDomParser(config, correlation_id).open(path)


def save_document(
    node: Optional[XMLNode],
    path: PathType,
    config: Optional[DomConfig] = None,
    correlation_id: Optional[str] = None
) -> SaveResult:
    """Render ``node`` and write it to ``path``."""
    return XMLDomParser(config, correlation_id).save(node, path)


def render_document(node: Optional[XMLNode], config: Optional[DomConfig] = None) -> str:
    """Render ``node`` using the indentation and line ending of ``config``."""
    return XMLDomParser(config).render(node)
