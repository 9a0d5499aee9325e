"""Tests for the document API: parsing, opening, rendering and saving."""

import pytest

from simple_xml_dom.api import (
    XMLDomParser,
    open_document,
    parse_lines,
    parse_string,
    read_lines,
    render_document,
    save_document,
    write_bytes,
)
from simple_xml_dom.shared import (
    DiagnosticSeverity,
    DomConfig,
    FileAccessError,
    MalformedTagError,
    UnmatchedCloseError,
)
from simple_xml_dom.tree import XMLNode

DOCUMENT = """<?xml version="1.0"?>
<!-- catalogue -->
<catalog name="books">
    <book id="1" title="Dune"/>
    <book id="2"
          title="Solaris">
        <note text="a &quot;classic&quot;"/>
    </book>
</catalog>
"""


class TestParseFunctions:
    """Test the level 1 parsing functions."""

    def test_parse_string(self):
        """Test parsing a complete document from a string."""
        result = parse_string(DOCUMENT)

        assert result.success
        assert result.error is None
        assert result.root.name == "catalog"
        assert [book.get_attribute("id") for book in result.root.find_all("book")] == ["1", "2"]
        assert result.element_count == 4
        assert result.performance.lines_processed == 9
        assert result.performance.comments_skipped == 1

    def test_parse_lines(self):
        """Test parsing an iterable of lines."""
        result = parse_lines(iter(["<root>", '  <leaf a="1"/>', "</root>"]))

        assert result.root.children[0].attributes == {"a": "1"}

    def test_failure_is_returned_not_raised(self):
        """Test that parse errors come back in the result."""
        result = parse_string("</Root>")

        assert result.success is False
        assert result.root is None
        assert isinstance(result.error, UnmatchedCloseError)
        assert result.has_errors()
        assert result.diagnostics[-1].component == "tree_builder"
        with pytest.raises(UnmatchedCloseError):
            result.unwrap()

    def test_malformed_tag(self):
        result = parse_string("<root>\n<>\n</root>")

        assert isinstance(result.error, MalformedTagError)
        assert result.error.line == 2

    def test_warnings_survive_success(self):
        """Test that tolerated anomalies are reported on a successful result."""
        result = parse_string("<root>\n<a>\n</b>\n</root>")

        assert result.success
        warnings = result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)
        assert [w.message for w in warnings] == ["</b> closes <a>"]

    def test_warnings_kept_on_failure(self):
        """Test that warnings raised before a fatal error are not lost."""
        result = parse_string("<root>\n<a>\n</b>\n</root>\n</root>")

        assert not result.success
        severities = [diag.severity for diag in result.diagnostics]
        assert severities == [DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR]

    def test_strict_config(self):
        """Test that the strict preset rejects what the default accepts."""
        result = parse_string(DOCUMENT, DomConfig.strict())

        assert not result.success
        assert isinstance(result.error, MalformedTagError)

    def test_correlation_id_on_diagnostics(self):
        result = parse_string("</x>", correlation_id="job-7")

        assert result.correlation_id == "job-7"
        assert result.diagnostics[0].correlation_id == "job-7"


class TestOpenAndSave:
    """Test file input and output."""

    def test_open_document(self, tmp_path):
        path = tmp_path / "doc.xml"
        path.write_text(DOCUMENT, encoding="utf-8")

        result = open_document(path)

        assert result.success
        assert result.source == str(path)
        assert result.root.name == "catalog"

    def test_open_missing_file(self, tmp_path):
        """Test that a missing file gives a failed result, not an exception."""
        result = open_document(tmp_path / "missing.xml")

        assert not result.success
        assert isinstance(result.error, FileAccessError)
        assert "File not found" in str(result.error)
        assert result.diagnostics[0].component == "document_reader"

    def test_open_directory(self, tmp_path):
        result = open_document(tmp_path)

        assert isinstance(result.error, FileAccessError)

    def test_open_undecodable_file(self, tmp_path):
        path = tmp_path / "latin.xml"
        path.write_bytes(b'<root name="\xe9t\xe9"/>')

        result = open_document(path)
        assert isinstance(result.error, FileAccessError)
        assert "Cannot decode" in str(result.error)

        result = open_document(path, DomConfig(encoding="latin-1"))
        assert result.root.get_attribute("name") == "été"

    def test_save_then_open(self, tmp_path):
        """Test that a saved document reads back with the same structure."""
        original = parse_string(DOCUMENT).unwrap()
        path = tmp_path / "out.xml"

        saved = save_document(original, path)
        reopened = open_document(path).unwrap()

        assert saved.success
        assert saved.bytes_written == len(path.read_bytes())
        assert [n.name for n in reopened.iter()] == [n.name for n in original.iter()]
        assert [n.attributes for n in reopened.iter()] == [n.attributes for n in original.iter()]

    def test_save_overwrites(self, tmp_path):
        path = tmp_path / "out.xml"
        path.write_text("old content that is longer than the new document")

        save_document(XMLNode("r"), path)

        assert path.read_text() == "<r/>"

    def test_save_with_trailing_newline(self, tmp_path):
        path = tmp_path / "out.xml"

        save_document(XMLNode("r"), path, DomConfig(trailing_newline=True))

        assert path.read_text() == "<r/>\n"

    def test_save_none_writes_empty_file(self, tmp_path):
        path = tmp_path / "empty.xml"

        saved = save_document(None, path)

        assert saved.success
        assert saved.bytes_written == 0
        assert path.read_bytes() == b""
        assert saved.diagnostics[0].severity is DiagnosticSeverity.WARNING

    def test_save_unencodable(self, tmp_path):
        """Test that characters outside the encoding fail the save."""
        node = XMLNode("r", {"name": "é"})

        saved = save_document(node, tmp_path / "out.xml", DomConfig(encoding="ascii"))

        assert not saved.success
        assert isinstance(saved.error, FileAccessError)
        assert saved.to_dict()["error"].startswith("Cannot encode document as ascii")

    def test_save_into_missing_directory(self, tmp_path):
        saved = save_document(XMLNode("r"), tmp_path / "no" / "such" / "out.xml")

        assert not saved.success
        assert "Cannot write" in str(saved.error)


class TestLowLevelIO:
    """Test the file helpers behind open and save."""

    def test_read_lines(self, tmp_path):
        path = tmp_path / "lines.xml"
        path.write_text("<a>\r\n</a>\n")

        assert read_lines(path) == ["<a>", "</a>"]

    def test_read_lines_missing(self, tmp_path):
        with pytest.raises(FileAccessError, match="File not found"):
            read_lines(tmp_path / "nope.xml")

    def test_write_bytes(self, tmp_path):
        path = tmp_path / "raw.bin"

        assert write_bytes(path, b"abc") == 3
        assert path.read_bytes() == b"abc"


class TestXMLDomParser:
    """Test the configured, reusable parser."""

    def test_render_uses_config(self):
        parser = XMLDomParser(DomConfig.with_spaces(2))
        root = parser.parse_string('<root><item id="1"/></root>').unwrap()

        assert parser.render(root) == '<root>\n  <item id="1"/>\n</root>'

    def test_render_document_function(self):
        root = XMLNode("root")
        root.add_child(XMLNode("leaf"))

        assert render_document(root) == "<root>\n\t<leaf/>\n</root>"
        assert render_document(None, DomConfig(trailing_newline=True)) == ""

    def test_statistics(self, tmp_path):
        parser = XMLDomParser()
        parser.parse_string("<a/>")
        parser.parse_string("</a>")
        parser.open(tmp_path / "missing.xml")

        stats = parser.statistics
        assert stats["total_parses"] == 3
        assert stats["successful_parses"] == 1
        assert stats["success_rate"] == pytest.approx(1 / 3)

        parser.reset_statistics()
        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["success_rate"] == 0.0

    def test_escaped_quote_round_trip(self):
        """Test that escaped quotes survive parse, render and parse again."""
        parser = XMLDomParser()
        root = parser.parse_string('<n a="va\\"lue"/>').unwrap()

        rendered = parser.render(root)
        again = parser.parse_string(rendered).unwrap()

        assert rendered == '<n a="va\\"lue"/>'
        assert again.get_attribute("a") == 'va\\"lue'
