"""Tests for building node trees from scanned tags."""

import pytest

from simple_xml_dom.api import parse_string
from simple_xml_dom.parsing import ParseResult, TreeBuilder
from simple_xml_dom.shared import (
    DiagnosticSeverity,
    DomConfig,
    EmptyDocumentError,
    MalformedTagError,
    UnmatchedCloseError,
)
from simple_xml_dom.tree import XMLNode, attach, create, render, set_attribute

SAMPLE = [
    "<!-- sample document -->",
    '<root a="b" c="d">',
    "    <node_1.1>",
    "        <node_2.1/>",
    "    </node_1.1>",
    "    <node_1.2>",
    "        <node_2.2/>",
    "    </node_1.2>",
    "</root>",
]


def build(lines, config=None):
    return TreeBuilder(config).build(lines)


class TestTreeBuilder:
    """Test the structure produced for well-formed input."""

    def test_sample_document(self) -> None:
        """Opening tags descend, self-closing tags attach leaves."""
        root = build(SAMPLE)

        assert root.name == "root"
        assert root.attributes == {"a": "b", "c": "d"}
        assert [child.name for child in root.children] == ["node_1.1", "node_1.2"]
        assert [leaf.name for leaf in root.children[0].children] == ["node_2.1"]
        assert root.children[1].children[0].parent is root.children[1]
        assert root.parent is None

    def test_render_of_sample(self) -> None:
        """The built tree renders in canonical layout."""
        assert build(SAMPLE).render() == "\n".join([
            '<root a="b" c="d">',
            "\t<node_1.1>",
            "\t\t<node_2.1/>",
            "\t</node_1.1>",
            "\t<node_1.2>",
            "\t\t<node_2.2/>",
            "\t</node_1.2>",
            "</root>",
        ])

    def test_self_closing_root(self) -> None:
        """A lone self-closing element is the document root."""
        root = build(['<only k="v"/>'])

        assert root.name == "only"
        assert root.attributes == {"k": "v"}

    def test_empty_pair_renders_self_closing(self) -> None:
        """An explicit empty open/close pair becomes a childless node."""
        root = build(["<root>", "<empty></empty>", "</root>"])

        assert root.children[0].is_self_closing
        assert root.render() == "<root>\n\t<empty/>\n</root>"

    def test_multiline_tag_matches_single_line(self) -> None:
        """Attributes split over three lines parse like a one-line tag."""
        single = build(['<item id="1" kind="x" label="y"/>'])
        multi = build(['<item id="1"', 'kind="x"', 'label="y"/>'])

        assert multi.name == single.name
        assert multi.attributes == single.attributes

    def test_multiline_value(self) -> None:
        """Line breaks inside a value become spaces."""
        root = build(["<  multi", '      line="', '         tags"', "", " >", "</multi>"])

        assert root.name == "multi"
        assert root.attributes == {"line": " tags"}

    def test_comment_content_is_not_parsed(self) -> None:
        """Elements inside a multi-line comment do not appear in the tree."""
        root = build(["<root><!--", " ignored <tag/> text ", "-->child is absent</root>"])

        assert root.name == "root"
        assert root.children == []
        assert root.find("tag") is None

    def test_declaration_skipped(self) -> None:
        """The XML prolog does not become an element."""
        root = build(['<?xml version="1.0" encoding="UTF-8"?>', "<root/>"])

        assert root.name == "root"

    def test_metrics_collected(self) -> None:
        """Counters describe the consumed document."""
        builder = TreeBuilder()
        builder.build(SAMPLE)

        assert builder.metrics.lines_processed == len(SAMPLE)
        assert builder.metrics.elements_created == 5
        assert builder.metrics.tags_processed == 8
        assert builder.metrics.comments_skipped == 1


class TestTreeBuilderErrors:
    """Test that structural problems abort the build."""

    def test_document_starting_with_close_tag(self) -> None:
        """A close tag with nothing open is an unmatched close."""
        with pytest.raises(UnmatchedCloseError, match="no matching opening tag"):
            build(["</Root>"])

    def test_more_closes_than_opens(self) -> None:
        """An extra close after the root closed is an unmatched close."""
        with pytest.raises(UnmatchedCloseError) as excinfo:
            build(["<root>", "</root>", "</root>"])
        assert excinfo.value.line == 3

    def test_empty_tag_is_malformed(self) -> None:
        """'<>' never produces a node with an empty name."""
        with pytest.raises(MalformedTagError):
            build(["<root>", "<>", "</root>"])

    def test_empty_input(self) -> None:
        """Input without elements is rejected."""
        with pytest.raises(EmptyDocumentError):
            build([])
        with pytest.raises(EmptyDocumentError):
            build(["<!-- only a comment -->", "   "])

    def test_declaration_rejected_when_not_skipped(self) -> None:
        """Declarations fail when skipping is disabled."""
        config = DomConfig(skip_declarations=False)
        with pytest.raises(MalformedTagError, match="Declarations are not supported"):
            build(['<?xml version="1.0"?>', "<root/>"], config)

    def test_max_depth(self) -> None:
        """Nesting beyond max_depth is rejected."""
        config = DomConfig(max_depth=2)
        build(["<a>", "<b>", "<c/>", "</b>", "</a>"], config)
        with pytest.raises(MalformedTagError, match="max_depth=2"):
            build(["<a>", "<b>", "<c>", "<d/>", "</c>", "</b>", "</a>"], config)


class TestTreeBuilderWarnings:
    """Test tolerated anomalies reported as diagnostics."""

    def test_mismatched_close_name_warns(self) -> None:
        """By default a wrong close name only produces a warning."""
        builder = TreeBuilder()
        root = builder.build(["<root>", "<a>", "</b>", "</root>"])

        assert root.children[0].name == "a"
        assert len(builder.diagnostics) == 1
        assert builder.diagnostics[0].severity is DiagnosticSeverity.WARNING
        assert builder.diagnostics[0].message == "</b> closes <a>"

    def test_mismatched_close_name_ignored(self) -> None:
        """The 'ignore' policy records nothing."""
        builder = TreeBuilder(DomConfig(mismatched_close="ignore"))
        builder.build(["<root>", "</other>"])

        assert builder.diagnostics == []

    def test_mismatched_close_name_error(self) -> None:
        """The 'error' policy treats a wrong close name as unmatched."""
        with pytest.raises(UnmatchedCloseError, match="</b> closes <a>"):
            build(["<a>", "</b>"], DomConfig(mismatched_close="error"))

    def test_second_top_level_element_dropped(self) -> None:
        """Elements after the closed root are dropped with a warning."""
        builder = TreeBuilder()
        root = builder.build(["<first>", "</first>", "<second>", "<inner/>", "</second>"])

        assert root.name == "first"
        assert root.children == []
        assert "<second> follows the closed document root" in builder.diagnostics[0].message

    def test_unclosed_elements_warn(self) -> None:
        """Input ending with open elements keeps the tree and warns."""
        builder = TreeBuilder()
        root = builder.build(["<root>", "<child>", "<leaf/>"])

        assert root.find("leaf") is not None
        assert builder.diagnostics[-1].message == "2 element(s) left unclosed at end of input"


class TestParseResult:
    """Test the result object carrying a document or an error."""

    def test_unwrap_success(self) -> None:
        """unwrap() returns the root of a successful result."""
        root = build(["<r/>"])
        result = ParseResult(root=root)

        assert result.unwrap() is root
        assert result.element_count == 1
        assert not result.has_errors()

    def test_fail_and_unwrap(self) -> None:
        """A failed result re-raises its error and lists it as a diagnostic."""
        result = ParseResult()
        error = UnmatchedCloseError("boom", line=4)
        result.fail(error, "tree_builder")

        assert result.success is False
        assert result.has_errors()
        assert result.diagnostics[0].line == 4
        assert result.diagnostics[0].details == {"error_type": "UnmatchedCloseError"}
        with pytest.raises(UnmatchedCloseError):
            result.unwrap()

    def test_summary(self) -> None:
        """summary() is JSON friendly."""
        result = ParseResult(root=build(["<r>", "<c/>", "</r>"]), source="mem")
        summary = result.summary()

        assert summary["root"] == "r"
        assert summary["element_count"] == 2
        assert summary["error"] is None
        assert summary["source"] == "mem"


class TestUnterminatedValues:
    """Test that a missing closing quote only stops attribute collection."""

    def test_self_closing_tag(self) -> None:
        """The broken tag keeps its earlier attributes and its siblings survive."""
        result = parse_string('<root>\n<a k="1" b="x/>\n<c/>\n</root>')

        assert result.success
        assert [child.name for child in result.root.children] == ["a", "c"]
        assert result.root.children[0].attributes == {"k": "1"}

    def test_opening_tag(self) -> None:
        """An opening tag with an open value still opens its element."""
        result = parse_string('<root b="x>\n<c/>\n</root>')

        assert result.success
        assert result.root.attributes == {}
        assert [child.name for child in result.root.children] == ["c"]
        assert result.performance.tags_processed == 3


def empty_root() -> XMLNode:
    return create("root")


def deep_chain() -> XMLNode:
    root = create("root")
    node = root
    for depth in range(50):
        node = attach(node, create(f"level{depth}"))
        set_attribute(node, "depth", str(depth))
    return root


def repeated_siblings() -> XMLNode:
    root = create("list")
    for index in range(3):
        item = attach(root, create("item"))
        set_attribute(item, "index", str(index))
        if index == 1:
            attach(item, create("item"))
    return root


def many_attributes() -> XMLNode:
    root = create("wide")
    for index in range(200):
        set_attribute(root, f"attr{index}", f"value {index}")
    attach(root, create("leaf"))
    return root


def awkward_values() -> XMLNode:
    root = create("values")
    set_attribute(root, "empty", "")
    set_attribute(root, "markup", "a > b/c = d")
    set_attribute(root, "escaped", 'say \\"hi\\"')
    set_attribute(attach(root, create("path")), "windows", "C:\\dir\\file")
    return root


def outline(node: XMLNode):
    return [(n.depth, n.name, n.attributes) for n in node.iter()]


class TestRenderRoundTrip:
    """Test that rendered trees parse back into the same structure."""

    @pytest.mark.parametrize(
        "make_tree",
        [empty_root, deep_chain, repeated_siblings, many_attributes, awkward_values],
    )
    @pytest.mark.parametrize("indent", ["\t", "  ", ""])
    def test_render_then_parse_is_isomorphic(self, make_tree, indent) -> None:
        """Names, attributes and nesting survive render and re-parse."""
        tree = make_tree()

        parsed = parse_string(render(tree, indent)).unwrap()

        assert outline(parsed) == outline(tree)
        assert render(parsed, indent) == render(tree, indent)
