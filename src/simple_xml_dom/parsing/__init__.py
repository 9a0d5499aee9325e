"""Parsing layer: line scanner, tag parsing and tree building.

Key Components:
    TagScanner: accumulates tag text across lines and skips comments
    parse_tag / parse_attributes: turn tag text into an unattached node
    TreeBuilder: drives tree mutations from scanned tags
    ParseResult: root or error plus diagnostics and metrics
"""

from .builder import ParseResult, TreeBuilder
from .scanner import RawTag, TagScanner
from .tags import (
    TagKind,
    classify_tag,
    find_value_end,
    parse_attributes,
    parse_tag,
    split_tag,
)

__all__ = [
    "ParseResult",
    "TreeBuilder",
    "RawTag",
    "TagScanner",
    "TagKind",
    "classify_tag",
    "find_value_end",
    "parse_attributes",
    "parse_tag",
    "split_tag",
]
