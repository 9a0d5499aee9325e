"""Conversion between ``XMLNode`` trees and ElementTree / lxml elements.

Only element names and attributes cross the boundary: the DOM has no
character data, so ``text`` and ``tail`` are left empty on export and ignored
on import. Comments and processing instructions in foreign trees are skipped.
Conversions walk the tree with an explicit stack.
"""

import xml.etree.ElementTree as ET
from typing import Any, Callable, List, Tuple

from lxml import etree as lxml_etree

from simple_xml_dom.tree import XMLNode


def _export(node: XMLNode, make_root: Callable[..., Any], make_child: Callable[..., Any]) -> Any:
    root = make_root(node.name, dict(node.attributes))
    pending: List[Tuple[XMLNode, Any]] = [(node, root)]
    while pending:
        source, target = pending.pop()
        for child in source.children:
            pending.append((child, make_child(target, child.name, dict(child.attributes))))
    return root


def _import(element: Any) -> XMLNode:
    if not isinstance(element.tag, str):
        raise TypeError("Only element nodes can be converted to XMLNode")
    root = XMLNode(element.tag, dict(element.attrib))
    pending: List[Tuple[Any, XMLNode]] = [(element, root)]
    while pending:
        source, target = pending.pop()
        for child in source:
            # Comments and processing instructions carry a non-string tag
            if not isinstance(child.tag, str):
                continue
            node = target.add_child(XMLNode(child.tag, dict(child.attrib)))
            pending.append((child, node))
    return root


def to_etree(node: XMLNode) -> ET.Element:
    """Convert a node and its subtree into an ``xml.etree.ElementTree.Element``."""
    return _export(
        node,
        lambda name, attrs: ET.Element(name, attrs),
        lambda parent, name, attrs: ET.SubElement(parent, name, attrs),
    )


def from_etree(element: ET.Element) -> XMLNode:
    """Convert an ElementTree element and its element children into nodes."""
    return _import(element)


def to_lxml(node: XMLNode) -> Any:
    """Convert a node and its subtree into an ``lxml.etree._Element``.

    Raises:
        ValueError: if a node name is not a valid XML name for lxml.
    """
    return _export(
        node,
        lambda name, attrs: lxml_etree.Element(name, attrs),
        lambda parent, name, attrs: lxml_etree.SubElement(parent, name, attrs),
    )


def from_lxml(element: Any) -> XMLNode:
    """Convert an lxml element and its element children into nodes."""
    return _import(element)
