"""Functional node API.

Every function accepts ``None`` as the "no node" value and degrades to an
empty result instead of raising, so callers walking up the ancestor chain can
step past the root without special-casing it.
"""

from typing import List, Optional

from simple_xml_dom.tree.node import XMLNode
from simple_xml_dom.tree.render import render_node


def create(name: str) -> XMLNode:
    """Create an unattached node.

    Raises:
        InvalidNameError: if ``name`` is empty.
    """
    return XMLNode(name)


def attach(parent: Optional[XMLNode], child: XMLNode) -> XMLNode:
    """Make ``child`` the last child of ``parent`` and return ``child``.

    Attaching under ``None`` leaves ``child`` untouched.

    Raises:
        ReparentError: if ``child`` already has a parent or the attachment
            would make a node its own ancestor.
    """
    if parent is None:
        return child
    return parent.add_child(child)


def detach(node: Optional[XMLNode]) -> Optional[XMLNode]:
    if node is None:
        return None
    return node.detach()


def set_attribute(node: Optional[XMLNode], key: str, value: str) -> None:
    if node is not None:
        node.set_attribute(key, value)


def name_of(node: Optional[XMLNode]) -> str:
    return "" if node is None else node.name


def children_of(node: Optional[XMLNode]) -> List[XMLNode]:
    return [] if node is None else node.children


def parent_of(node: Optional[XMLNode]) -> Optional[XMLNode]:
    return None if node is None else node.parent


def clear_subtree(node: Optional[XMLNode]) -> None:
    if node is not None:
        node.clear()


def render(node: Optional[XMLNode], indent: str = "\t") -> str:
    return render_node(node, indent)
