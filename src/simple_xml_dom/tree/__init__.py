"""Tree model for the XML DOM.

Key Components:
    XMLNode: element with name, attributes, owned children and a weak parent link
    operations: functional API (create, attach, render, ...) tolerant of ``None``
    render: indented text serialization with attribute quote escaping
"""

from .node import XMLNode, is_valid_name
from .operations import (
    attach,
    children_of,
    clear_subtree,
    create,
    detach,
    name_of,
    parent_of,
    render,
    set_attribute,
)
from .render import escape_attribute_value, render_node

__all__ = [
    "XMLNode",
    "is_valid_name",
    "attach",
    "children_of",
    "clear_subtree",
    "create",
    "detach",
    "name_of",
    "parent_of",
    "render",
    "set_attribute",
    "escape_attribute_value",
    "render_node",
]
