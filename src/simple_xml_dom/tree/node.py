"""XML node: the element type of the DOM tree.

A parent owns its children through an ordered list of strong references. A
child only keeps a weak reference back to its parent, so the parent/child
pair never forms a reference cycle and a tree is reclaimed as soon as its
root is no longer referenced.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from simple_xml_dom.shared import InvalidNameError, ReparentError
from simple_xml_dom.tree.render import render_node


# Characters that would change the tag structure when rendered inside a name
FORBIDDEN_NAME_CHARS = frozenset('<>/="')


def is_valid_name(name: str) -> bool:
    """True for a non-empty name without whitespace or markup characters."""
    return bool(name) and not any(
        char.isspace() or char in FORBIDDEN_NAME_CHARS for char in name
    )


def _check_name(name: Any, what: str) -> str:
    if not isinstance(name, str):
        raise TypeError(f"{what} must be a string")
    if not name.strip():
        raise InvalidNameError(f"{what} cannot be empty")
    if not is_valid_name(name):
        raise InvalidNameError(
            f"{what} {name!r} contains whitespace or one of the characters <>/=\""
        )
    return name


def _check_value(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError("Attribute value must be a string")
    # A trailing backslash would escape the closing quote once rendered
    if value.endswith("\\"):
        raise ValueError("Attribute value cannot end with a backslash")
    return value


@dataclass(eq=False)
class XMLNode:
    """Represents a single XML element in the document tree.

    Identity is reference identity: two nodes with the same name and
    attributes are still different nodes.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    _children: List["XMLNode"] = field(default_factory=list, init=False, repr=False)
    _parent_ref: Optional["weakref.ReferenceType[XMLNode]"] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        """Validate the element name and initial attributes."""
        _check_name(self.name, "Element name")
        for key, value in self.attributes.items():
            _check_name(key, "Attribute name")
            _check_value(value)

    def __repr__(self) -> str:
        return (
            f"XMLNode(name={self.name!r}, attributes={self.attributes!r}, "
            f"children={len(self._children)})"
        )

    @property
    def parent(self) -> Optional["XMLNode"]:
        """Owning node, or None for the root, a detached node or a reclaimed parent."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def children(self) -> List["XMLNode"]:
        """Snapshot copy of the child list; mutating it does not touch the tree."""
        return list(self._children)

    @property
    def child_count(self) -> int:
        return len(self._children)

    @property
    def is_self_closing(self) -> bool:
        """True when the node has no children and therefore renders as ``<Name/>``."""
        return not self._children

    # Structure mutation

    def add_child(self, child: "XMLNode") -> "XMLNode":
        """Append a child element and establish the parent relationship.

        Raises:
            ReparentError: if ``child`` already has a parent, is this node, or
                is an ancestor of this node.
        """
        self._check_attachable(child)
        child._parent_ref = weakref.ref(self)
        self._children.append(child)
        return child

    def insert_child(self, index: int, child: "XMLNode") -> "XMLNode":
        """Insert child element at specific index."""
        if not (0 <= index <= len(self._children)):
            raise IndexError("Child index out of range")
        self._check_attachable(child)
        child._parent_ref = weakref.ref(self)
        self._children.insert(index, child)
        return child

    def _check_attachable(self, child: "XMLNode") -> None:
        if not isinstance(child, XMLNode):
            raise TypeError("Child must be an XMLNode instance")
        if child.parent is not None:
            raise ReparentError(
                f"<{child.name}> is already a child of <{child.parent.name}>; "
                "detach it first"
            )
        if child is self or any(ancestor is child for ancestor in self.ancestors()):
            raise ReparentError(
                f"Attaching <{child.name}> under <{self.name}> would create a cycle"
            )

    def remove_child(self, child: "XMLNode") -> bool:
        """Remove a direct child and clear its parent relationship."""
        for index, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[index]
                child._parent_ref = None
                return True
        return False

    def detach(self) -> "XMLNode":
        """Remove this node from its parent, keeping its own subtree intact."""
        parent = self.parent
        if parent is not None:
            parent.remove_child(self)
        self._parent_ref = None
        return self

    def clear(self) -> None:
        """Drop ownership of every descendant; this node stays, now childless."""
        pending = [self]
        while pending:
            node = pending.pop()
            for child in node._children:
                child._parent_ref = None
                pending.append(child)
            node._children = []

    # Attributes

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value, stored exactly as given."""
        _check_name(name, "Attribute name")
        _check_value(value)
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def remove_attribute(self, name: str) -> bool:
        """Remove an attribute, returning whether it existed."""
        return self.attributes.pop(name, None) is not None

    # Navigation

    def ancestors(self) -> Iterator["XMLNode"]:
        """Yield parent, grandparent, ... up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def root(self) -> "XMLNode":
        """Topmost reachable ancestor (the node itself when unparented)."""
        top = self
        for ancestor in self.ancestors():
            top = ancestor
        return top

    @property
    def depth(self) -> int:
        """Depth of this element in the tree (root = 0)."""
        return sum(1 for _ in self.ancestors())

    @property
    def path(self) -> str:
        """XPath-like path to this element, with positions for repeated names."""
        parts = []
        node: Optional[XMLNode] = self
        while node is not None:
            parent = node.parent
            step = node.name
            if parent is not None:
                siblings = [c for c in parent._children if c.name == node.name]
                if len(siblings) > 1:
                    position = next(
                        i for i, sibling in enumerate(siblings, 1) if sibling is node
                    )
                    step = f"{node.name}[{position}]"
            parts.append(step)
            node = parent
        return "/" + "/".join(reversed(parts))

    def iter(self) -> Iterator["XMLNode"]:
        """Iterate over this node and all descendants in document order."""
        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node._children))

    def find(self, name: str) -> Optional["XMLNode"]:
        """Find first descendant element with matching name."""
        return next((node for node in self.iter() if node is not self and node.name == name), None)

    def find_all(self, name: str) -> List["XMLNode"]:
        """Find all descendant elements with matching name."""
        return [node for node in self.iter() if node is not self and node.name == name]

    def find_by_attribute(
        self, name: str, value: Optional[str] = None
    ) -> List["XMLNode"]:
        """Find elements (this one included) by attribute name and optionally value."""
        return [
            node for node in self.iter()
            if name in node.attributes
            and (value is None or node.attributes[name] == value)
        ]

    # Conversion

    def render(self, indent: str = "\t") -> str:
        """Render this node and its subtree as indented XML text."""
        return render_node(self, indent)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "name": self.name,
            "attributes": dict(self.attributes),
        }
        if self._children:
            result["children"] = [child.to_dict() for child in self._children]
        return result
