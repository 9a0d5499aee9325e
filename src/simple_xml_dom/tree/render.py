"""Text rendering of DOM subtrees.

Output is one element per line, one indent unit per depth level, attributes
as ``key="value"`` in the opening tag, and the self-closing form for every
childless element. Quotes in attribute values are escaped here, at render
time, so stored values are never escaped twice across round trips.
"""

import re
from typing import TYPE_CHECKING, List, Mapping, Optional, Tuple

if TYPE_CHECKING:
    from simple_xml_dom.tree.node import XMLNode

_UNESCAPED_QUOTE = re.compile(r'(?<!\\)"')


def escape_attribute_value(value: str) -> str:
    """Prefix every double quote not already preceded by a backslash with one."""
    return _UNESCAPED_QUOTE.sub(r'\\"', value)


def format_attributes(attributes: Mapping[str, str]) -> str:
    return "".join(
        f' {key}="{escape_attribute_value(value)}"' for key, value in attributes.items()
    )


def render_node(node: Optional["XMLNode"], indent: str = "\t") -> str:
    """Render ``node`` and its subtree; ``None`` renders as an empty string.

    The walk uses an explicit stack, so very deep trees do not hit the
    interpreter recursion limit.
    """
    if node is None:
        return ""

    lines: List[str] = []
    # (node, depth, emit_closing_tag)
    stack: List[Tuple["XMLNode", int, bool]] = [(node, 0, False)]
    while stack:
        current, depth, closing = stack.pop()
        padding = indent * depth
        if closing:
            lines.append(f"{padding}</{current.name}>")
            continue

        opening = f"{padding}<{current.name}{format_attributes(current.attributes)}"
        children = current.children
        if not children:
            lines.append(f"{opening}/>")
            continue

        lines.append(f"{opening}>")
        stack.append((current, depth, True))
        for child in reversed(children):
            stack.append((child, depth + 1, False))

    return "\n".join(lines)
