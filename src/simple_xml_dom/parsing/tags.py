"""Tag classification, tag-content parsing and attribute parsing.

Attribute values are double-quoted; a quote preceded by a backslash belongs
to the value. Values are stored exactly as written between the quotes, with
escape sequences left in place. Attribute text that cannot be parsed (no
``=``, an invalid name, no opening quote, no closing quote) ends attribute collection for the
tag instead of failing the document.
"""

from enum import Enum, auto
from typing import Optional, Tuple

from simple_xml_dom.shared import MalformedTagError
from simple_xml_dom.tree import XMLNode, is_valid_name


class TagKind(Enum):
    """Kinds of complete tags produced by the line scanner."""

    OPEN = auto()           # <Name ...>
    SELF_CLOSING = auto()   # <Name .../>
    CLOSE = auto()          # </Name>
    DECLARATION = auto()    # <?xml ...?>, <!DOCTYPE ...>


def classify_tag(text: str) -> TagKind:
    tag = text.strip()
    if tag.startswith("<?") or tag.startswith("<!"):
        return TagKind.DECLARATION
    if tag.startswith("</"):
        return TagKind.CLOSE
    if tag.endswith("/>"):
        return TagKind.SELF_CLOSING
    return TagKind.OPEN


def split_tag(text: str, line: Optional[int] = None) -> Tuple[str, str]:
    """Split raw tag text into its name and its attribute text.

    The ``<``/``>`` envelope, the leading ``/`` of a closing tag and the
    trailing ``/`` of a self-closing tag are removed, and line breaks inside
    the tag become spaces.

    Raises:
        MalformedTagError: if the envelope is missing or no name remains.
    """
    start = text.find("<")
    end = text.rfind(">")
    if start == -1 or end == -1 or end < start:
        raise MalformedTagError(f'malformed tag "{text}"', line)

    body = text[start + 1:end].replace("\n", " ").strip()
    if body.startswith("/"):
        body = body[1:]
    if body.endswith("/"):
        body = body[:-1]

    parts = body.strip().split(None, 1)
    if not parts:
        raise MalformedTagError(f"Can't parse tag {text!r}", line)

    name = parts[0]
    if not is_valid_name(name):
        raise MalformedTagError(f'Invalid tag name "{name}" in "{text}"', line)
    return name, parts[1] if len(parts) > 1 else ""


def parse_tag(text: str, line: Optional[int] = None) -> XMLNode:
    """Build a new unattached node from opening or self-closing tag text."""
    name, attribute_text = split_tag(text, line)
    node = XMLNode(name)
    if attribute_text:
        parse_attributes(node, attribute_text)
    return node


def find_value_end(text: str, start: int) -> int:
    """Index of the first ``"`` at or after ``start`` not preceded by ``\\``, or -1."""
    position = text.find('"', start)
    while position > 0 and text[position - 1] == "\\":
        position = text.find('"', position + 1)
    return position


def parse_attributes(node: XMLNode, text: str) -> int:
    """Register every ``name="value"`` pair of ``text`` on ``node``.

    Returns:
        Number of attributes set.
    """
    count = 0
    remaining = text.strip()
    while remaining:
        equals = remaining.find("=")
        if equals <= 0:
            break
        name = remaining[:equals].strip()
        if not is_valid_name(name):
            break

        opening_quote = remaining.find('"', equals + 1)
        if opening_quote == -1:
            break
        closing_quote = find_value_end(remaining, opening_quote + 1)
        if closing_quote == -1:
            break

        node.set_attribute(name, remaining[opening_quote + 1:closing_quote])
        count += 1
        remaining = remaining[closing_quote + 1:].strip()
    return count
