"""Document-level API: reading, writing and converting DOM trees."""

from .adapters import from_etree, from_lxml, to_etree, to_lxml
from .document import (
    SaveResult,
    XMLDomParser,
    open_document,
    parse_lines,
    parse_string,
    read_lines,
    render_document,
    save_document,
    write_bytes,
)

__all__ = [
    "from_etree",
    "from_lxml",
    "to_etree",
    "to_lxml",
    "SaveResult",
    "XMLDomParser",
    "open_document",
    "parse_lines",
    "parse_string",
    "read_lines",
    "render_document",
    "save_document",
    "write_bytes",
]
