"""Simple XML DOM.

A minimal XML reader/writer exposing documents as a browsable, mutable tree.
Supports elements, double-quoted attributes (with ``\\"`` escapes),
self-closing tags, tags split across lines and multi-line comments.

Progressive API Disclosure:
- Level 1: Simple functions - parse_string(), open_document(), save_document()
- Level 2: Configured parser - XMLDomParser with DomConfig
- Level 3: Tree model - XMLNode and the functional node API
"""

__version__ = "0.1.0"
__author__ = "Simple XML DOM Team"

from .api import (
    SaveResult,
    XMLDomParser,
    open_document,
    parse_lines,
    parse_string,
    render_document,
    save_document,
)
from .parsing import ParseResult
from .shared import (
    DomConfig,
    EmptyDocumentError,
    FileAccessError,
    InvalidNameError,
    MalformedTagError,
    ReparentError,
    UnmatchedCloseError,
    XMLDomError,
)
from .tree import (
    XMLNode,
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

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: document functions
    "parse_string",
    "parse_lines",
    "open_document",
    "save_document",
    "render_document",

    # Level 2: configured parser
    "XMLDomParser",
    "DomConfig",

    # Results
    "ParseResult",
    "SaveResult",

    # Level 3: tree model
    "XMLNode",
    "create",
    "attach",
    "detach",
    "set_attribute",
    "name_of",
    "children_of",
    "parent_of",
    "clear_subtree",
    "render",

    # Errors
    "XMLDomError",
    "FileAccessError",
    "MalformedTagError",
    "EmptyDocumentError",
    "UnmatchedCloseError",
    "InvalidNameError",
    "ReparentError",
]
