"""Exception hierarchy for XML DOM reading, building and writing.

Parse-time errors abort the parse at the first failure. The document API
layer turns them into failed result objects instead of letting them escape.
"""

from typing import Optional


class XMLDomError(Exception):
    """Base exception for all DOM errors."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        super().__init__(self._format(message, line))

    @staticmethod
    def _format(message: str, line: Optional[int]) -> str:
        if line is None:
            return message
        return f"line {line}: {message}"


class FileAccessError(XMLDomError):
    """A document could not be opened, decoded, created or written."""


class MalformedTagError(XMLDomError):
    """Tag text has no ``<...>`` envelope, no name, or never terminates."""


class EmptyDocumentError(MalformedTagError):
    """The input contains no element at all."""


class UnmatchedCloseError(XMLDomError):
    """Structural nesting violation: more closes than opens."""


class InvalidNameError(XMLDomError, ValueError):
    """An element or attribute name is empty."""


class ReparentError(XMLDomError):
    """A node already owned by a parent, or an ancestor, was attached again."""
