"""Line-oriented tag scanner.

Input is consumed one physical line at a time. Each line is trimmed; blank
lines are ignored. A tag may span several lines, in which case its trimmed
fragments are joined with ``\\n``. Comments (``<!-- ... -->``) may span
several lines as well and never reach the tag accumulator. A ``>`` inside a
double-quoted attribute value does not end the tag, unless the value is
still open at the end of the physical line: the tag then ends at the last
``>`` of that line and attribute parsing stops at the unterminated value.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from simple_xml_dom.shared import MalformedTagError, UnmatchedCloseError, get_logger

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
PREVIEW_LENGTH = 60  # Max length of skipped text echoed into logs


@dataclass(frozen=True)
class RawTag:
    """Complete tag text, from ``<`` to the terminating ``>``."""

    text: str
    line: int
    end_line: int


class TagScanner:
    """Accumulates tag text across lines and emits complete tags.

    The scanner keeps only per-document state and is meant to be used for a
    single input.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, correlation_id, "tag_scanner")

        self.line_number = 0
        self.characters_processed = 0
        self.comments_skipped = 0
        self.in_comment = False
        self._comment_start_line = 0

        self._pending_tag_text: List[str] = []
        self._tag_open_seen = False
        self._in_quote = False
        self._tag_start_line = 0

    def scan(self, lines: Iterable[str]) -> Iterator[RawTag]:
        """Yield every complete tag of ``lines``, then check for truncated input."""
        for line in lines:
            yield from self.feed(line)
        self.finish()

    def feed(self, line: str) -> List[RawTag]:
        """Consume one physical line and return the tags it completes.

        Raises:
            UnmatchedCloseError: on a ``>`` with no ``<`` opening the current tag.
        """
        self.line_number += 1
        self.characters_processed += len(line)
        text = line.strip()
        if not text:
            return []

        completed: List[RawTag] = []
        fragment_start: Optional[int] = 0 if self._tag_open_seen else None
        # Last '>' of the current tag seen inside a quoted value on this line
        quoted_close: Optional[int] = None
        position = 0
        length = len(text)

        while True:
            while position < length:
                if self.in_comment:
                    close = text.find(COMMENT_CLOSE, position)
                    if close == -1:
                        break
                    self.in_comment = False
                    position = close + len(COMMENT_CLOSE)
                    continue

                if self._tag_open_seen:
                    char = text[position]
                    if char == '"':
                        if not self._in_quote:
                            self._in_quote = True
                        elif position == 0 or text[position - 1] != "\\":
                            self._in_quote = False
                    elif char == ">" and self._in_quote:
                        quoted_close = position
                    elif char == ">":
                        self._pending_tag_text.append(text[fragment_start:position + 1])
                        completed.append(self._complete_tag())
                        fragment_start = None
                        quoted_close = None
                    position += 1
                    continue

                if text.startswith(COMMENT_OPEN, position):
                    self.in_comment = True
                    self.comments_skipped += 1
                    self._comment_start_line = self.line_number
                    position += len(COMMENT_OPEN)
                    continue

                char = text[position]
                if char == "<":
                    self._tag_open_seen = True
                    self._in_quote = False
                    self._tag_start_line = self.line_number
                    fragment_start = position
                    quoted_close = None
                    position += 1
                    continue
                if char == ">":
                    raise UnmatchedCloseError("There is no matching '<' for '>'", self.line_number)

                position = self._skip_character_data(text, position)

            if not (self._tag_open_seen and self._in_quote and quoted_close is not None):
                break
            # Unterminated value: the tag ends at the last '>' of the line
            self.logger.warning(
                "Unterminated attribute value, closing tag at end of line",
                extra={"line": self.line_number, "tag_start_line": self._tag_start_line},
            )
            self._pending_tag_text.append(text[fragment_start:quoted_close + 1])
            completed.append(self._complete_tag())
            fragment_start = None
            position = quoted_close + 1
            quoted_close = None

        if self._tag_open_seen and fragment_start is not None:
            self._pending_tag_text.append(text[fragment_start:])

        return completed

    def finish(self) -> None:
        """Check the scanner state once the input is exhausted.

        Raises:
            MalformedTagError: if a tag was opened but never terminated.
        """
        if self._tag_open_seen:
            preview = "\n".join(self._pending_tag_text)[:PREVIEW_LENGTH]
            raise MalformedTagError(
                f'Unterminated tag "{preview}" at end of input', self._tag_start_line
            )
        if self.in_comment:
            self.logger.warning(
                "Unterminated comment at end of input",
                extra={"comment_start_line": self._comment_start_line},
            )

    def _complete_tag(self) -> RawTag:
        tag = RawTag(
            text="\n".join(self._pending_tag_text),
            line=self._tag_start_line,
            end_line=self.line_number,
        )
        self._pending_tag_text = []
        self._tag_open_seen = False
        self._in_quote = False
        return tag

    def _skip_character_data(self, text: str, position: int) -> int:
        """Skip text outside tags up to the next ``<``; return the new position."""
        next_open = text.find("<", position)
        end = len(text) if next_open == -1 else next_open
        stray_close = text.find(">", position, end)
        if stray_close != -1:
            raise UnmatchedCloseError("There is no matching '<' for '>'", self.line_number)
        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Skipping character data",
                extra={"line": self.line_number, "text": text[position:end][:PREVIEW_LENGTH]},
            )
        return end
