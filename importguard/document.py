"""In-memory text document with live position markers.

Every ``EditPoint`` is an offset registered with its document. Mutations go
through the document, which adjusts every registered point:

- inserting ``n`` characters at offset ``o`` shifts each point past ``o`` by
  ``n``; a point sitting exactly at ``o`` stays in front of the new text,
  unless it is the point doing the insertion, which moves to its end
- deleting ``[a, b)`` collapses points inside the range to ``a`` and shifts
  points at ``>= b`` left by ``b - a``
"""

from __future__ import annotations

import difflib
import logging

logger = logging.getLogger(__name__)


def detect_newline(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def split_lines(text: str) -> list[str]:
    """Split on "\\n" only, keeping terminators."""
    lines = text.split("\n")
    result = [line + "\n" for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result


class TextDocument:
    def __init__(self, text: str, newline: str | None = None, indent_unit: str = "    "):
        self._text = text
        self.newline = newline or detect_newline(text)
        self.indent_unit = indent_unit
        self._points: list[EditPoint] = []

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def create_point(self, offset: int = 0) -> EditPoint:
        offset = max(0, min(offset, len(self._text)))
        point = EditPoint(self, offset)
        self._points.append(point)
        return point

    def point_at(self, line: int, column: int = 0) -> EditPoint:
        offset = self.line_start_offset(line)
        column = min(column, len(self.get_line(offset)))
        return self.create_point(offset + column)

    def release(self, point: EditPoint) -> None:
        if point in self._points:
            self._points.remove(point)

    def line_start(self, offset: int) -> int:
        return self._text.rfind("\n", 0, offset) + 1

    def line_end(self, offset: int) -> int:
        """Offset of the line terminator (or end of text) for the line at offset."""
        end = self._text.find("\n", offset)
        if end == -1:
            return len(self._text)
        if end > self.line_start(offset) and self._text[end - 1] == "\r":
            return end - 1
        return end

    def line_end_with_terminator(self, offset: int) -> int:
        end = self._text.find("\n", offset)
        return len(self._text) if end == -1 else end + 1

    def line_number(self, offset: int) -> int:
        return self._text.count("\n", 0, offset)

    def line_start_offset(self, line: int) -> int:
        offset = 0
        for _ in range(line):
            next_newline = self._text.find("\n", offset)
            if next_newline == -1:
                return offset
            offset = next_newline + 1
        return offset

    def get_line(self, offset: int) -> str:
        return self._text[self.line_start(offset):self.line_end(offset)]

    def insert(self, offset: int, text: str, origin: EditPoint | None = None) -> None:
        if not text:
            return
        self._text = self._text[:offset] + text + self._text[offset:]
        for point in self._points:
            if point.offset > offset:
                point.offset += len(text)
        if origin is not None and origin.offset == offset:
            origin.offset += len(text)

    def delete(self, start: int, end: int) -> None:
        if start > end:
            start, end = end, start
        if start == end:
            return
        self._text = self._text[:start] + self._text[end:]
        length = end - start
        for point in self._points:
            if point.offset >= end:
                point.offset -= length
            elif point.offset > start:
                point.offset = start

    def find_matches(self, pattern: str) -> list[tuple[EditPoint, str]]:
        """Find lines whose trimmed text equals pattern, top to bottom.

        Returns a marker at the start of each matching line together with
        the complete line text.
        """
        pattern = pattern.strip()
        matches: list[tuple[EditPoint, str]] = []
        if not pattern:
            return matches

        offset = 0
        for raw_line in split_lines(self._text):
            line = raw_line.rstrip("\n")
            if line.endswith("\r"):
                line = line[:-1]
            if line.strip() == pattern:
                matches.append((self.create_point(offset), line))
            offset += len(raw_line)
        return matches

    def apply_text(self, new_text: str) -> int:
        """Rewrite the buffer to new_text as line-level edits.

        Points follow the edits the same way they follow direct insertions
        and deletions. Returns the number of edits applied.
        """
        if new_text == self._text:
            return 0

        old_lines = split_lines(self._text)
        new_lines = split_lines(new_text)
        matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)

        starts = [0]
        for line in old_lines:
            starts.append(starts[-1] + len(line))

        edits = [op for op in matcher.get_opcodes() if op[0] != "equal"]
        for tag, i1, i2, j1, j2 in reversed(edits):
            start, end = starts[i1], starts[i2]
            if tag in ("delete", "replace"):
                self.delete(start, end)
            if tag in ("insert", "replace"):
                self.insert(start, "".join(new_lines[j1:j2]))

        logger.debug(f"Applied {len(edits)} edits to document")
        return len(edits)


class EditPoint:
    """A live position in a TextDocument."""

    def __init__(self, document: TextDocument, offset: int):
        self.document = document
        self.offset = offset

    def __repr__(self) -> str:
        return f"EditPoint(line={self.line}, column={self.column})"

    @property
    def line(self) -> int:
        return self.document.line_number(self.offset)

    @property
    def column(self) -> int:
        return self.offset - self.document.line_start(self.offset)

    def clone(self) -> EditPoint:
        return self.document.create_point(self.offset)

    def get_line(self) -> str:
        return self.document.get_line(self.offset)

    def get_text(self, other: EditPoint) -> str:
        start, end = sorted((self.offset, other.offset))
        return self.document.text[start:end]

    def move_right(self, count: int = 1) -> None:
        self.offset = min(self.offset + count, len(self.document))

    def move_line_down(self, count: int = 1) -> None:
        column = self.column
        offset = self.offset
        for _ in range(count):
            newline = self.document.text.find("\n", offset)
            if newline == -1:
                break
            offset = newline + 1
        start = self.document.line_start(offset)
        self.offset = min(start + column, self.document.line_end(start))

    def move_to_line_start(self) -> None:
        self.offset = self.document.line_start(self.offset)

    def insert(self, text: str) -> None:
        """Insert text here; the point ends up after the inserted text."""
        self.document.insert(self.offset, text, origin=self)

    def delete(self, other: EditPoint) -> None:
        start, end = sorted((self.offset, other.offset))
        self.document.delete(start, end)

    def indent(self, levels: int = 1) -> None:
        """Indent the line holding this point."""
        self.document.insert(self.document.line_start(self.offset), self.document.indent_unit * levels)
