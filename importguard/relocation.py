"""Move import directives inside the enclosing scope block."""

import logging

from .scanner import ImportDirective, ScopeBlock

logger = logging.getLogger(__name__)


class ScopeRelocator:
    def __init__(self, collapse_emptied_lines: bool = False):
        self.collapse_emptied_lines = collapse_emptied_lines

    def relocate(self, directives: list[ImportDirective], scope_blocks: list[ScopeBlock]) -> bool:
        """Cut each directive and paste it, in the given order, at the top of the scope.

        Only a file with exactly one scope block is handled; anything else is
        left untouched and False is returned.
        """
        if len(scope_blocks) != 1:
            logger.debug(f"Skipping relocation: {len(scope_blocks)} scope blocks found")
            return False

        scope = scope_blocks[0]
        document = scope.start.document
        newline = document.newline

        cursor = scope.start.clone()
        cursor.move_line_down()
        cursor.move_right()
        cursor.insert(newline)

        for directive in directives:
            text = directive.text
            directive.start.delete(directive.end)
            if self.collapse_emptied_lines:
                self._collapse_line(directive)

            cursor.insert(text)
            cursor.indent(1)
            cursor.insert(newline)

        document.release(cursor)
        logger.info(f"Moved {len(directives)} directives into {scope.name}")
        return True

    def _collapse_line(self, directive: ImportDirective) -> None:
        document = directive.start.document
        offset = directive.start.offset
        start = document.line_start(offset)
        if document.get_line(offset).strip():
            return
        document.delete(start, document.line_end_with_terminator(offset))
