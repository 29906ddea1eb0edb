"""Cleanup session tying protection, sorting and relocation together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypedDict

from .document import TextDocument
from .host import HostCommands
from .models import DirectiveSyntax, Settings
from .protection import DestructiveCommand, ProtectionGuard
from .relocation import ScopeRelocator
from .scanner import find_directives, find_scope_blocks
from .sorting import DirectiveSorter
from .utils.text import get_language_id, read_file_content, unified_diff, write_file_content

logger = logging.getLogger(__name__)


class FileResult(TypedDict, total=False):
    path: str
    changed: bool
    skipped: str | None
    diff: str | None


class ImportCleanup:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.guard = ProtectionGuard(self.settings.cleanup)
        self.relocator = ScopeRelocator(self.settings.sorting.collapse_emptied_lines)

    def open_document(self, text: str) -> TextDocument:
        return TextDocument(text, indent_unit=self.settings.formatting.indent_unit)

    def remove_and_sort(
        self,
        document: TextDocument,
        command: DestructiveCommand,
        autosave: bool = False,
    ) -> None:
        self.guard.protect_and_clean(document, command, autosave=autosave)

    def move_within_scope(self, document: TextDocument, syntax: DirectiveSyntax) -> bool:
        scope_blocks = find_scope_blocks(document, syntax)
        directives = DirectiveSorter(syntax).sort(find_directives(document, syntax))
        try:
            return self.relocator.relocate(directives, scope_blocks)
        finally:
            for directive in directives:
                document.release(directive.start)
                document.release(directive.end)
            for block in scope_blocks:
                document.release(block.start)

    def syntax_for_path(self, path: Path) -> DirectiveSyntax | None:
        language_id = get_language_id(path)
        syntax = self.settings.syntax_for(language_id)
        if syntax is None:
            logger.warning(f"No directive syntax known for {language_id} ({path})")
        return syntax

    def clean_file(self, path: Path, autosave: bool = False, dry_run: bool = False) -> FileResult:
        if self.syntax_for_path(path) is None:
            return {"path": str(path), "changed": False, "skipped": f"unsupported language: {get_language_id(path)}"}

        commands = HostCommands(self.settings.cleanup, source_path=path)
        if not commands.is_configured():
            logger.warning("No remove-unused command configured; set [cleanup] commands in the config file")
            return {"path": str(path), "changed": False, "skipped": "no command configured"}

        return self._process(path, lambda doc: self.remove_and_sort(doc, commands, autosave), dry_run)

    def sort_file(self, path: Path, dry_run: bool = False) -> FileResult:
        syntax = self.syntax_for_path(path)
        if syntax is None:
            return {"path": str(path), "changed": False, "skipped": f"unsupported language: {get_language_id(path)}"}

        return self._process(path, lambda doc: self.move_within_scope(doc, syntax), dry_run)

    def _process(self, path: Path, action, dry_run: bool) -> FileResult:
        before = read_file_content(path)
        document = self.open_document(before)
        action(document)
        after = document.text

        result: FileResult = {"path": str(path), "changed": after != before}
        if dry_run:
            result["diff"] = unified_diff(before, after, str(path))
        elif after != before:
            write_file_content(path, after)
            logger.info(f"Wrote {path}")
        return result
