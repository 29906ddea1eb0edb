"""Protect selected directives from the host's remove-unused command.

Lines matching a protected pattern are captured before the destructive
command runs and re-inserted verbatim if the command removed them.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .document import EditPoint, TextDocument
from .models import CleanupSettings
from .utils.config import CachedSettingSet

logger = logging.getLogger(__name__)

PATTERN_DELIMITER = "||"


class DestructiveCommand(Protocol):
    def remove_and_sort(self, document: TextDocument) -> None: ...


def parse_protected_patterns(expression: str | None) -> list[str]:
    if not expression:
        return []
    segments = (segment.strip() for segment in expression.split(PATTERN_DELIMITER))
    return [segment for segment in segments if segment]


class CapturedPoint:
    def __init__(self, point: EditPoint, text: str):
        self.point = point
        self.text = text


class ProtectionGuard:
    def __init__(self, settings: CleanupSettings | None = None):
        self.settings = settings or CleanupSettings()
        self._patterns = CachedSettingSet(
            lambda: self.settings.protected_patterns,
            parse_protected_patterns,
        )

    @property
    def patterns(self) -> list[str]:
        return self._patterns.value

    def should_run(self, autosave: bool = False) -> bool:
        if not self.settings.run_builtin_cleanup:
            return False
        if autosave and self.settings.skip_during_autosave:
            return False
        return True

    def capture(self, document: TextDocument, patterns: list[str]) -> list[CapturedPoint]:
        points = [
            CapturedPoint(point, text)
            for pattern in patterns
            for point, text in document.find_matches(pattern)
        ]
        points.reverse()

        # Step one character into the line so insertions at its start push the marker along.
        for captured in points:
            captured.point.move_right()
        return points

    def restore(self, points: list[CapturedPoint]) -> int:
        restored = 0
        for captured in points:
            point = captured.point
            if point.get_line() == captured.text:
                continue
            point.move_to_line_start()
            point.insert(captured.text)
            point.insert(point.document.newline)
            restored += 1
            logger.info(f"Restored protected line {captured.text.strip()!r} at line {point.line}")
        return restored

    def protect_and_clean(
        self,
        document: TextDocument,
        command: DestructiveCommand,
        patterns: list[str] | None = None,
        autosave: bool = False,
    ) -> None:
        """Run command over document, re-inserting any protected line it removed."""
        if not self.should_run(autosave):
            logger.debug("Skipping remove-and-sort: disabled or suppressed during autosave")
            return

        if patterns is None:
            patterns = self.patterns

        points = self.capture(document, patterns)
        logger.debug(f"Captured {len(points)} protected lines")

        command.remove_and_sort(document)

        self.restore(points)
        for captured in points:
            document.release(captured.point)
