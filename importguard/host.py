"""Run the external remove-unused/sort commands against a document."""

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path

from .document import TextDocument
from .exceptions import HostCommandError
from .models import CleanupSettings

logger = logging.getLogger(__name__)

PATH_PLACEHOLDER = "{path}"


class HostCommands:
    """The host's built-in remove-unused and sort commands.

    Hosts that support it run one merged command; older hosts run
    "remove unused" and then "sort".
    """

    def __init__(self, settings: CleanupSettings, source_path: Path | None = None):
        self.settings = settings
        self.source_path = source_path

    @property
    def commands(self) -> list[str]:
        if self.settings.merged_command_supported:
            names = [self.settings.merged_command]
        else:
            names = [self.settings.remove_unused_command, self.settings.sort_command]
        return [name for name in names if name.strip()]

    def is_configured(self) -> bool:
        return bool(self.commands)

    def remove_and_sort(self, document: TextDocument) -> None:
        for command in self.commands:
            self.execute(document, command)

    def execute(self, document: TextDocument, command: str) -> None:
        logger.info(f"Running {command!r}")
        if PATH_PLACEHOLDER in command:
            new_text = self._run_on_file(document.text, command)
        else:
            new_text = self._run_filter(document.text, command)
        edits = document.apply_text(new_text)
        logger.debug(f"{command!r} produced {edits} edits")

    def _run_filter(self, text: str, command: str) -> str:
        return self._run(shlex.split(command), text)

    def _run_on_file(self, text: str, command: str) -> str:
        directory = self.source_path.parent if self.source_path else None
        suffix = self.source_path.suffix if self.source_path else ""
        fd, temp_name = tempfile.mkstemp(prefix=".importguard-", suffix=suffix, dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            args = [arg.replace(PATH_PLACEHOLDER, temp_name) for arg in shlex.split(command)]
            self._run(args, None)
            with open(temp_name, encoding="utf-8", newline="") as f:
                return f.read()
        finally:
            Path(temp_name).unlink(missing_ok=True)

    def _run(self, args: list[str], stdin: str | None) -> str:
        try:
            result = subprocess.run(
                args,
                input=stdin.encode("utf-8") if stdin is not None else None,
                capture_output=True,
                cwd=self.source_path.parent if self.source_path else None,
            )
        except FileNotFoundError:
            raise HostCommandError(args, None, f"command not found: {args[0]}")

        if result.returncode != 0:
            raise HostCommandError(args, result.returncode, result.stderr.decode("utf-8", "replace"))
        return result.stdout.decode("utf-8")
