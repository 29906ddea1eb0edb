import pytest

from importguard.document import TextDocument
from importguard.models import CleanupSettings
from importguard.protection import ProtectionGuard, parse_protected_patterns
from importguard.utils.config import CachedSettingSet


class FakeCommand:
    """Stands in for the host's remove-and-sort command."""

    def __init__(self, rewrite):
        self.rewrite = rewrite
        self.calls = 0

    def remove_and_sort(self, document):
        self.calls += 1
        document.apply_text(self.rewrite(document.text))


def drop_lines(*texts):
    def rewrite(text):
        return "".join(
            line for line in text.splitlines(keepends=True)
            if line.strip() not in texts
        )
    return rewrite


SOURCE = """\
using System;
using System.Linq;
using MyApp;

namespace App
{
}
"""


class TestParseProtectedPatterns:
    def test_default_expression(self):
        assert parse_protected_patterns("using System;||using System.Linq;") == [
            "using System;",
            "using System.Linq;",
        ]

    def test_trims_and_drops_empty_segments(self):
        assert parse_protected_patterns(" a || ||b||") == ["a", "b"]

    def test_single_pipe_is_not_a_delimiter(self):
        assert parse_protected_patterns("a|b") == ["a|b"]

    @pytest.mark.parametrize("expression", ["", None, "||", "  ||  "])
    def test_empty(self, expression):
        assert parse_protected_patterns(expression) == []


class TestCachedSettingSet:
    def test_parses_once_until_source_changes(self):
        source = {"value": "a||b"}
        calls = []

        def parse(expression):
            calls.append(expression)
            return parse_protected_patterns(expression)

        cached = CachedSettingSet(lambda: source["value"], parse)
        assert cached.value == ["a", "b"]
        assert cached.value == ["a", "b"]
        assert calls == ["a||b"]

        source["value"] = "c"
        assert cached.value == ["c"]
        assert calls == ["a||b", "c"]

    def test_guard_follows_setting_changes(self):
        settings = CleanupSettings(protected_patterns="using A;")
        guard = ProtectionGuard(settings)
        assert guard.patterns == ["using A;"]
        settings.protected_patterns = "using B;||using C;"
        assert guard.patterns == ["using B;", "using C;"]


class TestProtectAndClean:
    def test_deleted_protected_line_is_restored(self):
        doc = TextDocument(SOURCE)
        command = FakeCommand(drop_lines("using System.Linq;"))

        ProtectionGuard().protect_and_clean(doc, command)

        assert command.calls == 1
        assert doc.text == SOURCE

    def test_untouched_document_is_unchanged(self):
        doc = TextDocument(SOURCE)
        ProtectionGuard().protect_and_clean(doc, FakeCommand(lambda text: text))
        assert doc.text == SOURCE

    def test_unprotected_line_stays_removed(self):
        doc = TextDocument(SOURCE)
        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using MyApp;")))
        assert doc.text == SOURCE.replace("using MyApp;\n", "")

    def test_several_removed_lines_restored_in_order(self):
        doc = TextDocument(SOURCE)
        command = FakeCommand(drop_lines("using System;", "using System.Linq;", "using MyApp;"))

        ProtectionGuard().protect_and_clean(doc, command)

        assert doc.text == SOURCE.replace("using MyApp;\n", "")

    def test_indentation_is_restored(self):
        source = "namespace App\n{\n    using System.Linq;\n    using Other;\n}\n"
        doc = TextDocument(source)

        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using System.Linq;")))

        assert doc.text == source

    def test_insertion_at_line_start_pushes_capture(self):
        source = "using System.Linq;\nclass A { }\n"
        doc = TextDocument(source)
        command = FakeCommand(lambda text: "using MyApp;\n" + text)

        ProtectionGuard().protect_and_clean(doc, command)

        assert doc.text == "using MyApp;\nusing System.Linq;\nclass A { }\n"

    def test_line_matching_two_patterns_restored_once(self):
        doc = TextDocument(SOURCE)
        patterns = ["using System.Linq;", "  using System.Linq;  "]

        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using System.Linq;")), patterns=patterns)

        assert doc.text == SOURCE
        assert doc.text.count("using System.Linq;") == 1

    def test_crlf_document(self):
        source = SOURCE.replace("\n", "\r\n")
        doc = TextDocument(source)

        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using System.Linq;")))

        assert doc.text == source

    def test_protected_last_line_without_terminator(self):
        doc = TextDocument("class A { }\nusing System;")
        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using System;")))
        assert doc.text == "class A { }\nusing System;\n"

    def test_no_patterns(self):
        doc = TextDocument(SOURCE)
        guard = ProtectionGuard(CleanupSettings(protected_patterns=""))
        guard.protect_and_clean(doc, FakeCommand(drop_lines("using System.Linq;")))
        assert "using System.Linq;" not in doc.text

    def test_markers_released(self):
        doc = TextDocument(SOURCE)
        ProtectionGuard().protect_and_clean(doc, FakeCommand(drop_lines("using System.Linq;")))
        assert doc._points == []


class TestPreconditions:
    def test_disabled(self):
        doc = TextDocument(SOURCE)
        command = FakeCommand(drop_lines("using MyApp;"))
        guard = ProtectionGuard(CleanupSettings(run_builtin_cleanup=False))

        guard.protect_and_clean(doc, command)

        assert command.calls == 0
        assert doc.text == SOURCE

    def test_skipped_during_autosave(self):
        command = FakeCommand(drop_lines("using MyApp;"))
        ProtectionGuard().protect_and_clean(TextDocument(SOURCE), command, autosave=True)
        assert command.calls == 0

    def test_autosave_runs_when_not_suppressed(self):
        command = FakeCommand(drop_lines("using MyApp;"))
        guard = ProtectionGuard(CleanupSettings(skip_during_autosave=False))
        guard.protect_and_clean(TextDocument(SOURCE), command, autosave=True)
        assert command.calls == 1

    def test_suppression_only_applies_to_autosave(self):
        command = FakeCommand(drop_lines("using MyApp;"))
        ProtectionGuard().protect_and_clean(TextDocument(SOURCE), command, autosave=False)
        assert command.calls == 1
