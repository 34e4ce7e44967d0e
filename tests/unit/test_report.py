"""Tests for Reporter: tables, truncation and hand-off to the ignore workflow."""

import io
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from commitguard.core.config import ReportSettings
from commitguard.detection.report import Reporter, truncate_message
from commitguard.detection.results import FILE_CONTENT, FILE_SIZE, DetectionResults
from commitguard.detection.severity import Severity
from commitguard.ignores.rc_file import RCFile
from commitguard.ignores.suggestion import IgnoreSuggester, SuggestionOutcome
from commitguard.prompt import PromptContext, ScriptedPrompt


def _message(length: int) -> str:
    return "".join(chr(ord("a") + i % 26) for i in range(length))


@pytest.fixture
def settings():
    return ReportSettings(color=False)


@pytest.fixture
def suggester():
    mock = MagicMock()
    mock.will_prompt.return_value = False
    mock.suggest.return_value = SuggestionOutcome(output="SUGGESTED ENTRIES\n")
    return mock


class TestTruncateMessage:
    def test_long_message_is_cut_into_two_lines(self):
        message = _message(200)
        assert truncate_message(message) == message[:75] + "\n" + message[75:147] + "..."

    def test_message_at_limit_is_unchanged(self):
        message = _message(150)
        assert truncate_message(message) == message

    def test_short_message_is_unchanged(self):
        assert truncate_message("secret key") == "secret key"

    def test_custom_lengths(self):
        assert truncate_message("abcdefghij", limit=5, head=2, tail=3) == "ab\ncde..."


class TestRenderWarnings:
    def test_empty_when_no_warnings(self, settings, suggester):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])

        assert Reporter(results, suggester, settings).render_warnings() == ""

    def test_table_rows_in_insertion_order(self, settings, suggester):
        results = DetectionResults()
        results.warn("z.txt", FILE_CONTENT, "possible token", [], Severity.MEDIUM)
        results.warn("a.txt", FILE_CONTENT, "possible password", [], Severity.LOW)

        output = Reporter(results, suggester, settings).render_warnings()

        assert "Warnings:" in output
        assert "Please review the above file(s)" in output
        assert output.index("z.txt") < output.index("a.txt")
        assert "medium" in output

    def test_rows_for_one_file(self, settings, suggester):
        results = DetectionResults()
        results.warn("a.txt", FILE_CONTENT, _message(200), [], Severity.HIGH)

        rows = Reporter(results, suggester, settings).report_file_warnings("a.txt")

        assert rows == [["a.txt", truncate_message(_message(200)), "high"]]

    def test_colour_output_contains_ansi(self, suggester):
        results = DetectionResults()
        results.warn("a.txt", FILE_CONTENT, "possible token", [])

        output = Reporter(results, suggester, ReportSettings(color=True)).render_warnings()

        assert "\x1b[" in output


class TestRenderFailures:
    def test_empty_and_no_suggestion_when_successful(self, settings, suggester):
        results = DetectionResults()
        results.ignore("b.txt", FILE_SIZE)
        results.warn("c.txt", FILE_CONTENT, "maybe", [])

        reporter = Reporter(results, suggester, settings)

        assert reporter.render_failures(PromptContext()) == ""
        suggester.suggest.assert_not_called()

    def test_table_contains_failure_rows(self, settings, suggester):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [], Severity.HIGH)

        output = Reporter(results, suggester, settings).render_failures(PromptContext())

        assert "Report:" in output
        assert "a.pem" in output
        assert "secret key" in output
        assert "high" in output
        assert output.endswith("SUGGESTED ENTRIES\n")

    def test_long_messages_are_truncated_in_table(self, settings, suggester):
        message = _message(200)
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, message, [])

        output = Reporter(results, suggester, settings).render_failures(PromptContext())

        assert message[:75] in output
        assert message[75:147] + "..." in output
        assert message not in output

    def test_ignore_only_files_get_suggestions(self, settings, suggester):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])
        results.ignore("b.txt", FILE_SIZE)

        Reporter(results, suggester, settings).render_failures(PromptContext())

        paths, _ = suggester.suggest.call_args[0]
        assert paths == ["a.pem", "b.txt"]

    def test_ignore_only_files_skipped_when_disabled(self, suggester):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])
        results.ignore("b.txt", FILE_SIZE)
        settings = ReportSettings(color=False, suggest_for_ignored_files=False)

        Reporter(results, suggester, settings).render_failures(PromptContext())

        paths, _ = suggester.suggest.call_args[0]
        assert paths == ["a.pem"]

    def test_prompt_context_is_passed_through(self, settings, suggester):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])
        context = PromptContext(interactive=False)

        Reporter(results, suggester, settings).render_failures(context)

        assert suggester.suggest.call_args[0][1] is context

    def test_interactive_run_writes_table_before_prompting(self, settings, tmp_path):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])
        buffer = io.StringIO()
        stage = MagicMock()
        suggester = IgnoreSuggester(
            rc_file=RCFile(tmp_path / ".talismanrc"),
            hasher=lambda paths: "abc123",
            stage=stage,
            console=Console(file=buffer, color_system=None, width=120),
            is_interactive_supported=lambda: True,
        )
        prompt = ScriptedPrompt([True])

        reporter = Reporter(results, suggester, settings)
        output = reporter.render_failures(PromptContext(interactive=True, prompt=prompt))

        assert output == ""
        written = buffer.getvalue()
        assert written.index("a.pem") < written.index("Interactively adding")
        assert [c.filename for c in reporter.last_suggestion.confirmed] == ["a.pem"]
        stage.assert_called_once_with(tmp_path / ".talismanrc")


class TestEndToEnd:
    def test_failure_and_ignore_run(self, settings, tmp_path):
        results = DetectionResults()
        results.fail("a.pem", FILE_CONTENT, "secret key", [])
        results.ignore("b.txt", FILE_SIZE)

        suggester = IgnoreSuggester(
            rc_file=RCFile(tmp_path / ".talismanrc"),
            hasher=lambda paths: f"sum-{paths[0]}",
            stage=MagicMock(),
            color=False,
        )
        reporter = Reporter(results, suggester, settings)
        output = reporter.render_failures(PromptContext(interactive=False))

        assert results.successful() is False
        assert results.has_ignores() is True
        assert "a.pem" in output
        assert [c.filename for c in reporter.last_suggestion.candidates] == ["a.pem", "b.txt"]
        assert "checksum: sum-a.pem" in output
        assert "checksum: sum-b.txt" in output
        assert not (tmp_path / ".talismanrc").exists()
