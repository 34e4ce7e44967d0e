"""Terminal reports for a finished detection run."""

import logging
from typing import List, Optional

from rich import box
from rich.table import Table
from rich.text import Text

from ..core.config import ReportSettings
from ..ignores.rc_file import RCFile
from ..ignores.suggestion import IgnoreSuggester, SuggestionOutcome
from ..prompt import PromptContext
from ..utils.console import render_to_text, unique_items
from .results import DetectionResults, Finding

logger = logging.getLogger(__name__)


def truncate_message(
    message: str,
    limit: int = 150,
    head: int = 75,
    tail: int = 72,
) -> str:
    """Shorten messages longer than limit to two lines ending in "..."."""
    if len(message) <= limit:
        return message
    return message[:head] + "\n" + message[head:head + tail] + "..."


class Reporter:
    """Renders warnings and failures of a DetectionResults as tables."""

    def __init__(
        self,
        results: DetectionResults,
        suggester: Optional[IgnoreSuggester] = None,
        settings: Optional[ReportSettings] = None,
    ):
        self.results = results
        self.settings = settings or ReportSettings()
        self.suggester = suggester or IgnoreSuggester(
            mode=results.mode,
            rc_file=RCFile(self.settings.rc_filename),
            color=self.settings.color,
            width=self.settings.table_width,
            git_timeout=self.settings.git_timeout,
        )
        self.last_suggestion: Optional[SuggestionOutcome] = None

    def _rows(self, file_path: str, details: List[Finding]) -> List[List[str]]:
        return [
            [
                file_path,
                truncate_message(
                    detail.message,
                    self.settings.max_message_length,
                    self.settings.truncate_head,
                    self.settings.truncate_tail,
                ),
                str(detail.severity),
            ]
            for detail in details
        ]

    def report_file_failures(self, file_path: str) -> List[List[str]]:
        return self._rows(file_path, self.results.get_failures(file_path))

    def report_file_warnings(self, file_path: str) -> List[List[str]]:
        return self._rows(file_path, self.results.get_warnings(file_path))

    def _table(self, column: str, rows: List[List[str]]) -> Table:
        table = Table(box=box.ASCII, show_lines=True, header_style="bold")
        table.add_column("File")
        table.add_column(column)
        table.add_column("Severity")
        for row in rows:
            table.add_row(*row)
        return table

    def _render(self, *renderables) -> str:
        return render_to_text(renderables, color=self.settings.color, width=self.settings.table_width)

    def render_warnings(self) -> str:
        """Warnings table, or an empty string if nothing was warned about."""
        if not self.results.has_warnings():
            return ""

        rows: List[List[str]] = []
        for file_results in self.results.file_results():
            if file_results.warning_list:
                rows.extend(self.report_file_warnings(file_results.filename))

        return self._render(
            Text("\nWarnings:", style="bold red"),
            self._table("Warnings", rows),
            Text(
                "\nPlease review the above file(s) to make sure that no sensitive "
                "content is being pushed\n",
                style="yellow",
            ),
        )

    def failures_report(self) -> str:
        """Failures table, or an empty string for a successful run."""
        if not self.results.has_failures():
            return ""

        rows: List[List[str]] = []
        for file_results in self.results.file_results():
            if file_results.has_failures_or_ignores:
                rows.extend(self.report_file_failures(file_results.filename))

        return self._render(Text("\nReport:", style="bold red"), self._table("Errors", rows))

    def suggestion_paths(self) -> List[str]:
        """Files that should get a suggested ignore entry, in report order."""
        paths = unique_items(self.results.files_with_failures_or_ignores())
        if self.settings.suggest_for_ignored_files:
            return paths
        return [path for path in paths if self.results.get_failures(path)]

    def render_failures(self, prompt_context: Optional[PromptContext] = None) -> str:
        """Failures table followed by ignore suggestions for the failing files.

        Returns an empty string for a successful run. In an interactive run
        the table is written to the suggester's console ahead of the
        confirmation prompts and the returned text is empty.
        """
        self.last_suggestion = None
        report = self.failures_report()
        if not report:
            return ""

        prompt_context = prompt_context or PromptContext()
        paths = self.suggestion_paths()
        logger.debug(f"Suggesting ignore entries for {len(paths)} file(s)")

        if self.suggester.will_prompt(prompt_context):
            self.suggester.console.print(Text.from_ansi(report), end="", soft_wrap=True)
            self.last_suggestion = self.suggester.suggest(paths, prompt_context)
            return ""

        self.last_suggestion = self.suggester.suggest(paths, prompt_context)
        return report + self.last_suggestion.output
