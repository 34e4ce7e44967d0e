"""Turns files with unresolved failures into suggested ignore entries.

For every file a checksum is taken from the hasher and an ignore entry is
built for it. In an interactive session each entry is shown and confirmed
one at a time; confirmed entries are merged into the rc file, which is then
staged with git. Otherwise all entries are rendered as YAML for the user to
paste into the rc file by hand, and nothing is written.

Nothing here fails the run: write, staging and marshalling errors are logged
and the workflow moves on.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from ..core.config import interactive_supported
from ..prompt import Prompt, PromptContext
from ..utils.console import render_to_text, unique_items
from ..utils.error_handling import log_and_ignore, safe_call
from ..utils.hashing import DefaultSHA256Hasher, Hasher
from ..utils.subprocess_utils import SubprocessError, stage_file
from .rc_file import (
    IgnoreConfig,
    Mode,
    RCFile,
    build_ignore_config,
    dump_ignore_config,
    dump_ignore_list_item,
)

logger = logging.getLogger(__name__)


class SuggestionState(str, Enum):
    COLLECTING = "collecting"
    CONFIRMING = "confirming"
    PERSISTING = "persisting"
    PRINTING = "printing"
    DONE = "done"


@dataclass
class SuggestionOutcome:
    """What one run of the workflow produced."""
    candidates: List[IgnoreConfig] = field(default_factory=list)
    confirmed: List[IgnoreConfig] = field(default_factory=list)
    # Copy-paste suggestion text (non-interactive runs only)
    output: str = ""
    persisted: bool = False
    # States visited, in order
    states: List[SuggestionState] = field(default_factory=list)

    @property
    def state(self) -> Optional[SuggestionState]:
        return self.states[-1] if self.states else None


class IgnoreSuggester:
    """Builds, confirms and persists checksum-scoped ignore entries."""

    def __init__(
        self,
        mode: Mode = Mode.PRE_COMMIT,
        rc_file: Optional[RCFile] = None,
        hasher: Optional[Hasher] = None,
        stage: Optional[Callable[[Path], None]] = None,
        console: Optional[Console] = None,
        is_interactive_supported: Optional[Callable[[], bool]] = None,
        color: bool = True,
        width: Optional[int] = None,
        git_timeout: Optional[int] = None,
    ):
        self.mode = mode
        self.rc_file = rc_file or RCFile()
        self.hasher = hasher or DefaultSHA256Hasher()
        self._stage = stage or (lambda path: stage_file(path, timeout=git_timeout))
        self.console = console or Console(highlight=False)
        self._is_interactive_supported = is_interactive_supported or interactive_supported
        self.color = color
        self.width = width

    def suggest(self, file_paths: Iterable[str], prompt_context: PromptContext) -> SuggestionOutcome:
        """Run the workflow for file_paths; duplicate paths are collapsed."""
        outcome = SuggestionOutcome(states=[SuggestionState.COLLECTING])
        outcome.candidates = self.build_candidates(unique_items(file_paths))

        if not outcome.candidates:
            outcome.states.append(SuggestionState.DONE)
            return outcome

        if self.will_prompt(prompt_context):
            outcome.states.append(SuggestionState.CONFIRMING)
            outcome.confirmed = self.get_user_confirmation(outcome.candidates, prompt_context.prompt)
            outcome.states.append(SuggestionState.PERSISTING)
            outcome.persisted = self.persist(outcome.confirmed)
        else:
            outcome.states.append(SuggestionState.PRINTING)
            outcome.output = self.render_suggestion(outcome.candidates)

        outcome.states.append(SuggestionState.DONE)
        return outcome

    def will_prompt(self, prompt_context: PromptContext) -> bool:
        return prompt_context.interactive and self._is_interactive_supported()

    def build_candidates(self, file_paths: List[str]) -> List[IgnoreConfig]:
        candidates = []
        for file_path in file_paths:
            checksum = self.hasher([file_path])
            candidates.append(build_ignore_config(self.mode, file_path, checksum, []))
        return candidates

    def get_user_confirmation(
        self,
        candidates: List[IgnoreConfig],
        prompt: Optional[Prompt],
    ) -> List[IgnoreConfig]:
        """Ask about each candidate once; declined candidates are dropped."""
        if prompt is None:
            logger.warning("Interactive run without a prompt, no entries confirmed")
            return []

        self.console.print(f"==== Interactively adding to {self.rc_file.path.name} ====")
        confirmed = []
        for candidate in candidates:
            if self.confirm(candidate, prompt):
                confirmed.append(candidate)
            else:
                logger.debug(f"Skipped ignore entry for {candidate.filename}")
        return confirmed

    def confirm(self, candidate: IgnoreConfig, prompt: Prompt) -> bool:
        rendered = safe_call(
            dump_ignore_config,
            candidate,
            error_message="error marshalling file ignore config",
            logger_instance=logger,
        )
        self.console.print()
        if rendered is not None:
            self.console.print(Text(rendered), soft_wrap=True)

        return prompt.confirm(
            f"Do you want to add {candidate.get_file_name()} with above checksum "
            f"in {self.rc_file.path.name} ?"
        )

    def persist(self, entries: List[IgnoreConfig]) -> bool:
        """Write entries to the rc file and stage it. Returns True if both succeeded."""
        if not entries:
            logger.info("No ignore entries confirmed, leaving rc file untouched")
            return False

        persisted = True
        try:
            self.rc_file.add_ignores(self.mode, entries)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            log_and_ignore(
                e,
                f"Error writing ignore entries to {self.rc_file.path}",
                logger_instance=logger,
                level=logging.ERROR,
            )
            persisted = False

        try:
            self._stage(self.rc_file.path)
        except SubprocessError as e:
            logger.error(f"Error appending to {self.rc_file.path.name} {e.output}")
            persisted = False
        except OSError as e:
            log_and_ignore(e, "Could not run git", logger_instance=logger, level=logging.ERROR)
            persisted = False

        return persisted

    def render_suggestion(self, candidates: List[IgnoreConfig]) -> str:
        """Hint plus YAML for all candidates, for a non-interactive run.

        Each candidate is marshalled on its own; one that fails is logged and
        left out while the others are still shown.
        """
        items = []
        for candidate in candidates:
            item = safe_call(
                dump_ignore_list_item,
                candidate,
                default=None,
                error_message=f"error marshalling file ignore config for {candidate.filename}",
                logger_instance=logger,
            )
            if item is not None:
                items.append(item)
        entries = "fileignoreconfig:\n" + "".join(items) if items else ""
        hint = Text(
            "\nIf you are absolutely sure that you want to ignore the above files from "
            f"detectors, consider pasting the following format in {self.rc_file.path.name} "
            "file in the project root\n",
            style="yellow",
        )
        return render_to_text(
            [hint, Text(entries)], color=self.color, width=self.width, soft_wrap=True
        )
