"""User confirmation prompts used by the interactive ignore workflow."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol

import click

logger = logging.getLogger(__name__)


class Prompt(Protocol):
    def confirm(self, message: str) -> bool:
        ...


class ClickPrompt:
    """Asks on the terminal; blocks until the user answers."""

    def __init__(self, default: bool = False):
        self.default = default

    def confirm(self, message: str) -> bool:
        return click.confirm(message, default=self.default)


class ScriptedPrompt:
    """Replays a fixed list of answers. Answers False once the script runs out."""

    def __init__(self, answers: Iterable[bool]):
        self._answers = list(answers)
        self.asked: List[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        if not self._answers:
            logger.debug(f"No scripted answer left for: {message}")
            return False
        return self._answers.pop(0)


@dataclass
class PromptContext:
    """Whether the run may ask questions, and how."""
    interactive: bool = False
    prompt: Optional[Prompt] = field(default=None)

    def __post_init__(self):
        if self.interactive and self.prompt is None:
            self.prompt = ClickPrompt()
