"""Helpers for rendering rich output to plain (ANSI-styled) text."""

import io
from typing import Any, Iterable, List, Optional

from rich.console import Console

DEFAULT_WIDTH = 120


def text_console(color: bool = True, width: Optional[int] = None) -> Console:
    """Console writing into an in-memory buffer instead of the terminal."""
    return Console(
        file=io.StringIO(),
        force_terminal=color,
        color_system="standard" if color else None,
        width=width or DEFAULT_WIDTH,
        highlight=False,
        emoji=False,
    )


def render_to_text(
    renderables: Iterable[Any],
    color: bool = True,
    width: Optional[int] = None,
    soft_wrap: bool = False,
) -> str:
    console = text_console(color=color, width=width)
    for renderable in renderables:
        console.print(renderable, soft_wrap=soft_wrap)
    return console.file.getvalue()


def unique_items(items: Iterable[str]) -> List[str]:
    """Drop repeated items (exact match), keeping first-seen order."""
    return list(dict.fromkeys(items))
