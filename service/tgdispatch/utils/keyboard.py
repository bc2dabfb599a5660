"""
Inline keyboard helpers.

Builds URL keyboards from a compact markdown notation:

    [caption](Pick a link:\\Docs are below)
    [Docs](https://example.com/docs) | [API](https://example.com/api)
    [Support](https://example.com/support)

The optional first line labelled "caption" carries the message text
(a backslash becomes a newline); every other line is a keyboard row with
cells separated by " | ".
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Sequence, TypeVar

from tgdispatch.telegram_bot.types import InlineKeyboardButton, InlineKeyboardMarkup

T = TypeVar("T")

_LINK_PATTERN = re.compile(r'\[([^\[]+)\]\((.*)\)')
_CELL_SEPARATOR = " | "


@dataclass
class MarkdownLinks:
    """Caption plus rows of {"text", "url"} cells."""
    caption: Optional[str] = None
    rows: list[list[dict[str, str]]] = field(default_factory=list)


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive chunks of at most ``size``.

    Handy for laying out buttons: ``partition(buttons, 2)`` gives two
    buttons per row.
    """
    if size < 1:
        raise ValueError("size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def extract_markdown_links(value: str) -> MarkdownLinks:
    """
    Parse markdown link rows (see module docstring).

    Raises:
        ValueError: If a cell is not a ``[text](url)`` link
    """
    lines = value.split("\n")
    caption = None

    first = _LINK_PATTERN.search(lines[0]) if lines else None
    if first and first.group(1).lower() == "caption":
        caption = first.group(2).replace("\\", "\n")
        lines = lines[1:]

    rows = []
    for line in lines:
        if not line.strip():
            continue
        row = []
        for cell in line.split(_CELL_SEPARATOR):
            match = _LINK_PATTERN.search(cell)
            if not match:
                raise ValueError(f"Not a markdown link: {cell!r}")
            row.append({"text": match.group(1), "url": match.group(2)})
        rows.append(row)

    return MarkdownLinks(caption=caption, rows=rows)


def build_link_keyboard(rows: Sequence[Sequence[dict[str, str]]]) -> InlineKeyboardMarkup:
    """Turn parsed link rows into an inline keyboard of URL buttons."""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=cell["text"], url=cell["url"]) for cell in row]
        for row in rows
    ])
