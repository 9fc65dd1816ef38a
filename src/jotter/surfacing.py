"""
Surfacing module for Jotter.

Sort-and-render pipeline: order notes by timestamp according to the active
directive, then project them into a display list of content lines.
"""

import os
from typing import Iterable

from jotter.models import Note, SortDirective


# ANSI color codes
class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    BRIGHT_BLACK = "\033[90m"  # Gray

    @classmethod
    def enabled(cls) -> bool:
        """Check if colors should be enabled."""
        # Disable if NO_COLOR is set
        if os.environ.get("NO_COLOR"):
            return False
        return True


def c(text: str, *codes: str) -> str:
    """Apply color codes to text if colors are enabled."""
    if not Colors.enabled():
        return text
    return "".join(codes) + text + Colors.RESET


class DisplayList:
    """The rendered note list. Each line is one note's content."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def replace(self, lines: Iterable[str]) -> None:
        """Replace the whole list. Nothing from the previous render survives."""
        self.lines = list(lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"DisplayList({self.lines!r})"


def sort_notes(notes: list[Note], directive: SortDirective | str) -> list[Note]:
    """
    Order notes by timestamp.

    NewestToOldest sorts descending, OldestToNewest ascending. Both are
    stable, so equal timestamps keep their input order. Any other directive
    leaves the storage order untouched.

    Returns a new list; the input is not modified.
    """
    if directive == SortDirective.NEWEST_TO_OLDEST:
        return sorted(notes, key=lambda note: note.timestamp, reverse=True)
    if directive == SortDirective.OLDEST_TO_NEWEST:
        return sorted(notes, key=lambda note: note.timestamp)
    return list(notes)


def render_notes(notes: list[Note], display: DisplayList) -> DisplayList:
    """Replace the display with one line of content per note."""
    display.replace(note.content for note in notes)
    return display


def format_display(display: DisplayList, title: str = "Notes", plain: bool = False) -> str:
    """Format a display list for the terminal (plain: no ANSI codes)."""
    paint = (lambda text, *codes: text) if plain else c

    if not display.lines:
        return paint("No notes yet.", Colors.DIM)

    lines = [paint(f"{title} ({len(display)})", Colors.BOLD), ""]
    width = len(str(len(display)))

    for seq, content in enumerate(display.lines, 1):
        marker = paint(f"{seq:>{width}}.", Colors.BRIGHT_BLACK)
        # Continuation lines of multi-line notes stay under the first line
        body = content.replace("\n", "\n" + " " * (width + 2))
        lines.append(f"{marker} {body}")

    return "\n".join(lines)
