"""
Data models for Jotter.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SortDirective(str, Enum):
    """User-selected display order."""

    NEWEST_TO_OLDEST = "NewestToOldest"
    OLDEST_TO_NEWEST = "OldestToNewest"


DEFAULT_DIRECTIVE = SortDirective.NEWEST_TO_OLDEST

# CLI shorthand
DIRECTIVE_ALIASES = {
    "newest": SortDirective.NEWEST_TO_OLDEST,
    "oldest": SortDirective.OLDEST_TO_NEWEST,
}


class Note(BaseModel):
    """A persisted note. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Engine-assigned, never reused")
    content: str = Field(min_length=1, description="Note body")
    timestamp: int = Field(description="Write time, ms since epoch")


def parse_directive(value: str) -> SortDirective:
    """Parse a directive from its stored value or a CLI alias."""
    value = value.strip()
    if value.lower() in DIRECTIVE_ALIASES:
        return DIRECTIVE_ALIASES[value.lower()]
    return SortDirective(value)
