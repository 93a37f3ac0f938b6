"""Shared constants for git-batch."""

from dataclasses import dataclass
from typing import List

from git_batch.models.repository import RepoState


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Repository", 24),
    ColumnDefinition("branch", "Branch", 20),
    ColumnDefinition("remote", "Remote", 10),
    ColumnDefinition("tracking", "Tracking", 24),
    ColumnDefinition("commit", "Commit", 9),
    ColumnDefinition("state", "State", 10),
    ColumnDefinition("message", "Message", 0),
]


SYMBOL_NONE = "-"


# Rich colour per state; None keeps the default colour
STATE_COLORS = {
    RepoState.AVAILABLE: None,
    RepoState.QUEUED: "cyan",
    RepoState.WORKING: "yellow",
    RepoState.SUCCESS: "green",
    RepoState.FAIL: "red",
}
