"""Repository models and the operation state machine"""
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Tuple


class RepoState(Enum):
    """Position of a repository in a batch operation lifecycle."""
    AVAILABLE = "available"
    QUEUED = "queued"
    WORKING = "working"
    SUCCESS = "success"
    FAIL = "fail"

    def can_transition_to(self, target: "RepoState") -> bool:
        """Check whether moving from this state to target is allowed."""
        return target in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        """Success and Fail end a batch run."""
        return self in (RepoState.SUCCESS, RepoState.FAIL)


_TRANSITIONS = {
    RepoState.AVAILABLE: frozenset({RepoState.QUEUED}),
    RepoState.QUEUED: frozenset({RepoState.WORKING, RepoState.AVAILABLE}),
    RepoState.WORKING: frozenset({RepoState.SUCCESS, RepoState.FAIL}),
    RepoState.SUCCESS: frozenset({RepoState.AVAILABLE}),
    RepoState.FAIL: frozenset({RepoState.AVAILABLE}),
}


class OperationMode(Enum):
    """Operation dispatched to repositories in a batch run."""
    FETCH = "fetch"
    PULL = "pull"
    MERGE = "merge"


@dataclass(frozen=True)
class Commit:
    """A commit as reported by git. Read-only."""
    hash: str
    message: str
    author: str
    email: str
    date: datetime
    parents: Tuple[str, ...] = ()

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


@dataclass
class Branch:
    """A local branch."""
    name: str
    reference: Any = field(default=None, compare=False, repr=False)


@dataclass
class RemoteBranch:
    """A remote-tracking branch, named <remote>/<branch>."""
    name: str
    reference: Any = field(default=None, compare=False, repr=False)


@dataclass
class Remote:
    """A configured remote and its remote-tracking branches."""
    name: str
    url: str = ""
    branches: List[RemoteBranch] = field(default_factory=list)
    branch: Optional[RemoteBranch] = None  # merge/fetch target

    def find_branch(self, name: str) -> Optional[RemoteBranch]:
        for remote_branch in self.branches:
            if remote_branch.name == name:
                return remote_branch
        return None

    def select_branch(self, name: str) -> bool:
        """Try to select a remote-tracking branch by name.

        Returns:
            True if the branch exists and is now selected. False if it does
            not exist, in which case the current selection is left as is.
        """
        remote_branch = self.find_branch(name)
        if remote_branch is None:
            return False
        self.branch = remote_branch
        return True
