"""Data models for git-batch."""

from .repository import Branch, Commit, OperationMode, Remote, RemoteBranch, RepoState

__all__ = ["Branch", "Commit", "OperationMode", "Remote", "RemoteBranch", "RepoState"]
