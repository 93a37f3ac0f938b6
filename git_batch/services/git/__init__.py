"""Git-related services for git-batch."""

from .adapter import GitAdapter

__all__ = ["GitAdapter"]
