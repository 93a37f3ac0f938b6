"""Custom exceptions for git-batch"""

from typing import Optional


class GitBatchError(Exception):
    """Base exception for all git-batch errors."""
    pass


class PathUnreadableError(GitBatchError):
    """Exception raised when a directory cannot be opened or stat'ed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Cannot read directory '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NotARepositoryError(GitBatchError):
    """Exception raised when a directory is not a git working copy."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"'{path}' is not a git repository"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class EmptyRepositoryError(GitBatchError):
    """Load diagnostic: the repository has no commits yet."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"There is no commit for this repository: {path}")


class NoRemoteError(GitBatchError):
    """Load diagnostic: the repository has no configured remote."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"There is no remote for this repository: {path}")


class RemoteBranchNotFoundError(GitBatchError):
    """Exception raised when a remote-tracking branch does not exist."""

    def __init__(self, remote: str, branch: str):
        self.remote = remote
        self.branch = branch
        super().__init__(f"Remote '{remote}' has no branch '{branch}'")


class RefreshFailedError(GitBatchError):
    """Exception raised when cached state could not be reloaded from disk.

    Cached state may be partially stale after this error: steps completed
    before the failing one are kept.
    """

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Refresh failed for '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitOperationError(GitBatchError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message
        # Set when the follow-up refresh failed as well
        self.refresh_error: Optional[RefreshFailedError] = None

        error_msg = f"Git operation '{operation}' failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)

    def attach_refresh_error(self, error: RefreshFailedError) -> None:
        """Record a refresh failure that happened while handling this error."""
        self.refresh_error = error
        self.args = (f"{self.args[0]} (and {error})",)


class FetchFailedError(GitOperationError):
    """Exception raised when fetching a remote fails."""

    def __init__(self, remote: str, message: Optional[str] = None):
        super().__init__("fetch", remote, message)


class MergeFailedError(GitOperationError):
    """Exception raised when merging a branch fails."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("merge", branch, message)


class CheckoutFailedError(GitOperationError):
    """Exception raised when checking out a branch fails."""

    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("checkout", branch, message)


class EntityNotReadyError(GitBatchError):
    """Exception raised when an operation lacks a selected branch or remote."""

    def __init__(self, name: str, message: str):
        self.name = name
        self.message = message
        super().__init__(f"Repository '{name}' is not ready: {message}")


class InvalidStateTransitionError(GitBatchError):
    """Exception raised for a state change the state machine does not allow."""

    def __init__(self, name: str, current, requested):
        self.name = name
        self.current = current
        self.requested = requested
        super().__init__(
            f"Repository '{name}' cannot move from {current.value} to {requested.value}"
        )
