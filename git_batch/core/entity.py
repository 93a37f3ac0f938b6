"""Repository entity: one working copy, its cached git state and operations"""

import os
import secrets
import stat
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import List, Optional, Union

import git

from git_batch.config import Config
from git_batch.exceptions import (
    EmptyRepositoryError,
    EntityNotReadyError,
    FetchFailedError,
    GitBatchError,
    GitOperationError,
    InvalidStateTransitionError,
    NoRemoteError,
    NotARepositoryError,
    PathUnreadableError,
    RefreshFailedError,
    RemoteBranchNotFoundError,
)
from git_batch.logging_config import get_logger
from git_batch.models.repository import Branch, Commit, Remote, RepoState
from git_batch.services.git import GitAdapter

logger = get_logger(__name__)

_default_adapter = GitAdapter()


def _random_id(length: int = 8) -> str:
    return secrets.token_hex(length)[:length]


def _stat_directory(path: str) -> datetime:
    """Return the modification time of a directory."""
    try:
        info = os.stat(path)
    except OSError as e:
        raise PathUnreadableError(path, e.strerror or str(e)) from e
    if not stat.S_ISDIR(info.st_mode):
        raise PathUnreadableError(path, "not a directory")
    if not os.access(path, os.R_OK | os.X_OK):
        raise PathUnreadableError(path, "permission denied")
    return datetime.fromtimestamp(info.st_mtime)


class RepositoryEntity:
    """A working copy together with its cached branches, remotes and commits.

    ``repository``, ``branches``, ``remotes`` and ``commits`` are snapshots:
    every load step assigns a complete new list and never patches an
    existing one. ``state`` only changes through :meth:`transition`.
    """

    def __init__(
        self,
        abs_path: str,
        repository: git.Repo,
        mod_time: datetime,
        config: Union[Config, dict, None] = None,
        adapter: Optional[GitAdapter] = None,
    ):
        self.repo_id = _random_id()
        self.name = os.path.basename(abs_path)
        self.abs_path = abs_path
        self.mod_time = mod_time
        self.repository = repository
        self.config = config if config is not None else {}
        self.adapter = adapter or _default_adapter

        self.branch: Optional[Branch] = None
        self.branches: List[Branch] = []
        self.remote: Optional[Remote] = None
        self.remotes: List[Remote] = []
        self.commit: Optional[Commit] = None
        self.commits: List[Commit] = []

        self.last_error: Optional[Exception] = None
        self._state = RepoState.AVAILABLE
        self._state_lock = Lock()

    def __str__(self) -> str:
        branch = self.branch.name if self.branch else "-"
        return f"{self.name} [{branch}] ({self._state.value})"

    @property
    def state(self) -> RepoState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """True when a branch and a remote are selected."""
        return self.branch is not None and self.remote is not None

    def transition(self, new_state: RepoState) -> None:
        """Move to new_state.

        Raises:
            InvalidStateTransitionError: if the state machine does not allow it
        """
        with self._state_lock:
            if not self._state.can_transition_to(new_state):
                raise InvalidStateTransitionError(self.name, self._state, new_state)
            logger.debug(f"{self.name}: {self._state.value} -> {new_state.value}")
            if new_state == RepoState.QUEUED:
                self.last_error = None
            self._state = new_state

    # Loading

    def load_branches(self, preferred: Optional[str] = None) -> None:
        """Reload local branches and select the active one.

        The preferred branch name wins when it still exists, otherwise the
        branch HEAD points at is selected.
        """
        branches = self.adapter.list_local_branches(self.repository)
        wanted = [preferred] if preferred else []
        wanted.append(self.adapter.current_head(self.repository))
        active = None
        for name in wanted:
            active = next((b for b in branches if b.name == name), None)
            if active is not None:
                break
        self.branches, self.branch = branches, active

    def load_commits(self) -> None:
        """Reload commits reachable from the active branch (HEAD if none)."""
        ref = self.branch.name if self.branch else None
        commits = self.adapter.list_commits(
            self.repository, ref, max_count=self.config.get("commit_limit")
        )
        self.commits, self.commit = commits, (commits[0] if commits else None)

    def load_remotes(self, preferred: Optional[str] = None,
                     preferred_branch: Optional[str] = None) -> None:
        """Reload remotes and select the active remote and its tracking branch."""
        remotes = self.adapter.list_remotes(self.repository)
        remote = self._choose_remote(remotes, preferred)
        if remote is not None:
            if not (preferred_branch and remote.select_branch(preferred_branch)):
                self.select_tracking_branch(remote)
        self.remotes, self.remote = remotes, remote

    def _choose_remote(self, remotes: List[Remote], preferred: Optional[str]) -> Optional[Remote]:
        if not remotes:
            return None
        for name in (preferred, self.config.get("default_remote")):
            if not name:
                continue
            for remote in remotes:
                if remote.name == name:
                    return remote
        return remotes[0]

    def select_tracking_branch(self, remote: Remote) -> bool:
        """Try to select <remote>/<active branch> on remote.

        Returns:
            Whether the tracking branch was found. A miss is not an error:
            the remote stays usable for fetch, just without a merge target.
        """
        if self.branch is None:
            return False
        name = f"{remote.name}/{self.branch.name}"
        found = remote.select_branch(name)
        if not found:
            logger.debug(f"{self.name}: {RemoteBranchNotFoundError(remote.name, name)}")
        return found

    # Operations

    def refresh(self) -> None:
        """Reload the handle, modification time, branches, commits and remotes.

        Steps run in that order and stop at the first failure. Whatever was
        reloaded before the failure is kept.

        Raises:
            RefreshFailedError: if any step fails
        """
        branch_name = self.branch.name if self.branch else None
        remote_name = self.remote.name if self.remote else None
        remote_branch_name = self.remote.branch.name if self.remote and self.remote.branch else None

        try:
            mod_time = _stat_directory(self.abs_path)
            repository = self.adapter.open_repository(self.abs_path)
        except (PathUnreadableError, NotARepositoryError) as e:
            raise RefreshFailedError(self.abs_path, str(e)) from e

        stale, self.repository = self.repository, repository
        self.mod_time = mod_time
        stale.close()

        try:
            self.load_branches(branch_name)
            if self.branch is None or self.branch.name != branch_name:
                remote_branch_name = None
            self.load_commits()
            self.load_remotes(remote_name, remote_branch_name)
        except (git.GitError, ValueError, OSError) as e:
            raise RefreshFailedError(self.abs_path, str(e)) from e
        logger.debug(f"Refreshed {self.name}: {len(self.branches)} branches, "
                     f"{len(self.commits)} commits, {len(self.remotes)} remotes")

    def checkout(self, branch: Branch) -> None:
        self.adapter.checkout(self.repository, branch)

    def fetch(self) -> None:
        """Fetch the selected remote, then refresh and re-checkout the active branch.

        A failed fetch leaves cached state untouched.
        """
        self._require_ready()
        remote_name = self.remote.name
        try:
            self.adapter.fetch(self.repository, remote_name)
        except FetchFailedError as e:
            logger.debug(f"{self.name}: error while fetching remote {remote_name}: {e}")
            raise
        self.refresh()
        self.checkout(self.branch)

    def merge(self) -> None:
        """Merge the selected remote branch into the active branch."""
        self._require_ready(tracking=True)
        target = self.remote.branch.name
        try:
            self.checkout(self.branch)
            self.adapter.merge(self.repository, target)
        except GitOperationError as e:
            logger.debug(f"{self.name}: error while merging {target}: {e}")
            self._refresh_after_failure(e)
            raise
        self.refresh()

    def pull(self) -> None:
        """Fetch the selected remote, then merge its tracking branch.

        If the fetch fails no merge is attempted and nothing is reloaded.
        """
        self._require_ready(tracking=True)
        remote_name = self.remote.name
        target = self.remote.branch.name
        try:
            self.adapter.fetch(self.repository, remote_name)
        except FetchFailedError as e:
            logger.debug(f"{self.name}: error while fetching remote {remote_name}: {e}")
            raise
        try:
            self.checkout(self.branch)
            self.adapter.merge(self.repository, target)
        except GitOperationError as e:
            logger.debug(f"{self.name}: error while merging {target}: {e}")
            self._refresh_after_failure(e)
            raise
        self.refresh()
        self.checkout(self.branch)

    def _refresh_after_failure(self, error: GitOperationError) -> None:
        try:
            self.refresh()
        except RefreshFailedError as refresh_error:
            logger.warning(f"{self.name}: refresh after failed {error.operation} also failed: {refresh_error}")
            error.attach_refresh_error(refresh_error)

    def _require_ready(self, tracking: bool = False) -> None:
        if self.branch is None:
            raise EntityNotReadyError(self.name, "no active branch")
        if self.remote is None:
            raise EntityNotReadyError(self.name, "no remote selected")
        if tracking and self.remote.branch is None:
            raise EntityNotReadyError(
                self.name,
                f"remote '{self.remote.name}' has no tracking branch for '{self.branch.name}'",
            )


@dataclass
class LoadResult:
    """An entity plus an optional load diagnostic.

    The entity is always usable for display. A non-None ``error`` tells the
    caller why it cannot take part in remote operations.
    """
    entity: RepositoryEntity
    error: Optional[GitBatchError] = None

    @property
    def operational(self) -> bool:
        return self.error is None


def initialize_repository(
    path: str,
    config: Union[Config, dict, None] = None,
    adapter: Optional[GitAdapter] = None,
) -> LoadResult:
    """Build a RepositoryEntity for the working copy at path.

    Raises:
        PathUnreadableError: if path cannot be stat'ed or is not a directory
        NotARepositoryError: if path is not a git repository

    Returns:
        LoadResult whose error is EmptyRepositoryError when there are no
        commits, NoRemoteError when no remote is configured, else None.
    """
    abs_path = os.path.abspath(path)
    try:
        mod_time = _stat_directory(abs_path)
    except PathUnreadableError:
        logger.debug(f"Cannot open {abs_path} as directory")
        raise
    adapter = adapter or _default_adapter
    repository = adapter.open_repository(abs_path)

    entity = RepositoryEntity(abs_path, repository, mod_time, config, adapter)
    entity.load_branches()
    entity.load_commits()
    if not entity.commits:
        return LoadResult(entity, EmptyRepositoryError(abs_path))

    entity.load_remotes()
    if not entity.remotes:
        return LoadResult(entity, NoRemoteError(abs_path))
    return LoadResult(entity)
