"""GitPython adapter.

Every git call made by git-batch goes through :class:`GitAdapter`. It is
stateless: each method receives the ``git.Repo`` handle to work on, so one
instance can be shared by all worker threads.
"""

from typing import List, Optional

import git

from git_batch.exceptions import (
    CheckoutFailedError,
    FetchFailedError,
    MergeFailedError,
    NotARepositoryError,
)
from git_batch.logging_config import get_logger
from git_batch.models.repository import Branch, Commit, Remote, RemoteBranch

logger = get_logger(__name__)


class GitAdapter:
    """Thin wrapper translating GitPython calls into git-batch models and errors."""

    def open_repository(self, path: str) -> git.Repo:
        """Open the working copy at path.

        Raises:
            NotARepositoryError: if git does not recognise path as a repository
        """
        try:
            return git.Repo(path)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            logger.debug(f"Cannot open {path} as a git repository: {e!r}")
            raise NotARepositoryError(path, str(e) or type(e).__name__) from e

    def list_local_branches(self, repo: git.Repo) -> List[Branch]:
        return [Branch(name=head.name, reference=head) for head in repo.heads]

    def list_commits(self, repo: git.Repo, ref: Optional[str] = None,
                     max_count: Optional[int] = None) -> List[Commit]:
        """List commits reachable from ref (HEAD by default), newest first.

        An unborn HEAD (no commits yet) yields an empty list.
        """
        if not repo.head.is_valid():
            return []
        kwargs = {"max_count": max_count} if max_count else {}
        return [
            Commit(
                hash=commit.hexsha,
                message=commit.summary,
                author=commit.author.name or "",
                email=commit.author.email or "",
                date=commit.committed_datetime,
                parents=tuple(parent.hexsha for parent in commit.parents),
            )
            for commit in repo.iter_commits(ref or "HEAD", **kwargs)
        ]

    def list_remotes(self, repo: git.Repo) -> List[Remote]:
        """List configured remotes with their remote-tracking branches.

        The symbolic <remote>/HEAD reference is left out.
        """
        remote_refs = [
            ref for ref in repo.refs
            if isinstance(ref, git.RemoteReference) and ref.remote_head != "HEAD"
        ]
        remotes = []
        for remote in repo.remotes:
            branches = [
                RemoteBranch(name=ref.name, reference=ref)
                for ref in remote_refs
                if ref.remote_name == remote.name
            ]
            remotes.append(Remote(name=remote.name, url=self._remote_url(remote), branches=branches))
        return remotes

    def current_head(self, repo: git.Repo) -> Optional[str]:
        """Name of the branch HEAD points at, or None when detached."""
        try:
            return repo.head.ref.name
        except TypeError:
            return None

    def fetch(self, repo: git.Repo, remote_name: str) -> None:
        try:
            repo.remote(remote_name).fetch()
        except (git.GitCommandError, ValueError) as e:
            raise FetchFailedError(remote_name, self._describe(e)) from e

    def merge(self, repo: git.Repo, branch_name: str) -> None:
        try:
            repo.git.merge(branch_name)
        except git.GitCommandError as e:
            raise MergeFailedError(branch_name, self._describe(e)) from e

    def checkout(self, repo: git.Repo, branch: Branch) -> None:
        try:
            repo.heads[branch.name].checkout()
        except (git.GitCommandError, IndexError) as e:
            raise CheckoutFailedError(branch.name, self._describe(e)) from e

    @staticmethod
    def _remote_url(remote: git.Remote) -> str:
        try:
            return next(iter(remote.urls), "")
        except git.GitCommandError:
            return ""

    @staticmethod
    def _describe(error: Exception) -> str:
        if isinstance(error, git.GitCommandError):
            return (error.stderr or str(error)).strip()
        return str(error)
