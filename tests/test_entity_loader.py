"""Tests for loading repository entities"""
import logging
import os
from unittest.mock import patch

import pytest

from git_batch.core import initialize_repository
from git_batch.exceptions import (
    EmptyRepositoryError,
    NoRemoteError,
    NotARepositoryError,
    PathUnreadableError,
)
from git_batch.models.repository import RepoState


class TestInitializeRepository:
    """Test a successful load."""

    def test_identity(self, cloned_repo, mock_config):
        result = initialize_repository(cloned_repo.working_dir, mock_config)
        entity = result.entity

        assert result.error is None
        assert result.operational
        assert entity.name == "clone"
        assert entity.abs_path == os.path.abspath(cloned_repo.working_dir)
        assert len(entity.repo_id) == 8
        assert entity.state == RepoState.AVAILABLE
        assert entity.last_error is None

    def test_ids_are_unique(self, cloned_repo, mock_config):
        first = initialize_repository(cloned_repo.working_dir, mock_config).entity
        second = initialize_repository(cloned_repo.working_dir, mock_config).entity
        assert first.repo_id != second.repo_id

    def test_selects_branch_remote_and_tracking_branch(self, cloned_repo, mock_config):
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity

        assert entity.branch.name == "main"
        assert entity.branch in entity.branches
        assert entity.remote.name == "origin"
        assert entity.remote in entity.remotes
        assert entity.remote.branch.name == "origin/main"
        assert entity.is_ready

    def test_commits_newest_first(self, cloned_repo, mock_config):
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity

        assert [c.message for c in entity.commits] == ["Add b", "Add a", "Initial commit"]
        assert entity.commit == entity.commits[0]
        assert entity.commit.hash == cloned_repo.head.commit.hexsha
        assert entity.commit.parents == (entity.commits[1].hash,)

    def test_remote_head_is_not_listed(self, cloned_repo, mock_config):
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity
        assert [b.name for b in entity.remote.branches] == ["origin/main"]

    def test_commit_limit(self, cloned_repo, mock_config):
        mock_config['commit_limit'] = 2
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity
        assert len(entity.commits) == 2

    def test_active_branch_follows_head(self, cloned_repo, mock_config):
        cloned_repo.git.checkout('-b', 'feature')
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity

        assert entity.branch.name == "feature"
        assert {b.name for b in entity.branches} == {"main", "feature"}
        # No origin/feature: remote selected without a tracking branch
        assert entity.remote.name == "origin"
        assert entity.remote.branch is None

    def test_missing_tracking_branch_is_logged(self, cloned_repo, mock_config, caplog):
        cloned_repo.git.checkout('-b', 'feature')
        caplog.set_level(logging.DEBUG)

        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity

        assert entity.remote.branch is None
        assert "Remote 'origin' has no branch 'origin/feature'" in caplog.text

    def test_default_remote_is_first(self, cloned_repo, mock_config):
        cloned_repo.create_remote('backup', cloned_repo.remotes.origin.url)
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity
        assert entity.remote.name == entity.remotes[0].name

    def test_default_remote_preference(self, cloned_repo, mock_config):
        cloned_repo.create_remote('zz-upstream', cloned_repo.remotes.origin.url)
        cloned_repo.remote('zz-upstream').fetch()
        mock_config['default_remote'] = 'zz-upstream'

        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity

        assert entity.remote.name == 'zz-upstream'
        assert entity.remote.branch.name == 'zz-upstream/main'

    def test_missing_preferred_remote_falls_back(self, cloned_repo, mock_config):
        mock_config['default_remote'] = 'nope'
        entity = initialize_repository(cloned_repo.working_dir, mock_config).entity
        assert entity.remote.name == 'origin'


class TestInitializeRepositoryPartial:
    """Loads that return an entity together with a diagnostic."""

    def test_empty_repository(self, empty_repo, mock_config):
        result = initialize_repository(empty_repo.working_dir, mock_config)

        assert result.entity is not None
        assert isinstance(result.error, EmptyRepositoryError)
        assert not result.operational
        assert result.entity.commits == []
        assert result.entity.commit is None
        assert result.entity.branch is None
        assert result.entity.state == RepoState.AVAILABLE

    def test_no_remote(self, local_repo, mock_config):
        result = initialize_repository(local_repo.working_dir, mock_config)

        assert isinstance(result.error, NoRemoteError)
        assert result.entity.branch.name == "main"
        assert result.entity.remote is None
        assert result.entity.remotes == []
        assert len(result.entity.commits) == 1
        assert not result.entity.is_ready

    def test_detached_head(self, cloned_repo, mock_config):
        cloned_repo.git.checkout(cloned_repo.head.commit.hexsha)
        result = initialize_repository(cloned_repo.working_dir, mock_config)

        assert result.error is None
        assert result.entity.branch is None
        assert result.entity.remote.branch is None
        assert len(result.entity.commits) == 3


class TestInitializeRepositoryFailures:
    """Loads that cannot build an entity."""

    def test_missing_path(self, temp_dir, mock_config):
        with pytest.raises(PathUnreadableError):
            initialize_repository(str(temp_dir / "missing"), mock_config)

    def test_file_path(self, temp_dir, mock_config):
        file_path = temp_dir / "file.txt"
        file_path.write_text("not a directory\n")
        with pytest.raises(PathUnreadableError):
            initialize_repository(str(file_path), mock_config)

    def test_plain_directory(self, temp_dir, mock_config):
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(NotARepositoryError):
            initialize_repository(str(plain), mock_config)

    def test_subdirectory_of_repository(self, local_repo, mock_config):
        """Only the working copy root is accepted."""
        nested = os.path.join(local_repo.working_dir, "nested")
        os.mkdir(nested)
        with pytest.raises(NotARepositoryError):
            initialize_repository(nested, mock_config)


    def test_unreadable_directory(self, local_repo, mock_config):
        with patch('git_batch.core.entity.os.access', return_value=False):
            with pytest.raises(PathUnreadableError, match="permission denied"):
                initialize_repository(local_repo.working_dir, mock_config)
