"""Pytest fixtures for git-batch tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_batch.core import initialize_repository


def _configure_user(repo):
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def _commit(repo, filename, content, message):
    """Write a file in the working tree and commit it."""
    path = Path(repo.working_dir) / filename
    path.write_text(content)
    repo.index.add([filename])
    return repo.index.commit(message)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config():
    """Create a configuration dictionary."""
    return {
        'mode': 'fetch',
        'verbose': False,
        'debug': False,
        'sequential': False,
        'workers': 2,
        'default_remote': None,
        'commit_limit': None,
    }


@pytest.fixture
def upstream_repo(temp_dir):
    """A repository with three commits on main, used as the remote."""
    repo_path = temp_dir / "upstream"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)
    _configure_user(repo)

    _commit(repo, "README.md", "# Upstream\n", "Initial commit")
    _commit(repo, "a.txt", "a\n", "Add a")
    _commit(repo, "b.txt", "b\n", "Add b")
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def cloned_repo(temp_dir, upstream_repo):
    """A clone of upstream_repo: local main tracking origin/main."""
    repo = git.Repo.clone_from(upstream_repo.working_dir, temp_dir / "workspace" / "clone")
    _configure_user(repo)

    yield repo

    repo.close()


@pytest.fixture
def local_repo(temp_dir):
    """A repository with commits but no remote."""
    repo_path = temp_dir / "local"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)
    _configure_user(repo)
    _commit(repo, "README.md", "# Local\n", "Initial commit")
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def empty_repo(temp_dir):
    """A freshly initialised repository with no commits."""
    repo_path = temp_dir / "empty"
    repo_path.mkdir()
    repo = git.Repo.init(repo_path)

    yield repo

    repo.close()


@pytest.fixture
def entity(cloned_repo, mock_config):
    """A fully loaded entity for cloned_repo."""
    result = initialize_repository(cloned_repo.working_dir, mock_config)
    assert result.operational
    yield result.entity
    result.entity.repository.close()


@pytest.fixture
def commit_file():
    """Return a helper that writes a file and commits it."""
    return _commit
