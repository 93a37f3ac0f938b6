"""
git-batch - Fetch, pull and merge many git repositories at once
"""

from .__version__ import __version__
from .core import BatchCoordinator, RepositoryEntity, initialize_repository
from .cli.main import main

__all__ = ["BatchCoordinator", "RepositoryEntity", "initialize_repository", "main", "__version__"]
