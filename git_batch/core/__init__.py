"""Core repository entity and batch coordination."""

from .entity import LoadResult, RepositoryEntity, initialize_repository
from .batch import BatchCoordinator, BatchResult

__all__ = [
    "BatchCoordinator",
    "BatchResult",
    "LoadResult",
    "RepositoryEntity",
    "initialize_repository",
]
