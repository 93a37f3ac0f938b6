"""Repository discovery"""
from pathlib import Path
from typing import Iterable, List

from git_batch.logging_config import get_logger

logger = get_logger(__name__)


def _is_working_copy(path: Path) -> bool:
    return (path / ".git").exists()


def _child_directories(path: Path) -> List[Path]:
    try:
        return [p for p in path.iterdir() if p.is_dir() and not p.name.startswith(".")]
    except OSError as e:
        logger.warning(f"Cannot list {path}: {e}")
        return []


def discover_repositories(directories: Iterable[str], recursive: bool = False) -> List[str]:
    """Find git working copies under the given directories.

    A directory that is itself a working copy is returned as-is. Otherwise
    its child directories are searched: only direct children by default,
    every level when recursive. Working copies are not searched further.

    Returns:
        Sorted, de-duplicated absolute paths
    """
    found = set()
    for directory in directories:
        root = Path(directory).expanduser().resolve()
        if not root.is_dir():
            logger.warning(f"Skipping {root}: not a directory")
            continue
        if _is_working_copy(root):
            found.add(str(root))
            continue

        pending = _child_directories(root)
        while pending:
            candidate = pending.pop()
            if _is_working_copy(candidate):
                found.add(str(candidate))
            elif recursive:
                pending.extend(_child_directories(candidate))

    logger.debug(f"Discovered {len(found)} repositories")
    return sorted(found)
