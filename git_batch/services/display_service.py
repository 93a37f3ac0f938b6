"""Display service for repository tables"""
from collections import Counter
from typing import Dict, List, Optional

from rich.console import Console
from rich.table import Table

from git_batch.constants import COLUMNS, STATE_COLORS, SYMBOL_NONE
from git_batch.core.entity import RepositoryEntity
from git_batch.logging_config import get_logger
from git_batch.models.repository import RepoState

console = Console()
logger = get_logger(__name__)


class DisplayService:
    @staticmethod
    def format_message(entity: RepositoryEntity, load_error: Optional[Exception] = None) -> str:
        """Last error first, then the load diagnostic, then the head commit summary."""
        if entity.last_error is not None:
            return str(entity.last_error)
        if load_error is not None:
            return str(load_error)
        if entity.commit is not None:
            return entity.commit.message
        return ""

    def build_table(
            self,
            entities: List[RepositoryEntity],
            load_errors: Optional[Dict[str, Exception]] = None
        ) -> Table:
        load_errors = load_errors or {}
        table = Table()
        for col in COLUMNS:
            table.add_column(col.label, width=col.width or None)

        for entity in sorted(entities, key=lambda e: e.name.lower()):
            remote = entity.remote
            table.add_row(
                entity.name,
                entity.branch.name if entity.branch else SYMBOL_NONE,
                remote.name if remote else SYMBOL_NONE,
                remote.branch.name if remote and remote.branch else SYMBOL_NONE,
                entity.commit.short_hash if entity.commit else SYMBOL_NONE,
                entity.state.value,
                self.format_message(entity, load_errors.get(entity.repo_id)),
                style=STATE_COLORS.get(entity.state),
            )
        return table

    def display_repositories(
            self,
            entities: List[RepositoryEntity],
            load_errors: Optional[Dict[str, Exception]] = None
        ) -> None:
        """Print a table of repositories followed by a per-state summary."""
        console.print(self.build_table(entities, load_errors))

        counts = Counter(entity.state for entity in entities)
        summary = ", ".join(
            f"{counts[state]} {state.value}" for state in RepoState if counts[state]
        )
        console.print(f"\n{len(entities)} repositories: {summary or 'none'}")
