"""Batch coordinator: runs one operation over many repositories"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from rich.console import Console
from rich.progress import Progress

from git_batch.config import Config
from git_batch.core.entity import RepositoryEntity
from git_batch.exceptions import GitBatchError, InvalidStateTransitionError
from git_batch.logging_config import get_logger
from git_batch.models.repository import OperationMode, RepoState
from git_batch.utils.threading import get_optimal_worker_count

console = Console()
logger = get_logger(__name__)


@dataclass
class BatchResult:
    """Outcome of one repository in a batch run."""
    entity: RepositoryEntity
    state: RepoState
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.state == RepoState.SUCCESS


class BatchCoordinator:
    """Dispatches fetch/pull/merge to queued repositories.

    Each queued entity is handled by exactly one worker, which moves it
    Queued -> Working -> Success/Fail. Entities that are not queued are
    skipped. The guarded Queued -> Working transition keeps a second
    dispatch of the same entity from running concurrently.
    """

    def __init__(self, config: Union[Config, dict, None] = None):
        self.config = config if config is not None else {}
        self.mode = OperationMode(self.config.get("mode", "fetch"))

    def queue(self, entity: RepositoryEntity) -> None:
        entity.transition(RepoState.QUEUED)

    def unqueue(self, entity: RepositoryEntity) -> None:
        if entity.state != RepoState.QUEUED:
            raise InvalidStateTransitionError(entity.name, entity.state, RepoState.AVAILABLE)
        entity.transition(RepoState.AVAILABLE)

    def queue_all(self, entities: Iterable[RepositoryEntity]) -> List[RepositoryEntity]:
        """Queue every available entity that has a branch and remote selected."""
        queued = []
        for entity in entities:
            if entity.state == RepoState.AVAILABLE and entity.is_ready:
                self.queue(entity)
                queued.append(entity)
            else:
                logger.debug(f"Not queueing {entity}")
        return queued

    def reset(self, entities: Iterable[RepositoryEntity]) -> None:
        """Return finished entities to Available for the next run."""
        for entity in entities:
            if entity.state.is_terminal:
                entity.transition(RepoState.AVAILABLE)

    def run(
        self,
        entities: Iterable[RepositoryEntity],
        mode: Optional[OperationMode] = None,
        show_progress: bool = False,
    ) -> List[BatchResult]:
        """Run the operation on every queued entity.

        Args:
            entities: Candidate entities; only those in Queued state run
            mode: Operation to run, defaults to the configured mode
            show_progress: Whether to show a Rich progress bar

        Returns:
            One BatchResult per entity that ran
        """
        mode = mode or self.mode
        queued = []
        seen = set()
        for entity in entities:
            if entity.state == RepoState.QUEUED and entity.repo_id not in seen:
                seen.add(entity.repo_id)
                queued.append(entity)
        if not queued:
            logger.info("No queued repositories")
            return []

        # Debug mode runs sequentially for readable logs
        sequential = self.config.get("sequential", False) or self.config.get("debug", False)
        workers = 1 if sequential else get_optimal_worker_count(self.config.get("workers"), len(queued))
        logger.debug(f"Running {mode.value} on {len(queued)} repositories with {workers} workers")

        results = []
        progress_context = Progress(console=console) if show_progress else nullcontext()
        with progress_context as progress:
            task = (
                progress.add_task(f"{mode.value.capitalize()} ({workers} workers)...", total=len(queued))
                if progress is not None
                else None
            )
            if sequential:
                for entity in queued:
                    result = self._execute(entity, mode)
                    if result:
                        results.append(result)
                    if progress is not None:
                        progress.update(task, advance=1)
            else:
                with ThreadPoolExecutor(max_workers=workers) as executor:
                    future_to_entity = {
                        executor.submit(self._execute, entity, mode): entity for entity in queued
                    }
                    for future in as_completed(future_to_entity):
                        result = future.result()
                        if result:
                            results.append(result)
                        if progress is not None:
                            progress.update(task, advance=1)
        return results

    def _execute(self, entity: RepositoryEntity, mode: OperationMode) -> Optional[BatchResult]:
        try:
            entity.transition(RepoState.WORKING)
        except InvalidStateTransitionError as e:
            logger.warning(f"Skipping {entity.name}: {e}")
            return None

        operation = getattr(entity, mode.value)
        try:
            operation()
        except GitBatchError as e:
            logger.error(f"{mode.value} failed for {entity.name}: {e}")
            return self._finish(entity, RepoState.FAIL, e)
        except Exception as e:
            logger.error(f"Unexpected error during {mode.value} of {entity.name}: {e}", exc_info=True)
            return self._finish(entity, RepoState.FAIL, e)
        logger.info(f"{mode.value} succeeded for {entity.name}")
        return self._finish(entity, RepoState.SUCCESS)

    @staticmethod
    def _finish(entity: RepositoryEntity, state: RepoState, error: Optional[Exception] = None) -> BatchResult:
        entity.last_error = error
        entity.transition(state)
        return BatchResult(entity, state, error)
