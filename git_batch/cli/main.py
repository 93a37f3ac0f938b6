"""Command-line entry point for git-batch"""

import os
import sys
from rich.console import Console

from git_batch.cli.args import parse_args
from git_batch.config import Config
from git_batch.core import BatchCoordinator, initialize_repository
from git_batch.exceptions import NotARepositoryError, PathUnreadableError
from git_batch.logging_config import get_logger, setup_logging
from git_batch.models.repository import RepoState
from git_batch.services.display_service import DisplayService
from git_batch.services.scanner import discover_repositories

console = Console()
logger = get_logger(__name__)


def load_entities(paths, config):
    """Load an entity per path.

    Returns:
        (entities, load_errors) where load_errors maps repo_id to the load
        diagnostic of entities that cannot take part in remote operations
    """
    entities = []
    load_errors = {}
    for path in paths:
        try:
            result = initialize_repository(path, config)
        except (PathUnreadableError, NotARepositoryError) as e:
            logger.warning(f"Skipping {path}: {e}")
            continue
        entities.append(result.entity)
        if not result.operational:
            load_errors[result.entity.repo_id] = result.error
            logger.info(str(result.error))
    return entities, load_errors


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            directories=parsed_args.directories or [os.getcwd()],
            recursive=parsed_args.recursive,
            mode=parsed_args.mode,
            default_remote=parsed_args.remote,
            commit_limit=parsed_args.commit_limit,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            sequential=parsed_args.sequential,
            workers=parsed_args.workers,
        )

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")
            console.print("[dim]Note: Debug mode forces sequential processing for readable logs[/dim]")

        paths = discover_repositories(config.directories, recursive=config.recursive)
        if not paths:
            console.print("[yellow]No git repositories found[/yellow]")
            return 0

        entities, load_errors = load_entities(paths, config)
        coordinator = BatchCoordinator(config)
        queued = coordinator.queue_all(entities)
        if queued:
            coordinator.run(entities, show_progress=not parsed_args.debug)

        display = DisplayService()
        display.display_repositories(entities, load_errors)

        failed = [e for e in entities if e.state == RepoState.FAIL]
        return 1 if failed else 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
