"""Command-line argument parsing for git-batch."""

import argparse
from git_batch.__version__ import __version__
from git_batch.config import MODES


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch, pull or merge many git repositories at once",
    )
    parser.add_argument(
        "-d",
        "--directory",
        action="append",
        dest="directories",
        metavar="DIR",
        help="Directory to scan for repositories; repeat for more (default: current directory)",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default="fetch",
        help="Operation to run on every repository (default: fetch)",
    )
    parser.add_argument(
        "--remote",
        metavar="NAME",
        help="Preferred remote; repositories without it use their first remote",
    )
    parser.add_argument(
        "--recursive", action="store_true", help="Search nested directories for repositories"
    )
    parser.add_argument(
        "--commit-limit", type=int, metavar="N", help="Load at most N commits per repository"
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of parallel workers (default: auto-detect based on CPU and threading mode)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Process repositories one at a time",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"git-batch {__version__}")

    return parser.parse_args(argv)
