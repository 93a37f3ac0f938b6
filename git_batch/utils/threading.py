"""Worker-count helpers for the batch thread pool."""

import os
import sys
from typing import Optional


def is_free_threading_enabled() -> bool:
    """True on Python 3.13+ builds running with the GIL disabled."""
    is_gil_enabled = getattr(sys, "_is_gil_enabled", None)
    return is_gil_enabled is not None and not is_gil_enabled()


def get_optimal_worker_count(user_specified: Optional[int] = None, jobs: Optional[int] = None) -> int:
    """Number of worker threads for a batch run.

    Args:
        user_specified: Worker count from configuration, used as-is when positive
        jobs: Number of repositories to process; the pool is never larger

    Returns:
        Worker count, at least 1
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        # Git calls block on subprocesses and disk, so oversubscribe the CPUs
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            workers = min(32, cpu_count + 4)

    if jobs is not None:
        workers = min(workers, jobs)
    return max(1, workers)
