"""Configuration handling for git-batch"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


MODES = ["fetch", "pull", "merge"]


@dataclass
class Config:
    """Configuration for git-batch with validation."""

    # Discovery
    directories: List[str] = field(default_factory=lambda: [os.getcwd()])
    recursive: bool = False

    # Operation
    mode: str = "fetch"
    default_remote: Optional[str] = None  # None = first configured remote
    commit_limit: Optional[int] = None  # None = load all commits

    # Execution modes
    verbose: bool = False
    debug: bool = False
    sequential: bool = False
    workers: Optional[int] = None  # None = auto-detect

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_directories()
        self._validate_mode()
        self._validate_default_remote()
        self._validate_commit_limit()
        self._validate_workers()

    def _validate_directories(self):
        if not isinstance(self.directories, list) or not self.directories:
            raise ValueError("directories must be a non-empty list")

    def _validate_mode(self):
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got '{self.mode}'")

    def _validate_default_remote(self):
        """Blank remote names are rejected, surrounding whitespace stripped."""
        if self.default_remote is None:
            return
        if not self.default_remote.strip():
            raise ValueError("default_remote cannot be blank")
        self.default_remote = self.default_remote.strip()

    def _validate_commit_limit(self):
        if self.commit_limit is not None and self.commit_limit <= 0:
            raise ValueError(f"commit_limit must be positive, got {self.commit_limit}")

    def _validate_workers(self):
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "directories": self.directories,
            "recursive": self.recursive,
            "mode": self.mode,
            "default_remote": self.default_remote,
            "commit_limit": self.commit_limit,
            "verbose": self.verbose,
            "debug": self.debug,
            "sequential": self.sequential,
            "workers": self.workers,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "directories",
            "recursive",
            "mode",
            "default_remote",
            "commit_limit",
            "verbose",
            "debug",
            "sequential",
            "workers",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
