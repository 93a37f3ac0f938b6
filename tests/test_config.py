"""Tests for Config"""
import os
import pytest

from git_batch.config import Config


class TestConfigDefaults:
    """Test default values."""

    def test_defaults(self):
        config = Config()
        assert config.directories == [os.getcwd()]
        assert config.mode == "fetch"
        assert config.default_remote is None
        assert config.commit_limit is None
        assert config.workers is None
        assert config.sequential is False

    def test_get(self):
        config = Config(mode="pull")
        assert config.get("mode") == "pull"
        assert config.get("unknown", "fallback") == "fallback"


class TestConfigValidation:
    """Test __post_init__ validation."""

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="mode must be one of"):
            Config(mode="push")

    def test_empty_directories(self):
        with pytest.raises(ValueError, match="directories"):
            Config(directories=[])

    @pytest.mark.parametrize("value", [0, -1])
    def test_invalid_workers(self, value):
        with pytest.raises(ValueError, match="workers must be positive"):
            Config(workers=value)

    def test_invalid_commit_limit(self):
        with pytest.raises(ValueError, match="commit_limit must be positive"):
            Config(commit_limit=0)

    def test_blank_default_remote(self):
        with pytest.raises(ValueError, match="default_remote"):
            Config(default_remote="  ")

    def test_default_remote_stripped(self):
        assert Config(default_remote=" upstream ").default_remote == "upstream"


class TestConfigConversion:
    """Test dict conversion."""

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"mode": "merge", "workers": 4, "stale_days": 30})
        assert config.mode == "merge"
        assert config.workers == 4

    def test_round_trip(self):
        config = Config(directories=["/tmp"], mode="pull", default_remote="upstream", commit_limit=50)
        assert Config.from_dict(config.to_dict()) == config
