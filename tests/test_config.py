"""Tests for configuration handling"""
import json

import pytest

from git_grove.config import Config
from git_grove.constants import DEFAULT_EXECUTABLE_PATHS
from git_grove.models.repository import SortOrder


class TestConfigValidation:
    """Test Config defaults and validation."""

    def test_defaults(self):
        config = Config()

        assert config.sort is SortOrder.NAME
        assert config.max_depth == 5
        assert config.command_timeout is None
        assert config.executable_paths == DEFAULT_EXECUTABLE_PATHS

    @pytest.mark.parametrize("overrides", [
        {"sort_order": "size"},
        {"max_depth": -1},
        {"command_timeout": 0},
        {"workers": 0},
        {"scan_paths": "~/code"},
        {"scan_paths": [""]},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ValueError):
            Config(**overrides)

    def test_partial_executable_paths_keep_other_tools(self):
        config = Config(executable_paths={"git": ["/custom/git"]})

        assert config.executable_paths["git"] == ["/custom/git"]
        assert config.executable_paths["du"] == DEFAULT_EXECUTABLE_PATHS["du"]

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"sort_order": "branch", "theme": "dark"})

        assert config.sort is SortOrder.BRANCH


class TestScanPaths:
    """Test scan root management."""

    def test_expanded_paths(self, temp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        config = Config(scan_paths=["~/code", "/srv/repos/", "~"])

        assert config.expanded_paths() == [str(temp_dir / "code"), "/srv/repos", str(temp_dir)]

    def test_add_abbreviates_and_deduplicates(self, temp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        config = Config(scan_paths=["~/code"])

        assert config.add_scan_path(str(temp_dir / "work")) is True
        assert config.add_scan_path("~/work") is False
        assert config.add_scan_path(str(temp_dir / "code")) is False
        assert config.scan_paths == ["~/code", "~/work"]

    def test_remove_by_either_form(self, temp_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(temp_dir))
        config = Config(scan_paths=["~/code", "~/work"])

        assert config.remove_scan_path(str(temp_dir / "code")) is True
        assert config.remove_scan_path("~/work") is True
        assert config.remove_scan_path("~/missing") is False
        assert config.scan_paths == []


class TestConfigFile:
    """Test loading and saving the settings file."""

    def test_missing_file_gives_defaults(self, temp_dir):
        assert Config.load(temp_dir / "none.json") == Config()

    def test_malformed_file_gives_defaults(self, temp_dir):
        path = temp_dir / "config.json"
        for content in ("{oops", "[1, 2]", json.dumps({"max_depth": -3})):
            path.write_text(content)
            assert Config.load(path) == Config()

    def test_save_and_load(self, temp_dir):
        path = temp_dir / "nested" / "config.json"
        config = Config(scan_paths=["/srv/code"], sort_order="last_modified", verbose=True)

        config.save(path)
        loaded = Config.load(path)

        assert loaded.scan_paths == ["/srv/code"]
        assert loaded.sort is SortOrder.LAST_MODIFIED
        assert loaded.verbose is False
        assert "verbose" not in json.loads(path.read_text())
