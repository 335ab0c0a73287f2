"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from scanview.config.loader import ConfigError, load_config
from scanview.results.severity import Severity
from scanview.tree.grouping import GroupDimension


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.results.path == "ast-results.json"
        assert cfg.filters.group_by == "severity"
        assert cfg.output.format == "terminal"
        assert cfg.workspace.root is None

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".scanview.toml").write_text(
            '[results]\n'
            'path = "out/results.json"\n'
            '[filters]\n'
            'group_by = "fileName"\n'
            'low = true\n'
            'unknown_key = 1\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.results.path == "out/results.json"
        state = cfg.filters.to_filter_state()
        assert state.grouping_dimension is GroupDimension.FILE_NAME
        assert state.active_severities == {Severity.HIGH, Severity.MEDIUM, Severity.LOW}

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".scanview.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_invalid_group_by_raises(self, tmp_path: Path):
        (tmp_path / ".scanview.toml").write_text('[filters]\ngroup_by = "owner"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_type_grouping_rejected(self, tmp_path: Path):
        (tmp_path / ".scanview.toml").write_text('[filters]\ngroup_by = "type"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".scanview.toml").write_text('results = "flat"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_results_and_workspace(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SCANVIEW_RESULTS_PATH", "/tmp/r.json")
        monkeypatch.setenv("SCANVIEW_WORKSPACE_ROOT", "file:///ws")
        cfg = load_config(tmp_path)
        assert cfg.results.path == "/tmp/r.json"
        assert cfg.workspace.root == "file:///ws"

    def test_severities(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SCANVIEW_SEVERITIES", "low, info")
        state = load_config(tmp_path).filters.to_filter_state()
        assert state.active_severities == {Severity.LOW, Severity.INFO}

    def test_group_by(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SCANVIEW_GROUP_BY", "language")
        assert load_config(tmp_path).filters.group_by == "language"

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SCANVIEW_GROUP_BY", "not_a_dimension")
        cfg = load_config(tmp_path)
        assert cfg.filters.group_by == "severity"

    def test_type_grouping_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SCANVIEW_GROUP_BY", "type")
        assert load_config(tmp_path).filters.group_by == "severity"
