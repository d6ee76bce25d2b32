"""Tests for config file discovery and loading."""

import tomllib
from pathlib import Path

import pytest
from foundry_bridge.config.discovery import CONFIG_ENV_VAR, find_config, read_toml


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestFindConfig:
    def test_found_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / "foundry-bridge.toml").write_text("")
        assert find_config(tmp_path) == tmp_path / "foundry-bridge.toml"

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "foundry-bridge.toml").write_text("")
        deep = tmp_path / "x" / "y"
        deep.mkdir(parents=True)
        assert find_config(deep) == tmp_path / "foundry-bridge.toml"

    def test_not_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "foundry-bridge.toml").write_text("")
        other = tmp_path / "other.toml"
        other.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        assert find_config(tmp_path) == other

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "foundry-bridge.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestReadToml:
    def test_parses_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "foundry-bridge.toml"
        path.write_text('[host]\nmap_generator = "mypkg.maps:build"\n')
        assert read_toml(path) == {"host": {"map_generator": "mypkg.maps:build"}}

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "foundry-bridge.toml"
        path.write_text("")
        assert read_toml(path) == {}

    def test_decode_error_propagates(self, tmp_path: Path) -> None:
        path = tmp_path / "foundry-bridge.toml"
        path.write_text("[host\n")
        with pytest.raises(tomllib.TOMLDecodeError):
            read_toml(path)
