"""Tests for layered configuration."""

import os

import pytest

from config import PacklinkConfig, build_config, load_config_file
from constants import Constants
from errors import ConfigError


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point ~ at an empty directory so no real user config is read."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class TestBuildConfig:
    """Tests for build_config()."""

    def test_defaults(self, isolated_home):
        cfg = build_config(env={})
        assert cfg.cache_dir == os.path.join(str(isolated_home), ".config", "packlink")
        assert cfg.builder_command == ["pnpm", "pack", "--pack-destination"]
        assert cfg.installer_command == ["pnpm", "add"]
        assert cfg.quiet_period == pytest.approx(0.2)
        assert cfg.publish_watch_dir == "dist"

    def test_yaml_file_section(self, tmp_path):
        path = tmp_path / "packlink.yml"
        path.write_text(
            "packlink:\n"
            "  cache_dir: /tmp/pl-cache\n"
            "  builder: npm pack --pack-destination\n"
            "  installer: [npm, install]\n"
            "  quiet_period: 0.5\n"
            "  publish_watch_dir: lib\n"
        )
        cfg = build_config(str(path), env={})
        assert cfg.cache_dir == "/tmp/pl-cache"
        assert cfg.builder_command == ["npm", "pack", "--pack-destination"]
        assert cfg.installer_command == ["npm", "install"]
        assert cfg.quiet_period == 0.5
        assert cfg.publish_watch_dir == "lib"

    def test_default_file_is_read_when_present(self, isolated_home):
        (isolated_home / ".config").mkdir()
        (isolated_home / ".config" / "packlink.yml").write_text("quiet_period: 1\n")
        assert build_config(env={}).quiet_period == 1.0

    def test_env_overrides_file_and_cli_overrides_env(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("cache_dir: /from/file\n")
        env = {Constants.ENV_CACHE_DIR: "/from/env", Constants.ENV_INSTALLER: "yarn add"}
        cfg = build_config(str(path), env=env)
        assert cfg.cache_dir == "/from/env"
        assert cfg.installer_command == ["yarn", "add"]
        assert build_config(str(path), env=env, cache_dir="/from/cli").cache_dir == "/from/cli"

    def test_config_path_from_env(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("publish_watch_dir: out\n")
        cfg = build_config(env={Constants.ENV_CONFIG: str(path)})
        assert cfg.publish_watch_dir == "out"

    def test_explicit_missing_file_is_error(self, tmp_path):
        with pytest.raises(ConfigError):
            build_config(str(tmp_path / "nope.yml"), env={})

    @pytest.mark.parametrize("body", [
        "builder: []\n",
        "builder: 5\n",
        "quiet_period: soon\n",
        "quiet_period: -1\n",
        "- just\n- a list\n",
        "packlink: nope\n",
        "key: [unterminated\n",
    ])
    def test_invalid_values(self, tmp_path, body):
        path = tmp_path / "bad.yml"
        path.write_text(body)
        with pytest.raises(ConfigError):
            build_config(str(path), env={})


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_none_and_missing_are_empty(self, tmp_path):
        assert load_config_file(None) == {}
        assert load_config_file(str(tmp_path / "missing.yml")) == {}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config_file(str(path)) == {}


def test_cache_dir_is_expanded(isolated_home):
    assert PacklinkConfig(cache_dir="~/cache").cache_dir == os.path.join(str(isolated_home), "cache")
