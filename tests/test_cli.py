"""Tests for argument parsing and the packlink entry point."""

import logging
from unittest.mock import patch

import pytest

from args import parse_args
from errors import BuildError, NotFound, UsageError
from packlink import main


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("PACKLINK_CONFIG", raising=False)
    monkeypatch.delenv("PACKLINK_CACHE_DIR", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "packlink-console":
            root.removeHandler(handler)


class TestParseArgs:
    """Tests for CLI argument parsing."""

    def test_publish_defaults(self):
        ns = parse_args(["publish"])
        assert ns.action == "publish"
        assert ns.WATCH is None
        assert ns.LOG_LEVEL is None

    def test_publish_bare_watch(self):
        assert parse_args(["publish", "--watch"]).WATCH is True

    def test_publish_watch_dir(self):
        assert parse_args(["publish", "--watch=build"]).WATCH == "build"

    def test_add_with_watch(self):
        ns = parse_args(["add", "@scope/pkg", "--watch"])
        assert ns.action == "add"
        assert ns.PACKAGE == "@scope/pkg"
        assert ns.WATCH is True

    def test_add_without_package(self):
        assert parse_args(["add"]).PACKAGE is None

    def test_common_options(self):
        ns = parse_args(["add", "foo", "--loglevel", "debug", "--cache-dir", "/c", "-c", "p.yml"])
        assert ns.LOG_LEVEL == "DEBUG"
        assert ns.CACHE_DIR == "/c"
        assert ns.CONFIG == "p.yml"


class TestMain:
    """Tests for main() exit behavior."""

    @pytest.mark.parametrize("argv", [[], ["bogus"], ["-h"]])
    def test_usage_exits_zero(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 0
        assert "packlink publish" in capsys.readouterr().out

    @patch("packlink.run_publish")
    def test_publish_success(self, mock_publish, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["publish", "--watch=out", "--cache-dir", str(tmp_path / "c")])
        assert exc_info.value.code == 0
        config, cwd = mock_publish.call_args[0]
        assert config.cache_dir == str(tmp_path / "c")
        assert cwd == str(tmp_path)
        assert mock_publish.call_args[1]["watch"] == "out"

    @patch("packlink.run_add")
    def test_add_passes_package(self, mock_add):
        with pytest.raises(SystemExit) as exc_info:
            main(["add", "foo", "--watch"])
        assert exc_info.value.code == 0
        assert mock_add.call_args[0][2] == "foo"
        assert mock_add.call_args[1]["watch"] is True

    @pytest.mark.parametrize("error", [
        NotFound("No published tarball found for package foo."),
        UsageError("Usage: packlink add <package-name>"),
        BuildError("Error running pnpm pack", output="boom"),
    ])
    def test_failures_exit_one(self, error, capsys):
        with patch("packlink.run_add", side_effect=error):
            with pytest.raises(SystemExit) as exc_info:
                main(["add", "foo"])
        assert exc_info.value.code == 1
        assert str(error) in capsys.readouterr().err

    def test_missing_package_name_exits_one(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["add"])
        assert exc_info.value.code == 1

    def test_missing_manifest_exits_one(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["publish"])
        assert exc_info.value.code == 1

    @patch("packlink.run_publish", side_effect=KeyboardInterrupt)
    def test_interrupt_exits_130(self, _mock_publish):
        with pytest.raises(SystemExit) as exc_info:
            main(["publish", "--watch"])
        assert exc_info.value.code == 130

    def test_cache_root_that_is_a_file_exits_one(self, tmp_path, capsys):
        (tmp_path / "package.json").write_text('{"name": "lib", "version": "1.0.0"}')
        cache_file = tmp_path / "cachefile"
        cache_file.write_text("not a directory")
        with patch("package_manager.subprocess.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main(["publish", "--cache-dir", str(cache_file)])
        assert exc_info.value.code == 1
        mock_run.assert_not_called()
        err = capsys.readouterr().err
        assert "[ERROR] Error preparing cache directory" in err
        assert "Traceback" not in err

    def test_collaborator_output_follows_single_error_line(self, capsys):
        error = BuildError("Error running pnpm pack", output="ERR_PNPM_A\nERR_PNPM_B\n")
        with patch("packlink.run_publish", side_effect=error):
            with pytest.raises(SystemExit) as exc_info:
                main(["publish"])
        assert exc_info.value.code == 1
        lines = capsys.readouterr().err.splitlines()
        error_lines = [line for line in lines if line.startswith("[ERROR]")]
        assert error_lines == ["[ERROR] Error running pnpm pack"]
        assert "ERR_PNPM_A" in lines
        assert "ERR_PNPM_B" in lines
