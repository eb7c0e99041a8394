"""
Tests for CLI command implementations.

The process environment is pointed at tmp_path, so commands build their
manager from real settings and directory resolution.
"""

from unittest.mock import MagicMock, patch

import pytest
import responses

from duckup.cli.parser import CLI
from duckup.core.directory import resolve_environment
from duckup.toolchain.linking import ActiveLinkManager


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point duckup's directories at tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_BIN_HOME", str(tmp_path / "xdg-bin"))
    monkeypatch.setenv("PATH", str(tmp_path / "elsewhere"))
    return resolve_environment()


def _install(env, tag, content=b"dargo"):
    binary = env.toolchain_binary(tag)
    binary.parent.mkdir(parents=True)
    binary.write_bytes(content)
    binary.chmod(0o755)
    return binary


class TestListCommand:
    """Tests for 'duckup list'."""

    def test_empty(self, cli_env, capsys):
        assert CLI().run(["list"]) == 0

        out = capsys.readouterr().out
        assert "installed toolchains:" in out
        assert "(No toolchains found)" in out

    def test_marks_active(self, cli_env, capsys):
        _install(cli_env, "v1", b"one")
        _install(cli_env, "v2", b"two two")
        ActiveLinkManager(cli_env).activate("v2")

        assert CLI().run(["list"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert "  v1" in lines
        assert "  v2 (active)" in lines


class TestUseCommand:
    """Tests for 'duckup use'."""

    def test_not_installed(self, cli_env, capsys):
        assert CLI().run(["use", "v9"]) == 1

        err = capsys.readouterr().err
        assert "ERROR: Version v9 is not installed." in err
        assert "duckup install v9" in err
        assert not cli_env.active_link.exists()
        assert not cli_env.data_dir.exists()
        assert not cli_env.bin_dir.exists()
        assert not cli_env.global_dir.exists()


class TestRunCommand:
    """Tests for 'duckup run'."""

    def test_no_active_toolchain(self, cli_env, capsys):
        assert CLI().run(["run", "build"]) == 1
        assert "duckup update" in capsys.readouterr().err

    def test_forwards_arguments_and_exit_code(self, cli_env):
        _install(cli_env, "v1")
        ActiveLinkManager(cli_env).activate("v1")

        with patch(
            "duckup.cli.commands.run.subprocess.run",
            return_value=MagicMock(returncode=3),
        ) as mock_run:
            result = CLI().run(["run", "--", "build", "--release"])

        assert result == 3
        mock_run.assert_called_once_with(
            [str(cli_env.active_link), "build", "--release"]
        )


class TestInstallCommand:
    """Tests for 'duckup install'."""

    @responses.activate
    def test_release_not_found(self, cli_env, capsys):
        api = "https://api.github.com/repos/duck-compiler/duckc"
        responses.add(responses.GET, f"{api}/releases/latest", status=404)
        responses.add(responses.GET, f"{api}/releases?per_page=1", json=[])

        assert CLI().run(["install", "latest"]) == 1
        assert "No releases found" in capsys.readouterr().err

    def test_bad_config_file(self, cli_env, tmp_path, capsys):
        config = tmp_path / "bad.yaml"
        config.write_text("- not\n- a mapping\n")

        assert CLI().run(["--config", str(config), "install", "v1"]) == 1
        assert "ERROR:" in capsys.readouterr().err


class TestEnvCommand:
    """Tests for 'duckup env'."""

    def test_reports_directories(self, cli_env, capsys):
        assert CLI().run(["env"]) == 0

        out = capsys.readouterr().out
        assert f"XDG_DATA_HOME: {cli_env.data_dir.parent}" in out
        assert f"toolchain dir: {cli_env.toolchains_dir}" in out
        assert f"binary dir   : {cli_env.bin_dir}" in out
        assert "NOT in your PATH" in out

    def test_bin_dir_on_path(self, cli_env, monkeypatch, capsys):
        monkeypatch.setenv("PATH", str(cli_env.bin_dir))

        CLI().run(["env"])

        assert "binary directory is in your PATH" in capsys.readouterr().out

    def test_defaults_without_xdg(self, cli_env, monkeypatch, capsys):
        monkeypatch.delenv("XDG_DATA_HOME")

        CLI().run(["env"])

        assert "XDG_DATA_HOME: not set" in capsys.readouterr().out
