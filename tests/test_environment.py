"""Tests for execution-context detection."""

from datetime import datetime
from pathlib import Path

import pytest

from dot_install.environment import (
    ToolResolver,
    backup_dir_for,
    detect_environment,
    detect_interactive,
    detect_platform,
)


class TestInteractiveDetection:
    """Interactive unless any non-interactive signal is present."""

    def test_terminal_defaults_to_interactive(self):
        """Test a plain terminal session is interactive."""
        interactive, reason = detect_interactive({}, stdin_isatty=True)
        assert interactive
        assert reason == ""

    @pytest.mark.parametrize("marker", ["CI", "CODESPACES", "REMOTE_CONTAINERS", "DEVCONTAINER"])
    def test_markers_force_non_interactive(self, marker):
        """Test each environment marker disables prompts."""
        interactive, reason = detect_interactive({marker: "true"}, stdin_isatty=True)
        assert not interactive
        assert reason

    def test_marker_overrides_user_request(self):
        """INTERACTIVE=true cannot re-enable prompts in CI."""
        interactive, _ = detect_interactive({"INTERACTIVE": "true", "CI": "1"}, stdin_isatty=True)
        assert not interactive

    def test_non_terminal_stdin(self):
        """Piped stdin wins over INTERACTIVE=true."""
        interactive, reason = detect_interactive({"INTERACTIVE": "true"}, stdin_isatty=False)
        assert not interactive
        assert "terminal" in reason

    def test_user_can_opt_out(self):
        """Test INTERACTIVE=false disables prompts."""
        interactive, _ = detect_interactive({"INTERACTIVE": "false"}, stdin_isatty=True)
        assert not interactive

    def test_empty_marker_is_ignored(self):
        """An exported but empty CI variable does not count."""
        interactive, _ = detect_interactive({"CI": ""}, stdin_isatty=True)
        assert interactive

    @pytest.mark.parametrize("value", ["0", "false", "1"])
    def test_any_marker_value_counts(self, value):
        """Markers are presence-based: CI=false still disables prompts."""
        interactive, _ = detect_interactive({"CI": value}, stdin_isatty=True)
        assert not interactive


class TestPlatform:
    def test_macos(self):
        assert detect_platform({}, system="Darwin", release="23.0.0") == "macos"

    def test_linux(self):
        assert detect_platform({}, system="Linux", release="6.5.0-generic") == "linux"

    def test_wsl_from_environment(self):
        """Test WSL detection from its environment variables."""
        assert detect_platform({"WSL_DISTRO_NAME": "Ubuntu"}, system="Linux", release="6.5") == "wsl"

    def test_wsl_from_kernel_release(self):
        """Test WSL detection from the kernel release string."""
        assert detect_platform({}, system="Linux", release="5.15.90.1-microsoft-standard-WSL2") == "wsl"

    def test_unknown(self):
        assert detect_platform({}, system="Windows", release="10") == "unknown"


class TestToolResolver:
    def test_lookups_are_cached(self):
        """Each tool is looked up at most once."""
        calls = []

        def which(name):
            calls.append(name)
            return "/usr/bin/git" if name == "git" else None

        resolver = ToolResolver(which)
        assert resolver.resolve("git")
        assert resolver.resolve("git")
        assert not resolver.resolve("fnm")
        assert not resolver.resolve("fnm")
        assert calls == ["git", "fnm"]

    def test_forget_triggers_new_lookup(self):
        """Test forget() drops the cached answer."""
        found = {"fnm": None}
        resolver = ToolResolver(lambda name: found.get(name))
        assert not resolver.resolve("fnm")

        found["fnm"] = "/home/u/.fnm/fnm"
        assert not resolver.resolve("fnm")
        resolver.forget("fnm")
        assert resolver.path("fnm") == "/home/u/.fnm/fnm"

    def test_probe(self):
        resolver = ToolResolver(lambda name: "/bin/x" if name == "git" else None)
        assert resolver.probe(["git", "curl"]) == {"git": True, "curl": False}


class TestDetectEnvironment:
    def test_builds_paths_from_home(self, tmp_path):
        """Test derived paths and identity fields."""
        home = tmp_path / "home"
        config = detect_environment(
            environ={"SHELL": "/usr/bin/bash", "USER": "ada"},
            stdin_isatty=True,
            euid=1000,
            home=home,
            dotfiles_dir=tmp_path,
            now=datetime(2024, 5, 1, 9, 30, 15),
        )

        assert config.home == home
        assert config.backup_dir == home / ".dotfiles_backup_20240501_093015"
        assert config.log_file == home / ".dotfiles_install.log"
        assert config.secrets_file == home / ".secrets"
        assert config.secrets_template == tmp_path.resolve() / ".secrets.template"
        assert config.framework_dir == home / ".oh-my-zsh"
        assert config.shell == "bash"
        assert config.user == "ada"
        assert config.interactive

    def test_dotfiles_dir_from_environment(self, tmp_path):
        """Test DOTFILES_DIR selects the repository."""
        config = detect_environment(
            environ={"DOTFILES_DIR": str(tmp_path), "CODESPACES": "true"},
            stdin_isatty=True,
            euid=1000,
            home=tmp_path,
        )
        assert config.dotfiles_dir == tmp_path.resolve()
        assert config.is_codespaces
        assert not config.interactive

    def test_debug_flag(self, tmp_path):
        config = detect_environment(
            environ={"DOTFILES_DEBUG": "1"}, stdin_isatty=False, euid=1000, home=tmp_path,
            dotfiles_dir=tmp_path,
        )
        assert config.debug

    def test_config_is_immutable(self, tmp_path):
        """Test RunConfig cannot be changed mid-run."""
        config = detect_environment(environ={}, stdin_isatty=True, euid=1000, home=tmp_path,
                                    dotfiles_dir=tmp_path)
        with pytest.raises(AttributeError):
            config.interactive = False


def test_backup_dir_name():
    assert backup_dir_for(Path("/h"), datetime(2023, 1, 2, 3, 4, 5)) == Path(
        "/h/.dotfiles_backup_20230102_030405"
    )
