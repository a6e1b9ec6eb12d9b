"""Tests for install.toml parsing."""

import pytest

from dot_install.config import InstallManifest
from dot_install.constants import DEFAULT_GIT_SETTINGS
from dot_install.exceptions import ConfigurationError
from dot_install.links import ManagedLink


def write_manifest(repo, text):
    (repo / "install.toml").write_text(text)


def test_defaults_without_manifest(dotfiles_repo):
    """Test defaults are used when install.toml is absent."""
    manifest = InstallManifest.load(dotfiles_repo)

    assert ManagedLink(".zshrc", ".zshrc", True) in manifest.links
    assert ManagedLink("config", "config", True) in manifest.links
    assert [t.command for t in manifest.tools] == ["fnm", "pyenv"]
    assert manifest.git_settings == DEFAULT_GIT_SETTINGS
    assert manifest.validate() == []


def test_overrides(dotfiles_repo):
    """Test each install.toml table overrides its default."""
    write_manifest(dotfiles_repo, """
[[links]]
source = "zsh/zshrc"
target = ".zshrc"

[[links]]
source = ".tmux.conf"
required = false

[[tools]]
command = "rustup"
description = "Rust toolchain"
install = "curl -sSf https://sh.rustup.rs | sh -s -- -y"

[backup]
extra = [".vimrc"]

[plugins]
zsh-completions = "https://github.com/zsh-users/zsh-completions"

[git]
"init.defaultBranch" = "trunk"
"pull.rebase" = true
""")

    manifest = InstallManifest.load(dotfiles_repo)

    assert manifest.links == [
        ManagedLink("zsh/zshrc", ".zshrc", True),
        ManagedLink(".tmux.conf", ".tmux.conf", False),
    ]
    assert [(t.command, t.description) for t in manifest.tools] == [("rustup", "Rust toolchain")]
    assert manifest.extra_backups == [".vimrc"]
    assert manifest.plugins == [
        ("zsh-completions", "https://github.com/zsh-users/zsh-completions")
    ]
    assert manifest.git_settings["init.defaultBranch"] == "trunk"
    assert manifest.git_settings["pull.rebase"] == "true"
    # Untouched defaults survive
    assert manifest.git_settings["push.default"] == "simple"


def test_invalid_toml(dotfiles_repo):
    """Test invalid TOML is a configuration error."""
    write_manifest(dotfiles_repo, "[[links]\nsource = ")

    with pytest.raises(ConfigurationError) as exc_info:
        InstallManifest.load(dotfiles_repo)

    assert exc_info.value.exit_code == 7
    assert "install.toml" in str(exc_info.value)


@pytest.mark.parametrize("text, message", [
    ("links = 3", "array of tables"),
    ("[[links]]\ntarget = '.zshrc'", "'source' is required"),
    ("[[tools]]\ncommand = 'fnm'", "missing 'install'"),
    ("[git]\ndefaultBranch = 'main'", "section.option"),
    ("[backup]\nextra = '.vimrc'", "list of strings"),
])
def test_malformed_tables(dotfiles_repo, text, message):
    """Test entries with the wrong shape are rejected."""
    write_manifest(dotfiles_repo, text)

    with pytest.raises(ConfigurationError, match=message):
        InstallManifest.load(dotfiles_repo)


def test_validate_rejects_duplicate_and_escaping_targets():
    """Test targets must be unique and stay inside home."""
    manifest = InstallManifest(links=[
        ManagedLink("a", ".zshrc"),
        ManagedLink("b", ".zshrc"),
        ManagedLink("c", "../outside"),
        ManagedLink("d", "/etc/passwd"),
    ])

    problems = manifest.validate()

    assert problems[0] == "Duplicate link target: .zshrc"
    assert len(problems) == 3


@pytest.mark.parametrize("target", [".", "", "./", "config/.."])
def test_validate_rejects_home_itself_as_target(target):
    """A target must name something below the home directory, never the directory."""
    manifest = InstallManifest(links=[ManagedLink(".zshrc", target)])

    assert len(manifest.validate()) == 1


@pytest.mark.parametrize("source", ["../outside", "/etc/passwd", "config/../../x"])
def test_validate_rejects_sources_outside_repository(source):
    """Sources are resolved inside the dotfiles repository only."""
    manifest = InstallManifest(links=[ManagedLink(source, ".zshrc")])

    assert manifest.validate() == [f"Link source must stay inside the repository: {source}"]
