"""Pytest configuration and fixtures."""

import io
from pathlib import Path

import pytest
from rich.console import Console

from dot_install import ui
from dot_install.environment import detect_environment
from dot_install.interactive import Prompter
from dot_install.runner import CommandResult, CommandRunner


AVAILABLE_TOOLS = {"git", "curl", "apt", "zsh"}


class FakeRunner(CommandRunner):
    """Records commands instead of running them.

    Commands whose joined arguments contain any string in ``fail`` return
    exit status 1; everything else succeeds.
    """

    def __init__(self, fail=(), on_call=None):
        self.calls: list[list[str]] = []
        self.fail = list(fail)
        self.on_call = on_call

    def run(self, args, input=None, capture=True):
        args = [str(a) for a in args]
        self.calls.append(args)
        if self.on_call:
            self.on_call(args)
        cmdline = " ".join(args)
        if any(f in cmdline for f in self.fail):
            return CommandResult(args, 1, "", "simulated failure")
        return CommandResult(args, 0, "fake 1.0\n", "")


class ScriptedPrompter(Prompter):
    """Answers prompts whose text contains a configured fragment."""

    def __init__(self, answers=None, texts=None, default_answer=False):
        self.answers = answers or {}
        self.texts = texts or {}
        self.default_answer = default_answer
        self.asked: list[str] = []

    def confirm(self, question, default=False):
        self.asked.append(question)
        for fragment, answer in self.answers.items():
            if fragment in question:
                return answer
        return self.default_answer

    def text(self, question, validator=None):
        self.asked.append(question)
        for fragment, answer in self.texts.items():
            if fragment in question:
                return answer
        raise AssertionError(f"Unexpected prompt: {question}")


def fake_which(available):
    def which(name):
        return f"/usr/bin/{name}" if name in available else None
    return which


@pytest.fixture
def temp_home(tmp_path):
    """Create a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def dotfiles_repo(tmp_path):
    """Create a minimal dotfiles checkout."""
    repo = tmp_path / "dotfiles"
    (repo / "config").mkdir(parents=True)
    (repo / ".zshrc").write_text("source ~/config/aliases.zsh\n")
    (repo / ".gitignore.global").write_text(".DS_Store\n*.swp\n")
    (repo / "config" / "aliases.zsh").write_text("alias ll='ls -la'\n")
    (repo / ".secrets.template").write_text("export GITHUB_TOKEN=\n")
    return repo


@pytest.fixture
def framework(temp_home):
    """Pretend Oh My Zsh and its plugins are already installed."""
    plugins = temp_home / ".oh-my-zsh" / "custom" / "plugins"
    for name in ("zsh-autosuggestions", "zsh-syntax-highlighting"):
        (plugins / name).mkdir(parents=True)
    return temp_home / ".oh-my-zsh"


@pytest.fixture
def make_config(temp_home, dotfiles_repo):
    """Factory for RunConfig with a controlled environment."""

    def _make(environ=None, tty=True, euid=1000, available=AVAILABLE_TOOLS):
        env = {"SHELL": "/bin/zsh", "USER": "tester"}
        env.update(environ or {})
        return detect_environment(
            environ=env,
            stdin_isatty=tty,
            euid=euid,
            home=temp_home,
            dotfiles_dir=dotfiles_repo,
            which=fake_which(available),
        )

    return _make


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def reporter(output):
    return ui.Reporter(output=Console(file=output, theme=ui.theme, width=200))


@pytest.fixture
def fake_runner():
    return FakeRunner()


def tree(root: Path) -> dict[str, str]:
    """Snapshot of a directory: relative path -> kind/target."""
    snapshot = {}
    for path in sorted(root.rglob("*")):
        rel = str(path.relative_to(root))
        if path.is_symlink():
            snapshot[rel] = f"link:{path.readlink()}"
        elif path.is_dir():
            snapshot[rel] = "dir"
        else:
            snapshot[rel] = f"file:{path.read_bytes()!r}"
    return snapshot
