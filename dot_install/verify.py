"""Environment verification report (tools, shell, dotfiles)."""

from dataclasses import dataclass

from .constants import GITCONFIG_FILE_NAME, TARGET_SHELL
from .environment import RunConfig
from .runner import CommandRunner

# group title -> [(display name, command)]
TOOL_GROUPS = [
    ("Core Modern CLI Tools", [
        ("ripgrep", "rg"),
        ("bat", "bat"),
        ("fd", "fd"),
        ("fzf", "fzf"),
        ("eza", "eza"),
        ("git-delta", "delta"),
        ("jq", "jq"),
        ("httpie", "http"),
    ]),
    ("Rust-based Tools", [
        ("zoxide", "zoxide"),
        ("procs", "procs"),
        ("bottom", "btm"),
        ("tldr", "tldr"),
        ("hyperfine", "hyperfine"),
        ("sd", "sd"),
    ]),
    ("Additional Tools", [
        ("GitHub CLI", "gh"),
        ("Starship", "starship"),
        ("mise", "mise"),
    ]),
]


@dataclass
class Check:
    name: str
    status: str  # ok, warn, missing
    detail: str = ""


def check_tool(config: RunConfig, runner: CommandRunner, name: str, command: str) -> Check:
    if not config.tools.resolve(command):
        return Check(name, "missing", "NOT FOUND")
    result = runner.run([command, "--version"])
    lines = (result.stdout or result.stderr).strip().splitlines()
    return Check(name, "ok", lines[0] if lines else "")


def tool_report(config: RunConfig, runner: CommandRunner) -> list[tuple[str, list[Check]]]:
    return [
        (title, [check_tool(config, runner, name, command) for name, command in tools])
        for title, tools in TOOL_GROUPS
    ]


def shell_checks(config: RunConfig) -> list[Check]:
    checks = []
    if config.shell == TARGET_SHELL:
        checks.append(Check("Default shell", "ok", TARGET_SHELL))
    else:
        checks.append(Check("Default shell", "warn", f"{config.shell or 'unknown'} (expected zsh)"))

    if config.framework_dir.is_dir():
        checks.append(Check("Oh My Zsh", "ok", "installed"))
    else:
        checks.append(Check("Oh My Zsh", "missing", "NOT FOUND"))

    if config.is_codespaces:
        checks.append(Check("Codespaces", "ok", "Running in GitHub Codespaces"))
    else:
        checks.append(Check("Codespaces", "warn", "Not running in Codespaces"))
    if config.is_remote_container:
        checks.append(Check("Dev container", "ok", "Running in a remote container"))
    return checks


def dotfile_checks(config: RunConfig) -> list[Check]:
    checks = []
    for name in (".zshrc", GITCONFIG_FILE_NAME):
        if (config.home / name).is_file():
            checks.append(Check(name, "ok", "exists"))
        else:
            checks.append(Check(name, "missing", "NOT FOUND"))
    return checks
