"""Execution-context detection for dot-install.

Everything the installer needs to know about the host is computed once by
:func:`detect_environment` and carried in a :class:`RunConfig`. Steps take
the config as a parameter and never consult ``os.environ`` themselves.
"""

import os
import platform
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Mapping

from .constants import (
    BACKUP_DIR_PREFIX,
    BACKUP_TIMESTAMP_FORMAT,
    CI_MARKERS,
    CODESPACES_MARKERS,
    FALSE_VALUES,
    LOG_FILE_NAME,
    REMOTE_CONTAINER_MARKERS,
    SECRETS_FILE_NAME,
    SECRETS_TEMPLATE_NAME,
    SHELL_FRAMEWORK_DIR,
)


class ToolResolver:
    """Capability lookup: is a command on PATH?

    Each name is looked up at most once; later calls answer from the cache.
    """

    def __init__(self, which: Callable[[str], str | None] | None = None):
        self._which = which or shutil.which
        self._cache: dict[str, str | None] = {}

    def resolve(self, name: str) -> bool:
        return self.path(name) is not None

    def path(self, name: str) -> str | None:
        if name not in self._cache:
            self._cache[name] = self._which(name)
        return self._cache[name]

    def probe(self, names: Iterable[str]) -> dict[str, bool]:
        return {name: self.resolve(name) for name in names}

    def forget(self, name: str) -> None:
        """Drop a cached answer, e.g. after installing the tool."""
        self._cache.pop(name, None)


@dataclass(frozen=True)
class RunConfig:
    """Immutable description of one installer run."""

    home: Path
    dotfiles_dir: Path
    backup_dir: Path
    log_file: Path
    interactive: bool
    interactive_reason: str = ""
    is_ci: bool = False
    is_codespaces: bool = False
    is_remote_container: bool = False
    platform: str = "unknown"
    shell: str = ""
    user: str = ""
    euid: int = -1
    debug: bool = False
    tools: ToolResolver = field(default_factory=ToolResolver, compare=False)

    @property
    def secrets_file(self) -> Path:
        return self.home / SECRETS_FILE_NAME

    @property
    def secrets_template(self) -> Path:
        return self.dotfiles_dir / SECRETS_TEMPLATE_NAME

    @property
    def framework_dir(self) -> Path:
        return self.home / SHELL_FRAMEWORK_DIR


def _flag(environ: Mapping[str, str], name: str) -> bool:
    value = environ.get(name)
    if value is None:
        return False
    return value.strip().lower() not in FALSE_VALUES


def _any_set(environ: Mapping[str, str], names: list[str]) -> bool:
    """Markers count whenever they hold a non-empty value, even "false"."""
    return any(environ.get(name) for name in names)


def detect_platform(environ: Mapping[str, str], system: str | None = None, release: str | None = None) -> str:
    """Return one of ``macos``, ``wsl``, ``linux`` or ``unknown``."""
    system = system if system is not None else platform.system()
    release = release if release is not None else platform.release()

    if system == "Darwin":
        return "macos"
    if system == "Linux":
        if environ.get("WSL_DISTRO_NAME") or environ.get("WSL_INTEROP"):
            return "wsl"
        if "microsoft" in release.lower():
            return "wsl"
        return "linux"
    return "unknown"


def detect_interactive(environ: Mapping[str, str], stdin_isatty: bool) -> tuple[bool, str]:
    """Decide whether prompts are allowed.

    Returns:
        (interactive, reason)
    """
    if _any_set(environ, CI_MARKERS):
        return False, "CI environment detected"
    if _any_set(environ, CODESPACES_MARKERS):
        return False, "Codespaces environment detected"
    if _any_set(environ, REMOTE_CONTAINER_MARKERS):
        return False, "remote container detected"
    if not stdin_isatty:
        return False, "standard input is not a terminal"

    override = environ.get("INTERACTIVE")
    if override is not None and override.strip().lower() in FALSE_VALUES:
        return False, "INTERACTIVE override"
    return True, ""


def backup_dir_for(home: Path, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return home / f"{BACKUP_DIR_PREFIX}{stamp}"


def detect_environment(
    environ: Mapping[str, str] | None = None,
    stdin_isatty: bool | None = None,
    euid: int | None = None,
    home: Path | None = None,
    dotfiles_dir: Path | None = None,
    which: Callable[[str], str | None] | None = None,
    now: datetime | None = None,
) -> RunConfig:
    """Build the run configuration from the process environment.

    Every argument defaults to the live process value; tests pass their own.
    """
    environ = dict(os.environ if environ is None else environ)
    if stdin_isatty is None:
        stdin_isatty = sys.stdin is not None and sys.stdin.isatty()
    if euid is None:
        euid = os.geteuid() if hasattr(os, "geteuid") else -1

    home = home or Path(environ.get("HOME") or Path.home())
    if dotfiles_dir is None:
        dotfiles_dir = Path(environ.get("DOTFILES_DIR") or Path.cwd())

    interactive, reason = detect_interactive(environ, stdin_isatty)

    return RunConfig(
        home=home,
        dotfiles_dir=dotfiles_dir.resolve(),
        backup_dir=backup_dir_for(home, now),
        log_file=home / LOG_FILE_NAME,
        interactive=interactive,
        interactive_reason=reason,
        is_ci=_any_set(environ, CI_MARKERS),
        is_codespaces=_any_set(environ, CODESPACES_MARKERS),
        is_remote_container=_any_set(environ, REMOTE_CONTAINER_MARKERS),
        platform=detect_platform(environ),
        shell=Path(environ.get("SHELL", "")).name,
        user=environ.get("USER") or environ.get("LOGNAME") or "",
        euid=euid,
        debug=_flag(environ, "DOTFILES_DEBUG"),
        tools=ToolResolver(which),
    )
