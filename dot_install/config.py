"""Install manifest parsing for dot-install using TOML format."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

# Python 3.11+ has tomllib built-in, otherwise use tomli
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .constants import (
    DEFAULT_GIT_SETTINGS,
    DEFAULT_LINKS,
    DEFAULT_OPTIONAL_TOOLS,
    EXTRA_BACKUP_FILES,
    MANIFEST_FILE_NAME,
    SHELL_FRAMEWORK_PLUGINS,
)
from .exceptions import ConfigurationError
from .links import ManagedLink
from .tools import OptionalTool


@dataclass
class InstallManifest:
    """What the installer manages for one dotfiles repository."""

    links: list[ManagedLink] = field(default_factory=list)
    extra_backups: list[str] = field(default_factory=list)
    tools: list[OptionalTool] = field(default_factory=list)
    git_settings: dict[str, str] = field(default_factory=dict)
    plugins: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def defaults(cls) -> "InstallManifest":
        return cls(
            links=[ManagedLink(src, dst, required) for src, dst, required in DEFAULT_LINKS],
            extra_backups=list(EXTRA_BACKUP_FILES),
            tools=[OptionalTool(cmd, desc, install) for cmd, desc, install in DEFAULT_OPTIONAL_TOOLS],
            git_settings=dict(DEFAULT_GIT_SETTINGS),
            plugins=list(SHELL_FRAMEWORK_PLUGINS),
        )

    @classmethod
    def load(cls, dotfiles_dir: Path) -> "InstallManifest":
        """Load ``install.toml`` from the repository, or the defaults if absent."""
        path = dotfiles_dir / MANIFEST_FILE_NAME
        manifest = cls.defaults()
        if not path.exists():
            return manifest

        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Invalid {path.name}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read {path}: {e}")

        manifest.apply(data)
        return manifest

    def apply(self, data: dict) -> None:
        """Override defaults with the tables present in ``data``."""
        if "links" in data:
            self.links = [_parse_link(i, entry) for i, entry in enumerate(_table_list(data, "links"))]
        if "tools" in data:
            self.tools = [_parse_tool(i, entry) for i, entry in enumerate(_table_list(data, "tools"))]
        if "backup" in data:
            extra = data["backup"].get("extra", []) if isinstance(data["backup"], dict) else None
            if not isinstance(extra, list) or not all(isinstance(x, str) for x in extra):
                raise ConfigurationError("backup.extra must be a list of strings")
            self.extra_backups = list(extra)
        if "plugins" in data:
            plugins = data["plugins"]
            if not isinstance(plugins, dict):
                raise ConfigurationError("[plugins] must map plugin names to git URLs")
            self.plugins = [(str(name), str(url)) for name, url in plugins.items()]
        if "git" in data:
            settings = data["git"]
            if not isinstance(settings, dict):
                raise ConfigurationError("[git] must map config keys to values")
            for key, value in settings.items():
                if "." not in key:
                    raise ConfigurationError(f"git setting '{key}' must be 'section.option'")
                if isinstance(value, bool):
                    value = str(value).lower()
                self.git_settings[key] = str(value)

    def validate(self) -> list[str]:
        """Return a list of problems; empty when the manifest is usable."""
        errors = []
        targets = [link.target for link in self.links]
        for target in sorted(set(t for t in targets if targets.count(t) > 1)):
            errors.append(f"Duplicate link target: {target}")
        for link in self.links:
            target = Path(link.target)
            if target.is_absolute() or ".." in target.parts:
                errors.append(f"Link target must stay inside the home directory: {link.target}")
            elif os.path.normpath(link.target) in (".", ""):
                errors.append(f"Link target must name a path below the home directory: {link.target!r}")
            source = Path(link.source)
            if source.is_absolute() or ".." in source.parts:
                errors.append(f"Link source must stay inside the repository: {link.source}")
        return errors


def _table_list(data: dict, key: str) -> list[dict]:
    value = data[key]
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ConfigurationError(f"'{key}' must be an array of tables ([[{key}]])")
    return value


def _parse_link(index: int, entry: dict) -> ManagedLink:
    source = entry.get("source")
    if not isinstance(source, str) or not source:
        raise ConfigurationError(f"links[{index}]: 'source' is required")
    target = entry.get("target", source)
    required = entry.get("required", True)
    if not isinstance(target, str) or not isinstance(required, bool):
        raise ConfigurationError(f"links[{index}]: invalid 'target' or 'required'")
    return ManagedLink(source, target, required)


def _parse_tool(index: int, entry: dict) -> OptionalTool:
    try:
        return OptionalTool(
            command=str(entry["command"]),
            description=str(entry.get("description", entry["command"])),
            install=str(entry["install"]),
        )
    except KeyError as e:
        raise ConfigurationError(f"tools[{index}]: missing {e}")
