"""Symlink synchronization for managed dotfiles."""

import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from .exceptions import LinkError


@dataclass(frozen=True)
class ManagedLink:
    """A (repository source, home target) pair kept in sync via symlink."""

    source: str
    target: str
    required: bool = True

    def resolve(self, dotfiles_dir: Path, home: Path) -> tuple[Path, Path]:
        return dotfiles_dir / self.source, home / self.target


@dataclass
class LinkChange:
    """What happened to one managed target."""

    link: ManagedLink
    source: Path
    target: Path
    action: str  # linked, replaced, unchanged, missing-source

    @property
    def changed(self) -> bool:
        return self.action in ("linked", "replaced")


def is_link_to(target: Path, source: Path) -> bool:
    """True if ``target`` is a symlink whose destination is ``source``."""
    if not target.is_symlink():
        return False
    dest = Path(os.readlink(target))
    if not dest.is_absolute():
        dest = target.parent / dest
    return os.path.normpath(dest) == os.path.normpath(source)


def remove_path(path: Path) -> None:
    """Remove a file, symlink (dangling or not) or whole directory."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        shutil.rmtree(path)


class LinkSynchronizer:
    """Makes every managed target a symlink to its repository source."""

    def __init__(self, dotfiles_dir: Path, home: Path):
        self.dotfiles_dir = dotfiles_dir
        self.home = home
        # Targets this instance created, for rollback
        self.created: list[Path] = []

    def sync_one(self, link: ManagedLink) -> LinkChange:
        source, target = link.resolve(self.dotfiles_dir, self.home)

        if not source.exists():
            return LinkChange(link, source, target, "missing-source")

        if is_link_to(target, source):
            return LinkChange(link, source, target, "unchanged")

        existed = target.exists() or target.is_symlink()
        try:
            if existed:
                remove_path(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.symlink_to(source, target_is_directory=source.is_dir())
        except OSError as e:
            raise LinkError(f"Failed to link {target} -> {source}: {e}")

        self.created.append(target)
        return LinkChange(link, source, target, "replaced" if existed else "linked")

    def sync(self, links: list[ManagedLink]) -> list[LinkChange]:
        return [self.sync_one(link) for link in links]

    def remove_created(self) -> list[Path]:
        """Remove the symlinks created by this synchronizer."""
        removed = []
        for target in reversed(self.created):
            if target.is_symlink():
                try:
                    target.unlink()
                except OSError as e:
                    raise LinkError(f"Failed to remove {target}: {e}")
                removed.append(target)
        self.created.clear()
        return removed
