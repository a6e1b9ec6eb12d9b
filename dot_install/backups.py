"""Backup management for dot-install."""

import json
import shutil
from pathlib import Path

from .exceptions import BackupError

MANIFEST_NAME = "manifest.json"


class BackupManager:
    """Copies pre-existing files aside before the installer replaces them.

    The backup directory is created on the first backup and is never
    removed by the installer.
    """

    def __init__(self, backup_dir: Path):
        self.requested_dir = backup_dir
        self.backup_dir: Path | None = None
        # backup file name -> original path
        self.entries: dict[str, Path] = {}

    @property
    def created(self) -> bool:
        return self.backup_dir is not None

    def _ensure_dir(self) -> Path:
        """Create the run's backup directory, adding a suffix on collision."""
        if self.backup_dir is not None:
            return self.backup_dir

        candidate = self.requested_dir
        counter = 1
        while candidate.exists():
            candidate = self.requested_dir.with_name(f"{self.requested_dir.name}_{counter}")
            counter += 1

        try:
            candidate.mkdir(parents=True)
        except OSError as e:
            raise BackupError(f"Failed to create backup directory {candidate}: {e}")

        self.backup_dir = candidate
        return candidate

    def needs_backup(self, path: Path) -> bool:
        """Anything present at ``path``, dangling symlinks included."""
        return path.is_symlink() or path.exists()

    def backup(self, path: Path) -> Path | None:
        """
        Copy ``path`` into the backup directory under its basename.

        Returns:
            The path of the copy, or None when nothing needed saving.
        """
        if not self.needs_backup(path):
            return None

        backup_dir = self._ensure_dir()
        dest = backup_dir / path.name

        try:
            if dest.is_dir() and not dest.is_symlink():
                shutil.rmtree(dest)
            elif dest.exists() or dest.is_symlink():
                dest.unlink()

            if path.is_symlink():
                # Keep foreign links as links
                shutil.copy2(path, dest, follow_symlinks=False)
            elif path.is_dir():
                shutil.copytree(path, dest, symlinks=True)
            else:
                shutil.copy2(path, dest)
        except OSError as e:
            raise BackupError(f"Failed to back up {path}: {e}")

        # Last write wins on name collisions
        self.entries[dest.name] = path
        self._write_manifest()
        return dest

    def _write_manifest(self) -> None:
        assert self.backup_dir is not None
        manifest = {name: str(original) for name, original in self.entries.items()}
        try:
            (self.backup_dir / MANIFEST_NAME).write_text(
                json.dumps(manifest, indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise BackupError(f"Failed to write backup manifest: {e}")

    def restore(self) -> list[Path]:
        """
        Copy every backed-up entry back to its original location.

        Returns:
            The restored original paths.
        """
        restored = []
        if self.backup_dir is None:
            return restored

        for name, original in self.entries.items():
            source = self.backup_dir / name
            if not source.exists() and not source.is_symlink():
                continue
            try:
                original.parent.mkdir(parents=True, exist_ok=True)
                if original.is_symlink() or original.is_file():
                    original.unlink()
                elif original.is_dir():
                    shutil.rmtree(original)

                if source.is_dir() and not source.is_symlink():
                    shutil.copytree(source, original, symlinks=True)
                else:
                    shutil.copy2(source, original, follow_symlinks=False)
            except OSError as e:
                raise BackupError(f"Failed to restore {original}: {e}")
            restored.append(original)

        return restored
