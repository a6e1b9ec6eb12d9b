"""Secret detection patterns and secrets-file provisioning."""

import os
import re
import shutil
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator

from .constants import SCAN_MAX_FILE_SIZE, SECRETS_FILE_MODE
from .ui import Reporter


class Severity(Enum):
    """Secret severity levels."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


@dataclass
class SecretPattern:
    """A secret detection pattern."""

    name: str
    pattern: re.Pattern
    severity: Severity
    description: str


@dataclass
class SecretMatch:
    """A detected secret match."""

    file: Path
    line_number: int
    line_content: str
    pattern_name: str
    severity: Severity
    matched_text: str


# ============================================================================
# Default Patterns
# ============================================================================

DEFAULT_PATTERNS: list[SecretPattern] = [
    # CRITICAL - System/Cloud compromise
    SecretPattern(
        name="Private Key",
        pattern=re.compile(r"-----BEGIN\s+(?:RSA|DSA|EC|OPENSSH|PGP|ENCRYPTED)?\s*PRIVATE KEY-----"),
        severity=Severity.CRITICAL,
        description="PEM private key header detected",
    ),
    SecretPattern(
        name="AWS Access Key ID",
        pattern=re.compile(r"\bAKIA[0-9A-Z]{16}\b"),
        severity=Severity.CRITICAL,
        description="AWS Access Key ID format",
    ),
    SecretPattern(
        name="AWS Secret Key",
        pattern=re.compile(
            r"aws[_-]?secret[_-]?access[_-]?key.*['\"][A-Za-z0-9/+=]{40}['\"]", re.IGNORECASE
        ),
        severity=Severity.CRITICAL,
        description="AWS Secret Access Key assignment",
    ),
    # HIGH - Service compromise
    SecretPattern(
        name="Generic API Key",
        pattern=re.compile(r"api[_-]?key.*=.*['\"][^'\"]{20,}['\"]", re.IGNORECASE),
        severity=Severity.HIGH,
        description="API key assignment",
    ),
    SecretPattern(
        name="Password Assignment",
        pattern=re.compile(r"password.*=.*['\"][^'\"]{8,}['\"]", re.IGNORECASE),
        severity=Severity.HIGH,
        description="Password assignment detected",
    ),
    SecretPattern(
        name="Auth Token",
        pattern=re.compile(r"token.*=.*['\"][^'\"]{20,}['\"]", re.IGNORECASE),
        severity=Severity.HIGH,
        description="Token assignment",
    ),
    # MEDIUM - Potential exposure
    SecretPattern(
        name="Generic Secret",
        pattern=re.compile(r"secret.*=.*['\"][^'\"]{20,}['\"]", re.IGNORECASE),
        severity=Severity.MEDIUM,
        description="Generic secret assignment",
    ),
]

# False positive indicators - lines containing these are skipped
FALSE_POSITIVE_INDICATORS = [
    "example",
    "dummy",
    "sample",
    "your_key_here",
    "your-key-here",
    "placeholder",
    "<your",
    "${",  # Environment variable substitution
    "{{",  # Template variable
]


class SecretScanner:
    """Scans files for secrets. Heuristic: misses and false alarms are expected."""

    def __init__(
        self,
        patterns: list[SecretPattern] | None = None,
        max_file_size: int = SCAN_MAX_FILE_SIZE,
    ):
        self.patterns = patterns or DEFAULT_PATTERNS
        self.max_file_size = max_file_size

    def is_false_positive(self, line: str) -> bool:
        """Check if a line is likely a false positive."""
        line_lower = line.lower()
        return any(indicator in line_lower for indicator in FALSE_POSITIVE_INDICATORS)

    def is_binary_file(self, path: Path) -> bool:
        """Check if a file is binary."""
        try:
            with open(path, "rb") as f:
                chunk = f.read(8192)
                return b"\x00" in chunk
        except OSError:
            return True

    def scan_content(
        self, content: str, file_path: Path | None = None
    ) -> Iterator[SecretMatch]:
        """Scan content for secrets."""
        file_path = file_path or Path("<string>")

        for line_number, line in enumerate(content.splitlines(), start=1):
            # Skip likely false positives
            if self.is_false_positive(line):
                continue

            for pattern in self.patterns:
                match = pattern.pattern.search(line)
                if match:
                    yield SecretMatch(
                        file=file_path,
                        line_number=line_number,
                        line_content=line.strip(),
                        pattern_name=pattern.name,
                        severity=pattern.severity,
                        matched_text=match.group(0),
                    )

    def scan_file(self, path: Path) -> Iterator[SecretMatch]:
        """Scan a file for secrets."""
        try:
            if path.stat().st_size > self.max_file_size:
                return
        except OSError:
            return
        if self.is_binary_file(path):
            return

        try:
            content = path.read_text(encoding="utf-8", errors="ignore")
        except OSError:
            # Skip files we can't read
            return
        yield from self.scan_content(content, path)

    def scan_directory(
        self,
        directory: Path,
        exclude_dirs: list[str] | None = None,
        skip_files: list[Path] | None = None,
    ) -> Iterator[SecretMatch]:
        """Scan all files below a directory, pruning excluded directory names.

        Entries that cannot be inspected (permission denied, vanished) are
        skipped.
        """
        excluded = set(exclude_dirs or []) | {".git"}
        skipped = set(skip_files or [])

        for root, dirs, files in os.walk(directory, followlinks=False):
            dirs[:] = sorted(d for d in dirs if not _is_excluded(d, excluded))
            for name in sorted(files):
                path = Path(root) / name
                if path in skipped:
                    continue
                try:
                    if path.is_symlink() or not path.is_file():
                        continue
                except OSError:
                    continue
                yield from self.scan_file(path)

    def first_match(
        self,
        directory: Path,
        exclude_dirs: list[str] | None = None,
        skip_files: list[Path] | None = None,
    ) -> SecretMatch | None:
        """Stop at the first hit."""
        return next(iter(self.scan_directory(directory, exclude_dirs, skip_files)), None)


def _is_excluded(name: str, excluded: set[str]) -> bool:
    if name in excluded:
        return True
    # Prefix patterns such as ".dotfiles_backup_*"
    return any(p.endswith("*") and name.startswith(p[:-1]) for p in excluded)


# ============================================================================
# Secrets file
# ============================================================================


def file_mode(path: Path) -> int:
    """Permission bits of ``path`` (e.g. 0o600)."""
    return stat.S_IMODE(path.stat().st_mode)


def has_secure_permissions(path: Path) -> bool:
    return file_mode(path) == SECRETS_FILE_MODE


class SecretsProvisioner:
    """Ensures the secrets file exists and is readable by its owner only."""

    def __init__(self, secrets_file: Path, template: Path, reporter: Reporter):
        self.secrets_file = secrets_file
        self.template = template
        self.reporter = reporter

    def provision(self) -> bool:
        """
        Create the secrets file from the template if needed, then fix its mode.

        Returns:
            True if the secrets file exists afterwards.
        """
        name = self.secrets_file.name
        if self.secrets_file.exists():
            self.reporter.info(f"{name} file already exists")
        elif self.template.is_file():
            self.reporter.info(f"Creating {name} file from template")
            shutil.copyfile(self.template, self.secrets_file)
            os.chmod(self.secrets_file, SECRETS_FILE_MODE)
            self.reporter.success(f"{name} file created with secure permissions (600)")
            self.reporter.info(f"Edit ~/{name} to add your actual secrets")
        else:
            self.reporter.warn(f"No {self.template.name} found; skipping {name} setup")
            return False

        self.enforce_permissions()
        return True

    def enforce_permissions(self) -> bool:
        """Reset the mode to 0600 if it differs. Returns True if it was changed."""
        actual = file_mode(self.secrets_file)
        if actual == SECRETS_FILE_MODE:
            return False

        self.reporter.warn(
            f"File {self.secrets_file} has permissions {actual:o}, expected {SECRETS_FILE_MODE:o}"
        )
        os.chmod(self.secrets_file, SECRETS_FILE_MODE)
        self.reporter.info(f"Fixed {self.secrets_file.name} permissions to 600")
        return True
