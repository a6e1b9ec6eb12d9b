"""Custom exceptions for dot-install."""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(Enum):
    """Categorizes errors for user-friendly diagnostics."""
    PRIVILEGE = "privilege"       # Running as root
    DEPENDENCY = "dependency"     # Missing required tool
    ABORTED = "aborted"           # User declined to continue
    INTERRUPTED = "interrupted"   # KeyboardInterrupt / SIGTERM
    COMMAND = "command"           # External command failed
    CONFIG = "config"             # install.toml errors
    FILESYSTEM = "filesystem"     # Backup / link / permission errors
    VALIDATION = "validation"     # Post-condition check failed
    UNKNOWN = "unknown"           # Fallback


@dataclass
class ErrorDiagnostic:
    """Rich error diagnostic for user display."""
    category: ErrorCategory
    title: str
    details: str
    suggestion: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDiagnostic":
        """Factory to create diagnostics from common exceptions."""
        if isinstance(exc, KeyboardInterrupt):
            return cls(
                ErrorCategory.INTERRUPTED,
                "Installation interrupted",
                "User cancelled the installation",
                "Run dot-install again; completed steps are safe to repeat",
            )
        if isinstance(exc, RootUserError):
            return cls(
                ErrorCategory.PRIVILEGE,
                "Refusing to run as root",
                str(exc),
                "Run as your regular user account",
            )
        if isinstance(exc, MissingDependencyError):
            return cls(
                ErrorCategory.DEPENDENCY,
                "Missing required dependencies",
                str(exc),
                "Install them with your package manager, then retry",
            )
        if isinstance(exc, InstallAborted):
            return cls(
                ErrorCategory.ABORTED,
                "Installation cancelled",
                str(exc),
                "Review the reported files, then run dot-install again",
            )
        if isinstance(exc, ConfigurationError):
            return cls(
                ErrorCategory.CONFIG,
                "Configuration error",
                str(exc),
                "Fix install.toml in the dotfiles repository",
            )
        if isinstance(exc, CommandError):
            return cls(
                ErrorCategory.COMMAND,
                "External command failed",
                str(exc),
                "Check network access and the install log, then retry",
            )
        if isinstance(exc, ValidationFailed):
            return cls(
                ErrorCategory.VALIDATION,
                "Installation validation failed",
                str(exc),
                "Inspect the reported paths; nothing was rolled back",
            )
        if isinstance(exc, (BackupError, LinkError, OSError)):
            return cls(
                ErrorCategory.FILESYSTEM,
                "File operation failed",
                str(exc),
                "Check permissions under your home directory",
            )

        # Fallback
        return cls(
            ErrorCategory.UNKNOWN,
            "Unexpected error",
            str(exc),
            "Check the install log or set DOTFILES_DEBUG=1 for details",
        )


class InstallerError(Exception):
    """Base exception for all dot-install errors."""

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


# ============================================================================
# Pre-flight Errors (no mutation has happened yet)
# ============================================================================


class RootUserError(InstallerError):
    """Installer was started by the superuser."""

    exit_code = 1


class MissingDependencyError(InstallerError):
    """A required tool is not on PATH."""

    exit_code = 2

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required dependencies: {' '.join(self.missing)}")


class InstallAborted(InstallerError):
    """User chose not to continue."""

    exit_code = 1


class ConfigurationError(InstallerError):
    """install.toml is invalid."""

    exit_code = 7


# ============================================================================
# Mid-run Errors (trigger rollback)
# ============================================================================


class CommandError(InstallerError):
    """An external command failed."""

    exit_code = 5


class LinkError(InstallerError):
    """Creating or removing a symlink failed."""

    exit_code = 40


class BackupError(InstallerError):
    """Backup operation failed."""

    exit_code = 41


# ============================================================================
# Post-condition Errors
# ============================================================================


class ValidationFailed(InstallerError):
    """Post-install checks reported errors."""

    exit_code = 1
