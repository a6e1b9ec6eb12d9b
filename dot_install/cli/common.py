"""Common utilities for dot-install CLI commands."""

from .. import ui
from ..exceptions import ErrorDiagnostic, ValidationFailed
from ..installer import RunResult


def error(message: str, exit_code: int = 1) -> None:
    """Print error message and exit."""
    ui.error(message, exit_code)


def success(message: str) -> None:
    """Print success message."""
    ui.success(message)


def warn(message: str) -> None:
    """Print warning message."""
    ui.warn(message)


def report_failure(result: RunResult) -> None:
    """Print the closing error panel for a failed run."""
    if result.error is not None:
        diagnostic = ErrorDiagnostic.from_exception(result.error)
    else:
        count = len(result.validation.errors) if result.validation else 0
        diagnostic = ErrorDiagnostic.from_exception(
            ValidationFailed(f"{count} post-install check(s) failed")
        )

    details = diagnostic.details
    if result.rolled_back:
        details += "\nChanges made by this run were rolled back."
    ui.print_error_panel(diagnostic.title, details, diagnostic.suggestion)
