"""Centralized UI and logging module for dot-install using Rich."""

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.theme import Theme

# Custom theme for consistent branding
theme = Theme({
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red bold",
    "debug": "blue",
    "highlight": "magenta bold",
    "dim": "dim",
    "key": "blue bold",
    "value": "white",
})

console = Console(theme=theme)
error_console = Console(theme=theme, stderr=True)

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOGGER_NAME = "dot_install"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handler: logging.FileHandler | None = None


def setup_logging(log_file: Path, debug: bool = False) -> logging.Logger:
    """Attach the append-only install log to the dot_install logger.

    Calling it again replaces the previous file handler.
    """
    global _file_handler

    logger = logging.getLogger(LOGGER_NAME)
    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    _file_handler = logging.FileHandler(str(log_file), mode="a", encoding="utf-8")
    _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    _file_handler.setLevel(logging.DEBUG if debug else logging.INFO)

    logger.addHandler(_file_handler)
    logger.setLevel(logging.DEBUG)
    return logger


# level -> (logging level, style, glyph)
_LEVELS = {
    "ERROR": (logging.ERROR, "error", "✗"),
    "WARN": (logging.WARNING, "warning", "⚠"),
    "INFO": (logging.INFO, "info", "ℹ"),
    "SUCCESS": (SUCCESS, "success", "✓"),
    "DEBUG": (logging.DEBUG, "debug", "·"),
}


class Reporter:
    """Sends every step message to the install log and the console."""

    def __init__(
        self,
        output: Console | None = None,
        logger: logging.Logger | None = None,
        debug: bool = False,
    ):
        self.console = output or console
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.debug_enabled = debug
        self.counts: dict[str, int] = {level: 0 for level in _LEVELS}

    def log(self, level: str, message: str) -> None:
        log_level, style, glyph = _LEVELS[level]
        self.counts[level] += 1
        self.logger.log(log_level, message)

        if level == "DEBUG" and not self.debug_enabled:
            return
        self.console.print(f"[{style}]{glyph}[/{style}]  {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.log("ERROR", message)

    def warn(self, message: str) -> None:
        self.log("WARN", message)

    def info(self, message: str) -> None:
        self.log("INFO", message)

    def success(self, message: str) -> None:
        self.log("SUCCESS", message)

    def debug(self, message: str) -> None:
        self.log("DEBUG", message)

    def bullets(self, lines: list[str]) -> None:
        """Console-only list, not logged."""
        for line in lines:
            self.console.print(f"  • {escape(line)}", highlight=False)


def print_banner(title: str, subtitle: str = "") -> None:
    """Print a styled banner."""
    content = f"[bold]{title}[/bold]"
    if subtitle:
        content += f"\n[dim]{subtitle}[/dim]"

    console.print(
        Panel(
            content,
            border_style="cyan",
            padding=(0, 2),
        )
    )


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓[/success] {message}")


def warn(message: str) -> None:
    """Print a warning message."""
    console.print(f"[warning]⚠[/warning] {message}")


def error(message: str, exit_code: int = 1) -> None:
    """Print an error message and optionally exit."""
    error_console.print(f"[error]✗ Error:[/error] {message}")
    if exit_code != 0:
        sys.exit(exit_code)


def print_error_panel(title: str, details: str, suggestion: str) -> None:
    """Print the final error summary on stderr."""
    error_console.print(
        Panel(
            f"[error]{escape(details)}[/error]\n\n[dim]{escape(suggestion)}[/dim]",
            title=f"[error]{title}[/error]",
            border_style="red",
            padding=(0, 2),
        )
    )


def confirm(question: str, default: bool = False) -> bool:
    """Ask a yes/no question."""
    return Confirm.ask(f"[bold]{question}[/bold]", default=default, console=console)

