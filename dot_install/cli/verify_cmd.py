"""Verify command: report which tools and dotfiles are in place."""

import click
from rich.table import Table

from .. import __version__
from .. import ui
from ..environment import detect_environment
from ..runner import CommandRunner
from ..verify import Check, dotfile_checks, shell_checks, tool_report
from .common import success

STATUS_STYLE = {
    "ok": "[success]✓[/success]",
    "warn": "[warning]⚠[/warning]",
    "missing": "[error]✗[/error]",
}


def _table(title: str, checks: list[Check]) -> Table:
    table = Table(title=f"[bold]{title}[/bold]", title_justify="left", box=None, padding=(0, 2))
    table.add_column("", width=2)
    table.add_column("Check", style="cyan")
    table.add_column("Detail")
    for check in checks:
        table.add_row(STATUS_STYLE[check.status], check.name, check.detail)
    return table


@click.command()
@click.version_option(version=__version__, prog_name="dot-install-verify")
def verify():
    """Verify the tools and shell configuration of this environment."""
    config = detect_environment()
    runner = CommandRunner()

    ui.print_banner("🧪 Dotfiles Verification")
    for title, checks in tool_report(config, runner):
        ui.console.print(_table(title, checks))
        ui.console.print()

    ui.console.print(_table("Shell Configuration", shell_checks(config)))
    ui.console.print()
    ui.console.print(_table("Dotfiles", dotfile_checks(config)))
    ui.console.print()

    success("Verification complete!")
