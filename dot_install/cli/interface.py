"""CLI Interface definition.

``dot-install`` takes no subcommands and no behaviour flags; everything is
driven by environment variables (INTERACTIVE, CI, CODESPACES,
REMOTE_CONTAINERS, DOTFILES_DIR, DOTFILES_DEBUG).
"""

import click

from .. import __version__
from .. import ui
from ..environment import detect_environment
from ..installer import Installer
from .common import error, report_failure, warn


@click.command()
@click.version_option(version=__version__, prog_name="dot-install")
@click.pass_context
def cli(ctx):
    """dot-install: secure, re-runnable dotfiles bootstrap."""
    config = detect_environment()

    try:
        ui.setup_logging(config.log_file, debug=config.debug)
    except OSError as e:
        error(f"Cannot open install log {config.log_file}: {e}", exit_code=1)

    if config.debug:
        ui.console.print("[dim]Debug logging enabled[/dim]")

    ui.print_banner("dot-install", "Secure dotfiles installation")

    reporter = ui.Reporter(debug=config.debug)
    result = Installer(config, reporter=reporter).run()

    if result.ok and reporter.counts["WARN"]:
        warn(f"Completed with {reporter.counts['WARN']} warning(s); see {config.log_file}")
    elif not result.ok and not result.cancelled:
        report_failure(result)

    ctx.exit(result.exit_code)
