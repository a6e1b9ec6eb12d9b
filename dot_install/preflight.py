"""Pre-flight checks. Nothing here touches the filesystem."""

from .constants import (
    BACKUP_DIR_PREFIX,
    PACKAGE_MANAGERS,
    REQUIRED_TOOLS,
    SCAN_EXCLUDE_DIRS,
    SHELL_CONFIG_FILES,
)
from .environment import RunConfig
from .exceptions import InstallAborted, MissingDependencyError, RootUserError
from .interactive import Prompter
from .secrets import SecretMatch, SecretScanner
from .ui import Reporter


def check_not_root(config: RunConfig, reporter: Reporter) -> None:
    if config.euid == 0:
        reporter.error("This script should not be run as root for security reasons")
        reporter.info("Run as your regular user account")
        raise RootUserError("Refusing to install as the superuser")


def check_requirements(config: RunConfig, reporter: Reporter) -> None:
    reporter.info("Checking system requirements...")

    missing = [tool for tool, found in config.tools.probe(REQUIRED_TOOLS).items() if not found]

    for command, label in PACKAGE_MANAGERS:
        if config.tools.resolve(command):
            reporter.info(f"{label} detected")
            break
    else:
        reporter.warn("No supported package manager found")

    if missing:
        reporter.error(f"Missing required dependencies: {' '.join(missing)}")
        reporter.info("Please install them before running this script")
        raise MissingDependencyError(missing)

    reporter.success("System requirements satisfied")


def check_existing_config(config: RunConfig, reporter: Reporter) -> list[str]:
    """Report shell startup files that will be backed up."""
    reporter.info("Checking existing shell configuration...")
    found = [name for name in SHELL_CONFIG_FILES if (config.home / name).is_file()]
    if found:
        reporter.info(f"Found existing configuration files: {' '.join(found)}")
        reporter.info(f"These will be backed up to: {config.backup_dir}")
    return found


def find_secret(config: RunConfig, scanner: SecretScanner | None = None) -> SecretMatch | None:
    """First credential-like match under the home directory, if any.

    The secrets file itself and earlier backup directories are not scanned.
    """
    scanner = scanner or SecretScanner()
    return scanner.first_match(
        config.home,
        exclude_dirs=SCAN_EXCLUDE_DIRS + [f"{BACKUP_DIR_PREFIX}*"],
        skip_files=[config.secrets_file],
    )


def scan_for_secrets(
    config: RunConfig,
    prompter: Prompter,
    reporter: Reporter,
    scanner: SecretScanner | None = None,
) -> SecretMatch | None:
    """Advisory scan: warns, asks when interactive, never blocks unattended runs."""
    reporter.info(f"Scanning for exposed secrets in: {config.home}")

    match = find_secret(config, scanner)
    if match is None:
        reporter.success("No obvious secrets found in existing files")
        return None

    reporter.warn("Potential secrets detected in existing files!")
    reporter.warn(f"{match.pattern_name} in {match.file}:{match.line_number}")
    reporter.warn("Please review your existing dotfiles for exposed credentials")

    if config.interactive:
        if not prompter.confirm("Continue anyway?", default=False):
            reporter.info("Installation cancelled")
            raise InstallAborted(f"Potential secret in {match.file}")
    else:
        reporter.warn("Non-interactive mode: proceeding despite potential secrets")
    return match
