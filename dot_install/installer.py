"""Bootstrap installer run: sequencing, rollback and the final report."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .backups import BackupManager
from .config import InstallManifest
from .constants import PACKAGE_MANAGERS, TARGET_SHELL
from .environment import RunConfig
from .exceptions import ConfigurationError, InstallerError
from .gitconfig import GitConfigurator
from .interactive import Prompter
from .links import LinkChange, LinkSynchronizer, is_link_to
from .preflight import check_existing_config, check_not_root, check_requirements, scan_for_secrets
from .runner import CommandRunner
from .secrets import SecretsProvisioner
from .shell import ShellSwitcher
from .tools import OptionalToolInstaller, ShellFrameworkInstaller, ToolOutcome
from .ui import Reporter
from .validate import ValidationReport, Validator


class Stage(Enum):
    START = "start"
    PRECHECK = "precheck"
    BACKUP = "backup"
    SYMLINK = "symlink"
    SECRETS = "secrets"
    GIT_CONFIG = "git_config"
    OPTIONAL_TOOLS = "optional_tools"
    SHELL_SWITCH = "shell_switch"
    VALIDATE = "validate"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class RunResult:
    stage: Stage
    exit_code: int
    error: BaseException | None = None
    failed_stage: Stage | None = None
    cancelled: bool = False
    rolled_back: bool = False
    backup_dir: Path | None = None
    changes: list[LinkChange] = field(default_factory=list)
    tools: list[ToolOutcome] = field(default_factory=list)
    validation: ValidationReport | None = None

    @property
    def ok(self) -> bool:
        return self.stage is Stage.SUCCESS


PLAN = [
    "Install Oh My Zsh and plugins",
    "Create symlinks for dotfiles",
    "Set up secure .secrets file",
    "Configure Git with global settings",
    "Optionally install development tools",
    "Optionally set Zsh as default shell",
]

NEXT_STEPS = [
    "Restart your terminal or run: source ~/.zshrc",
    "Edit ~/.secrets to add your credentials",
    "Customize your configuration in ~/config/",
    "Run 'dot-install-verify' to check your environment",
]


class Installer:
    """
    Runs the installer stages strictly in order.

    Errors during pre-flight abort with nothing to undo. Errors from BACKUP
    through SHELL_SWITCH roll back the links and restore backed-up files.
    A failed validation is reported but leaves the filesystem as it is.
    """

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        reporter: Reporter | None = None,
        manifest: InstallManifest | None = None,
    ):
        self.config = config
        self.runner = runner or CommandRunner()
        self.prompter = prompter or Prompter()
        self.reporter = reporter or Reporter(debug=config.debug)
        self.manifest = manifest

        self.stage = Stage.START
        self.backups = BackupManager(config.backup_dir)
        self.links = LinkSynchronizer(config.dotfiles_dir, config.home)
        self.changes: list[LinkChange] = []
        self.tool_outcomes: list[ToolOutcome] = []

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _enter(self, stage: Stage) -> None:
        self.stage = stage
        self.reporter.debug(f"Stage: {stage.name}")

    def precheck(self) -> None:
        check_not_root(self.config, self.reporter)

        if self.manifest is None:
            self.manifest = InstallManifest.load(self.config.dotfiles_dir)
        problems = self.manifest.validate()
        if problems:
            raise ConfigurationError("; ".join(problems))

        check_requirements(self.config, self.reporter)
        # Cache the remaining capabilities for later stages
        self.config.tools.probe(
            [TARGET_SHELL]
            + [cmd for cmd, _ in PACKAGE_MANAGERS]
            + [tool.command for tool in self.manifest.tools]
        )
        check_existing_config(self.config, self.reporter)
        scan_for_secrets(self.config, self.prompter, self.reporter)

    def backup_files(self) -> None:
        self.reporter.info(f"Backing up existing files to: {self.config.backup_dir}")

        candidates: list[Path] = []
        for link in self.manifest.links:
            source, target = link.resolve(self.config.dotfiles_dir, self.config.home)
            if not is_link_to(target, source):
                candidates.append(target)
        candidates += [self.config.home / name for name in self.manifest.extra_backups]

        seen = set()
        for path in candidates:
            if path in seen:
                continue
            seen.add(path)
            if self._is_managed_link(path) or not self.backups.needs_backup(path):
                continue
            self.reporter.info(f"Backing up {path.name}")
            self.backups.backup(path)

        if self.backups.created:
            self.reporter.success(f"Backup created in {self.backups.backup_dir}")
        else:
            self.reporter.info("No existing files needed backup")

    def _is_managed_link(self, path: Path) -> bool:
        for link in self.manifest.links:
            source, target = link.resolve(self.config.dotfiles_dir, self.config.home)
            if target == path and is_link_to(target, source):
                return True
        return False

    def link_files(self) -> None:
        # The framework installer writes its own ~/.zshrc, so it runs first
        ShellFrameworkInstaller(
            self.config, self.runner, self.reporter, self.manifest.plugins
        ).install()

        self.reporter.info("Creating symlinks for dotfiles...")
        for link in self.manifest.links:
            change = self.links.sync_one(link)
            self.changes.append(change)
            if change.action == "missing-source":
                self.reporter.warn(f"Source file not found: {change.source}")
            elif change.changed:
                self.reporter.info(f"Symlinked {link.target}")
            else:
                self.reporter.debug(f"{link.target} already linked")

        if any(c.changed for c in self.changes):
            self.reporter.success("Symlinks created")
        else:
            self.reporter.success("Symlinks already up to date")

    def provision_secrets(self) -> None:
        SecretsProvisioner(
            self.config.secrets_file, self.config.secrets_template, self.reporter
        ).provision()

    def configure_git(self) -> None:
        GitConfigurator(self.config, self.prompter, self.reporter).configure(
            self.manifest.git_settings
        )

    def install_tools(self) -> None:
        installer = OptionalToolInstaller(self.config, self.runner, self.prompter, self.reporter)
        self.tool_outcomes = installer.install_all(self.manifest.tools)

    def switch_shell(self) -> None:
        ShellSwitcher(self.config, self.runner, self.prompter, self.reporter).switch()

    def validate(self) -> ValidationReport:
        return Validator(self.config, self.reporter).validate(self.manifest.links)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def confirm_start(self) -> bool:
        self.reporter.info("This script will:")
        self.reporter.bullets(PLAN)
        if not self.config.interactive:
            return True
        return self.prompter.confirm("Continue with installation?", default=False)

    def run(self) -> RunResult:
        self.reporter.info("Starting secure dotfiles installation")
        self.reporter.info(f"Installation directory: {self.config.dotfiles_dir}")
        self.reporter.info(f"Platform: {self.config.platform}")
        self.reporter.info(f"Log file: {self.config.log_file}")
        if not self.config.interactive:
            self.reporter.info(f"Running in non-interactive mode ({self.config.interactive_reason})")

        self._enter(Stage.PRECHECK)
        try:
            self.precheck()
        except ConfigurationError as e:
            self.reporter.error(f"Configuration error: {e}")
            return self._failed(e, e.exit_code)
        except InstallerError as e:
            return self._failed(e, e.exit_code)
        except Exception as e:
            self.reporter.error(f"{self.stage.name} failed: {str(e) or type(e).__name__}")
            return self._failed(e, 1)

        if not self.confirm_start():
            self.reporter.info("Installation cancelled")
            return RunResult(Stage.START, 0, cancelled=True)

        steps = [
            (Stage.BACKUP, self.backup_files),
            (Stage.SYMLINK, self.link_files),
            (Stage.SECRETS, self.provision_secrets),
            (Stage.GIT_CONFIG, self.configure_git),
            (Stage.OPTIONAL_TOOLS, self.install_tools),
            (Stage.SHELL_SWITCH, self.switch_shell),
        ]
        try:
            for stage, step in steps:
                self._enter(stage)
                step()
        except (Exception, KeyboardInterrupt) as e:
            exit_code = getattr(e, "exit_code", 130 if isinstance(e, KeyboardInterrupt) else 1)
            self.reporter.error(f"{self.stage.name} failed: {str(e) or type(e).__name__}")
            self.rollback()
            return self._failed(e, exit_code, rolled_back=True)

        self._enter(Stage.VALIDATE)
        report = self.validate()
        if not report.ok:
            self.reporter.error("Installation validation failed")
            result = self._failed(None, 1)
            result.validation = report
            return result

        self.stage = Stage.SUCCESS
        self.reporter.success("Installation completed successfully!")
        self.reporter.info("Next steps:")
        self.reporter.bullets(NEXT_STEPS)
        if self.backups.created:
            self.reporter.info(f"Backup created in: {self.backups.backup_dir}")
        self.reporter.info(f"Installation log: {self.config.log_file}")
        return self._result(Stage.SUCCESS, 0, validation=report)

    def rollback(self) -> None:
        """Best effort: remove links made by this run, restore backed-up files."""
        self.reporter.error("Installation failed, cleaning up...")

        try:
            for target in self.links.remove_created():
                self.reporter.info(f"Removed symlink: {target}")
        except InstallerError as e:
            self.reporter.error(f"Symlink removal incomplete: {e}")

        if self.backups.created:
            self.reporter.info("Restoring from backup...")
            try:
                for original in self.backups.restore():
                    self.reporter.info(f"Restored: {original}")
            except InstallerError as e:
                self.reporter.error(f"Restore incomplete: {e}")

        self.reporter.info("Cleanup completed")

    def _result(self, stage: Stage, exit_code: int, **kwargs) -> RunResult:
        return RunResult(
            stage,
            exit_code,
            backup_dir=self.backups.backup_dir,
            changes=list(self.changes),
            tools=list(self.tool_outcomes),
            **kwargs,
        )

    def _failed(
        self, error: BaseException | None, exit_code: int, rolled_back: bool = False
    ) -> RunResult:
        failed_stage = self.stage
        self.stage = Stage.FAILED
        return self._result(
            Stage.FAILED,
            exit_code,
            error=error,
            failed_stage=failed_stage,
            rolled_back=rolled_back,
        )
