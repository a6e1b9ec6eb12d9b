"""Shell framework and optional tool installation."""

from dataclasses import dataclass
from pathlib import Path

from .constants import SHELL_FRAMEWORK_INSTALLER
from .environment import RunConfig
from .exceptions import CommandError
from .interactive import Prompter
from .runner import CommandRunner
from .ui import Reporter


@dataclass(frozen=True)
class OptionalTool:
    """A version manager the user may opt into."""

    command: str
    description: str
    install: str


@dataclass
class ToolOutcome:
    tool: OptionalTool
    status: str  # installed, present, skipped, declined, failed
    message: str = ""


class ShellFrameworkInstaller:
    """Installs Oh My Zsh and its custom plugins when missing."""

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner,
        reporter: Reporter,
        plugins: list[tuple[str, str]],
        installer_url: str = SHELL_FRAMEWORK_INSTALLER,
    ):
        self.config = config
        self.runner = runner
        self.reporter = reporter
        self.plugins = plugins
        self.installer_url = installer_url

    @property
    def plugins_dir(self) -> Path:
        return self.config.framework_dir / "custom" / "plugins"

    def install(self) -> None:
        self.install_framework()
        self.install_plugins()

    def install_framework(self) -> None:
        framework_dir = self.config.framework_dir
        if framework_dir.is_dir():
            self.reporter.info("Oh My Zsh already installed")
            return

        self.reporter.info("Installing Oh My Zsh...")
        result = self.runner.shell(
            f'sh -c "$(curl -fsSL {self.installer_url})" "" --unattended'
        )
        if not result.ok or not framework_dir.is_dir():
            self.reporter.error("Failed to install Oh My Zsh")
            raise CommandError(result.message or f"{framework_dir} missing after install")
        self.reporter.success("Oh My Zsh installed successfully")

    def install_plugins(self) -> None:
        self.reporter.info("Installing additional Zsh plugins...")
        for name, url in self.plugins:
            dest = self.plugins_dir / name
            if dest.is_dir():
                self.reporter.debug(f"{name} already present")
                continue

            self.reporter.info(f"Installing {name}...")
            result = self.runner.run(["git", "clone", url, str(dest)])
            if not result.ok:
                raise CommandError(f"Failed to clone {name}: {result.message}")
        self.reporter.success("Zsh plugins installed")


class OptionalToolInstaller:
    """Best-effort installs; a failure is a warning, never fatal."""

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner,
        prompter: Prompter,
        reporter: Reporter,
    ):
        self.config = config
        self.runner = runner
        self.prompter = prompter
        self.reporter = reporter

    def install_all(self, tools: list[OptionalTool]) -> list[ToolOutcome]:
        self.reporter.info("Checking development tools...")
        return [self.install_one(tool) for tool in tools]

    def install_one(self, tool: OptionalTool) -> ToolOutcome:
        if self.config.tools.resolve(tool.command):
            self.reporter.info(f"{tool.description} already installed")
            return ToolOutcome(tool, "present")

        if not self.config.interactive:
            self.reporter.info(f"Skipping {tool.description} installation (non-interactive mode)")
            return ToolOutcome(tool, "skipped")

        if not self.prompter.confirm(f"Install {tool.description}?", default=False):
            self.reporter.info(f"Skipped {tool.description}")
            return ToolOutcome(tool, "declined")

        self.reporter.info(f"Installing {tool.description}...")
        result = self.runner.shell(tool.install)
        self.config.tools.forget(tool.command)
        if not result.ok:
            self.reporter.warn(f"{tool.description} installation failed: {result.message}")
            return ToolOutcome(tool, "failed", result.message)

        self.reporter.success(f"{tool.description} installed")
        return ToolOutcome(tool, "installed")
