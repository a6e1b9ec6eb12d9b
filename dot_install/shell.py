"""Default login shell switching."""

from pathlib import Path

from .constants import SYSTEM_SHELLS_FILE, TARGET_SHELL
from .environment import RunConfig
from .exceptions import CommandError
from .interactive import Prompter
from .runner import CommandRunner
from .ui import Reporter


class ShellSwitcher:
    """Offers to make zsh the user's default shell."""

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner,
        prompter: Prompter,
        reporter: Reporter,
        shells_file: Path = Path(SYSTEM_SHELLS_FILE),
    ):
        self.config = config
        self.runner = runner
        self.prompter = prompter
        self.reporter = reporter
        self.shells_file = shells_file

    def _registered(self, shell_path: str) -> bool:
        try:
            lines = self.shells_file.read_text(encoding="utf-8").splitlines()
        except OSError:
            return False
        return shell_path in (line.strip() for line in lines)

    def switch(self) -> bool:
        """Returns True if the default shell was changed."""
        if self.config.shell == TARGET_SHELL:
            self.reporter.info("Zsh is already your default shell")
            return False

        self.reporter.info(f"Current shell is {self.config.shell or 'unknown'}")

        if not self.config.interactive:
            self.reporter.info("Skipping shell change (non-interactive mode)")
            return False

        if not self.prompter.confirm("Set Zsh as your default shell?", default=False):
            return False

        zsh_path = self.config.tools.path(TARGET_SHELL)
        if zsh_path is None:
            self.reporter.error("Zsh not found in PATH")
            return False

        if not self._registered(zsh_path):
            self.reporter.info(f"Adding Zsh to {self.shells_file} (requires sudo)")
            result = self.runner.run(
                ["sudo", "tee", "-a", str(self.shells_file)], input=f"{zsh_path}\n"
            )
            if not result.ok:
                raise CommandError(result.message)

        self.reporter.info("Changing default shell to Zsh (requires sudo)")
        result = self.runner.run(["sudo", "chsh", "-s", zsh_path, self.config.user])
        if not result.ok:
            raise CommandError(result.message)

        self.reporter.success("Default shell changed to Zsh")
        self.reporter.info("You may need to restart your terminal or log out/in")
        return True
