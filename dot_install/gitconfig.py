"""Global git configuration for dot-install."""

from pathlib import Path

from git import GitConfigParser

from .constants import GITCONFIG_FILE_NAME
from .environment import RunConfig
from .interactive import EmailValidator, NonEmptyValidator, Prompter
from .ui import Reporter


def split_key(key: str) -> tuple[str, str]:
    """'init.defaultBranch' -> ('init', 'defaultBranch')."""
    section, _, option = key.partition(".")
    return section, option


class GitConfigurator:
    """Applies default settings to the user's global git configuration."""

    def __init__(
        self,
        config: RunConfig,
        prompter: Prompter,
        reporter: Reporter,
        path: Path | None = None,
    ):
        self.config = config
        self.prompter = prompter
        self.reporter = reporter
        self.path = path or config.home / GITCONFIG_FILE_NAME

    def _expand(self, value: str) -> str:
        if value.startswith("~/"):
            return str(self.config.home / value[2:])
        return value

    def configure(self, settings: dict[str, str]) -> dict[str, str]:
        """
        Write ``settings`` and, when interactive, the missing user identity.

        Returns:
            The key/value pairs that were written.
        """
        self.reporter.info("Configuring Git...")
        if not self.path.exists():
            self.path.touch()

        written: dict[str, str] = {}
        with GitConfigParser(str(self.path), read_only=False) as parser:
            parser.read()
            for key, value in settings.items():
                section, option = split_key(key)
                value = self._expand(value)
                parser.set_value(section, option, value)
                written[key] = value
                self.reporter.debug(f"git config {key} {value}")
            if "core.excludesfile" in settings:
                self.reporter.info("Global gitignore configured")

            for option, question, validator in (
                ("name", "Enter your Git name:", NonEmptyValidator()),
                ("email", "Enter your Git email:", EmailValidator()),
            ):
                if parser.has_option("user", option):
                    continue
                if not self.config.interactive:
                    self.reporter.info(
                        f"Skipping Git user.{option} configuration (non-interactive mode)"
                    )
                    continue
                answer = self.prompter.text(question, validator)
                parser.set_value("user", option, answer)
                written[f"user.{option}"] = answer

        self.reporter.success("Git configured")
        return written
