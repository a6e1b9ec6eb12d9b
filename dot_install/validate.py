"""Post-install validation."""

from dataclasses import dataclass, field

from .environment import RunConfig
from .links import ManagedLink
from .secrets import file_mode, has_secure_permissions
from .ui import Reporter


@dataclass
class ValidationReport:
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Validator:
    """Re-checks what the run was supposed to achieve. Never mutates anything."""

    def __init__(self, config: RunConfig, reporter: Reporter):
        self.config = config
        self.reporter = reporter

    def _fail(self, report: ValidationReport, message: str) -> None:
        report.errors.append(message)
        self.reporter.error(message)

    def validate(self, links: list[ManagedLink]) -> ValidationReport:
        self.reporter.info("Validating installation...")
        report = ValidationReport()

        for link in links:
            source, target = link.resolve(self.config.dotfiles_dir, self.config.home)
            if not link.required and not source.exists():
                continue
            if not target.is_symlink():
                self._fail(report, f"Symlink not found: {target}")

        secrets_file = self.config.secrets_file
        if secrets_file.exists() and not has_secure_permissions(secrets_file):
            self._fail(
                report,
                f"Incorrect permissions on {secrets_file.name} file ({file_mode(secrets_file):o})",
            )

        if not self.config.framework_dir.is_dir():
            self._fail(report, "Oh My Zsh not installed")

        if report.ok:
            self.reporter.success("Installation validation passed")
        else:
            self.reporter.error(f"Installation validation failed with {len(report.errors)} errors")
        return report
