"""Blocking external command execution with explicit results."""

import subprocess
from dataclasses import dataclass
from typing import Sequence


@dataclass
class CommandResult:
    """Outcome of one external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def message(self) -> str:
        """Short human-readable failure description."""
        if self.ok:
            return ""
        detail = (self.stderr or self.stdout).strip().splitlines()
        tail = detail[-1] if detail else "no output"
        return f"'{' '.join(self.args)}' exited with {self.returncode}: {tail}"


class CommandRunner:
    """Runs commands to completion. No timeout, never raises on failure."""

    def run(
        self,
        args: Sequence[str],
        input: str | None = None,
        capture: bool = True,
    ) -> CommandResult:
        args = [str(a) for a in args]
        try:
            proc = subprocess.run(
                args,
                input=input,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as e:
            return CommandResult(args, 127, "", str(e))
        except OSError as e:
            return CommandResult(args, 126, "", str(e))

        return CommandResult(args, proc.returncode, proc.stdout or "", proc.stderr or "")

    def shell(self, command: str, capture: bool = False) -> CommandResult:
        """Run a shell pipeline such as ``curl ... | bash``."""
        return self.run(["sh", "-c", command], capture=capture)
