"""Interactive prompts for dot-install."""

import re

import questionary
from questionary import Validator, ValidationError

from . import ui
from .exceptions import InstallAborted

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class NonEmptyValidator(Validator):
    def validate(self, document):
        if not document.text.strip():
            raise ValidationError(
                message="Please enter a value",
                cursor_position=len(document.text),
            )


class EmailValidator(Validator):
    def validate(self, document):
        if not EMAIL_RE.match(document.text.strip()):
            raise ValidationError(
                message="Please enter a valid email address",
                cursor_position=len(document.text),
            )


class Prompter:
    """Asks the user questions on the terminal.

    Only used when the run is interactive; steps check
    ``RunConfig.interactive`` before calling it.
    """

    def confirm(self, question: str, default: bool = False) -> bool:
        return ui.confirm(question, default=default)

    def text(self, question: str, validator: Validator | None = None) -> str:
        answer = questionary.text(question, validate=validator or NonEmptyValidator()).ask()
        if answer is None:
            # questionary returns None on Ctrl-C
            raise InstallAborted("Prompt cancelled")
        return answer.strip()
