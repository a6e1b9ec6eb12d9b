"""dot-install: idempotent bootstrap for a shell configuration bundle."""

__version__ = "1.0.0"
