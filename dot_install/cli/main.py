"""Console entry points for dot-install."""

from .interface import cli
from .verify_cmd import verify


def main():
    """Entry point for ``dot-install``."""
    cli()


def verify_main():
    """Entry point for ``dot-install-verify``."""
    verify()


if __name__ == "__main__":
    main()
