"""dot-install CLI package.

This package provides the console entry points for dot-install.
"""

from .main import main, verify_main
from .interface import cli
from .verify_cmd import verify
from .common import error, success, warn, report_failure

__all__ = [
    'main',
    'verify_main',
    'cli',
    'verify',
    'error',
    'success',
    'warn',
    'report_failure',
]
