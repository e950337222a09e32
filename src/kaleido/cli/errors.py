"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes for the command-line
tools.

Forms that fail to parse are not CLI errors: they are reported by the
read loop and the command still exits with SUCCESS.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    INVALID_ARGS = 2     # Invalid arguments, configuration, or unreadable input
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, (
        click.BadParameter,
        FileNotFoundError,
        PermissionError,
        UnicodeDecodeError,
    )):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
