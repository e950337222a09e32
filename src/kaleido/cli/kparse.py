"""
kparse - Kaleido Parser Command-Line Interface
==============================================

This module implements the command-line front end for the Kaleido
parser. It reads source from a file or standard input, parses it one
top-level form at a time, and reports each result.

Usage Examples
--------------
Interactive session:
    $ kparse
    ready> def add(x y) x+y
    parsed definition

Parse a file:
    $ kparse program.kal

Dump tokens instead of parsing:
    $ echo "extern sin(x)" | kparse --tokens

Print each parsed tree:
    $ kparse --ast program.kal

Environment
-----------
KALEIDO_PROMPT, KALEIDO_SHOW_PROMPT and KALEIDO_STRICT_NUMBERS set the
defaults that the command-line flags override.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

import click

from kaleido import __version__
from kaleido.cli.errors import handle_cli_exception
from kaleido.config import FrontendOptions
from kaleido.driver import TopLevelDriver
from kaleido.lexer import Lexer, TokenType

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def dump_tokens(stream: TextIO, options: FrontendOptions, verbose: bool) -> None:
    """
    Print the classification of every token up to the end of input.

    A malformed number (strict mode) is reported in place of its
    classification.
    """
    lexer = Lexer(stream, options.filename, strict_numbers=options.strict_numbers)
    while True:
        token = lexer.next_token()
        if token.error is not None:
            click.echo(f"Error: {token.error.message}", err=True)
            continue

        line = token.describe()
        if verbose:
            line = f"{token.location}: {line}"
        click.echo(line)

        if token.type == TokenType.EOF:
            return


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print each token's classification instead of parsing",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the tree of each parsed form",
)
@click.option(
    "--strict-numbers/--lenient-numbers",
    default=None,
    help="Reject malformed numbers such as 1.2.3 (default: read the valid prefix)",
)
@click.option(
    "--prompt/--no-prompt",
    "show_prompt",
    default=None,
    help="Show the 'ready>' prompt (default: on for standard input, off for files)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging, token locations, error summary)",
)
@click.version_option(version=__version__, prog_name="kparse")
def main(
    input_file: Optional[Path],
    tokens: bool,
    ast: bool,
    strict_numbers: Optional[bool],
    show_prompt: Optional[bool],
    verbose: bool,
) -> None:
    """
    Parse Kaleido source and report each top-level form.

    INPUT_FILE is the source to read; standard input is read when it is
    omitted. Reading stops at the end of input. Forms that fail to parse
    are reported and skipped; they do not change the exit status.

    \b
    Top-level forms:
        def name(params) body     function definition
        extern name(params)       external declaration
        expression                anonymous function wrapping it
    """
    setup_logging(verbose)

    try:
        try:
            options = FrontendOptions.from_env()
        except ValueError as e:
            raise click.BadParameter(str(e)) from e

        if input_file is not None:
            options = options.with_overrides(
                filename=str(input_file),
                show_prompt=bool(show_prompt),
                strict_numbers=strict_numbers,
            )
        else:
            options = options.with_overrides(
                show_prompt=show_prompt,
                strict_numbers=strict_numbers,
            )

        if input_file is not None:
            # Undecodable bytes reach the lexer as U+FFFD character tokens
            with input_file.open(encoding="utf-8", errors="replace") as stream:
                _process(stream, options, tokens, ast, verbose)
        else:
            _process(sys.stdin, options, tokens, ast, verbose)

    except Exception as e:
        handle_cli_exception(e, verbose)


def _process(
    stream: TextIO,
    options: FrontendOptions,
    tokens: bool,
    ast: bool,
    verbose: bool,
) -> None:
    if tokens:
        dump_tokens(stream, options, verbose)
        return

    logger.debug(f"Reading {options.filename}")
    driver = TopLevelDriver(stream, options)
    failed = driver.run(show_ast=ast)

    if options.show_prompt:
        click.echo()

    if verbose and driver.errors.has_errors():
        click.echo(driver.errors.report(), err=True)
    logger.debug(f"Finished {options.filename}: {failed} form(s) failed")


if __name__ == "__main__":
    main()
