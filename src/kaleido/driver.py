"""
Kaleido Top-Level Driver
========================

This module runs the top-level read loop over a source: it looks at the
token that starts each form, dispatches to the matching parser entry
point, and reports what came of it.

    Source -> Lexer -> Parser -> FormResult (reported, then discarded)

Dispatch
--------
| Current token | Action                         |
|---------------|--------------------------------|
| EOF           | stop                           |
| ';'           | skip                           |
| 'def'         | parse a definition             |
| 'extern'      | parse an extern declaration    |
| anything else | parse a top-level expression   |

Recovery
--------
When a form fails, the driver consumes exactly one more token and starts
over from there. This is coarse: a failure in the middle of a construct
can leave the loop resuming inside it, which typically produces more
errors until the input lines up with a form again. Parsing always
continues until the end of input.

Usage
-----
>>> from kaleido.driver import parse_program
>>> for result in parse_program("def f(x) x*2; f(21)"):
...     print(result.notice)
parsed definition
parsed top level expression
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, TextIO, Union
import logging
import sys

import click

from kaleido.ast import ASTPrinter, Node
from kaleido.config import FrontendOptions
from kaleido.errors import ErrorCollector, KaleidoError, KaleidoSyntaxError, ParseError
from kaleido.lexer import Lexer, TokenType
from kaleido.parser import Parser

logger = logging.getLogger(__name__)


class FormKind(Enum):
    """The three kinds of top-level form."""
    DEFINITION = "definition"
    EXTERN = "extern"
    EXPRESSION = "top level expression"


@dataclass
class FormResult:
    """
    Outcome of parsing one top-level form.

    Attributes:
        kind: Which kind of form the leading token selected
        node: The parsed tree (Function or Prototype), None on failure
        error: The error that discarded the form, None on success
    """
    kind: FormKind
    node: Optional[Node] = None
    error: Optional[KaleidoError] = None

    @property
    def ok(self) -> bool:
        return self.node is not None

    @property
    def notice(self) -> str:
        """Success notice, e.g. "parsed extern"."""
        return f"parsed {self.kind.value}"

    def diagnostic_lines(self) -> list[str]:
        """Error line plus the offending token's classification, if known."""
        if self.error is None:
            return []
        message = getattr(self.error, "message", str(self.error))
        lines = [f"Error: {message}"]
        if isinstance(self.error, ParseError):
            lines.append(self.error.token.describe())
        elif isinstance(self.error, KaleidoSyntaxError) and self.error.location:
            lines.append(f"at {self.error.location}")
        return lines


class TopLevelDriver:
    """
    Reads top-level forms until the end of input.

    Example:
        driver = TopLevelDriver(sys.stdin)
        for result in driver.forms():
            print(result.notice if result.ok else result.error)

    Attributes:
        options: Front-end configuration
        parser: The parser, whose cursor the driver steers between forms
    """

    def __init__(
        self,
        source: Union[str, TextIO],
        options: Optional[FrontendOptions] = None,
        prompt_hook: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the driver.

        Args:
            source: Source text or a text stream
            options: Front-end configuration (uses defaults if None)
            prompt_hook: Called with the prompt text before each form is
                read, when options.show_prompt is set
        """
        self.options = options or FrontendOptions()
        self.prompt_hook = prompt_hook
        lexer = Lexer(
            source,
            self.options.filename,
            strict_numbers=self.options.strict_numbers,
        )
        self.parser = Parser(lexer)

    @property
    def errors(self) -> ErrorCollector:
        return self.parser.errors

    def forms(self) -> Iterator[FormResult]:
        """
        Generate a FormResult for every top-level form in the input.

        A successful form leaves the cursor on the token after it. After
        ';' or after a failure the driver advances the cursor itself.
        """
        self._prompt()
        self.parser.next_token()

        while True:
            token = self.parser.current
            if token.type == TokenType.EOF:
                logger.debug("End of input")
                return

            if not token.is_char(";"):
                result = self._parse_form()
                yield result
                if result.ok:
                    self._prompt()
                    continue

            self._prompt()
            self.parser.next_token()

    def run(
        self,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        show_ast: bool = False,
    ) -> int:
        """
        Run the loop, writing notices and diagnostics.

        The prompt goes to `out`; success notices, error messages and
        token dumps go to `err` (standard error when None).

        Returns:
            The number of forms that failed to parse
        """
        if err is None:
            err = sys.stderr

        if self.prompt_hook is None:
            self.prompt_hook = lambda text: click.echo(text, file=out, nl=False)

        printer = ASTPrinter()
        failed = 0
        for result in self.forms():
            if result.ok:
                click.echo(result.notice, file=err)
                if show_ast:
                    click.echo(printer.print(result.node), file=out)
            else:
                failed += 1
                for line in result.diagnostic_lines():
                    click.echo(line, file=err)
        return failed

    # =========================================================================
    # Internals
    # =========================================================================

    def _prompt(self) -> None:
        if self.options.show_prompt and self.prompt_hook is not None:
            self.prompt_hook(self.options.prompt)

    def _parse_form(self) -> FormResult:
        """Dispatch on the current token and parse one form."""
        token_type = self.parser.current.type

        if token_type == TokenType.DEF:
            kind = FormKind.DEFINITION
            node = self.parser.parse_definition()
        elif token_type == TokenType.EXTERN:
            kind = FormKind.EXTERN
            node = self.parser.parse_extern()
        else:
            kind = FormKind.EXPRESSION
            node = self.parser.parse_top_level_expression()

        if node is None:
            return FormResult(kind, error=self.errors.errors[-1])
        return FormResult(kind, node=node)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_program(
    source: Union[str, TextIO],
    options: Optional[FrontendOptions] = None,
) -> list[FormResult]:
    """
    Parse every top-level form in a source.

    Failed forms are included in the result rather than raised.

    Args:
        source: Source text or a text stream
        options: Front-end configuration (prompt is never shown)

    Returns:
        One FormResult per form, in input order
    """
    options = (options or FrontendOptions()).with_overrides(show_prompt=False)
    return list(TopLevelDriver(source, options).forms())


def parse_source(source: str, filename: str = "<input>") -> list[Node]:
    """
    Parse a source in which every form must be valid.

    Args:
        source: The Kaleido source text
        filename: Source name for error messages

    Returns:
        The parsed trees (Function or Prototype), in input order

    Raises:
        KaleidoCompilationError: If any form failed, listing all errors
    """
    options = FrontendOptions(show_prompt=False, filename=filename)
    driver = TopLevelDriver(source, options)
    nodes = [result.node for result in driver.forms() if result.ok]
    driver.errors.raise_if_errors()
    return nodes
