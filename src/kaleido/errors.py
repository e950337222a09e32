"""
Kaleido Error Hierarchy
=======================

This module defines the exception hierarchy for the Kaleido front end.
All exceptions inherit from KaleidoError, allowing callers to catch all
front-end errors with a single except clause if desired.

Exception Hierarchy
-------------------
KaleidoError (base)
├── KaleidoSyntaxError - lexer and parser errors
│   ├── ParseError - grammar rule found the wrong token
│   └── MalformedNumberError - bad numeric literal (strict mode only)
└── KaleidoCompilationError - aggregate report of collected errors

Error Message Format
--------------------
Errors that know their source location format like this:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing

Example:
    <stdin>:1:7: error: expected ',' or ')' in argument list
    hint: found token type: eof
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from kaleido.lexer import Token


# =============================================================================
# Base Exception Class
# =============================================================================

class KaleidoError(Exception):
    """
    Base exception for all Kaleido front-end errors.

        try:
            forms = parse_program(source)
        except KaleidoError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source (or "<stdin>" for piped input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class KaleidoSyntaxError(KaleidoError):
    """
    Syntax error in Kaleido source.

    Provides location tracking, source line context, and an optional hint.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, source context, and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class ParseError(KaleidoSyntaxError):
    """
    A grammar rule met a token it cannot accept.

    The offending token is kept so the driver can dump its classification
    next to the message.
    """

    def __init__(self, message: str, token: "Token"):
        self.token = token
        super().__init__(
            message,
            location=token.location,
            hint=f"found {token.describe()}",
        )


class MalformedNumberError(KaleidoSyntaxError):
    """
    Numeric literal that is not a valid number.

    Only raised when the lexer runs with strict_numbers enabled; the
    default lexer converts the longest valid prefix instead.

    Example:
        1.2.3    // two decimal points
    """

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"malformed number literal '{text}'",
            location=location,
            hint="a number is digits with at most one '.'",
            source_line=source_line,
        )


class KaleidoCompilationError(KaleidoError):
    """
    Aggregate error containing every error collected during a run.

    The message is already a formatted report from ErrorCollector.
    """

    def __init__(self, report: str, errors: Optional[List[KaleidoError]] = None):
        self.errors = errors or []
        super().__init__(report)


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects errors for batch reporting.

    The parser records every failed top-level form here so a whole input
    can be processed before the errors are summarised.

    Example:
        collector = ErrorCollector()
        try:
            parse_form()
        except KaleidoSyntaxError as e:
            collector.add(e)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[KaleidoError] = []

    def add(self, error: KaleidoError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def error_count(self) -> int:
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, followed by a summary line."""
        lines = []
        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")
        return "\n".join(lines)

    def clear(self) -> None:
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise a KaleidoCompilationError if any errors were collected."""
        if self.has_errors():
            raise KaleidoCompilationError(self.report(), list(self.errors))
