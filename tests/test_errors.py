# =============================================================================
# test_errors.py - Error Hierarchy Tests
# =============================================================================
# Tests for error formatting and the ErrorCollector.
# =============================================================================

import pytest

from kaleido.errors import (
    ErrorCollector,
    KaleidoCompilationError,
    KaleidoError,
    KaleidoSyntaxError,
    MalformedNumberError,
    ParseError,
    SourceLocation,
)
from kaleido.lexer import Token, TokenType


class TestSourceLocation:
    def test_str(self):
        assert str(SourceLocation("prog.kal", 3, 14)) == "prog.kal:3:14"


class TestSyntaxErrorFormatting:
    """Errors render location, source context, and hint."""

    def test_message_only(self):
        assert str(KaleidoSyntaxError("oops")) == "error: oops"

    def test_with_location(self):
        error = KaleidoSyntaxError("oops", SourceLocation("f.kal", 2, 5))
        assert str(error) == "f.kal:2:5: error: oops"

    def test_source_line_and_caret(self):
        error = KaleidoSyntaxError(
            "oops",
            SourceLocation("f.kal", 1, 3),
            hint="try again",
            source_line="a b c",
        )
        assert str(error).split("\n") == [
            "f.kal:1:3: error: oops",
            "    a b c",
            "      ^",
            "hint: try again",
        ]

    def test_hierarchy(self):
        assert issubclass(ParseError, KaleidoSyntaxError)
        assert issubclass(MalformedNumberError, KaleidoSyntaxError)
        assert issubclass(KaleidoSyntaxError, KaleidoError)
        assert issubclass(KaleidoCompilationError, KaleidoError)


class TestParseError:
    def test_carries_token(self):
        token = Token(TokenType.CHAR, ")", 4, 2, "x.kal")
        error = ParseError("failed to parse argument", token)
        assert error.token is token
        assert error.location == SourceLocation("x.kal", 4, 2)
        assert error.hint == "found unknown token type: )"

    def test_malformed_number(self):
        error = MalformedNumberError("1.2.3")
        assert error.message == "malformed number literal '1.2.3'"
        assert error.text == "1.2.3"


class TestErrorCollector:
    """Errors are collected and reported together."""

    def test_empty(self):
        collector = ErrorCollector()
        assert not collector.has_errors()
        assert collector.error_count() == 0
        collector.raise_if_errors()

    def test_report_singular(self):
        collector = ErrorCollector()
        collector.add(KaleidoSyntaxError("first"))
        assert collector.report() == "error: first\n\n1 error"

    def test_report_plural(self):
        collector = ErrorCollector()
        collector.add(KaleidoSyntaxError("first"))
        collector.add(KaleidoSyntaxError("second"))
        assert collector.report().endswith("2 errors")

    def test_raise_if_errors(self):
        collector = ErrorCollector()
        first = KaleidoSyntaxError("first")
        collector.add(first)
        with pytest.raises(KaleidoCompilationError) as exc_info:
            collector.raise_if_errors()
        assert exc_info.value.errors == [first]

    def test_clear(self):
        collector = ErrorCollector()
        collector.add(KaleidoSyntaxError("first"))
        collector.clear()
        assert collector.error_count() == 0
