"""
Kaleido Lexer (Tokenizer)
=========================

This module implements the lexer for the Kaleido toy language. It pulls
characters one at a time from a text stream and classifies them into
tokens on demand for the parser.

Token Categories
----------------
- Keywords: def, extern (case-sensitive)
- Identifiers: a letter followed by letters and digits
- Numbers: digits and '.' characters, converted to float
- Characters: any other character is its own token, verbatim
  (operators, parentheses, commas, semicolons, unknown symbols)

The lexer never rejects a character: anything it does not recognise is
handed to the parser as a single-character token. Comments are not
recognised; '#' is just another character.

Number Conversion
-----------------
Numeric text is scanned greedily over digits and '.', so "1.2.3" is one
token. By default the longest numeric prefix is converted, the way C's
strtod reads it:

| Text    | Value |
|---------|-------|
| 42      | 42.0  |
| .5      | 0.5   |
| 1.2.3   | 1.2   |
| .       | 0.0   |

With strict_numbers=True a malformed literal still becomes a NUMBER token,
but the token carries a MalformedNumberError that the parser raises when
it reads the number as an operand.

Example Usage
-------------
>>> from kaleido.lexer import Lexer
>>> lexer = Lexer("def f(x) x+1")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 'def', 1:1)
Token(IDENTIFIER, 'f', 1:5)
Token(CHAR, '(', 1:6)
Token(IDENTIFIER, 'x', 1:7)
Token(CHAR, ')', 1:8)
Token(IDENTIFIER, 'x', 1:10)
Token(CHAR, '+', 1:11)
Token(NUMBER, 1.0, 1:12)
Token(EOF, 1:13)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, Optional, TextIO, Union
import io
import logging
import re
import string

from kaleido.errors import MalformedNumberError, SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token classes produced by the Kaleido lexer."""

    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Variable/function names
    NUMBER = auto()         # Floating-point literals
    CHAR = auto()           # Any other single character


KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}

# Numeric prefix accepted by the lenient conversion
_NUMBER_PREFIX = re.compile(r"\d*(?:\.\d*)?")

# Complete numeric literal accepted by strict mode
_NUMBER_STRICT = re.compile(r"(?:\d+\.?\d*|\.\d+)")


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from Kaleido source.

    Attributes:
        type: The TokenType classification
        value: Matched text for keywords and identifiers, float for
            numbers, the character itself for CHAR, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source
        error: For a malformed number in strict mode, the error to raise
            when the number is used
    """
    type: TokenType
    value: str | float | None
    line: int
    column: int
    filename: str
    error: Optional[MalformedNumberError] = field(default=None, compare=False, repr=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, float):
                return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_char(self, char: str) -> bool:
        """Return True if this is the single-character token `char`."""
        return self.type == TokenType.CHAR and self.value == char

    def describe(self) -> str:
        """
        Describe the token's classification for diagnostics.

        Produces lines such as "token type: ident. foo" or
        "unknown token type: )".
        """
        if self.type == TokenType.DEF:
            return "token type: def"
        if self.type == TokenType.EXTERN:
            return "token type: extern"
        if self.type == TokenType.IDENTIFIER:
            return f"token type: ident. {self.value}"
        if self.type == TokenType.NUMBER:
            return f"token type: number. {self.value:g}"
        if self.type == TokenType.EOF:
            return "token type: eof"
        return f"unknown token type: {self.value}"


# =============================================================================
# Number Conversion
# =============================================================================

def convert_number(text: str) -> float:
    """
    Convert numeric text leniently, reading its longest valid prefix.

    Text with no convertible prefix (such as ".") yields 0.0.
    """
    prefix = _NUMBER_PREFIX.match(text).group(0)
    if not prefix or prefix == ".":
        return 0.0
    return float(prefix)


def is_well_formed_number(text: str) -> bool:
    """Return True if text is digits with at most one '.'."""
    return _NUMBER_STRICT.fullmatch(text) is not None


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Kaleido source, one token per next_token() call.

    The lexer is forward-only: it holds the last character read but not
    yet consumed, and reads further characters from the stream only as
    tokens are requested. Once the stream is exhausted every call returns
    an EOF token.

    Usage:
        lexer = Lexer(sys.stdin, "<stdin>")
        token = lexer.next_token()

    Attributes:
        filename: Name of the source (for error reporting)
        strict_numbers: Reject malformed numeric literals
    """

    IDENT_START = string.ascii_letters
    IDENT_CHARS = string.ascii_letters + string.digits
    NUMBER_CHARS = string.digits + "."
    WHITESPACE = " \t\n\r\v\f"

    def __init__(
        self,
        source: Union[str, TextIO],
        filename: str = "<input>",
        strict_numbers: bool = False,
    ):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a text stream read one character at a time
            filename: Name of the source (for error messages)
            strict_numbers: Raise MalformedNumberError for bad numeric text
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self._stream = source
        self.filename = filename
        self.strict_numbers = strict_numbers

        # A virtual space before the first character, so the first call
        # starts by skipping whitespace and reading real input.
        self._char = " "
        self._line = 1
        self._column = 0

        # Text of the current line consumed so far, for error context
        self._line_text: list[str] = []

    # =========================================================================
    # Character Access
    # =========================================================================

    def _at_end(self) -> bool:
        return self._char == ""

    def _advance(self) -> str:
        """
        Consume the current character and read the next one.

        Returns the consumed character.
        """
        char = self._char
        if char == "":
            return char

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_text = []
        else:
            if self._column:
                self._line_text.append(char)
            self._column += 1

        self._char = self._stream.read(1)
        return char

    def _current_line(self) -> str:
        """Text of the current line read so far."""
        return "".join(self._line_text)

    def _make_token(
        self,
        token_type: TokenType,
        value: str | float | None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        error: Optional[MalformedNumberError] = None,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=line or self._line,
            column=column or max(self._column, 1),
            filename=self.filename,
            error=error,
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Never raises for bad input: a malformed number in strict mode is
        returned with its error attached.
        """
        while self._char in self.WHITESPACE and not self._at_end():
            self._advance()

        line = self._line
        column = max(self._column, 1)
        char = self._char

        if char and char in self.IDENT_START:
            token = self._scan_identifier(line, column)
        elif char and char in self.NUMBER_CHARS:
            token = self._scan_number(line, column)
        elif self._at_end():
            token = self._make_token(TokenType.EOF, None, line, column)
        else:
            self._advance()
            token = self._make_token(TokenType.CHAR, char, line, column)

        logger.debug(f"Lexed {token!r}")
        return token

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens until the end of input.

        Yields:
            Token objects, ending with exactly one EOF token
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def _scan_identifier(self, line: int, column: int) -> Token:
        """Scan an identifier, distinguishing the keywords."""
        chars = []
        while self._char and self._char in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        token_type = KEYWORDS.get(name, TokenType.IDENTIFIER)
        return self._make_token(token_type, name, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        """Scan a run of digits and '.' characters as a number."""
        chars = []
        while self._char and self._char in self.NUMBER_CHARS:
            chars.append(self._advance())

        text = "".join(chars)
        value = convert_number(text)
        error = None

        if not is_well_formed_number(text):
            logger.debug(f"Numeric text {text!r} read as {value}")
            if self.strict_numbers:
                error = MalformedNumberError(
                    text,
                    SourceLocation(self.filename, line, column),
                    self._current_line(),
                )

        return self._make_token(TokenType.NUMBER, value, line, column, error)
