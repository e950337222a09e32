"""
Kaleido Recursive Descent Parser
================================

This module implements the recursive descent parser for the Kaleido toy
language. It pulls tokens from the lexer one at a time and builds AST
nodes for each top-level form.

Grammar (EBNF)
--------------
definition      ::= 'def' prototype expression
extern          ::= 'extern' prototype
toplevel_expr   ::= expression

prototype       ::= IDENTIFIER '(' (param ((',')? param)*)? ')'
param           ::= IDENTIFIER

expression      ::= primary (binop primary)*
binop           ::= '+' | '-' | '*'
primary         ::= identifier_expr | NUMBER
identifier_expr ::= IDENTIFIER
                  | IDENTIFIER '(' (expression (',' expression)*)? ')'

Operators
---------
There is no precedence: every operator binds the same, and chains fold
left to right. The right operand of each operator is a single primary.

    1+2*3   parses as   (1+2)*3

Error Handling
--------------
Grammar rules raise ParseError on the first token they cannot accept.
The public parse_* entry points catch it, record it in the parser's
ErrorCollector, and return None. A form is either parsed completely or
discarded; no partial tree is ever returned.

Example Usage
-------------
>>> from kaleido.lexer import Lexer
>>> from kaleido.parser import Parser
>>> parser = Parser(Lexer("def add(x y) x+y"))
>>> _ = parser.next_token()
>>> parser.parse_definition()
Function(prototype=Prototype(name='add', params=('x', 'y')), body=...)
"""

from typing import Callable, Optional, TypeVar
import logging

from kaleido.ast import (
    BinaryOp,
    Call,
    Expr,
    Function,
    NumberLiteral,
    Prototype,
    Variable,
    anonymous_function,
)
from kaleido.errors import ErrorCollector, KaleidoSyntaxError, ParseError
from kaleido.lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

# Characters accepted as binary operators
BINARY_OPERATORS = frozenset("+-*")

T = TypeVar("T")


class Parser:
    """
    Recursive descent parser for Kaleido.

    The parser and the lexer share one cursor: `current` is the token
    under consideration, and next_token() replaces it with the lexer's
    next token. There is no lookahead beyond that one token.

    Attributes:
        lexer: The token source
        current: The current token (None until the cursor is primed, either
            by next_token() or by the first parse_* call)
        errors: Errors recorded by failed parse_* calls
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current: Optional[Token] = None
        self.errors = ErrorCollector()

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def next_token(self) -> Token:
        """Advance the cursor and return the new current token."""
        self.current = self.lexer.next_token()
        return self.current

    def _check_char(self, char: str) -> bool:
        return self.current.is_char(char)

    def _is_binary_operator(self) -> bool:
        return (
            self.current.type == TokenType.CHAR
            and self.current.value in BINARY_OPERATORS
        )

    # =========================================================================
    # Public Entry Points
    # =========================================================================

    def parse_primary(self) -> Optional[Expr]:
        """Parse an identifier, call, or number; None on failure."""
        return self._attempt(self._parse_primary)

    def parse_expression(self) -> Optional[Expr]:
        """Parse a primary and any operator chain after it; None on failure."""
        return self._attempt(self._parse_expression)

    def parse_prototype(self) -> Optional[Prototype]:
        """Parse a function name and parameter list; None on failure."""
        return self._attempt(self._parse_prototype)

    def parse_definition(self) -> Optional[Function]:
        """Parse 'def' prototype body; None on failure."""
        return self._attempt(self._parse_definition)

    def parse_extern(self) -> Optional[Prototype]:
        """Parse 'extern' prototype; None on failure."""
        return self._attempt(self._parse_extern)

    def parse_top_level_expression(self) -> Optional[Function]:
        """Parse a bare expression wrapped as an anonymous function; None on failure."""
        return self._attempt(self._parse_top_level_expression)

    def _attempt(self, rule: Callable[[], T]) -> Optional[T]:
        """
        Run a grammar rule, turning a syntax error into None.

        Primes the cursor if next_token() has not been called yet.
        Nesting deeper than the interpreter stack allows is reported as
        a syntax error at the token reached.
        """
        if self.current is None:
            self.next_token()

        try:
            return rule()
        except RecursionError:
            error = ParseError("expression nested too deeply", self.current)
        except KaleidoSyntaxError as e:
            error = e

        self.errors.add(error)
        logger.info(f"Discarding form: {error.message}")
        return None

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expr:
        lhs = self._parse_primary()
        return self._parse_binary_rhs(lhs)

    def _parse_binary_rhs(self, lhs: Expr) -> Expr:
        """
        Fold operator/primary pairs onto lhs, left to right.

        Stops at the first token that is not a binary operator.
        """
        while self._is_binary_operator():
            op_token = self.current
            self.next_token()  # eat the operator

            try:
                rhs = self._parse_primary()
            except ParseError as e:
                raise ParseError(
                    "could not parse right hand side of binary expression",
                    e.token,
                ) from e

            lhs = BinaryOp(op_token.value, lhs, rhs, location=op_token.location)

        return lhs

    def _parse_primary(self) -> Expr:
        token = self.current

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_or_call()

        if token.type == TokenType.NUMBER:
            return self._parse_number()

        raise ParseError("unknown token when expecting an expression", token)

    def _parse_number(self) -> NumberLiteral:
        token = self.current
        if token.error is not None:
            raise token.error
        self.next_token()  # eat the number
        return NumberLiteral(token.value, location=token.location)

    def _parse_identifier_or_call(self) -> Expr:
        """
        Parse a variable reference, or a call if '(' follows the name.

        Arguments are full expressions separated by ','. After each
        argument the next token must be ')' or ','.
        """
        name_token = self.current
        self.next_token()  # eat the name

        if not self._check_char("("):
            return Variable(name_token.value, location=name_token.location)

        self.next_token()  # eat '('
        args = []

        if not self._check_char(")"):
            while True:
                try:
                    args.append(self._parse_expression())
                except ParseError as e:
                    raise ParseError("failed to parse argument", e.token) from e

                if self._check_char(")"):
                    break
                if not self._check_char(","):
                    raise ParseError("expected ',' or ')' in argument list", self.current)

                self.next_token()  # eat ','

        self.next_token()  # eat ')'
        return Call(name_token.value, tuple(args), location=name_token.location)

    # =========================================================================
    # Prototypes and Top-Level Forms
    # =========================================================================

    def _parse_prototype(self) -> Prototype:
        """
        Parse name '(' params ')'.

        Parameters may be separated by ',' or by whitespace alone; a
        trailing ',' is an error.
        """
        name_token = self.current
        if name_token.type != TokenType.IDENTIFIER:
            raise ParseError("expected function name in prototype", name_token)
        self.next_token()  # eat the name

        if not self._check_char("("):
            raise ParseError("expected '(' in prototype", self.current)
        self.next_token()  # eat '('

        params = []
        if not self._check_char(")"):
            while True:
                params.append(self._parse_parameter())

                if self._check_char(")"):
                    break
                if self._check_char(","):
                    self.next_token()  # eat ','
                elif self.current.type != TokenType.IDENTIFIER:
                    raise ParseError("expected ',' or ')' in parameter list", self.current)

        self.next_token()  # eat ')'
        return Prototype(name_token.value, tuple(params), location=name_token.location)

    def _parse_parameter(self) -> str:
        """
        Parse one parameter name.

        The parameter goes through the same path as an identifier
        expression and must come out as a bare Variable.
        """
        token = self.current
        if token.type != TokenType.IDENTIFIER:
            raise ParseError("expected identifier in parameter list", token)

        node = self._parse_identifier_or_call()
        if not isinstance(node, Variable):
            raise ParseError(f"parameter '{token.value}' must be a bare name", token)
        return node.name

    def _parse_definition(self) -> Function:
        def_token = self.current
        self.next_token()  # eat 'def'
        prototype = self._parse_prototype()

        try:
            body = self._parse_expression()
        except ParseError as e:
            raise ParseError("expected function body", e.token) from e

        logger.debug(f"Parsed definition of '{prototype.name}'")
        return Function(prototype, body, location=def_token.location)

    def _parse_extern(self) -> Prototype:
        self.next_token()  # eat 'extern'
        prototype = self._parse_prototype()
        logger.debug(f"Parsed extern '{prototype.name}'")
        return prototype

    def _parse_top_level_expression(self) -> Function:
        body = self._parse_expression()
        logger.debug("Parsed top-level expression")
        return anonymous_function(body)
