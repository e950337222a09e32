"""
Kaleido - Front End for a Toy Expression Language
=================================================

This package reads programs in Kaleido, a small expression-oriented toy
language, and builds an abstract syntax tree for each top-level form.

Main Components
---------------
- **lexer**: turns a character stream into classified tokens
- **parser**: recursive descent over the token stream, building the AST
- **ast**: the node types, plus a visitor and a tree printer
- **driver**: the top-level read loop and its per-form results
- **cli**: the `kparse` command

Language
--------
    def add(x y) x+y        # function definition
    extern sin(x)           # external declaration
    add(1, 2) * 3           # bare expression, wrapped as __anon_expr()

Operators are '+', '-' and '*'. They have no precedence: chains fold
left to right, so "1+2*3" means "(1+2)*3".

Quick Start
-----------
>>> from kaleido import parse_program
>>> [r.notice for r in parse_program("extern sin(x); sin(1)")]
['parsed extern', 'parsed top level expression']

Or use the command-line tool:
    $ kparse program.kal
"""

__version__ = "1.0.0"
__author__ = "Kaleido Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from kaleido.errors import (
    KaleidoError,
    KaleidoSyntaxError,
    ParseError,
    MalformedNumberError,
    KaleidoCompilationError,
    ErrorCollector,
    SourceLocation,
)
from kaleido.lexer import Lexer, Token, TokenType
from kaleido.ast import (
    ANON_EXPR_NAME,
    Node,
    Expression,
    Expr,
    NumberLiteral,
    Variable,
    BinaryOp,
    Call,
    Prototype,
    Function,
    ASTVisitor,
    ASTPrinter,
)
from kaleido.parser import Parser, BINARY_OPERATORS
from kaleido.config import FrontendOptions
from kaleido.driver import (
    TopLevelDriver,
    FormKind,
    FormResult,
    parse_program,
    parse_source,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Errors
    "KaleidoError",
    "KaleidoSyntaxError",
    "ParseError",
    "MalformedNumberError",
    "KaleidoCompilationError",
    "ErrorCollector",
    "SourceLocation",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    # AST
    "ANON_EXPR_NAME",
    "Node",
    "Expression",
    "Expr",
    "NumberLiteral",
    "Variable",
    "BinaryOp",
    "Call",
    "Prototype",
    "Function",
    "ASTVisitor",
    "ASTPrinter",
    # Parser
    "Parser",
    "BINARY_OPERATORS",
    # Configuration
    "FrontendOptions",
    # Driver
    "TopLevelDriver",
    "FormKind",
    "FormResult",
    "parse_program",
    "parse_source",
]
