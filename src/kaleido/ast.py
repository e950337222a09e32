"""
Kaleido Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types built by the Kaleido parser.

Node Hierarchy
--------------
Node (base)
├── Expression
│   ├── NumberLiteral - floating-point constant
│   ├── Variable - variable reference
│   ├── BinaryOp - binary operator applied to two operands
│   └── Call - function call
├── Prototype - function name and parameter names
└── Function - prototype plus body expression

Design Notes
------------
- The node set is closed; consumers match on it exhaustively
- Nodes are frozen dataclasses, sequences are tuples, so a tree
  cannot be modified after construction
- Every child is owned by exactly one parent (trees only, no sharing)
- Each node may carry its source location; locations are excluded from
  equality so trees compare by structure alone
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union

from kaleido.errors import SourceLocation

# Name of the synthetic function wrapping a bare top-level expression
ANON_EXPR_NAME = "__anon_expr"


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""


@dataclass(frozen=True)
class Expression(Node):
    """Base class for nodes that produce a value."""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Numeric constant.

    Attributes:
        value: The floating-point value
    """
    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Variable(Expression):
    """
    Reference to a named value.

    The name is not checked against any definition.

    Attributes:
        name: The variable name
    """
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BinaryOp(Expression):
    """
    Binary operation (lhs op rhs).

    Attributes:
        op: The operator character ('+', '-' or '*')
        lhs: Left operand
        rhs: Right operand
    """
    op: str
    lhs: "Expr"
    rhs: "Expr"
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Call(Expression):
    """
    Function call expression.

    Attributes:
        callee: Name of the function to call
        args: Argument expressions, in order
    """
    callee: str
    args: tuple["Expr", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


Expr = Union[NumberLiteral, Variable, BinaryOp, Call]


# =============================================================================
# Function Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype(Node):
    """
    Function signature shared by definitions and extern declarations.

    Attributes:
        name: Function name
        params: Parameter names, in order
    """
    name: str
    params: tuple[str, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @property
    def is_anonymous(self) -> bool:
        """True for the wrapper around a bare top-level expression."""
        return self.name == ANON_EXPR_NAME


@dataclass(frozen=True)
class Function(Node):
    """
    Function definition.

    Attributes:
        prototype: The function signature
        body: The body expression
    """
    prototype: Prototype
    body: "Expr"
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


def anonymous_function(body: Expr) -> Function:
    """Wrap a bare expression as a zero-parameter anonymous function."""
    return Function(
        prototype=Prototype(ANON_EXPR_NAME, (), location=body.location),
        body=body,
        location=body.location,
    )


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about; everything else falls through to generic_visit, which walks
    the node's children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_Call(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: Node) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """Visit all child nodes in field order."""
        for node_field in fields(node):
            value = getattr(node, node_field.name)
            if isinstance(value, Node):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Node):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Tree dump of an AST for debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function))

    Output for "def add(x y) x+y":
        Function add(x, y)
          BinaryOp '+'
            Variable x
            Variable y
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Node) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _children(self, *nodes: Node) -> None:
        self.indent_level += 1
        for child in nodes:
            self.visit(child)
        self.indent_level -= 1

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"Number {node.value:g}")

    def visit_Variable(self, node: Variable):
        self._emit(f"Variable {node.name}")

    def visit_BinaryOp(self, node: BinaryOp):
        self._emit(f"BinaryOp {node.op!r}")
        self._children(node.lhs, node.rhs)

    def visit_Call(self, node: Call):
        self._emit(f"Call {node.callee}")
        self._children(*node.args)

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Prototype {node.name}({', '.join(node.params)})")

    def visit_Function(self, node: Function):
        proto = node.prototype
        self._emit(f"Function {proto.name}({', '.join(proto.params)})")
        self._children(node.body)
