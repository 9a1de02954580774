"""
Syntax tree node definitions for transcript programs.

Every node carries a class-level ``kind`` discriminant from the closed
NodeKind enum and a source span. Nodes are built by the parser and never
mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, List, Optional
from abc import ABC
from .tokens import SourceSpan


class NodeKind(Enum):
    """Discriminant for syntax tree nodes."""
    PROGRAM = "Program"
    VAR_DECLARATION = "VarDeclaration"
    ASSIGNMENT_EXPR = "AssignmentExpr"
    BINARY_EXPR = "BinaryExpr"
    MEMBER_EXPR = "MemberExpr"
    CALL_EXPR = "CallExpr"
    IDENTIFIER = "Identifier"
    NUMERIC_LITERAL = "NumericLiteral"
    PROPERTY = "Property"
    OBJECT_LITERAL = "ObjectLiteral"


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all syntax tree nodes."""
    kind: ClassVar[NodeKind]
    span: Optional[SourceSpan]  # Source location for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for syntax tree visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class Expression(Statement):
    """Base class for all expressions. Any expression may stand as a statement."""
    pass


# =============================================================================
# Statements
# =============================================================================

@dataclass
class Program(Statement):
    """Root of a parsed script: statements in source order."""
    kind: ClassVar[NodeKind] = NodeKind.PROGRAM
    body: List[Statement] = field(default_factory=list)


@dataclass
class VarDeclaration(Statement):
    """let/const declaration. ``value`` is None for ``let x;``."""
    kind: ClassVar[NodeKind] = NodeKind.VAR_DECLARATION
    constant: bool = False
    identifier: str = ""
    value: Optional[Expression] = None


# =============================================================================
# Expressions
# =============================================================================

@dataclass
class AssignmentExpr(Expression):
    """``assignee = value``; right-associative."""
    kind: ClassVar[NodeKind] = NodeKind.ASSIGNMENT_EXPR
    assignee: Optional[Expression] = None
    value: Optional[Expression] = None


@dataclass
class BinaryExpr(Expression):
    """Arithmetic on two operands (``+ - * / %``)."""
    kind: ClassVar[NodeKind] = NodeKind.BINARY_EXPR
    left: Optional[Expression] = None
    operator: str = ""
    right: Optional[Expression] = None


@dataclass
class MemberExpr(Expression):
    """``object.property`` or ``object[property]`` (computed)."""
    kind: ClassVar[NodeKind] = NodeKind.MEMBER_EXPR
    object: Optional[Expression] = None
    property: Optional[Expression] = None
    computed: bool = False


@dataclass
class CallExpr(Expression):
    """``caller(arguments...)``."""
    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPR
    caller: Optional[Expression] = None
    arguments: List[Expression] = field(default_factory=list)


@dataclass
class Identifier(Expression):
    """A variable reference."""
    kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER
    symbol: str = ""


@dataclass
class NumericLiteral(Expression):
    """An integer literal."""
    kind: ClassVar[NodeKind] = NodeKind.NUMERIC_LITERAL
    value: int = 0


@dataclass
class Property(Expression):
    """One ``key: value`` entry of an object literal; ``value`` is None for the ``{ key }`` shorthand."""
    kind: ClassVar[NodeKind] = NodeKind.PROPERTY
    key: str = ""
    value: Optional[Expression] = None


@dataclass
class ObjectLiteral(Expression):
    """``{ a: 1, b }``"""
    kind: ClassVar[NodeKind] = NodeKind.OBJECT_LITERAL
    properties: List[Property] = field(default_factory=list)


# =============================================================================
# Visitor Helpers
# =============================================================================

class FormatVisitor(AstVisitor):
    """Debug visitor that renders the tree as indented text."""

    def __init__(self, indent: int = 0):
        self.indent = indent
        self.lines: List[str] = []

    def _line(self, text: str) -> None:
        self.lines.append("  " * self.indent + text)

    def _child(self, node: AstNode) -> None:
        child = FormatVisitor(self.indent + 2)
        node.accept(child)
        self.lines.extend(child.lines)

    def generic_visit(self, node: AstNode) -> List[str]:
        self._line(node.kind.value)
        for name, value in node.__dict__.items():
            if name == "span":
                continue
            if isinstance(value, AstNode):
                self._line(f"  {name}:")
                self._child(value)
            elif isinstance(value, list):
                self._line(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        self._child(item)
                    else:
                        self._line(f"    {item!r}")
                self._line("  ]")
            else:
                self._line(f"  {name}: {value!r}")
        return self.lines


def format_ast(node: AstNode) -> str:
    """Render a node and its children as indented text."""
    return "\n".join(node.accept(FormatVisitor()))


def print_ast(node: AstNode) -> None:
    """Print a node for debugging."""
    print(format_ast(node))
