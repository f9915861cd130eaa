"""
Abstract Syntax Tree (AST) for SMTL

Closed set of node types the compiler understands. The syntax adapter
(parser.py) builds these once from the host parser's tree, so nothing past
the adapter depends on tree-sitter's node kinds.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from enum import Enum


# ============================================================================
# BASE NODE
# ============================================================================

@dataclass(kw_only=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location (line, column) for error reporting
    """
    location: Optional[tuple] = None  # (line, column)

    def __repr__(self):
        return f"{self.__class__.__name__}(...)"


# ============================================================================
# SORTS & OPERATORS (Enums)
# ============================================================================

class Sort(Enum):
    """The two sorts a term can have"""
    INT = "int"
    BOOL = "bool"


class BinaryOperator(Enum):
    """Binary operators accepted inside assert()"""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    AND = "&&"
    OR = "||"
    EQ = "=="
    NEQ = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="


class UnaryOperator(Enum):
    NOT = "!"


class Method(Enum):
    """Methods callable on a boolean receiver (x.implies(y))"""
    IMPLIES = "implies"
    IFF = "iff"


ARITHMETIC_OPERATORS = frozenset({BinaryOperator.ADD, BinaryOperator.SUB, BinaryOperator.MUL})
LOGICAL_OPERATORS = frozenset({BinaryOperator.AND, BinaryOperator.OR})
EQUALITY_OPERATORS = frozenset({BinaryOperator.EQ, BinaryOperator.NEQ})
ORDERING_OPERATORS = frozenset({BinaryOperator.LT, BinaryOperator.GT, BinaryOperator.LTE, BinaryOperator.GTE})

PREDECLARED_CONSTANTS = {"true": True, "false": False}


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass
class Expression(ASTNode):
    """Base class for expressions"""
    pass


@dataclass
class BoolLiteral(Expression):
    value: bool

    def __repr__(self):
        return f"BoolLiteral({'true' if self.value else 'false'})"


@dataclass
class IntLiteral(Expression):
    """Integer literal; ``text`` is kept verbatim so bad forms fail at compile time"""
    text: str

    def __repr__(self):
        return f"IntLiteral({self.text})"


@dataclass
class Identifier(Expression):
    """Variable reference (true/false included)"""
    name: str

    def __repr__(self):
        return f"Identifier({self.name})"


@dataclass
class BinaryOp(Expression):
    """Binary operation (e.g., x + y, a && b). ``operator`` is the raw token."""
    left: Expression
    operator: str
    right: Expression

    def __repr__(self):
        return f"BinaryOp({self.left} {self.operator} {self.right})"


@dataclass
class UnaryOp(Expression):
    """Unary operation (e.g., !z)"""
    operator: str
    operand: Expression

    def __repr__(self):
        return f"UnaryOp({self.operator} {self.operand})"


@dataclass
class ParenExpr(Expression):
    """Parenthesized expression; compiles to its inner term"""
    inner: Expression

    def __repr__(self):
        return f"({self.inner})"


@dataclass
class Call(Expression):
    """Plain call (e.g., distinct(a, b, c)). ``callee`` is the callee's source text."""
    callee: str
    args: List[Expression] = field(default_factory=list)

    def __repr__(self):
        args_str = ", ".join(str(arg) for arg in self.args)
        return f"{self.callee}({args_str})"


@dataclass
class MethodCall(Expression):
    """Method-style call (e.g., (x > 0).implies(y))"""
    receiver: Expression
    method: str
    args: List[Expression] = field(default_factory=list)

    def __repr__(self):
        args_str = ", ".join(str(arg) for arg in self.args)
        return f"{self.receiver}.{self.method}({args_str})"


@dataclass
class UnsupportedExpressionNode(Expression):
    """Any host expression outside the SMTL grammar (float literal, index, ...)"""
    node_kind: str
    text: str = ""

    def __repr__(self):
        return f"Unsupported<{self.node_kind}>({self.text})"


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass
class TypeRef(ASTNode):
    """
    Declared type of a var statement.

    ``name`` is set only for plain named types (int, bool, string, ...);
    composite types (arrays, slices, maps, ...) keep just their node kind.
    """
    node_kind: str
    name: Optional[str] = None

    @property
    def is_composite(self) -> bool:
        return self.name is None

    def __repr__(self):
        return self.name or f"<{self.node_kind}>"


@dataclass
class Statement(ASTNode):
    """Base class for statements in main()'s body"""
    pass


@dataclass
class VarDeclaration(Statement):
    """
    Variable declaration sharing one type.

    Examples:
        var x int
        var a, b, c bool
    """
    names: List[str]
    type: Optional[TypeRef] = None
    has_initializer: bool = False

    def __repr__(self):
        return f"var {', '.join(self.names)} {self.type}"


@dataclass
class ExpressionStatement(Statement):
    """Bare expression statement; only assert(...) calls compile"""
    expression: Expression

    def __repr__(self):
        return f"ExpressionStatement({self.expression})"


@dataclass
class UnsupportedStatementNode(Statement):
    """Any host statement outside the SMTL grammar (assignment, if, for, ...)"""
    node_kind: str
    reason: str = ""

    def __repr__(self):
        return f"Unsupported<{self.node_kind}>"


# ============================================================================
# PROGRAM (TOP LEVEL)
# ============================================================================

@dataclass
class Program(ASTNode):
    """
    One SMTL source file after shape recognition.

    ``statements`` is the body of the parameterless ``main`` function, or an
    empty tuple when the file has none.
    """
    package: str
    statements: Tuple[Statement, ...] = ()
    filename: str = "<string>"

    def __repr__(self):
        return f"Program(package={self.package}, statements={len(self.statements)})"
