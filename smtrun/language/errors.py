"""
SMTL Errors

Every failure the toolchain can report, grouped under one root so callers
can catch ``SMTLError`` and still switch on ``kind``.

Hierarchy:
    SMTLError
    ├── CompilationError          (CLI exit code 2)
    │   ├── ParseError
    │   ├── UnsupportedModule
    │   ├── DuplicateDeclaration
    │   ├── UnsupportedType
    │   ├── UnknownVariable
    │   ├── UnsupportedStatement / UnsupportedAssertion / UnsupportedExpression
    │   ├── UnsupportedOperator / UnsupportedCall / UnsupportedMethod
    │   ├── ArityError
    │   ├── MalformedLiteral
    │   ├── TypeMismatch
    │   └── AggregateCompilationError
    └── SolverFailure             (CLI exit code 4)
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class SMTLError(Exception):
    """Base exception. ``kind`` names the error class in reports."""

    kind = "SMTLError"

    def __init__(self, message: str, location: Optional[tuple] = None):
        self.message = message
        self.location = location
        prefix = f"Line {location[0]}, Col {location[1]}: " if location else ""
        super().__init__(f"{prefix}{message}")


class CompilationError(SMTLError):
    """Raised when a source file cannot be turned into a constraint set."""

    kind = "CompilationError"


class ParseError(CompilationError):
    """The host-grammar parser rejected the source text."""

    kind = "ParseError"

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(message, (line, column) if line else None)


class UnsupportedModule(CompilationError):
    kind = "UnsupportedModule"

    def __init__(self, package: str, location: Optional[tuple] = None):
        self.package = package
        super().__init__(f"{package} is not supported package", location)


class DuplicateDeclaration(CompilationError):
    kind = "DuplicateDeclaration"

    def __init__(self, name: str, location: Optional[tuple] = None, *, predeclared: bool = False):
        self.name = name
        if predeclared:
            message = f"var {name} shadows the predeclared identifier {name}"
        else:
            message = f"var {name} is already declared"
        super().__init__(message, location)


class UnsupportedType(CompilationError):
    kind = "UnsupportedType"


class UnknownVariable(CompilationError):
    kind = "UnknownVariable"

    def __init__(self, name: str, location: Optional[tuple] = None):
        self.name = name
        super().__init__(f"{name} is unknown variable", location)


class UnsupportedStatement(CompilationError):
    kind = "UnsupportedStatement"


class UnsupportedAssertion(CompilationError):
    kind = "UnsupportedAssertion"


class UnsupportedExpression(CompilationError):
    kind = "UnsupportedExpression"


class UnsupportedOperator(CompilationError):
    kind = "UnsupportedOperator"

    def __init__(self, operator: str, arity: str, location: Optional[tuple] = None):
        self.operator = operator
        super().__init__(f"{arity} operator '{operator}' is not supported", location)


class UnsupportedCall(CompilationError):
    kind = "UnsupportedCall"

    def __init__(self, name: str, location: Optional[tuple] = None):
        self.name = name
        super().__init__(f"function {name}() is not supported; only distinct() may be called", location)


class UnsupportedMethod(CompilationError):
    kind = "UnsupportedMethod"

    def __init__(self, name: str, location: Optional[tuple] = None):
        self.name = name
        super().__init__(f"method .{name}() is not supported; use .implies() or .iff()", location)


class ArityError(CompilationError):
    kind = "ArityError"

    def __init__(self, callee: str, expected: str, got: int, location: Optional[tuple] = None):
        self.callee = callee
        self.expected = expected
        self.got = got
        super().__init__(f"{callee} must have {expected}, got {got}", location)


class MalformedLiteral(CompilationError):
    kind = "MalformedLiteral"

    def __init__(self, text: str, location: Optional[tuple] = None):
        self.text = text
        super().__init__(f"integer literal {text} is not a decimal integer", location)


class TypeMismatch(CompilationError):
    kind = "TypeMismatch"

    def __init__(self, context: str, expected: str, actual: str, location: Optional[tuple] = None):
        self.context = context
        self.expected = expected
        self.actual = actual
        super().__init__(f"{context} expects {expected}, got {actual}", location)


class AggregateCompilationError(CompilationError):
    """Every error found when compiling with ``collect_all_errors``."""

    kind = "AggregateCompilationError"

    def __init__(self, errors: Sequence[CompilationError]):
        self.errors: List[CompilationError] = list(errors)
        lines = [f"{e.kind}: {e}" for e in self.errors]
        super().__init__(f"{len(self.errors)} compilation errors\n" + "\n".join(lines))


class SolverFailure(SMTLError):
    """The z3 collaborator raised an internal error."""

    kind = "SolverFailure"
