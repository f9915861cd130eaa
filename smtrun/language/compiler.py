"""
SMTL Compiler - AST to Constraint Set

Compiles an SMTL Program into the ordered list of boolean z3 terms that the
solve driver hands to the solver.

Architecture:
1. Declarations: `var a, b int` creates one z3 constant per name in the
   symbol table.
2. Assertions: `assert(expr)` compiles expr through the ExpressionCompiler
   and appends the (boolean) term to the constraint set.
3. Packaging: constraints, symbols and the z3 context travel together in a
   CompiledProgram.

Processing is sequential and fail-fast: the first error aborts compilation
and no partial program is returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import z3
from rich.console import Console

from .ast import (
    Program, Statement, VarDeclaration, ExpressionStatement,
    UnsupportedStatementNode, Call, MethodCall, Sort, PREDECLARED_CONSTANTS,
)
from .errors import (
    AggregateCompilationError, CompilationError, DuplicateDeclaration,
    TypeMismatch, UnsupportedAssertion, UnsupportedExpression, UnsupportedStatement,
    UnsupportedType,
)
from .symbols import Symbol, SymbolTable
from ..engines.z3_engine.expressions import ExpressionCompiler, sort_name, sort_of, z3_sort


ASSERT = "assert"


# ============================================================================
# CONFIGURATION & INTERMEDIATE REPRESENTATION
# ============================================================================

@dataclass(frozen=True)
class CompilerConfig:
    """
    Compiler behavior toggles. Defaults are the strict fail-fast contract.
    """
    collect_all_errors: bool = False  # If True, report every failing statement at the end
    debug: bool = False  # If True, keep a bounded trace of compile events
    verbose: bool = False  # If True, print stage lines to stderr


@dataclass
class CompiledProgram:
    """
    The final artifact produced by the compiler.
    This is what gets handed to the SolveDriver.
    """
    context: z3.Context
    constraints: List[z3.BoolRef]
    symbols: SymbolTable
    filename: str = "<string>"
    trace: List[Dict[str, Any]] = field(default_factory=list)

    def sexprs(self) -> List[str]:
        return [c.sexpr() for c in self.constraints]


# ============================================================================
# THE COMPILER (ORCHESTRATOR)
# ============================================================================

class SMTLCompiler:
    """
    The Statement Compiler.
    Pipeline: Declarations -> Assertions -> CompiledProgram.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()
        self.console = Console(stderr=True, highlight=False)

        self._trace: List[Dict[str, Any]] = []
        self._trace_max: int = 400
        self._active_statement: Optional[int] = None

    @property
    def trace(self) -> List[Dict[str, Any]]:
        """Events recorded by the last compile() call (debug mode only)."""
        return list(self._trace)

    def compile(self, program: Program) -> CompiledProgram:
        """
        Main compilation pipeline.
        """
        self._trace = []
        self._active_statement = None
        self._say(f"Compiling {program.filename} ({len(program.statements)} statements)")

        ctx = z3.Context()
        symbols = SymbolTable()
        expressions = ExpressionCompiler(ctx, symbols, trace=self._t)
        constraints: List[z3.BoolRef] = []
        errors: List[CompilationError] = []

        for index, stmt in enumerate(program.statements):
            self._active_statement = index
            try:
                self._compile_statement(stmt, ctx, symbols, expressions, constraints)
            except CompilationError as e:
                self._t("error", kind=e.kind, message=e.message)
                if not self.config.collect_all_errors:
                    raise
                errors.append(e)

        self._active_statement = None
        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise AggregateCompilationError(errors)

        self._say(f"   • {len(symbols)} variables, {len(constraints)} constraints")
        return CompiledProgram(
            context=ctx,
            constraints=constraints,
            symbols=symbols,
            filename=program.filename,
            trace=list(self._trace),
        )

    # ========================================================================
    # STATEMENTS
    # ========================================================================

    def _compile_statement(
        self,
        stmt: Statement,
        ctx: z3.Context,
        symbols: SymbolTable,
        expressions: ExpressionCompiler,
        constraints: List[z3.BoolRef],
    ):
        if isinstance(stmt, VarDeclaration):
            self._compile_declaration(stmt, ctx, symbols)
            return

        if isinstance(stmt, ExpressionStatement):
            constraints.append(self._compile_assertion(stmt, expressions))
            return

        if isinstance(stmt, UnsupportedStatementNode):
            raise UnsupportedStatement(
                stmt.reason or f"{stmt.node_kind} is not supported in SMTL",
                stmt.location,
            )

        raise UnsupportedStatement(
            f"Unsupported statement type: {stmt.__class__.__name__}",
            getattr(stmt, "location", None),
        )

    def _compile_declaration(self, decl: VarDeclaration, ctx: z3.Context, symbols: SymbolTable):
        sort = self._resolve_sort(decl)

        if decl.has_initializer:
            raise UnsupportedStatement(
                f"var {', '.join(decl.names)} has an initializer; use assert() to constrain it",
                decl.location,
            )

        for name in decl.names:
            if name in PREDECLARED_CONSTANTS:
                raise DuplicateDeclaration(name, decl.location, predeclared=True)
            term = z3.Const(name, z3_sort(sort, ctx))
            symbols.declare(Symbol(name, sort, term, decl.location))
            self._t("declare", name=name, sort=sort.value)

    def _resolve_sort(self, decl: VarDeclaration) -> Sort:
        type_ref = decl.type
        if type_ref is None:
            raise UnsupportedType(f"var {', '.join(decl.names)} must declare int or bool", decl.location)
        if type_ref.is_composite:
            raise UnsupportedType(f"{type_ref.node_kind} of var declaration is not supported", type_ref.location)
        try:
            return Sort(type_ref.name)
        except ValueError:
            raise UnsupportedType(f"type {type_ref.name} is not supported", type_ref.location) from None

    def _compile_assertion(self, stmt: ExpressionStatement, expressions: ExpressionCompiler) -> z3.BoolRef:
        call = stmt.expression

        if isinstance(call, MethodCall):
            raise UnsupportedAssertion(f"{call} cannot be used as a statement; wrap it in assert()", stmt.location)
        if not isinstance(call, Call):
            raise UnsupportedStatement("only assert(...) calls may appear as expression statements", stmt.location)
        if call.callee != ASSERT:
            raise UnsupportedAssertion(f"{call.callee}() cannot be used as a statement; use assert()", call.location)
        if len(call.args) != 1:
            raise UnsupportedAssertion(f"assert must have single argument, got {len(call.args)}", call.location)

        try:
            term = expressions.compile(call.args[0])
        except RecursionError:
            raise UnsupportedExpression(
                "Input too complex: Maximum nesting depth exceeded",
                call.location,
            ) from None
        if sort_of(term) != Sort.BOOL:
            raise TypeMismatch("assert()", Sort.BOOL.value, sort_name(term), call.location)

        self._t("assert", term=term.sexpr())
        return term

    # ========================================================================
    # DIAGNOSTICS
    # ========================================================================

    def _t(self, event: str, **data):
        if not self.config.debug:
            return
        rec = {"event": event, "statement": self._active_statement, **data}
        self._trace.append(rec)
        if len(self._trace) > self._trace_max:
            self._trace.pop(0)

    def _say(self, line: str):
        if self.config.verbose:
            self.console.print(line, markup=False)
