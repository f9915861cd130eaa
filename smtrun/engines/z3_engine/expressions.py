"""
SMTL Expression Compiler (Z3 Engine)

Recursively encodes an SMTL expression into a z3 term bound to the
program's context.

Guarantees:
- Left operands are fully compiled before right operands, arguments left to
  right, so the first error in source order is the one reported.
- Every produced term has sort Int or Bool; operands of the wrong sort raise
  TypeMismatch instead of reaching z3.
- Nothing is built for an expression that fails: errors propagate out of the
  recursion untouched.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional

import z3

from ...language.ast import (
    Expression, BoolLiteral, IntLiteral, Identifier, BinaryOp, UnaryOp,
    ParenExpr, Call, MethodCall, UnsupportedExpressionNode,
    Sort, BinaryOperator, UnaryOperator, Method,
    ARITHMETIC_OPERATORS, LOGICAL_OPERATORS, EQUALITY_OPERATORS, ORDERING_OPERATORS,
    PREDECLARED_CONSTANTS,
)
from ...language.errors import (
    ArityError, MalformedLiteral, TypeMismatch, UnsupportedCall,
    UnsupportedExpression, UnsupportedMethod, UnsupportedOperator,
)
from ...language.symbols import SymbolTable


DISTINCT = "distinct"

_DECIMAL = re.compile(r"[0-9]+")

TraceFn = Callable[..., None]


def sort_of(term: z3.ExprRef) -> Optional[Sort]:
    if z3.is_bool(term):
        return Sort.BOOL
    if z3.is_int(term):
        return Sort.INT
    return None


def sort_name(term: z3.ExprRef) -> str:
    sort = sort_of(term)
    return sort.value if sort else str(term.sort())


def z3_sort(sort: Sort, ctx: z3.Context) -> z3.SortRef:
    if sort == Sort.INT:
        return z3.IntSort(ctx)
    return z3.BoolSort(ctx)


class ExpressionCompiler:
    """
    Expression -> z3 term, given the current symbol table.

    The symbol table is only read here; declarations are the statement
    compiler's job.
    """

    def __init__(self, ctx: z3.Context, symbols: SymbolTable, trace: Optional[TraceFn] = None):
        self.ctx = ctx
        self.symbols = symbols
        self._t: TraceFn = trace or (lambda event, **data: None)

    # -----------------------------
    # Public API
    # -----------------------------
    def compile(self, expr: Expression) -> z3.ExprRef:
        if isinstance(expr, BoolLiteral):
            return z3.BoolVal(expr.value, self.ctx)

        if isinstance(expr, IntLiteral):
            return self._compile_int_literal(expr)

        if isinstance(expr, Identifier):
            return self._compile_identifier(expr)

        if isinstance(expr, ParenExpr):
            return self.compile(expr.inner)

        if isinstance(expr, BinaryOp):
            return self._compile_binary(expr)

        if isinstance(expr, UnaryOp):
            return self._compile_unary(expr)

        if isinstance(expr, Call):
            return self._compile_call(expr)

        if isinstance(expr, MethodCall):
            return self._compile_method_call(expr)

        if isinstance(expr, UnsupportedExpressionNode):
            raise UnsupportedExpression(
                f"{expr.node_kind} '{expr.text}' is not supported in SMTL expressions",
                expr.location,
            )

        raise UnsupportedExpression(
            f"Unsupported expression node: {expr.__class__.__name__}",
            getattr(expr, "location", None),
        )

    # -----------------------------
    # Leaves
    # -----------------------------
    def _compile_int_literal(self, expr: IntLiteral) -> z3.ExprRef:
        if not _DECIMAL.fullmatch(expr.text):
            raise MalformedLiteral(expr.text, expr.location)
        self._t("literal", sort="int", value=expr.text)
        return z3.IntVal(int(expr.text), self.ctx)

    def _compile_identifier(self, expr: Identifier) -> z3.ExprRef:
        if expr.name in PREDECLARED_CONSTANTS:
            return z3.BoolVal(PREDECLARED_CONSTANTS[expr.name], self.ctx)
        symbol = self.symbols.lookup(expr.name, expr.location)
        self._t("var_ref", name=expr.name, sort=symbol.sort.value)
        return symbol.term

    # -----------------------------
    # Operators
    # -----------------------------
    def _compile_binary(self, expr: BinaryOp) -> z3.ExprRef:
        # Walk the left spine (a + b + c + ...) without recursing per operator
        chain: List[BinaryOp] = [expr]
        while isinstance(chain[-1].left, BinaryOp):
            chain.append(chain[-1].left)

        term = self.compile(chain[-1].left)
        for node in reversed(chain):
            right = self.compile(node.right)
            term = self._apply_binary(node, term, right)
        return term

    def _apply_binary(self, expr: BinaryOp, left: z3.ExprRef, right: z3.ExprRef) -> z3.ExprRef:
        try:
            op = BinaryOperator(expr.operator)
        except ValueError:
            raise UnsupportedOperator(expr.operator, "binary", expr.location) from None

        self._t("binop", op=op.value, left_sort=sort_name(left), right_sort=sort_name(right))

        if op in ARITHMETIC_OPERATORS:
            self._require(Sort.INT, f"operator '{op.value}'", expr, left, right)
            if op == BinaryOperator.ADD: return left + right
            if op == BinaryOperator.SUB: return left - right
            return left * right

        if op in LOGICAL_OPERATORS:
            self._require(Sort.BOOL, f"operator '{op.value}'", expr, left, right)
            if op == BinaryOperator.AND: return z3.And(left, right)
            return z3.Or(left, right)

        if op in EQUALITY_OPERATORS:
            self._require_same_sort(f"operator '{op.value}'", expr, [left, right])
            if op == BinaryOperator.EQ: return left == right
            return z3.Not(left == right)

        if op in ORDERING_OPERATORS:
            self._require(Sort.INT, f"operator '{op.value}'", expr, left, right)
            if op == BinaryOperator.LT: return left < right
            if op == BinaryOperator.GT: return left > right
            if op == BinaryOperator.LTE: return left <= right
            return left >= right

        raise UnsupportedOperator(expr.operator, "binary", expr.location)

    def _compile_unary(self, expr: UnaryOp) -> z3.ExprRef:
        operand = self.compile(expr.operand)
        if expr.operator != UnaryOperator.NOT.value:
            raise UnsupportedOperator(expr.operator, "unary", expr.location)
        self._require(Sort.BOOL, "operator '!'", expr, operand)
        return z3.Not(operand)

    # -----------------------------
    # Calls
    # -----------------------------
    def _compile_call(self, expr: Call) -> z3.ExprRef:
        args = [self.compile(arg) for arg in expr.args]
        self._t("call", name=expr.callee, argc=len(args))

        if not args:
            raise ArityError(f"{expr.callee}()", "at least 2 arguments", 0, expr.location)
        if expr.callee != DISTINCT:
            raise UnsupportedCall(expr.callee, expr.location)
        if len(args) < 2:
            raise ArityError("distinct()", "at least 2 arguments", len(args), expr.location)

        self._require_same_sort("distinct()", expr, args)
        return z3.Distinct(*args)

    def _compile_method_call(self, expr: MethodCall) -> z3.ExprRef:
        receiver = self.compile(expr.receiver)
        self._t("method", name=expr.method, argc=len(expr.args))

        if not expr.args:
            raise ArityError(f".{expr.method}()", "exactly 1 argument", 0, expr.location)
        try:
            method = Method(expr.method)
        except ValueError:
            raise UnsupportedMethod(expr.method, expr.location) from None
        if len(expr.args) != 1:
            raise ArityError(f".{method.value}()", "exactly 1 argument", len(expr.args), expr.location)

        argument = self.compile(expr.args[0])
        self._require(Sort.BOOL, f".{method.value}()", expr, receiver, argument)

        if method == Method.IMPLIES:
            return z3.Implies(receiver, argument, self.ctx)
        return receiver == argument

    # -----------------------------
    # Sort checks
    # -----------------------------
    def _require(self, sort: Sort, context: str, expr: Expression, *terms: z3.ExprRef):
        for term in terms:
            if sort_of(term) != sort:
                raise TypeMismatch(context, sort.value, sort_name(term), expr.location)

    def _require_same_sort(self, context: str, expr: Expression, terms: List[z3.ExprRef]):
        expected = sort_of(terms[0])
        for term in terms[1:]:
            if sort_of(term) != expected:
                raise TypeMismatch(
                    context,
                    f"operands of one sort ({sort_name(terms[0])})",
                    sort_name(term),
                    expr.location,
                )
