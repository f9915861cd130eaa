"""
SMTL - Solve Driver

Hands a compiled constraint set to z3 and turns the answer into a stable,
printable result.
Designed for:
- deterministic output (variables always sorted by name)
- a single blocking check, optionally bounded by a timeout
- solver failures surfaced as SolverFailure, never swallowed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
import time

import z3

from .language.compiler import CompiledProgram
from .language.errors import SolverFailure


class SolveStatus(Enum):
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


@dataclass
class SolveResult:
    """Result of a solve run."""
    status: SolveStatus
    assignments: Dict[str, str] = field(default_factory=dict)  # name -> value, sorted by name
    reason_unknown: Optional[str] = None
    latency_ms: float = 0.0

    @property
    def satisfiable(self) -> bool:
        return self.status == SolveStatus.SAT

    def lines(self):
        return [f"{name} = {value}" for name, value in self.assignments.items()]


@dataclass(frozen=True)
class SolverConfig:
    """
    Solver toggles. Defaults: no timeout, z3's default seed.
    """
    timeout_ms: Optional[int] = None  # unknown is reported once it elapses
    random_seed: Optional[int] = None


def render_value(value: z3.ExprRef) -> str:
    """Model value in SMTL literal syntax."""
    if z3.is_true(value):
        return "true"
    if z3.is_false(value):
        return "false"
    if z3.is_int_value(value):
        return str(value.as_long())
    return str(value)


class SolveDriver:
    """
    Thin adapter over z3.Solver.

    Usage:
        result = SolveDriver().solve(compiled_program)
        for line in result.lines(): print(line)
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = config or SolverConfig()

    def solve(self, program: CompiledProgram) -> SolveResult:
        start_time = time.perf_counter()

        try:
            solver = z3.Solver(ctx=program.context)
            if self.config.timeout_ms is not None:
                solver.set("timeout", int(self.config.timeout_ms))
            if self.config.random_seed is not None:
                solver.set("random_seed", int(self.config.random_seed))

            # constraints are asserted in source order
            for constraint in program.constraints:
                solver.add(constraint)

            verdict = solver.check()
        except z3.Z3Exception as e:
            raise SolverFailure(f"z3 failed: {e}") from e

        if verdict == z3.unsat:
            return SolveResult(status=SolveStatus.UNSAT, latency_ms=self._since(start_time))

        if verdict != z3.sat:
            return SolveResult(
                status=SolveStatus.UNKNOWN,
                reason_unknown=solver.reason_unknown(),
                latency_ms=self._since(start_time),
            )

        try:
            assignments = self._render_model(solver.model(), program)
        except z3.Z3Exception as e:
            raise SolverFailure(f"z3 failed to produce a model: {e}") from e

        return SolveResult(
            status=SolveStatus.SAT,
            assignments=assignments,
            latency_ms=self._since(start_time),
        )

    # -----------------------
    # Internal helpers
    # -----------------------

    def _render_model(self, model: z3.ModelRef, program: CompiledProgram) -> Dict[str, str]:
        # SymbolTable iterates in lexicographic order
        assignments: Dict[str, str] = {}
        for symbol in program.symbols:
            value = model.eval(symbol.term, model_completion=True)
            assignments[symbol.name] = render_value(value)
        return assignments

    def _since(self, start_time: float) -> float:
        return float((time.perf_counter() - start_time) * 1000.0)
