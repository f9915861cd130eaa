from __future__ import annotations

import pytest
import z3

from smtrun.factory import compile_source, solve_file, solve_source
from smtrun.language.errors import SolverFailure, UnknownVariable
from smtrun.runtime import SolveDriver, SolveResult, SolverConfig, SolveStatus, render_value
from tests.conftest import compile_program, smtl


def _ints(result: SolveResult):
    return {name: int(value) for name, value in result.assignments.items()}


# -----------------------------
# Example programs
# -----------------------------

def test_simple_has_unique_model(simple_path):
    result = SolveDriver().solve(compile_program(simple_path))

    assert result.status == SolveStatus.SAT
    assert result.satisfiable
    assert result.lines() == ["x = 13", "y = 11"]


def test_magic_square_model_is_valid(magic_square_path):
    result = solve_file(magic_square_path)
    assert result.satisfiable

    cells = _ints(result)
    grid = [[cells[f"c{r}{c}"] for c in range(3)] for r in range(3)]

    assert sorted(cells.values()) == list(range(1, 10))
    assert grid[0][0] == 4
    assert grid[1][2] == 7
    for i in range(3):
        assert sum(grid[i]) == 15
        assert sum(grid[r][i] for r in range(3)) == 15
    assert grid[0][0] + grid[1][1] + grid[2][2] == 15
    assert grid[0][2] + grid[1][1] + grid[2][0] == 15


def test_unsat_program(unsat_path):
    result = solve_file(unsat_path)

    assert result.status == SolveStatus.UNSAT
    assert result.assignments == {}
    assert result.lines() == []


def test_logic_program(logic_path):
    result = solve_file(logic_path)
    assert result.satisfiable

    values = result.assignments
    assert values["x"] == values["y"]
    assert values["p"] == "true"
    assert values["q"] == "false"
    assert int(values["x"]) > 3


# -----------------------------
# Rendering
# -----------------------------

def test_model_lines_are_sorted_by_name():
    result = solve_source(smtl("var b, a, c int", "assert(a < b && b < c)"))
    assert [line.split(" = ")[0] for line in result.lines()] == ["a", "b", "c"]


def test_unconstrained_variables_still_get_values():
    result = solve_source(smtl("var n int", "var flag bool"))
    assert set(result.assignments) == {"flag", "n"}
    assert result.assignments["flag"] in ("true", "false")
    int(result.assignments["n"])


def test_negative_values_render_as_decimal():
    result = solve_source(smtl("var x int", "assert(x + 5 == 0)"))
    assert result.lines() == ["x = -5"]


def test_render_value():
    ctx = z3.Context()
    assert render_value(z3.BoolVal(True, ctx)) == "true"
    assert render_value(z3.BoolVal(False, ctx)) == "false"
    assert render_value(z3.IntVal(42, ctx)) == "42"
    assert render_value(z3.IntVal(-7, ctx)) == "-7"


def test_empty_program_is_sat_with_no_lines():
    result = solve_source(smtl())
    assert result.status == SolveStatus.SAT
    assert result.lines() == []


def test_true_and_false_constants():
    assert solve_source(smtl("assert(true)")).satisfiable
    assert solve_source(smtl("assert(false)")).status == SolveStatus.UNSAT


# -----------------------------
# Driver configuration
# -----------------------------

def test_solver_config_is_applied(simple_path):
    config = SolverConfig(timeout_ms=10_000, random_seed=7)
    result = SolveDriver(config).solve(compile_program(simple_path))
    assert result.lines() == ["x = 13", "y = 11"]
    assert result.latency_ms >= 0.0


def test_same_program_solves_repeatedly():
    compiled = compile_source(smtl("var x int", "assert(x*x == 49 && x > 0)"))
    driver = SolveDriver()
    assert driver.solve(compiled).lines() == ["x = 7"]
    assert driver.solve(compiled).lines() == ["x = 7"]


def test_compile_errors_surface_before_solving():
    with pytest.raises(UnknownVariable):
        solve_source(smtl("assert(x == 1)"))


def test_long_sum_solves():
    chain = " + ".join(["x"] * 700)
    result = solve_source(smtl("var x int", f"assert({chain} == 700)"))
    assert result.lines() == ["x = 1"]


# -----------------------------
# Unknown verdicts and solver failures
# -----------------------------

FERMAT_CUBES = smtl(
    "var x, y, z int",
    "assert(x > 0 && y > 0 && z > 0)",
    "assert(x*x*x + y*y*y == z*z*z)",
)


def test_timeout_reports_unknown():
    result = solve_source(FERMAT_CUBES, solver_config=SolverConfig(timeout_ms=50))

    assert result.status == SolveStatus.UNKNOWN
    assert not result.satisfiable
    assert result.reason_unknown
    assert result.assignments == {}


def test_z3_exception_becomes_solver_failure(monkeypatch, simple_path):
    compiled = compile_program(simple_path)

    def explode(self, *assumptions):
        raise z3.Z3Exception("internal error")

    monkeypatch.setattr(z3.Solver, "check", explode)

    with pytest.raises(SolverFailure) as exc:
        SolveDriver().solve(compiled)
    assert exc.value.kind == "SolverFailure"
    assert "internal error" in str(exc.value)
