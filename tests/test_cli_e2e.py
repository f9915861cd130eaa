from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import z3

from smtrun import cli


def _run(args, cwd: Path):
    env = os.environ.copy()
    # Ensure repo root is importable when running `python -m smtrun`
    env["PYTHONPATH"] = str(cwd) + (os.pathsep + env["PYTHONPATH"] if env.get("PYTHONPATH") else "")
    return subprocess.run(
        [sys.executable, "-m", "smtrun", *args],
        cwd=str(cwd),
        env=env,
        text=True,
        capture_output=True,
    )


def _explain(p) -> str:
    return f"rc={p.returncode}\nSTDOUT:\n{p.stdout}\nSTDERR:\n{p.stderr}"


def test_cli_sat_prints_sorted_model(repo_root: Path, simple_path: Path):
    p = _run([str(simple_path)], cwd=repo_root)

    assert p.returncode == 0, _explain(p)
    assert p.stdout.splitlines() == ["x = 13", "y = 11"]


def test_cli_missing_argument(repo_root: Path):
    p = _run([], cwd=repo_root)

    assert p.returncode == 1, _explain(p)
    assert p.stdout == ""
    assert "usage" in p.stderr.lower()


def test_cli_compile_error(repo_root: Path, tmp_path: Path):
    src = tmp_path / "dup.smtl"
    src.write_text("package smtl\n\nfunc main() {\n\tvar x int\n\tvar x int\n}\n", encoding="utf-8")

    p = _run([str(src)], cwd=repo_root)

    assert p.returncode == 2, _explain(p)
    assert "DuplicateDeclaration" in p.stderr
    assert p.stdout == ""


def test_cli_explain_reports_suggestions(repo_root: Path, tmp_path: Path):
    src = tmp_path / "bad.smtl"
    src.write_text("package smtl\n\nfunc main() {\n\tassert(y > 0)\n}\n", encoding="utf-8")

    p = _run([str(src), "--explain"], cwd=repo_root)

    assert p.returncode == 2, _explain(p)
    assert "UnknownVariable" in p.stderr
    assert "Suggestions" in p.stderr


def test_cli_all_errors(repo_root: Path, tmp_path: Path):
    src = tmp_path / "many.smtl"
    src.write_text(
        "package smtl\n\nfunc main() {\n\tvar s string\n\tassert(y > 0)\n}\n",
        encoding="utf-8",
    )

    p = _run([str(src), "--all-errors"], cwd=repo_root)

    assert p.returncode == 2, _explain(p)
    assert "UnsupportedType" in p.stderr
    assert "UnknownVariable" in p.stderr


def test_cli_wrong_package(repo_root: Path, tmp_path: Path):
    src = tmp_path / "main.smtl"
    src.write_text("package main\n\nfunc main() {\n}\n", encoding="utf-8")

    p = _run([str(src)], cwd=repo_root)

    assert p.returncode == 2, _explain(p)
    assert "UnsupportedModule" in p.stderr


def test_cli_missing_file(repo_root: Path, tmp_path: Path):
    p = _run([str(tmp_path / "nope.smtl")], cwd=repo_root)
    assert p.returncode == 2, _explain(p)


def test_cli_unsat(repo_root: Path, unsat_path: Path):
    p = _run([str(unsat_path)], cwd=repo_root)

    assert p.returncode == 3, _explain(p)
    assert p.stdout.strip() == "Unsolvable"


def test_cli_table_output(repo_root: Path, simple_path: Path):
    p = _run([str(simple_path), "--table", "--timeout", "10000", "--seed", "1"], cwd=repo_root)

    assert p.returncode == 0, _explain(p)
    assert "SATISFIABLE" in p.stdout
    assert "13" in p.stdout


def test_cli_debug_trace(repo_root: Path, simple_path: Path):
    p = _run([str(simple_path), "--debug"], cwd=repo_root)

    assert p.returncode == 0, _explain(p)
    assert "Compile trace" in p.stderr
    assert p.stdout.splitlines() == ["x = 13", "y = 11"]


def test_cli_long_expression(repo_root: Path, tmp_path: Path):
    chain = " + ".join(["x"] * 700)
    src = tmp_path / "long.smtl"
    src.write_text(f"package smtl\n\nfunc main() {{\n\tvar x int\n\tassert({chain} == 700)\n}}\n", encoding="utf-8")

    p = _run([str(src)], cwd=repo_root)

    assert p.returncode == 0, _explain(p)
    assert p.stdout.splitlines() == ["x = 1"]


def test_cli_timeout_is_unknown(repo_root: Path, tmp_path: Path):
    src = tmp_path / "cubes.smtl"
    src.write_text(
        "package smtl\n\nfunc main() {\n"
        "\tvar x, y, z int\n"
        "\tassert(x > 0 && y > 0 && z > 0)\n"
        "\tassert(x*x*x + y*y*y == z*z*z)\n"
        "}\n",
        encoding="utf-8",
    )

    p = _run([str(src), "--timeout", "50"], cwd=repo_root)

    assert p.returncode == 4, _explain(p)
    assert p.stdout.startswith("Unknown (")


def test_cli_solver_failure_exit_code(monkeypatch, capsys, simple_path: Path):
    def explode(self, *assumptions):
        raise z3.Z3Exception("internal error")

    monkeypatch.setattr(z3.Solver, "check", explode)

    rc = cli.main([str(simple_path)])

    captured = capsys.readouterr()
    assert rc == 4
    assert "SolverFailure" in captured.err
    assert captured.out == ""
