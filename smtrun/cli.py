"""
smtrun command line

Usage:
    smtrun FILE [--table] [--explain] [--all-errors] [--timeout MS] [--seed N]
    python -m smtrun FILE ...

Exit codes:
    0   satisfiable, model printed as `name = value` lines
    1   missing source argument
    2   compilation error (parse, shape, typing, unreadable file)
    3   unsatisfiable
    4   solver answered unknown or failed internally
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from . import __version__
from .audit.visualizer import ModelVisualizer
from .engines.z3_engine.suggestion import SuggestionEngine
from .language.compiler import CompiledProgram, CompilerConfig, SMTLCompiler
from .language.errors import CompilationError, SMTLError
from .language.parser import parse_smtl_file
from .runtime import SolveDriver, SolverConfig, SolveStatus


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_COMPILE = 2
EXIT_UNSAT = 3
EXIT_UNKNOWN = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smtrun",
        description="Solve integer/boolean constraints written in SMTL.",
    )
    parser.add_argument("source", nargs="?", metavar="FILE", help="SMTL source file (package smtl)")
    parser.add_argument("--table", action="store_true", help="render the model as a table")
    parser.add_argument("--explain", action="store_true", help="show errors with fix suggestions")
    parser.add_argument("--all-errors", action="store_true", help="report every failing statement, not just the first")
    parser.add_argument("--timeout", type=int, metavar="MS", default=None, help="solver timeout in milliseconds")
    parser.add_argument("--seed", type=int, metavar="N", default=None, help="solver random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="print compilation stages to stderr")
    parser.add_argument("--debug", action="store_true", help="print the compile trace to stderr")
    parser.add_argument("--version", action="version", version=f"smtrun {__version__}")
    return parser


def _print_trace(console: Console, trace: List[Dict[str, Any]]):
    if not trace:
        return
    table = Table(title="Compile trace", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Stmt", style="cyan", width=5)
    table.add_column("Event", style="cyan")
    table.add_column("Data", style="white")
    for i, rec in enumerate(trace, 1):
        data = ", ".join(f"{k}={v}" for k, v in rec.items() if k not in ("event", "statement"))
        table.add_row(str(i), str(rec.get("statement")), rec["event"], data)
    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    err = Console(stderr=True, highlight=False)

    if args.source is None:
        parser.print_usage(sys.stderr)
        err.print("error: missing SMTL source file", markup=False)
        return EXIT_USAGE

    compiler = SMTLCompiler(CompilerConfig(
        collect_all_errors=args.all_errors,
        debug=args.debug,
        verbose=args.verbose,
    ))

    try:
        program = parse_smtl_file(args.source)
        compiled: CompiledProgram = compiler.compile(program)
    except (OSError, UnicodeDecodeError) as e:
        err.print(f"error: cannot read {args.source}: {e}", markup=False)
        return EXIT_COMPILE
    except CompilationError as e:
        if args.explain:
            SuggestionEngine(err).report_error(e, args.source)
        else:
            err.print(f"{e.kind}: {e}", markup=False)
        if args.debug:
            _print_trace(err, compiler.trace)
        return EXIT_COMPILE
    except SMTLError as e:
        err.print(f"{e.kind}: {e}", markup=False)
        return EXIT_COMPILE

    if args.debug:
        _print_trace(err, compiled.trace)

    driver = SolveDriver(SolverConfig(timeout_ms=args.timeout, random_seed=args.seed))
    try:
        result = driver.solve(compiled)
    except SMTLError as e:
        if args.explain:
            SuggestionEngine(err).report_error(e, args.source)
        else:
            err.print(f"{e.kind}: {e}", markup=False)
        return EXIT_UNKNOWN

    if args.table:
        ModelVisualizer().visualize(result, title=args.source)

    if result.status == SolveStatus.SAT:
        if not args.table:
            for line in result.lines():
                print(line)
        return EXIT_OK

    if result.status == SolveStatus.UNSAT:
        if not args.table:
            print("Unsolvable")
        return EXIT_UNSAT

    if not args.table:
        print(f"Unknown ({result.reason_unknown})")
    return EXIT_UNKNOWN


if __name__ == "__main__":
    sys.exit(main())
