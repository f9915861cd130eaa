"""
smtrun - solve integer/boolean constraints written in SMTL.

    from smtrun import solve_file
    result = solve_file("examples/simple.smtl")
    print(result.lines())
"""

__version__ = "0.2.0"

from .language.compiler import SMTLCompiler, CompiledProgram, CompilerConfig
from .language.errors import CompilationError, SMTLError, SolverFailure
from .language.parser import parse_smtl, parse_smtl_file
from .runtime import SolveDriver, SolveResult, SolveStatus, SolverConfig
from .factory import compile_file, compile_source, solve_file, solve_source

__all__ = [
    "__version__",
    "SMTLCompiler",
    "CompiledProgram",
    "CompilerConfig",
    "CompilationError",
    "SMTLError",
    "SolverFailure",
    "parse_smtl",
    "parse_smtl_file",
    "SolveDriver",
    "SolveResult",
    "SolveStatus",
    "SolverConfig",
    "compile_file",
    "compile_source",
    "solve_file",
    "solve_source",
]
