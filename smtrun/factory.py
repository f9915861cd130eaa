"""
SMTL Factory
============
Entry points that chain the pipeline stages:
source -> Program (parser) -> CompiledProgram (compiler) -> SolveResult (driver).
"""

import os
from typing import Optional, Union
from pathlib import Path

from .runtime import SolveDriver, SolveResult, SolverConfig
from .language.parser import parse_smtl_file, parse_smtl
from .language.compiler import SMTLCompiler, CompilerConfig, CompiledProgram


def compile_file(
    source_path: Union[str, Path],
    config: Optional[CompilerConfig] = None,
) -> CompiledProgram:
    """
    Loads a .smtl file from disk and compiles it.

    Args:
        source_path: Path to the .smtl file (str or Path object).
                     Supports relative paths and user expansion (~/).
        config: Optional compiler configuration override.

    Raises:
        FileNotFoundError: If the source file does not exist.
        CompilationError: If the SMTL syntax or typing is invalid.
    """
    path_obj = Path(source_path).expanduser().resolve()

    if not path_obj.exists():
        raise FileNotFoundError(
            f"SMTL source file not found at: '{path_obj}' "
            f"(current working directory: '{os.getcwd()}')"
        )

    program = parse_smtl_file(str(path_obj))
    return SMTLCompiler(config).compile(program)


def compile_source(
    source: str,
    config: Optional[CompilerConfig] = None,
    filename: str = "<string>",
) -> CompiledProgram:
    """
    Compiles SMTL code held in a string.
    Useful for unit testing and embedding.
    """
    program = parse_smtl(source, filename=filename)
    return SMTLCompiler(config).compile(program)


def solve_file(
    source_path: Union[str, Path],
    compiler_config: Optional[CompilerConfig] = None,
    solver_config: Optional[SolverConfig] = None,
) -> SolveResult:
    """Compile a .smtl file and solve it in one call."""
    compiled = compile_file(source_path, compiler_config)
    return SolveDriver(solver_config).solve(compiled)


def solve_source(
    source: str,
    compiler_config: Optional[CompilerConfig] = None,
    solver_config: Optional[SolverConfig] = None,
) -> SolveResult:
    """Compile SMTL code held in a string and solve it."""
    compiled = compile_source(source, compiler_config)
    return SolveDriver(solver_config).solve(compiled)
