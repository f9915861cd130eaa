from __future__ import annotations

from .ast import Program, Sort, VarDeclaration, ExpressionStatement
from .parser import parse_smtl, parse_smtl_file
from .compiler import SMTLCompiler, CompiledProgram, CompilerConfig
from .errors import CompilationError, SMTLError, SolverFailure
from .symbols import Symbol, SymbolTable

__all__ = [
    "Program",
    "Sort",
    "VarDeclaration",
    "ExpressionStatement",
    "parse_smtl",
    "parse_smtl_file",
    "SMTLCompiler",
    "CompiledProgram",
    "CompilerConfig",
    "CompilationError",
    "SMTLError",
    "SolverFailure",
    "Symbol",
    "SymbolTable",
]
