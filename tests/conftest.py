from __future__ import annotations

from pathlib import Path
import pytest

from smtrun.language.parser import parse_smtl, parse_smtl_file
from smtrun.language.compiler import SMTLCompiler, CompilerConfig


@pytest.fixture(scope="session")
def repo_root() -> Path:
    # tests/ -> repo root
    return Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def examples_dir(repo_root: Path) -> Path:
    return repo_root / "examples"


def _example(examples_dir: Path, name: str) -> Path:
    p = examples_dir / name
    assert p.exists(), f"Missing example program: {p}"
    return p


@pytest.fixture(scope="session")
def simple_path(examples_dir: Path) -> Path:
    return _example(examples_dir, "simple.smtl")


@pytest.fixture(scope="session")
def magic_square_path(examples_dir: Path) -> Path:
    return _example(examples_dir, "magic_square.smtl")


@pytest.fixture(scope="session")
def unsat_path(examples_dir: Path) -> Path:
    return _example(examples_dir, "unsat.smtl")


@pytest.fixture(scope="session")
def logic_path(examples_dir: Path) -> Path:
    return _example(examples_dir, "logic.smtl")


def smtl(*body: str, package: str = "smtl") -> str:
    """Wrap statement lines in a `package smtl` / `func main()` file."""
    lines = "\n".join(f"\t{line}" for line in body)
    return f"package {package}\n\nfunc main() {{\n{lines}\n}}\n"


def compile_text(text: str, config: CompilerConfig = None):
    return SMTLCompiler(config).compile(parse_smtl(text))


def compile_program(path: Path, config: CompilerConfig = None):
    return SMTLCompiler(config).compile(parse_smtl_file(str(path)))
