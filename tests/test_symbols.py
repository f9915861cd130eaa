from __future__ import annotations

import pytest
import z3

from smtrun.language.ast import Sort
from smtrun.language.errors import DuplicateDeclaration, UnknownVariable
from smtrun.language.symbols import Symbol, SymbolTable


@pytest.fixture
def ctx():
    return z3.Context()


def _int(name, ctx, location=None):
    return Symbol(name, Sort.INT, z3.Int(name, ctx), location)


def test_declare_and_lookup(ctx):
    table = SymbolTable()
    table.declare(_int("x", ctx))

    assert "x" in table
    assert table.lookup("x").sort == Sort.INT
    assert len(table) == 1


def test_redeclaration_is_rejected(ctx):
    table = SymbolTable()
    table.declare(_int("x", ctx))
    with pytest.raises(DuplicateDeclaration) as exc:
        table.declare(_int("x", ctx, (5, 2)))
    assert exc.value.location == (5, 2)
    assert table.lookup("x").location is None


def test_unknown_lookup_carries_location():
    with pytest.raises(UnknownVariable) as exc:
        SymbolTable().lookup("ghost", (7, 9))
    assert exc.value.name == "ghost"
    assert str(exc.value).startswith("Line 7, Col 9: ")


def test_iteration_is_lexicographic(ctx):
    table = SymbolTable()
    for name in ("b", "a", "c", "B"):
        table.declare(_int(name, ctx))

    assert table.names() == ["B", "a", "b", "c"]
    assert [s.name for s in table] == ["B", "a", "b", "c"]
