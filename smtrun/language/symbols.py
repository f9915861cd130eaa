"""
SMTL Symbol Table

Maps each declared variable name to its sort and its z3 constant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import z3

from .ast import Sort
from .errors import DuplicateDeclaration, UnknownVariable


@dataclass(frozen=True)
class Symbol:
    """A declared variable. Created once, never mutated."""
    name: str
    sort: Sort
    term: z3.ExprRef
    location: Optional[tuple] = None


class SymbolTable:
    """
    Owned map from name to Symbol.

    Iteration yields symbols in lexicographic name order, which is the order
    models are rendered in.
    """

    def __init__(self):
        self._symbols: Dict[str, Symbol] = {}

    def declare(self, symbol: Symbol) -> Symbol:
        if symbol.name in self._symbols:
            raise DuplicateDeclaration(symbol.name, symbol.location)
        self._symbols[symbol.name] = symbol
        return symbol

    def lookup(self, name: str, location: Optional[tuple] = None) -> Symbol:
        symbol = self._symbols.get(name)
        if symbol is None:
            raise UnknownVariable(name, location)
        return symbol

    def names(self) -> List[str]:
        return sorted(self._symbols)

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        for name in self.names():
            yield self._symbols[name]

    def __repr__(self):
        return f"SymbolTable({', '.join(self.names())})"
