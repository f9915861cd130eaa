from __future__ import annotations

from .expressions import ExpressionCompiler
from .suggestion import SuggestionEngine

__all__ = [
    "ExpressionCompiler",
    "SuggestionEngine",
]
