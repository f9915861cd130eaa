from .z3_engine.expressions import ExpressionCompiler
from .z3_engine.suggestion import SuggestionEngine

__all__ = [
    "ExpressionCompiler",
    "SuggestionEngine",
]
