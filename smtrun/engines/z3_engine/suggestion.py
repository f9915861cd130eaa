from typing import Dict, List, Optional, Sequence, Tuple
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ...language.errors import AggregateCompilationError, SMTLError


_SUGGESTIONS: Dict[str, List[Tuple[str, str]]] = {
    "ParseError": [
        ("Check Go syntax", "SMTL files are Go source: balanced braces, one statement per line."),
    ],
    "UnsupportedModule": [
        ("Fix package clause", "The first line must be `package smtl`."),
    ],
    "DuplicateDeclaration": [
        ("Rename", "Each variable may be declared once; pick a new name or drop the second `var`."),
    ],
    "UnsupportedType": [
        ("Use int or bool", "Only `var x int` and `var b bool` are supported; arrays and other types are not."),
    ],
    "UnknownVariable": [
        ("Declare first", "Add `var name int` (or bool) above the first assert that uses it."),
        ("Check spelling", "Identifiers are case sensitive."),
    ],
    "UnsupportedStatement": [
        ("Rewrite as assert", "main() may only contain `var` declarations and `assert(...)` calls."),
    ],
    "UnsupportedAssertion": [
        ("Wrap in assert", "Statements must be `assert(expr)` with exactly one boolean argument."),
    ],
    "UnsupportedExpression": [
        ("Simplify", "Use integer/boolean literals, variables, operators, distinct(), .implies() and .iff()."),
    ],
    "UnsupportedOperator": [
        ("Supported operators", "+ - * && || == != < > <= >= and unary !. Write `0 - x` for negation."),
    ],
    "UnsupportedCall": [
        ("Use distinct", "distinct(a, b, ...) is the only callable function inside an expression."),
    ],
    "UnsupportedMethod": [
        ("Use implies/iff", "Boolean receivers support `.implies(x)` and `.iff(x)` only."),
    ],
    "ArityError": [
        ("Fix argument count", "distinct() needs two or more arguments; .implies()/.iff() need exactly one."),
    ],
    "MalformedLiteral": [
        ("Use decimal", "Integer literals must be plain decimal digits (no 0x, 0o, 0b or `_`)."),
    ],
    "TypeMismatch": [
        ("Check sorts", "Arithmetic and ordering need int operands; &&, ||, !, implies, iff need bool."),
        ("Compare like with like", "== and != (and distinct) need both sides of the same sort."),
    ],
    "SolverFailure": [
        ("Retry", "z3 reported an internal error; try a different --seed or a larger --timeout."),
    ],
}


class SuggestionEngine:
    """Renders compile and solver errors as panels with fix suggestions."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)

    def report_error(self, error: SMTLError, filename: Optional[str] = None):
        errors: Sequence[SMTLError] = error.errors if isinstance(error, AggregateCompilationError) else [error]

        self._print_header(filename, len(errors))
        for i, e in enumerate(errors, 1):
            self._render_error(i, e)

    def suggestions_for(self, kind: str) -> List[Tuple[str, str]]:
        return _SUGGESTIONS.get(kind, [("Review source", "Check the statement reported above.")])

    def _render_error(self, index: int, error: SMTLError):
        title = f"[bold red]{error.kind} #{index}[/bold red]"

        header = error.message
        if error.location:
            header = f"Line {error.location[0]}, Col {error.location[1]}\n\n{error.message}"

        self.console.print(Panel(Text(header, style="white"), title=title, border_style="red", width=96))
        self._print_suggestions(error.kind)

    def _print_suggestions(self, kind: str):
        table = Table(title="💡 Suggestions", show_header=True, header_style="bold yellow", width=96)
        table.add_column("Strategy", style="cyan", width=26)
        table.add_column("What to do", style="white")

        for strategy, advice in self.suggestions_for(kind):
            table.add_row(strategy, advice)

        self.console.print(table)
        self.console.print()

    def _print_header(self, filename: Optional[str], count: int):
        self.console.print()
        subtitle = f"[red]{count} error{'s' if count != 1 else ''}[/red]"
        self.console.print(Panel(
            f"[bold white]SMTL Compilation Report[/bold white]\n{filename or ''}",
            style="bold red",
            subtitle=subtitle,
            width=96
        ))
        self.console.print()
