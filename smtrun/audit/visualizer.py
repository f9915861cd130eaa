"""
SMTL - Model Visualizer

Terminal rendering of a solve result (``smtrun --table``).
Deterministic: rows follow the result's name order.
"""

from typing import Optional
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box

from ..runtime import SolveResult, SolveStatus


class ModelVisualizer:
    def __init__(
        self,
        width: int = 72,
        max_value_len: int = 48,
        max_items: int = 500,
        console: Optional[Console] = None,
    ):
        self.console = console or Console()
        self.width = width
        self.max_value_len = max_value_len
        self.max_items = max_items

    def visualize(self, result: SolveResult, title: str = "smtrun"):
        # --- Header status ---
        if result.status == SolveStatus.SAT:
            header_style, status_text, border_style = "bold green", "SATISFIABLE", "green"
        elif result.status == SolveStatus.UNSAT:
            header_style, status_text, border_style = "bold red", "UNSATISFIABLE", "red"
        else:
            header_style, status_text, border_style = "bold yellow", "UNKNOWN", "yellow"

        self.console.print(
            Panel(
                Text(status_text, justify="center", style=header_style),
                title=f"[white]{title}[/]",
                border_style=border_style,
                width=self.width,
            )
        )

        if result.status == SolveStatus.UNKNOWN and result.reason_unknown:
            self.console.print(Text(f"reason: {result.reason_unknown}", style="yellow"))

        # --- Model ---
        if result.assignments:
            table = Table(title="Model", box=box.SIMPLE, show_header=True, header_style="bold cyan", width=self.width)
            table.add_column("Variable", style="cyan", width=24)
            table.add_column("Value", style="white")

            for shown, (name, value) in enumerate(result.assignments.items()):
                if shown >= self.max_items:
                    table.add_row("…", f"(truncated after {self.max_items} variables)")
                    break
                table.add_row(name, self._format_value(value))

            self.console.print(table)

        # --- Footer metrics ---
        latency_color = "green" if result.latency_ms < 100 else ("yellow" if result.latency_ms < 1000 else "red")
        footer = Text.assemble(
            ("Solve time: ", "dim"),
            (f"{result.latency_ms:.3f}ms", f"bold {latency_color}"),
            (" | ", "dim"),
            ("Variables: ", "dim"),
            (str(len(result.assignments)), "bold white"),
        )
        self.console.print(footer, justify="right", width=self.width)

    def _format_value(self, v: str) -> str:
        if len(v) > self.max_value_len:
            return v[: self.max_value_len - 3] + "..."
        return v
