"""Summaries of recorded pluggable timings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from plugtree.profiler import InvocationRecord, get_profiler


@dataclass
class TimingSummary:
    """Aggregate timing for one event name."""

    name: str
    count: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0

    @property
    def mean_ms(self) -> float:
        return self.total_ms / self.count if self.count else 0.0


def summarize(records: Iterable[InvocationRecord]) -> list[TimingSummary]:
    """Aggregate records per name, slowest total first."""
    summaries: dict[str, TimingSummary] = {}
    for record in records:
        summary = summaries.setdefault(record.name, TimingSummary(name=record.name))
        summary.count += 1
        summary.total_ms += record.elapsed_ms
        summary.max_ms = max(summary.max_ms, record.elapsed_ms)
    return sorted(summaries.values(), key=lambda s: (-s.total_ms, s.name))


def render_table(records: Iterable[InvocationRecord]) -> Table:
    summaries = summarize(records)
    table = Table(
        box=ROUNDED,
        show_header=True,
        header_style="bold cyan",
        row_styles=["", "dim"],
        caption=f"[dim]{len(summaries)} pluggable(s)[/dim]",
    )
    table.add_column("Pluggable", style="cyan", no_wrap=True)
    table.add_column("Calls", justify="right")
    table.add_column("Total (ms)", justify="right", style="yellow")
    table.add_column("Mean (ms)", justify="right")
    table.add_column("Max (ms)", justify="right")

    for summary in summaries:
        table.add_row(
            summary.name,
            str(summary.count),
            f"{summary.total_ms:.3f}",
            f"{summary.mean_ms:.3f}",
            f"{summary.max_ms:.3f}",
        )
    return table


def print_report(
    records: Iterable[InvocationRecord] | None = None,
    console: Console | None = None,
) -> None:
    """Print a timing table, defaulting to the global profiler's records."""
    if records is None:
        records = list(get_profiler().invocations)
    (console or Console()).print(render_table(records))
