"""Tests for profiler reports."""

from rich.console import Console

from plugtree.profiler import InvocationRecord, get_profiler
from plugtree.report import print_report, render_table, summarize


def records():
    return [
        InvocationRecord(name="parse", sec=0, nsec=2_000_000),
        InvocationRecord(name="emit", sec=0, nsec=1_000_000),
        InvocationRecord(name="parse", sec=0, nsec=4_000_000),
    ]


class TestSummarize:
    """Test timing aggregation."""

    def test_aggregates_by_name(self):
        summaries = summarize(records())

        assert [s.name for s in summaries] == ["parse", "emit"]
        parse = summaries[0]
        assert parse.count == 2
        assert parse.total_ms == 6.0
        assert parse.mean_ms == 3.0
        assert parse.max_ms == 4.0

    def test_empty(self):
        assert summarize([]) == []


class TestRenderTable:
    """Test rich rendering."""

    def test_table_rows(self):
        table = render_table(records())

        assert table.row_count == 2
        assert [c.header for c in table.columns] == ["Pluggable", "Calls", "Total (ms)", "Mean (ms)", "Max (ms)"]

    def test_print_report_defaults_to_profiler(self):
        get_profiler().create_event("link")()
        console = Console(record=True, width=120)

        print_report(console=console)

        output = console.export_text()
        assert "link" in output
        assert "1 pluggable(s)" in output
