"""Log subcommand: export, stats."""

from __future__ import annotations

import typer

from predledger.cli.common import open_ledger
from predledger.storage.export import export_events_to_parquet

app = typer.Typer(help="Ledger event log export and statistics")


@app.command("export")
def export(
    ctx: typer.Context,
    market: int | None = typer.Option(None, "--market", "-m", help="Filter by market id"),
    output: str = typer.Option("ledger_events.parquet", "--output", "-o", help="Output path"),
) -> None:
    """Export ledger events to Parquet."""
    with open_ledger(ctx) as ledger:
        count = export_events_to_parquet(ledger.conn, output, market_id=market)
        typer.echo(f"Exported {count} events to {output}")


@app.command("stats")
def stats(ctx: typer.Context) -> None:
    """Show event log statistics (counts, time range, by type)."""
    with open_ledger(ctx) as ledger:
        s = ledger.event_stats()
        typer.echo(f"Total events: {s['total_events']}")
        typer.echo(f"First recorded_at: {s.get('min_recorded_at')}")
        typer.echo(f"Last recorded_at: {s.get('max_recorded_at')}")
        for row in s.get("by_type", []):
            typer.echo(f"  {row['event_type']:<18} {row['count']}")
