"""Markets subcommand: create, list, show, resolve."""

from __future__ import annotations

from datetime import datetime, timezone

import typer

from predledger.cli.common import open_ledger
from predledger.models import Market
from predledger.units import format_amount

app = typer.Typer(help="Market creation, listing and resolution")


def _ts(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def _status(market: Market, now: int) -> str:
    if market.resolved:
        return f"resolved -> {market.outcomes[market.winning_option]}"
    return "open" if market.is_open(now) else "closed, awaiting resolution"


@app.command("create")
def create(
    ctx: typer.Context,
    question: str = typer.Option(..., "--question", "-q", help="Market question"),
    outcomes: list[str] = typer.Option(..., "--outcome", "-o", help="Outcome label (repeat, at least two)"),
    duration: int = typer.Option(..., "--duration", "-d", help="Seconds until betting closes"),
    creator: str = typer.Option(..., "--as", help="Creator identity"),
) -> None:
    """Create a market; the creator alone may resolve it."""
    with open_ledger(ctx) as ledger:
        market_id = ledger.create_market(question, outcomes, duration, creator)
        market = ledger.get_market(market_id)
        typer.echo(f"Created market {market_id} (betting closes {_ts(market.end_time)})")


@app.command("list")
def list_markets(
    ctx: typer.Context,
    limit: int = typer.Option(50, "--limit", "-n", help="Max markets to show"),
    offset: int = typer.Option(0, "--offset", help="Skip this many (newest first)"),
) -> None:
    """List markets, newest first."""
    with open_ledger(ctx) as ledger:
        markets = ledger.list_markets(limit=limit, offset=offset)
        now = ledger.clock()
        for m in markets:
            typer.echo(f"  #{m.market_id:<5} {format_amount(m.total_pool):>14}  {_status(m, now):<26} {m.question[:60]}")
        typer.echo(f"Total: {ledger.get_market_count()} markets")


@app.command("show")
def show(ctx: typer.Context, market_id: int = typer.Argument(..., help="Market id")) -> None:
    """Show one market with per-outcome pools."""
    with open_ledger(ctx) as ledger:
        m = ledger.get_market(market_id)
        now = ledger.clock()
        typer.echo(f"Market {m.market_id}: {m.question}")
        typer.echo(f"Creator: {m.creator}  Ends: {_ts(m.end_time)}  Status: {_status(m, now)}")
        for i, (label, total) in enumerate(zip(m.outcomes, m.option_totals)):
            marker = "*" if m.winning_option == i else " "
            typer.echo(f" {marker}[{i}] {label:<30} {format_amount(total)}")
        typer.echo(f"Total pool: {format_amount(m.total_pool)}")


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    winner: int = typer.Option(..., "--winner", "-w", help="Winning outcome index"),
    caller: str = typer.Option(..., "--as", help="Caller identity (must be the creator)"),
) -> None:
    """Resolve a market after its end time."""
    with open_ledger(ctx) as ledger:
        m = ledger.resolve_market(market_id, winner, caller)
        typer.echo(f"Market {market_id} resolved: {m.outcomes[winner]} (pool {format_amount(m.total_pool)})")
