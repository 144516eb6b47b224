"""Bets subcommand: place, stake, history."""

from __future__ import annotations

import typer

from predledger.cli.common import amount_option, open_ledger
from predledger.units import format_amount

app = typer.Typer(help="Stakes and bet history")


@app.command("place")
def place(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    outcome: int = typer.Option(..., "--outcome", "-o", help="Outcome index"),
    amount: str = typer.Option(..., "--amount", "-a", help="Stake in native units (e.g. 0.5)"),
    bettor: str = typer.Option(..., "--as", help="Bettor identity"),
) -> None:
    """Stake value on an outcome of an open market."""
    base_units = amount_option(amount)
    with open_ledger(ctx) as ledger:
        record = ledger.place_bet(market_id, outcome, base_units, bettor)
        typer.echo(
            f"Bet placed: {format_amount(base_units)} on outcome {outcome} of market {market_id} "
            f"(your stake: {format_amount(record.amount)})"
        )


@app.command("stake")
def stake(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    outcome: int = typer.Option(..., "--outcome", "-o", help="Outcome index"),
    user: str = typer.Option(..., "--user", "-u", help="User identity"),
) -> None:
    """Show a user's cumulative stake on one outcome."""
    with open_ledger(ctx) as ledger:
        typer.echo(format_amount(ledger.get_user_stake(market_id, outcome, user)))


@app.command("history")
def history(
    ctx: typer.Context,
    user: str = typer.Option(..., "--user", "-u", help="User identity"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max entries"),
    offset: int = typer.Option(0, "--offset", help="Skip this many entries"),
) -> None:
    """Show a user's bets in placement order."""
    with open_ledger(ctx) as ledger:
        entries = ledger.get_user_history(user, limit=limit, offset=offset)
        for e in entries:
            typer.echo(f"  market {e.market_id:<5} outcome {e.outcome_index:<3} {format_amount(e.amount)}")
        typer.echo(f"{len(entries)} bets")
