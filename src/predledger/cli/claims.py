"""Claims subcommand: claim, status, preview."""

from __future__ import annotations

import typer

from predledger.cli.common import open_ledger
from predledger.units import format_amount

app = typer.Typer(help="Claim winnings from resolved markets")


@app.command("claim")
def claim(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    claimant: str = typer.Option(..., "--as", help="Claimant identity"),
) -> None:
    """Collect winnings (once per market)."""
    with open_ledger(ctx) as ledger:
        winnings = ledger.claim(market_id, claimant)
        typer.echo(f"Paid {format_amount(winnings)} to {claimant}")


@app.command("status")
def status(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    user: str = typer.Option(..., "--user", "-u", help="User identity"),
) -> None:
    """Whether the user has already claimed this market."""
    with open_ledger(ctx) as ledger:
        typer.echo("claimed" if ledger.has_claimed(market_id, user) else "not claimed")


@app.command("preview")
def preview(
    ctx: typer.Context,
    market_id: int = typer.Argument(..., help="Market id"),
    user: str = typer.Option(..., "--user", "-u", help="User identity"),
) -> None:
    """Winnings the user would receive from a resolved market."""
    with open_ledger(ctx) as ledger:
        typer.echo(format_amount(ledger.preview_winnings(market_id, user)))
