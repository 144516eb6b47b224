"""Fees subcommand: balance, withdraw."""

from __future__ import annotations

import typer

from predledger.cli.common import open_ledger
from predledger.units import format_amount

app = typer.Typer(help="Treasury balance and operator fee sweep")


@app.command("balance")
def balance(ctx: typer.Context) -> None:
    """Show the aggregate balance held by the ledger."""
    with open_ledger(ctx) as ledger:
        typer.echo(format_amount(ledger.get_balance()))


@app.command("withdraw")
def withdraw(
    ctx: typer.Context,
    caller: str = typer.Option(..., "--as", help="Caller identity (must be the operator)"),
) -> None:
    """Sweep the entire balance to the operator."""
    with open_ledger(ctx) as ledger:
        amount = ledger.withdraw_fees(caller)
        typer.echo(f"Withdrew {format_amount(amount)}")
