"""Shared CLI helpers: open the configured ledger, report rejections."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from predledger.errors import LedgerError
from predledger.ledger.service import PredictionLedger
from predledger.units import parse_amount


@contextmanager
def open_ledger(ctx: typer.Context) -> Iterator[PredictionLedger]:
    """Open the ledger from settings; a rejected operation prints its reason and exits 1."""
    settings = ctx.obj["settings"]
    try:
        ledger = PredictionLedger.from_settings(settings)
    except LedgerError as e:
        typer.echo(f"Error [{e.code}]: {e.message}", err=True)
        raise typer.Exit(1)
    try:
        yield ledger
    except LedgerError as e:
        typer.echo(f"Error [{e.code}]: {e.message}", err=True)
        raise typer.Exit(1)
    finally:
        ledger.close()


def amount_option(text: str) -> int:
    """Parse a native-unit amount ("0.5") into base units for typer."""
    try:
        return parse_amount(text)
    except ValueError as e:
        raise typer.BadParameter(str(e))
