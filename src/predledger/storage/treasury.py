"""Aggregate balance, transfer log and ledger-wide metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import LedgerIntegrityError
from predledger.models import Transfer

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def get_balance(conn: DuckDBPyConnection) -> int:
    row = conn.execute("SELECT balance FROM treasury WHERE id = 1").fetchone()
    return int(row[0]) if row else 0


def credit(conn: DuckDBPyConnection, amount: int) -> int:
    """Add amount to the aggregate balance. Returns the new balance."""
    balance = get_balance(conn) + amount
    conn.execute("UPDATE treasury SET balance = ? WHERE id = 1", [balance])
    return balance


def debit(conn: DuckDBPyConnection, amount: int) -> int:
    """Remove amount from the aggregate balance. Returns the new balance."""
    balance = get_balance(conn)
    if amount > balance:
        raise LedgerIntegrityError(f"Treasury holds {balance}, cannot pay out {amount}")
    balance -= amount
    conn.execute("UPDATE treasury SET balance = ? WHERE id = 1", [balance])
    return balance


def record_transfer(conn: DuckDBPyConnection, transfer: Transfer) -> None:
    """Append one movement to the transfer log."""
    conn.execute(
        """
        INSERT INTO transfers (direction, counterparty, amount, market_id, reason, recorded_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [
            transfer.direction,
            transfer.counterparty,
            transfer.amount,
            transfer.market_id,
            transfer.reason,
            transfer.recorded_at,
        ],
    )


def list_transfers(conn: DuckDBPyConnection, counterparty: str | None = None, limit: int = 100) -> list[Transfer]:
    """Most recent transfers first."""
    sql = "SELECT direction, counterparty, amount, market_id, reason, recorded_at FROM transfers"
    params: list = []
    if counterparty is not None:
        sql += " WHERE counterparty = ?"
        params.append(counterparty)
    sql += " ORDER BY id DESC LIMIT ?"
    params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    return [
        Transfer(
            direction=r[0],
            counterparty=r[1],
            amount=int(r[2]),
            market_id=r[3],
            reason=r[4] or "",
            recorded_at=r[5],
        )
        for r in rows
    ]


def get_meta(conn: DuckDBPyConnection, key: str) -> str | None:
    row = conn.execute("SELECT value FROM ledger_meta WHERE key = ?", [key]).fetchone()
    return row[0] if row else None


def set_meta(conn: DuckDBPyConnection, key: str, value: str) -> None:
    conn.execute("INSERT INTO ledger_meta (key, value) VALUES (?, ?)", [key, value])
