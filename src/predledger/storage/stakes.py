"""Stake records and per-user bet history persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.models import BetHistoryEntry

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def get_stake(conn: DuckDBPyConnection, market_id: int, bettor: str, outcome_index: int) -> int:
    """Cumulative stake for (market, bettor, outcome), 0 if none."""
    row = conn.execute(
        "SELECT amount FROM stakes WHERE market_id = ? AND bettor = ? AND outcome_index = ?",
        [market_id, bettor, outcome_index],
    ).fetchone()
    return int(row[0]) if row else 0


def add_stake(conn: DuckDBPyConnection, market_id: int, bettor: str, outcome_index: int, amount: int) -> int:
    """Accumulate amount onto the bettor's stake record. Returns the new cumulative amount."""
    new_amount = get_stake(conn, market_id, bettor, outcome_index) + amount
    conn.execute(
        """
        INSERT INTO stakes (market_id, bettor, outcome_index, amount)
        VALUES (?, ?, ?, ?)
        ON CONFLICT (market_id, bettor, outcome_index) DO UPDATE SET
            amount = excluded.amount
        """,
        [market_id, bettor, outcome_index, new_amount],
    )
    return new_amount


def append_history(
    conn: DuckDBPyConnection,
    bettor: str,
    market_id: int,
    outcome_index: int,
    amount: int,
    placed_at: int,
) -> None:
    """Append one bet to the bettor's audit log."""
    conn.execute(
        "INSERT INTO bet_history (bettor, market_id, outcome_index, amount, placed_at) VALUES (?, ?, ?, ?, ?)",
        [bettor, market_id, outcome_index, amount, placed_at],
    )


def list_history(
    conn: DuckDBPyConnection,
    bettor: str,
    limit: int | None = None,
    offset: int = 0,
) -> list[BetHistoryEntry]:
    """Bettor's bets in placement order. limit=None returns the full log."""
    sql = "SELECT market_id, outcome_index, amount, placed_at FROM bet_history WHERE bettor = ? ORDER BY id"
    params: list = [bettor]
    if limit is not None:
        sql += " LIMIT ? OFFSET ?"
        params += [limit, offset]
    elif offset:
        sql += " OFFSET ?"
        params.append(offset)
    rows = conn.execute(sql, params).fetchall()
    return [
        BetHistoryEntry(market_id=r[0], outcome_index=r[1], amount=int(r[2]), placed_at=r[3]) for r in rows
    ]
