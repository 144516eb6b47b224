"""Claim records: at most one per (market, claimant)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.models import ClaimRecord

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


def get_claim(conn: DuckDBPyConnection, market_id: int, claimant: str) -> ClaimRecord | None:
    row = conn.execute(
        "SELECT market_id, claimant, winnings, claimed_at FROM claims WHERE market_id = ? AND claimant = ?",
        [market_id, claimant],
    ).fetchone()
    if not row:
        return None
    return ClaimRecord(market_id=row[0], claimant=row[1], winnings=int(row[2]), claimed_at=row[3])


def insert_claim(conn: DuckDBPyConnection, record: ClaimRecord) -> None:
    """Mark (market, claimant) as paid. The primary key rejects a second insert."""
    conn.execute(
        "INSERT INTO claims (market_id, claimant, winnings, claimed_at) VALUES (?, ?, ?, ?)",
        [record.market_id, record.claimant, record.winnings, record.claimed_at],
    )
