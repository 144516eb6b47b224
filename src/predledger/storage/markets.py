"""Market and market_outcomes persistence."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.models import Market

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

_MARKET_COLUMNS = "market_id, question, creator, end_time, resolved, winning_option, total_pool, created_at"


def count_markets(conn: DuckDBPyConnection) -> int:
    """Number of markets ever created. Ids are 0..count-1."""
    return int(conn.execute("SELECT COUNT(*) FROM markets").fetchone()[0])


def insert_market(conn: DuckDBPyConnection, market: Market) -> None:
    """Insert a new market and its outcome rows."""
    conn.execute(
        f"INSERT INTO markets ({_MARKET_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        [
            market.market_id,
            market.question,
            market.creator,
            market.end_time,
            market.resolved,
            market.winning_option,
            market.total_pool,
            market.created_at,
        ],
    )
    conn.executemany(
        "INSERT INTO market_outcomes (market_id, outcome_index, label, total_staked) VALUES (?, ?, ?, ?)",
        [
            [market.market_id, i, label, total]
            for i, (label, total) in enumerate(zip(market.outcomes, market.option_totals))
        ],
    )


def _row_to_market(row: tuple, outcome_rows: list[tuple]) -> Market:
    return Market(
        market_id=row[0],
        question=row[1],
        creator=row[2],
        end_time=row[3],
        resolved=row[4],
        winning_option=row[5],
        total_pool=int(row[6]),
        created_at=row[7],
        outcomes=[r[0] for r in outcome_rows],
        option_totals=[int(r[1]) for r in outcome_rows],
    )


def get_market(conn: DuckDBPyConnection, market_id: int) -> Market | None:
    """Load one market with its outcomes in index order."""
    row = conn.execute(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE market_id = ?", [market_id]).fetchone()
    if not row:
        return None
    outcome_rows = conn.execute(
        "SELECT label, total_staked FROM market_outcomes WHERE market_id = ? ORDER BY outcome_index",
        [market_id],
    ).fetchall()
    return _row_to_market(row, outcome_rows)


def list_markets(conn: DuckDBPyConnection, limit: int = 100, offset: int = 0) -> list[Market]:
    """List markets newest first."""
    ids = conn.execute(
        "SELECT market_id FROM markets ORDER BY market_id DESC LIMIT ? OFFSET ?",
        [limit, offset],
    ).fetchall()
    markets = []
    for (market_id,) in ids:
        market = get_market(conn, market_id)
        if market is not None:
            markets.append(market)
    return markets


def set_pool_totals(
    conn: DuckDBPyConnection,
    market_id: int,
    outcome_index: int,
    outcome_total: int,
    total_pool: int,
) -> None:
    """Write the new stake total of one outcome and the market's total pool together."""
    conn.execute(
        "UPDATE market_outcomes SET total_staked = ? WHERE market_id = ? AND outcome_index = ?",
        [outcome_total, market_id, outcome_index],
    )
    conn.execute("UPDATE markets SET total_pool = ? WHERE market_id = ?", [total_pool, market_id])


def mark_resolved(conn: DuckDBPyConnection, market_id: int, winning_option: int) -> None:
    """Set the winning option. Only ever applied to an unresolved market."""
    conn.execute(
        "UPDATE markets SET resolved = TRUE, winning_option = ? WHERE market_id = ? AND NOT resolved",
        [winning_option, market_id],
    )
