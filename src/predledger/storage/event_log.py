"""Ledger event append and query - the audit trail of emitted events."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.models import LedgerEvent


def append_event(conn: DuckDBPyConnection, event: LedgerEvent, recorded_at: int) -> None:
    """Append a single event. Runs inside the emitting operation's transaction."""
    payload = event.model_dump()
    conn.execute(
        "INSERT INTO ledger_events (event_type, market_id, payload, recorded_at) VALUES (?, ?, ?, ?)",
        [event.event_type, payload.get("market_id"), json.dumps(payload), recorded_at],
    )


def list_events(
    conn: DuckDBPyConnection,
    market_id: int | None = None,
    event_type: str | None = None,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """Events in emission order, optionally filtered by market and type."""
    clauses = []
    params: list[Any] = []
    if market_id is not None:
        clauses.append("market_id = ?")
        params.append(market_id)
    if event_type is not None:
        clauses.append("event_type = ?")
        params.append(event_type)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    rows = conn.execute(
        f"SELECT id, event_type, market_id, payload, recorded_at FROM ledger_events {where} ORDER BY id LIMIT ?",
        params + [limit],
    ).fetchall()
    return [
        {
            "id": r[0],
            "event_type": r[1],
            "market_id": r[2],
            "payload": json.loads(r[3]) if isinstance(r[3], str) else r[3],
            "recorded_at": r[4],
        }
        for r in rows
    ]


def event_stats(conn: DuckDBPyConnection) -> dict[str, Any]:
    """Return event log statistics: total count, min/max recorded_at, count by event type."""
    total = conn.execute("SELECT COUNT(*) FROM ledger_events").fetchone()[0]
    range_row = conn.execute("SELECT MIN(recorded_at), MAX(recorded_at) FROM ledger_events").fetchone()
    by_type = conn.execute(
        "SELECT event_type, COUNT(*) AS cnt FROM ledger_events GROUP BY event_type ORDER BY cnt DESC"
    ).fetchall()
    return {
        "total_events": total,
        "min_recorded_at": range_row[0],
        "max_recorded_at": range_row[1],
        "by_type": [{"event_type": r[0], "count": r[1]} for r in by_type],
    }
