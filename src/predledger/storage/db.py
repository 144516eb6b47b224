"""DuckDB connection, schema init and the transaction boundary."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import duckdb

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

MEMORY = ":memory:"

SCHEMA_SQL = """
-- Sequences for auto-increment IDs
CREATE SEQUENCE IF NOT EXISTS history_seq START 1;
CREATE SEQUENCE IF NOT EXISTS transfer_seq START 1;
CREATE SEQUENCE IF NOT EXISTS ledger_event_seq START 1;

-- Ledger-wide settings fixed at initialization (e.g. owner)
CREATE TABLE IF NOT EXISTS ledger_meta (
    key             VARCHAR PRIMARY KEY,
    value           VARCHAR NOT NULL
);

-- Markets: total_pool must equal the sum of market_outcomes.total_staked
CREATE TABLE IF NOT EXISTS markets (
    market_id       BIGINT PRIMARY KEY,
    question        VARCHAR NOT NULL,
    creator         VARCHAR NOT NULL,
    end_time        BIGINT NOT NULL,
    resolved        BOOLEAN NOT NULL DEFAULT FALSE,
    winning_option  INTEGER,
    total_pool      HUGEINT NOT NULL DEFAULT 0,
    created_at      BIGINT NOT NULL
);

-- Ordered outcome labels and per-outcome accumulated stake
CREATE TABLE IF NOT EXISTS market_outcomes (
    market_id       BIGINT NOT NULL,
    outcome_index   INTEGER NOT NULL,
    label           VARCHAR NOT NULL,
    total_staked    HUGEINT NOT NULL DEFAULT 0,
    PRIMARY KEY (market_id, outcome_index)
);

-- Cumulative stake per (market, bettor, outcome), never decremented
CREATE TABLE IF NOT EXISTS stakes (
    market_id       BIGINT NOT NULL,
    bettor          VARCHAR NOT NULL,
    outcome_index   INTEGER NOT NULL,
    amount          HUGEINT NOT NULL,
    PRIMARY KEY (market_id, bettor, outcome_index)
);

-- Per-user bet audit log (append-only)
CREATE TABLE IF NOT EXISTS bet_history (
    id              BIGINT PRIMARY KEY DEFAULT nextval('history_seq'),
    bettor          VARCHAR NOT NULL,
    market_id       BIGINT NOT NULL,
    outcome_index   INTEGER NOT NULL,
    amount          HUGEINT NOT NULL,
    placed_at       BIGINT NOT NULL
);

-- One row per paid (market, claimant), presence means claimed
CREATE TABLE IF NOT EXISTS claims (
    market_id       BIGINT NOT NULL,
    claimant        VARCHAR NOT NULL,
    winnings        HUGEINT NOT NULL,
    claimed_at      BIGINT NOT NULL,
    PRIMARY KEY (market_id, claimant)
);

-- Aggregate balance held by the ledger (single row, id = 1)
CREATE TABLE IF NOT EXISTS treasury (
    id              INTEGER PRIMARY KEY,
    balance         HUGEINT NOT NULL
);

INSERT INTO treasury (id, balance) SELECT 1, 0 WHERE NOT EXISTS (SELECT 1 FROM treasury);

-- Value movements in and out of the treasury
CREATE TABLE IF NOT EXISTS transfers (
    id              BIGINT PRIMARY KEY DEFAULT nextval('transfer_seq'),
    direction       VARCHAR NOT NULL,
    counterparty    VARCHAR NOT NULL,
    amount          HUGEINT NOT NULL,
    market_id       BIGINT,
    reason          VARCHAR,
    recorded_at     BIGINT NOT NULL
);

-- Emitted ledger events (committed together with the operation that raised them)
CREATE TABLE IF NOT EXISTS ledger_events (
    id              BIGINT PRIMARY KEY DEFAULT nextval('ledger_event_seq'),
    event_type      VARCHAR NOT NULL,
    market_id       BIGINT,
    payload         JSON NOT NULL,
    recorded_at     BIGINT NOT NULL
);
"""


def get_connection(db_path: str | Path, read_only: bool = False) -> DuckDBPyConnection:
    """Return a DuckDB connection. Caller must close or use as context manager.
    Pass ":memory:" for a throwaway in-process ledger."""
    if str(db_path) == MEMORY:
        return duckdb.connect(MEMORY)
    path = Path(db_path)
    if not read_only:
        path.parent.mkdir(parents=True, exist_ok=True)
    return duckdb.connect(str(path), read_only=read_only)


def init_schema(conn: DuckDBPyConnection) -> None:
    """Create tables and sequences if they do not exist."""
    for stmt in SCHEMA_SQL.split(";"):
        stmt = stmt.strip()
        if stmt:
            try:
                conn.execute(stmt)
            except duckdb.Error as e:
                if "already exists" not in str(e).lower():
                    raise


@contextmanager
def transaction(conn: DuckDBPyConnection) -> Iterator[DuckDBPyConnection]:
    """Run the enclosed block as one DuckDB transaction. Any exception rolls everything back."""
    conn.begin()
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()
