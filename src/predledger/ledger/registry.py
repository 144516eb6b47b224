"""MarketRegistry - creates and loads Market records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import InvalidMarket, InvalidOutcome, InvalidParameters
from predledger.models import Market, MarketCreated
from predledger.storage.markets import count_markets, get_market, insert_market, list_markets

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.ledger.events import EventRecorder


class MarketRegistry:
    """Market ids are allocated sequentially from 0 and never reused."""

    def __init__(self, conn: DuckDBPyConnection, recorder: EventRecorder) -> None:
        self.conn = conn
        self.recorder = recorder

    def create(self, question: str, outcomes: list[str], duration: int, creator: str, now: int) -> Market:
        question = (question or "").strip()
        if not question:
            raise InvalidParameters("Question must not be empty")
        labels = [str(o).strip() for o in outcomes]
        if len(labels) < 2:
            raise InvalidOutcome("A market needs at least two outcomes")
        if any(not label for label in labels):
            raise InvalidOutcome("Outcome labels must not be empty")
        if duration <= 0:
            raise InvalidParameters("Duration must be positive")

        market = Market(
            market_id=count_markets(self.conn),
            question=question,
            outcomes=labels,
            option_totals=[0] * len(labels),
            total_pool=0,
            end_time=now + duration,
            creator=creator,
            created_at=now,
        )
        insert_market(self.conn, market)
        self.recorder.record(
            MarketCreated(
                market_id=market.market_id,
                creator=creator,
                question=question,
                end_time=market.end_time,
            ),
            now,
        )
        return market

    def get(self, market_id: int) -> Market:
        """Load a market or raise InvalidMarket."""
        market = get_market(self.conn, market_id) if market_id >= 0 else None
        if market is None:
            raise InvalidMarket(f"No market with id {market_id}")
        return market

    def count(self) -> int:
        return count_markets(self.conn)

    def list_markets(self, limit: int = 100, offset: int = 0) -> list[Market]:
        return list_markets(self.conn, limit=limit, offset=offset)
