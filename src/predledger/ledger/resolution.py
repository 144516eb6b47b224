"""ResolutionController - the Open -> Resolved transition."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import AlreadyResolved, InvalidOutcome, MarketStillActive, Unauthorized
from predledger.models import MarketResolved
from predledger.storage.markets import mark_resolved

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.ledger.events import EventRecorder
    from predledger.ledger.registry import MarketRegistry
    from predledger.models import Market


class ResolutionController:
    """Only the market's creator may resolve, once, at or after end_time. Resolved is terminal."""

    def __init__(self, conn: DuckDBPyConnection, registry: MarketRegistry, recorder: EventRecorder) -> None:
        self.conn = conn
        self.registry = registry
        self.recorder = recorder

    def resolve(self, market_id: int, winning_outcome: int, caller: str, now: int) -> Market:
        market = self.registry.get(market_id)
        if caller != market.creator:
            raise Unauthorized(f"Only the creator of market {market_id} can resolve it")
        if now < market.end_time:
            raise MarketStillActive(f"Market {market_id} is open until {market.end_time}")
        if market.resolved:
            raise AlreadyResolved(f"Market {market_id} already resolved to outcome {market.winning_option}")
        if not market.has_outcome(winning_outcome):
            raise InvalidOutcome(f"Outcome {winning_outcome} out of range for {len(market.outcomes)} outcomes")

        mark_resolved(self.conn, market_id, winning_outcome)
        self.recorder.record(
            MarketResolved(market_id=market_id, winning_outcome=winning_outcome, total_pool=market.total_pool),
            now,
        )
        return market.model_copy(update={"resolved": True, "winning_option": winning_outcome})
