"""BettingLedger - records stakes per market, outcome and bettor."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import InvalidOutcome, MarketClosed, StakeTooLow, TransferFailure
from predledger.models import BetPlaced, StakeRecord, Transfer
from predledger.storage.markets import set_pool_totals
from predledger.storage.stakes import add_stake, append_history, get_stake, list_history
from predledger.storage.treasury import credit, record_transfer
from predledger.units import MIN_STAKE

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.ledger.events import EventRecorder
    from predledger.ledger.registry import MarketRegistry
    from predledger.ledger.transport import ValueTransport
    from predledger.models import BetHistoryEntry


class BettingLedger:
    """Accepts stakes while a market is open. Stakes accumulate and are never decremented."""

    def __init__(
        self,
        conn: DuckDBPyConnection,
        registry: MarketRegistry,
        transport: ValueTransport,
        recorder: EventRecorder,
        min_stake: int = MIN_STAKE,
    ) -> None:
        self.conn = conn
        self.registry = registry
        self.transport = transport
        self.recorder = recorder
        self.min_stake = min_stake

    def place_bet(self, market_id: int, outcome_index: int, amount: int, bettor: str, now: int) -> StakeRecord:
        market = self.registry.get(market_id)
        if now >= market.end_time:
            raise MarketClosed(f"Market {market_id} stopped taking bets at {market.end_time}")
        if market.resolved:
            raise MarketClosed(f"Market {market_id} is resolved")
        if amount < self.min_stake:
            raise StakeTooLow(f"Stake {amount} is below the minimum of {self.min_stake}")
        if not market.has_outcome(outcome_index):
            raise InvalidOutcome(f"Outcome {outcome_index} out of range for {len(market.outcomes)} outcomes")

        set_pool_totals(
            self.conn,
            market_id,
            outcome_index,
            outcome_total=market.option_totals[outcome_index] + amount,
            total_pool=market.total_pool + amount,
        )
        cumulative = add_stake(self.conn, market_id, bettor, outcome_index, amount)
        append_history(self.conn, bettor, market_id, outcome_index, amount, now)
        credit(self.conn, amount)
        record_transfer(
            self.conn,
            Transfer(direction="in", counterparty=bettor, amount=amount, market_id=market_id, reason="bet", recorded_at=now),
        )
        self.recorder.record(
            BetPlaced(market_id=market_id, bettor=bettor, outcome_index=outcome_index, amount=amount),
            now,
        )
        try:
            self.transport.collect(bettor, amount, f"bet:{market_id}:{outcome_index}")
        except Exception as e:
            raise TransferFailure(f"Could not collect {amount} from {bettor}: {e}") from e
        return StakeRecord(market_id=market_id, bettor=bettor, outcome_index=outcome_index, amount=cumulative)

    def stake_of(self, market_id: int, outcome_index: int, user: str) -> int:
        market = self.registry.get(market_id)
        if not market.has_outcome(outcome_index):
            raise InvalidOutcome(f"Outcome {outcome_index} out of range for {len(market.outcomes)} outcomes")
        return get_stake(self.conn, market_id, user, outcome_index)

    def history(self, user: str, limit: int | None = None, offset: int = 0) -> list[BetHistoryEntry]:
        return list_history(self.conn, user, limit=limit, offset=offset)
