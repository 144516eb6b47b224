"""ClaimTracker - at most one payout per (market, claimant)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import AlreadyClaimed, NotResolved, TransferFailure
from predledger.models import ClaimRecord, Transfer, WinningsClaimed
from predledger.storage.claims import get_claim, insert_claim
from predledger.storage.stakes import get_stake
from predledger.storage.treasury import debit, record_transfer

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.ledger.events import EventRecorder
    from predledger.ledger.payout import PayoutCalculator
    from predledger.ledger.registry import MarketRegistry
    from predledger.ledger.transport import ValueTransport


class ClaimTracker:
    """Claims run compute -> mark claimed -> transfer, inside the caller's transaction.

    A failed transfer raises TransferFailure, and the enclosing rollback also
    undoes the claim mark, so the claimant can retry.
    """

    def __init__(
        self,
        conn: DuckDBPyConnection,
        registry: MarketRegistry,
        calculator: PayoutCalculator,
        transport: ValueTransport,
        recorder: EventRecorder,
    ) -> None:
        self.conn = conn
        self.registry = registry
        self.calculator = calculator
        self.transport = transport
        self.recorder = recorder

    def quote(self, market_id: int, claimant: str) -> int:
        """Winnings the claimant would receive. Raises the same errors as claim, except AlreadyClaimed."""
        market = self.registry.get(market_id)
        if not market.resolved:
            raise NotResolved(f"Market {market_id} is not resolved")
        stake = get_stake(self.conn, market_id, claimant, market.winning_option)
        return self.calculator.winnings_for(market, stake)

    def claim(self, market_id: int, claimant: str, now: int) -> int:
        market = self.registry.get(market_id)
        if not market.resolved:
            raise NotResolved(f"Market {market_id} is not resolved")
        if get_claim(self.conn, market_id, claimant) is not None:
            raise AlreadyClaimed(f"{claimant} already claimed market {market_id}")
        stake = get_stake(self.conn, market_id, claimant, market.winning_option)

        winnings = self.calculator.winnings_for(market, stake)
        insert_claim(
            self.conn,
            ClaimRecord(market_id=market_id, claimant=claimant, winnings=winnings, claimed_at=now),
        )
        debit(self.conn, winnings)
        record_transfer(
            self.conn,
            Transfer(
                direction="out",
                counterparty=claimant,
                amount=winnings,
                market_id=market_id,
                reason="claim",
                recorded_at=now,
            ),
        )
        self.recorder.record(WinningsClaimed(market_id=market_id, claimant=claimant, winnings=winnings), now)
        try:
            self.transport.send(claimant, winnings, f"claim:{market_id}")
        except Exception as e:
            raise TransferFailure(f"Could not pay {winnings} to {claimant}: {e}") from e
        return winnings

    def has_claimed(self, market_id: int, claimant: str) -> bool:
        self.registry.get(market_id)
        return get_claim(self.conn, market_id, claimant) is not None
