"""Canonical schema (Pydantic) - Market, stakes, claims, transfers, events."""

from predledger.models.events import (
    BetPlaced,
    FeesWithdrawn,
    LedgerEvent,
    MarketCreated,
    MarketResolved,
    WinningsClaimed,
)
from predledger.models.ledger import BetHistoryEntry, ClaimRecord, StakeRecord, Transfer
from predledger.models.market import Market

__all__ = [
    "Market",
    "StakeRecord",
    "BetHistoryEntry",
    "ClaimRecord",
    "Transfer",
    "LedgerEvent",
    "MarketCreated",
    "BetPlaced",
    "MarketResolved",
    "WinningsClaimed",
    "FeesWithdrawn",
]
