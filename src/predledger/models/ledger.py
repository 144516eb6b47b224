"""StakeRecord, BetHistoryEntry, ClaimRecord, Transfer - bookkeeping rows."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StakeRecord(BaseModel):
    """Cumulative amount one bettor has staked on one outcome of one market."""

    market_id: int
    bettor: str
    outcome_index: int
    amount: int = Field(0, ge=0)


class BetHistoryEntry(BaseModel):
    """One bet in a user's append-only audit log."""

    market_id: int
    outcome_index: int
    amount: int = Field(..., gt=0)
    placed_at: int | None = None


class ClaimRecord(BaseModel):
    """Proof that a claimant has been paid for a market. Exists at most once per (market, claimant)."""

    market_id: int
    claimant: str
    winnings: int = Field(..., ge=0)
    claimed_at: int | None = None


class Transfer(BaseModel):
    """Value moved into or out of the treasury."""

    direction: str = Field(..., pattern="^(in|out)$")
    counterparty: str
    amount: int = Field(..., ge=0)
    market_id: int | None = None
    reason: str = ""
    recorded_at: int | None = None
