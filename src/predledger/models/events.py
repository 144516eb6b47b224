"""Ledger events emitted by successful operations."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel


class MarketCreated(BaseModel):
    event_type: Literal["MarketCreated"] = "MarketCreated"
    market_id: int
    creator: str
    question: str
    end_time: int


class BetPlaced(BaseModel):
    event_type: Literal["BetPlaced"] = "BetPlaced"
    market_id: int
    bettor: str
    outcome_index: int
    amount: int


class MarketResolved(BaseModel):
    event_type: Literal["MarketResolved"] = "MarketResolved"
    market_id: int
    winning_outcome: int
    total_pool: int


class WinningsClaimed(BaseModel):
    event_type: Literal["WinningsClaimed"] = "WinningsClaimed"
    market_id: int
    claimant: str
    winnings: int


class FeesWithdrawn(BaseModel):
    event_type: Literal["FeesWithdrawn"] = "FeesWithdrawn"
    owner: str
    amount: int


LedgerEvent = Union[MarketCreated, BetPlaced, MarketResolved, WinningsClaimed, FeesWithdrawn]
