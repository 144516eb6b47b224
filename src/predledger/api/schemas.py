"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from predledger.models import BetHistoryEntry, Market, Transfer


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    detail: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. invalid_market, already_claimed")


# --- Markets ---
class CreateMarketRequest(BaseModel):
    question: str
    outcomes: list[str]
    duration: int = Field(..., description="Seconds until betting closes")


class CreateMarketResponse(BaseModel):
    market_id: int
    end_time: int


class MarketsListResponse(BaseModel):
    markets: list[Market]
    total: int


class MarketCountResponse(BaseModel):
    count: int


class ResolveRequest(BaseModel):
    winning_outcome: int


# --- Bets ---
class PlaceBetRequest(BaseModel):
    outcome_index: int
    amount: int = Field(..., description="Stake in base units (1 native unit = 10**18)")


class StakeResponse(BaseModel):
    market_id: int
    user: str
    outcome_index: int
    amount: int


class HistoryResponse(BaseModel):
    user: str
    entries: list[BetHistoryEntry]
    limit: int
    offset: int


# --- Claims ---
class ClaimResponse(BaseModel):
    market_id: int
    claimant: str
    winnings: int


class ClaimStatusResponse(BaseModel):
    market_id: int
    user: str
    claimed: bool


# --- Treasury ---
class BalanceResponse(BaseModel):
    balance: int


class WithdrawResponse(BaseModel):
    owner: str
    amount: int


class TransfersResponse(BaseModel):
    transfers: list[Transfer]


# --- Events ---
class EventsResponse(BaseModel):
    events: list[dict[str, Any]]
