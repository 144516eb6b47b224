"""Market - the canonical ledger entity."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from predledger.errors import LedgerIntegrityError


class Market(BaseModel):
    """A question with mutually exclusive outcomes, a betting deadline and a pooled stake."""

    market_id: int = Field(..., ge=0)
    question: str
    outcomes: list[str] = Field(..., min_length=2)
    option_totals: list[int]
    total_pool: int = Field(0, ge=0)
    end_time: int  # epoch seconds
    resolved: bool = False
    winning_option: int | None = None  # None until resolved
    creator: str
    created_at: int | None = None

    @model_validator(mode="after")
    def _check_invariants(self) -> Market:
        if len(self.option_totals) != len(self.outcomes):
            raise LedgerIntegrityError(
                f"Market {self.market_id}: {len(self.option_totals)} totals for {len(self.outcomes)} outcomes"
            )
        if sum(self.option_totals) != self.total_pool:
            raise LedgerIntegrityError(
                f"Market {self.market_id}: outcome totals sum to {sum(self.option_totals)}, pool is {self.total_pool}"
            )
        if self.resolved != (self.winning_option is not None):
            raise LedgerIntegrityError(f"Market {self.market_id}: winning option set without resolution")
        if self.winning_option is not None and not 0 <= self.winning_option < len(self.outcomes):
            raise LedgerIntegrityError(f"Market {self.market_id}: winning option {self.winning_option} out of range")
        return self

    def is_open(self, now: int) -> bool:
        """Bets are accepted strictly before end_time and only while unresolved."""
        return not self.resolved and now < self.end_time

    def has_outcome(self, index: int) -> bool:
        return 0 <= index < len(self.outcomes)

    @property
    def winning_pool(self) -> int:
        if self.winning_option is None:
            return 0
        return self.option_totals[self.winning_option]
