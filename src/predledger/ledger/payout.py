"""PayoutCalculator - pari-mutuel share of the pool net of the platform fee.

All arithmetic is on integer base units with floor division, so every
rounding remainder stays with the platform:

    distributable = total_pool - floor(total_pool * fee_pct / 100)
    winnings      = floor(user_stake * distributable / winning_pool)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from predledger.errors import EmptyWinningPool, NoWinningStake, NotResolved
from predledger.units import PLATFORM_FEE

if TYPE_CHECKING:
    from predledger.models import Market


def platform_fee(total_pool: int, fee_pct: int = PLATFORM_FEE) -> int:
    return total_pool * fee_pct // 100


def distributable_pool(total_pool: int, fee_pct: int = PLATFORM_FEE) -> int:
    return total_pool - platform_fee(total_pool, fee_pct)


def compute_winnings(total_pool: int, winning_pool: int, user_stake: int, fee_pct: int = PLATFORM_FEE) -> int:
    """Claimant's share. Defined only for winning_pool > 0 and user_stake > 0."""
    if winning_pool <= 0:
        raise EmptyWinningPool("Nobody staked on the winning outcome")
    if user_stake <= 0:
        raise NoWinningStake("Claimant has no stake on the winning outcome")
    return user_stake * distributable_pool(total_pool, fee_pct) // winning_pool


class PayoutCalculator:
    """Pure computation over a resolved market; never touches storage."""

    def __init__(self, fee_pct: int = PLATFORM_FEE) -> None:
        if not 0 <= fee_pct <= 100:
            raise ValueError(f"Fee percentage must be within 0..100, got {fee_pct}")
        self.fee_pct = fee_pct

    def winnings_for(self, market: Market, user_stake: int) -> int:
        if not market.resolved:
            raise NotResolved(f"Market {market.market_id} is not resolved")
        return compute_winnings(market.total_pool, market.winning_pool, user_stake, self.fee_pct)
