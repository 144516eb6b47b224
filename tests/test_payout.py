"""PayoutCalculator: integer pari-mutuel arithmetic."""

import pytest

from predledger.errors import EmptyWinningPool, NoWinningStake, NotResolved
from predledger.ledger.payout import PayoutCalculator, compute_winnings, distributable_pool, platform_fee
from predledger.models import Market
from predledger.units import UNIT


def _resolved_market(totals, winner):
    return Market(
        market_id=0,
        question="Q?",
        outcomes=[f"o{i}" for i in range(len(totals))],
        option_totals=totals,
        total_pool=sum(totals),
        end_time=100,
        resolved=True,
        winning_option=winner,
        creator="alice",
    )


def test_single_winner_takes_pool_minus_fee():
    total = 4 * UNIT
    assert platform_fee(total) == 8 * UNIT // 100
    assert distributable_pool(total) == 392 * UNIT // 100
    assert compute_winnings(total, winning_pool=UNIT, user_stake=UNIT) == 392 * UNIT // 100


def test_rounding_remainder_stays_with_platform():
    # 10 units, 3 equal winners: fee floor(0.2) = 0, each gets floor(10 / 3) = 3
    assert distributable_pool(10) == 10
    shares = [compute_winnings(10, winning_pool=3, user_stake=1) for _ in range(3)]
    assert shares == [3, 3, 3]
    assert sum(shares) < distributable_pool(10)


def test_proportional_shares():
    # pool 100, winners staked 30 and 10: distributable 98
    assert compute_winnings(100, 40, 30) == 73  # floor(30 * 98 / 40) = floor(73.5)
    assert compute_winnings(100, 40, 10) == 24  # floor(10 * 98 / 40) = floor(24.5)


def test_empty_winning_pool_checked_before_stake():
    with pytest.raises(EmptyWinningPool):
        compute_winnings(100, winning_pool=0, user_stake=0)


def test_zero_user_stake():
    with pytest.raises(NoWinningStake):
        compute_winnings(100, winning_pool=50, user_stake=0)


def test_calculator_requires_resolution():
    market = _resolved_market([5, 5], 0).model_copy(update={"resolved": False, "winning_option": None})
    with pytest.raises(NotResolved):
        PayoutCalculator().winnings_for(market, 5)


def test_calculator_uses_configured_fee():
    market = _resolved_market([50, 50], 1)
    assert PayoutCalculator(fee_pct=0).winnings_for(market, 50) == 100
    assert PayoutCalculator(fee_pct=10).winnings_for(market, 25) == 45


def test_calculator_rejects_bad_fee():
    with pytest.raises(ValueError):
        PayoutCalculator(fee_pct=101)
