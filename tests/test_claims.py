"""ClaimTracker: one payout per (market, claimant), rollback on failed transfer."""

import pytest

from predledger.errors import (
    AlreadyClaimed,
    EmptyWinningPool,
    InvalidMarket,
    NoWinningStake,
    NotResolved,
    TransferFailure,
)
from predledger.ledger.payout import distributable_pool
from predledger.units import UNIT


def _resolve(ledger, clock, market_id, winner, creator="alice"):
    clock.advance(100)
    ledger.resolve_market(market_id, winner, creator)


def test_two_bettor_scenario(ledger, binary_market, clock, transport):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 1, 3 * UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)

    assert ledger.preview_winnings(binary_market, "x") == 392 * UNIT // 100
    assert ledger.claim(binary_market, "x") == 392 * UNIT // 100
    with pytest.raises(NoWinningStake):
        ledger.claim(binary_market, "y")
    assert transport.sent == [("x", 392 * UNIT // 100)]
    assert ledger.get_balance() == 8 * UNIT // 100


def test_second_claim_fails_without_paying(ledger, binary_market, clock, transport):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 1, UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)

    paid = ledger.claim(binary_market, "x")
    balance = ledger.get_balance()
    with pytest.raises(AlreadyClaimed):
        ledger.claim(binary_market, "x")
    assert ledger.get_balance() == balance
    assert transport.sent == [("x", paid)]
    assert ledger.has_claimed(binary_market, "x") is True
    assert ledger.has_claimed(binary_market, "y") is False
    assert len(ledger.list_events(event_type="WinningsClaimed")) == 1


def test_claim_before_resolution(ledger, binary_market):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    with pytest.raises(NotResolved):
        ledger.claim(binary_market, "x")
    with pytest.raises(NotResolved):
        ledger.preview_winnings(binary_market, "x")


def test_claim_unknown_market(ledger):
    with pytest.raises(InvalidMarket):
        ledger.claim(5, "x")


def test_empty_winning_pool_is_stranded_until_swept(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 1, 2 * UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)

    for who in ("y", "x"):
        with pytest.raises(EmptyWinningPool):
            ledger.claim(binary_market, who)
    assert ledger.get_balance() == 2 * UNIT
    assert ledger.withdraw_fees("operator") == 2 * UNIT
    assert ledger.get_balance() == 0


def test_claim_uses_summed_stake(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 0, 2 * UNIT, "x")
    ledger.place_bet(binary_market, 0, UNIT, "w")
    ledger.place_bet(binary_market, 1, 6 * UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)

    # pool 10, distributable 9.8, winning pool 4: x holds 3/4
    assert ledger.claim(binary_market, "x") == 3 * 98 * UNIT // 40


def test_losing_side_stake_does_not_count(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 1, UNIT, "x")
    ledger.place_bet(binary_market, 1, UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)
    assert ledger.claim(binary_market, "x") == 3 * 98 * UNIT // 100


def test_payouts_conserve_pool(ledger, clock):
    market_id = ledger.create_market("Three way?", ["A", "B", "C"], 100, "alice")
    stakes = {"a1": 1 * UNIT + 1, "a2": 2 * UNIT + 3, "a3": 5 * UNIT + 7}
    for who, amount in stakes.items():
        ledger.place_bet(market_id, 0, amount, who)
    ledger.place_bet(market_id, 1, 4 * UNIT, "b1")
    ledger.place_bet(market_id, 2, 9 * UNIT, "c1")
    _resolve(ledger, clock, market_id, 0)

    total = ledger.get_market(market_id).total_pool
    paid = sum(ledger.claim(market_id, who) for who in stakes)
    distributable = distributable_pool(total)
    assert paid <= distributable
    assert distributable - paid < len(stakes)
    assert ledger.get_balance() == total - paid
    assert ledger.get_market(market_id).total_pool == total


def test_failed_transfer_rolls_back_claim(ledger, binary_market, clock, transport):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 1, UNIT, "y")
    _resolve(ledger, clock, binary_market, 0)
    balance = ledger.get_balance()

    transport.fail_sends = True
    with pytest.raises(TransferFailure):
        ledger.claim(binary_market, "x")
    assert ledger.has_claimed(binary_market, "x") is False
    assert ledger.get_balance() == balance
    assert ledger.list_events(event_type="WinningsClaimed") == []
    assert all(t.direction == "in" for t in ledger.list_transfers())

    transport.fail_sends = False
    assert ledger.claim(binary_market, "x") == 196 * UNIT // 100
    assert ledger.has_claimed(binary_market, "x") is True


def test_claims_are_per_market(ledger, clock):
    m1 = ledger.create_market("One?", ["A", "B"], 100, "alice")
    m2 = ledger.create_market("Two?", ["A", "B"], 100, "alice")
    for market_id in (m1, m2):
        ledger.place_bet(market_id, 0, UNIT, "x")
    clock.advance(100)
    ledger.resolve_market(m1, 0, "alice")
    ledger.resolve_market(m2, 0, "alice")
    assert ledger.claim(m1, "x") == 98 * UNIT // 100
    assert ledger.claim(m2, "x") == 98 * UNIT // 100
