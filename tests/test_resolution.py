"""ResolutionController: Open -> Resolved, creator only, once, after end time."""

import pytest

from predledger.errors import AlreadyResolved, InvalidMarket, InvalidOutcome, MarketStillActive, Unauthorized
from predledger.units import UNIT


def test_resolve_boundary_at_end_time(ledger, binary_market, clock):
    clock.advance(99)  # end_time - 1
    with pytest.raises(MarketStillActive):
        ledger.resolve_market(binary_market, 0, "alice")
    clock.advance(1)  # == end_time
    m = ledger.resolve_market(binary_market, 0, "alice")
    assert m.resolved is True
    assert m.winning_option == 0


def test_winning_option_undefined_until_resolved_then_fixed(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 1, UNIT, "bob")
    assert ledger.get_market(binary_market).winning_option is None
    clock.advance(500)
    ledger.resolve_market(binary_market, 1, "alice")
    with pytest.raises(AlreadyResolved):
        ledger.resolve_market(binary_market, 0, "alice")
    m = ledger.get_market(binary_market)
    assert (m.resolved, m.winning_option) == (True, 1)


def test_only_creator_resolves(ledger, binary_market, clock):
    clock.advance(100)
    with pytest.raises(Unauthorized):
        ledger.resolve_market(binary_market, 0, "mallory")
    with pytest.raises(Unauthorized):
        ledger.resolve_market(binary_market, 0, "operator")
    assert ledger.get_market(binary_market).resolved is False


@pytest.mark.parametrize("outcome", [-1, 2])
def test_resolve_rejects_bad_outcome(ledger, binary_market, clock, outcome):
    clock.advance(100)
    with pytest.raises(InvalidOutcome):
        ledger.resolve_market(binary_market, outcome, "alice")
    assert ledger.get_market(binary_market).winning_option is None


def test_resolve_unknown_market(ledger):
    with pytest.raises(InvalidMarket):
        ledger.resolve_market(0, 0, "alice")


def test_resolve_emits_pool_snapshot(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    ledger.place_bet(binary_market, 1, 3 * UNIT, "y")
    clock.advance(100)
    ledger.resolve_market(binary_market, 0, "alice")
    (event,) = ledger.list_events(event_type="MarketResolved")
    assert event["payload"] == {
        "event_type": "MarketResolved",
        "market_id": binary_market,
        "winning_outcome": 0,
        "total_pool": 4 * UNIT,
    }


def test_unresolved_market_stays_locked(ledger, binary_market, clock):
    ledger.place_bet(binary_market, 0, UNIT, "x")
    clock.advance(10_000)
    m = ledger.get_market(binary_market)
    assert not m.is_open(clock.now)
    assert m.resolved is False
    assert ledger.get_balance() == UNIT
