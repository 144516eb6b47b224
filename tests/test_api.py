"""HTTP API over an in-memory ledger."""

import pytest
from fastapi.testclient import TestClient

from predledger.api.main import app, get_ledger
from predledger.units import UNIT


@pytest.fixture
def client(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


def _as(who):
    return {"X-Caller": who}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_market_lifecycle(client, clock):
    r = client.post("/markets", json={"question": "Rain?", "outcomes": ["A", "B"], "duration": 100}, headers=_as("alice"))
    assert r.status_code == 201
    market_id = r.json()["market_id"]
    assert r.json()["end_time"] == clock.now + 100

    assert client.post(f"/markets/{market_id}/bets", json={"outcome_index": 0, "amount": UNIT}, headers=_as("x")).status_code == 200
    r = client.post(f"/markets/{market_id}/bets", json={"outcome_index": 1, "amount": 3 * UNIT}, headers=_as("y"))
    assert r.json()["amount"] == 3 * UNIT

    body = client.get(f"/markets/{market_id}").json()
    assert body["option_totals"] == [UNIT, 3 * UNIT]
    assert body["total_pool"] == 4 * UNIT
    assert body["winning_option"] is None

    r = client.post(f"/markets/{market_id}/resolve", json={"winning_outcome": 0}, headers=_as("alice"))
    assert r.status_code == 409
    assert r.json()["code"] == "market_still_active"

    clock.advance(100)
    r = client.post(f"/markets/{market_id}/resolve", json={"winning_outcome": 0}, headers=_as("mallory"))
    assert r.status_code == 403
    r = client.post(f"/markets/{market_id}/resolve", json={"winning_outcome": 0}, headers=_as("alice"))
    assert r.status_code == 200
    assert r.json()["winning_option"] == 0

    r = client.post(f"/markets/{market_id}/claim", headers=_as("x"))
    assert r.json() == {"market_id": market_id, "claimant": "x", "winnings": 392 * UNIT // 100}
    r = client.post(f"/markets/{market_id}/claim", headers=_as("x"))
    assert r.status_code == 409
    assert r.json()["code"] == "already_claimed"
    r = client.post(f"/markets/{market_id}/claim", headers=_as("y"))
    assert r.json()["code"] == "no_winning_stake"
    assert client.get(f"/markets/{market_id}/claims/x").json()["claimed"] is True

    assert client.get("/treasury/balance").json() == {"balance": 8 * UNIT // 100}
    assert client.post("/treasury/withdraw", headers=_as("x")).status_code == 403
    r = client.post("/treasury/withdraw", headers=_as("operator"))
    assert r.json() == {"owner": "operator", "amount": 8 * UNIT // 100}

    types = [e["event_type"] for e in client.get("/events", params={"market_id": market_id}).json()["events"]]
    assert types == ["MarketCreated", "BetPlaced", "BetPlaced", "MarketResolved", "WinningsClaimed"]


def test_queries(client, ledger):
    market_id = ledger.create_market("Q?", ["A", "B", "C"], 100, "alice")
    ledger.place_bet(market_id, 2, UNIT, "bob")
    ledger.place_bet(market_id, 2, UNIT, "bob")

    assert client.get("/markets/count").json() == {"count": 1}
    listing = client.get("/markets").json()
    assert listing["total"] == 1
    assert listing["markets"][0]["outcomes"] == ["A", "B", "C"]
    assert client.get(f"/markets/{market_id}/stakes/bob/2").json()["amount"] == 2 * UNIT
    history = client.get("/users/bob/history", params={"limit": 1, "offset": 1}).json()
    assert [e["amount"] for e in history["entries"]] == [UNIT]
    transfers = client.get("/treasury/transfers", params={"counterparty": "bob"}).json()["transfers"]
    assert [t["direction"] for t in transfers] == ["in", "in"]


def test_error_mapping(client, ledger):
    assert client.get("/markets/9").json() == {"detail": "No market with id 9", "code": "invalid_market"}
    assert client.get("/markets/9").status_code == 404

    r = client.post("/markets", json={"question": "Q?", "outcomes": ["A"], "duration": 10}, headers=_as("alice"))
    assert (r.status_code, r.json()["code"]) == (422, "invalid_outcome")
    r = client.post("/markets", json={"question": "", "outcomes": ["A", "B"], "duration": 10}, headers=_as("alice"))
    assert (r.status_code, r.json()["code"]) == (422, "invalid_parameters")

    market_id = ledger.create_market("Q?", ["A", "B"], 100, "alice")
    r = client.post(f"/markets/{market_id}/bets", json={"outcome_index": 0, "amount": 1}, headers=_as("x"))
    assert (r.status_code, r.json()["code"]) == (422, "stake_too_low")
    r = client.post(f"/markets/{market_id}/claim", headers=_as("x"))
    assert (r.status_code, r.json()["code"]) == (409, "not_resolved")


def test_caller_header_required(client, ledger):
    market_id = ledger.create_market("Q?", ["A", "B"], 100, "alice")
    r = client.post(f"/markets/{market_id}/bets", json={"outcome_index": 0, "amount": UNIT})
    assert r.status_code == 422
    assert ledger.get_market(market_id).total_pool == 0
