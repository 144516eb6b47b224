"""Shared fixtures: in-memory ledger, controllable clock, transport that can refuse."""

import pytest

from predledger.ledger.service import PredictionLedger

OWNER = "operator"
START = 1_700_000_000


class FakeClock:
    def __init__(self, now: int = START) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FlakyTransport:
    """Records movements; refuses them while the matching flag is set."""

    def __init__(self) -> None:
        self.fail_collects = False
        self.fail_sends = False
        self.collected: list[tuple[str, int]] = []
        self.sent: list[tuple[str, int]] = []

    def collect(self, sender: str, amount: int, reason: str) -> None:
        if self.fail_collects:
            raise ConnectionError("wallet unreachable")
        self.collected.append((sender, amount))

    def send(self, recipient: str, amount: int, reason: str) -> None:
        if self.fail_sends:
            raise ConnectionError("wallet unreachable")
        self.sent.append((recipient, amount))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    return FlakyTransport()


@pytest.fixture
def ledger(clock, transport):
    led = PredictionLedger.open(":memory:", OWNER, clock=clock, transport=transport)
    yield led
    led.close()


@pytest.fixture
def binary_market(ledger):
    """Market 0: "A" vs "B", open for 100 seconds, created by alice."""
    return ledger.create_market("Will it rain?", ["A", "B"], 100, "alice")
