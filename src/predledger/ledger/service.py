"""PredictionLedger - the public operations, each atomic and serialized."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import TYPE_CHECKING, Any

import structlog

from predledger.errors import Unauthorized
from predledger.ledger.betting import BettingLedger
from predledger.ledger.claims import ClaimTracker
from predledger.ledger.events import EventRecorder
from predledger.ledger.fees import FeeSweep
from predledger.ledger.payout import PayoutCalculator
from predledger.ledger.registry import MarketRegistry
from predledger.ledger.resolution import ResolutionController
from predledger.ledger.transport import LoggingTransport, ValueTransport
from predledger.storage.db import get_connection, init_schema, transaction
from predledger.storage.event_log import event_stats, list_events
from predledger.storage.treasury import get_balance, get_meta, list_transfers, set_meta
from predledger.units import MIN_STAKE, PLATFORM_FEE

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.config import Settings
    from predledger.models import BetHistoryEntry, Market, StakeRecord, Transfer

log = structlog.get_logger(__name__)

Clock = Callable[[], int]


def system_clock() -> int:
    return int(time.time())


def _require_identity(who: str) -> str:
    who = (who or "").strip()
    if not who:
        raise Unauthorized("Caller identity is required")
    return who


class PredictionLedger:
    """Markets, stakes, resolution, claims and fee sweeps over one DuckDB connection.

    Every mutating operation holds the ledger lock and runs in a single
    transaction: it either commits all of its state changes (including the
    outgoing transfer) or none of them.
    """

    def __init__(
        self,
        conn: DuckDBPyConnection,
        owner: str,
        *,
        clock: Clock | None = None,
        transport: ValueTransport | None = None,
        min_stake: int = MIN_STAKE,
        fee_pct: int = PLATFORM_FEE,
    ) -> None:
        self.conn = conn
        self.clock = clock or system_clock
        self.transport = transport or LoggingTransport()
        self._lock = Lock()
        init_schema(conn)
        self.owner = self._establish_owner(_require_identity(owner))

        self._recorder = EventRecorder(conn)
        self.registry = MarketRegistry(conn, self._recorder)
        self.betting = BettingLedger(conn, self.registry, self.transport, self._recorder, min_stake=min_stake)
        self.resolution = ResolutionController(conn, self.registry, self._recorder)
        self.calculator = PayoutCalculator(fee_pct)
        self.claims = ClaimTracker(conn, self.registry, self.calculator, self.transport, self._recorder)
        self.fees = FeeSweep(conn, self.owner, self.transport, self._recorder)

    @classmethod
    def open(cls, db_path: str | Path, owner: str, **kwargs: Any) -> PredictionLedger:
        """Open (or create) a ledger database file. ":memory:" gives a throwaway ledger."""
        conn = get_connection(db_path)
        try:
            return cls(conn, owner, **kwargs)
        except Exception:
            conn.close()
            raise

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> PredictionLedger:
        kwargs.setdefault("min_stake", settings.min_stake)
        kwargs.setdefault("fee_pct", settings.platform_fee_pct)
        return cls.open(settings.db_path, settings.owner, **kwargs)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> PredictionLedger:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _establish_owner(self, owner: str) -> str:
        """The operator is fixed the first time a database is opened."""
        with transaction(self.conn):
            stored = get_meta(self.conn, "owner")
            if stored is None:
                set_meta(self.conn, "owner", owner)
                return owner
        if stored != owner:
            raise Unauthorized(f"Ledger is operated by {stored!r}, not {owner!r}")
        return stored

    @contextmanager
    def _operation(self, name: str) -> Iterator[int]:
        """Serialize, open a transaction, and yield the operation's timestamp."""
        with self._lock:
            now = self.clock()
            try:
                with transaction(self.conn):
                    yield now
            except Exception as e:
                self._recorder.discard()
                log.warning("operation_rejected", operation=name, error=type(e).__name__, detail=str(e))
                raise
            self._recorder.flush()

    # --- Mutating operations ---

    def create_market(self, question: str, outcomes: list[str], duration: int, creator: str) -> int:
        """Create a market open for `duration` seconds. Returns its id."""
        creator = _require_identity(creator)
        with self._operation("create") as now:
            market = self.registry.create(question, outcomes, duration, creator, now)
        return market.market_id

    def place_bet(self, market_id: int, outcome_index: int, amount: int, bettor: str) -> StakeRecord:
        """Stake `amount` base units on one outcome. Returns the bettor's cumulative stake on it."""
        bettor = _require_identity(bettor)
        with self._operation("place_bet") as now:
            return self.betting.place_bet(market_id, outcome_index, amount, bettor, now)

    def resolve_market(self, market_id: int, winning_outcome: int, caller: str) -> Market:
        caller = _require_identity(caller)
        with self._operation("resolve") as now:
            return self.resolution.resolve(market_id, winning_outcome, caller, now)

    def claim(self, market_id: int, claimant: str) -> int:
        """Pay out the claimant's winnings once. Returns the amount transferred."""
        claimant = _require_identity(claimant)
        with self._operation("claim") as now:
            return self.claims.claim(market_id, claimant, now)

    def withdraw_fees(self, caller: str) -> int:
        """Send the whole treasury balance to the operator. Returns the amount swept."""
        caller = _require_identity(caller)
        with self._operation("withdraw_fees") as now:
            return self.fees.withdraw(caller, now)

    # --- Queries ---

    def get_market(self, market_id: int) -> Market:
        with self._lock:
            return self.registry.get(market_id)

    def get_market_count(self) -> int:
        with self._lock:
            return self.registry.count()

    def list_markets(self, limit: int = 100, offset: int = 0) -> list[Market]:
        with self._lock:
            return self.registry.list_markets(limit=limit, offset=offset)

    def get_user_stake(self, market_id: int, outcome_index: int, user: str) -> int:
        with self._lock:
            return self.betting.stake_of(market_id, outcome_index, user)

    def get_user_history(self, user: str, limit: int | None = None, offset: int = 0) -> list[BetHistoryEntry]:
        with self._lock:
            return self.betting.history(user, limit=limit, offset=offset)

    def has_claimed(self, market_id: int, user: str) -> bool:
        with self._lock:
            return self.claims.has_claimed(market_id, user)

    def preview_winnings(self, market_id: int, user: str) -> int:
        with self._lock:
            return self.claims.quote(market_id, user)

    def get_balance(self) -> int:
        with self._lock:
            return get_balance(self.conn)

    def list_transfers(self, counterparty: str | None = None, limit: int = 100) -> list[Transfer]:
        with self._lock:
            return list_transfers(self.conn, counterparty=counterparty, limit=limit)

    def list_events(
        self,
        market_id: int | None = None,
        event_type: str | None = None,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        with self._lock:
            return list_events(self.conn, market_id=market_id, event_type=event_type, limit=limit)

    def event_stats(self) -> dict[str, Any]:
        with self._lock:
            return event_stats(self.conn)
