"""Event recorder: persist events in the open transaction, log them once committed."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from predledger.storage.event_log import append_event

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.models import LedgerEvent

log = structlog.get_logger(__name__)


class EventRecorder:
    """Buffers events emitted during one operation."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self.conn = conn
        self._pending: list[LedgerEvent] = []

    def record(self, event: LedgerEvent, now: int) -> None:
        append_event(self.conn, event, now)
        self._pending.append(event)

    def flush(self) -> list[LedgerEvent]:
        """Called after commit: log and return the events of the finished operation."""
        events, self._pending = self._pending, []
        for event in events:
            log.info("ledger_event", **event.model_dump())
        return events

    def discard(self) -> None:
        """Called after rollback: the buffered events never happened."""
        self._pending = []
