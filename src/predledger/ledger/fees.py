"""FeeSweep - the operator withdraws whatever the treasury holds."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from predledger.errors import TransferFailure, Unauthorized
from predledger.models import FeesWithdrawn, Transfer
from predledger.storage.treasury import debit, get_balance, record_transfer

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection

    from predledger.ledger.events import EventRecorder
    from predledger.ledger.transport import ValueTransport

log = structlog.get_logger(__name__)


class FeeSweep:
    """Sweeps the entire aggregate balance, which includes unclaimed winnings and stranded pools."""

    def __init__(
        self,
        conn: DuckDBPyConnection,
        owner: str,
        transport: ValueTransport,
        recorder: EventRecorder,
    ) -> None:
        self.conn = conn
        self.owner = owner
        self.transport = transport
        self.recorder = recorder

    def withdraw(self, caller: str, now: int) -> int:
        if caller != self.owner:
            raise Unauthorized("Only the platform operator can withdraw fees")
        amount = get_balance(self.conn)
        if amount == 0:
            log.info("fee_sweep_empty", owner=self.owner)
            return 0
        debit(self.conn, amount)
        record_transfer(
            self.conn,
            Transfer(direction="out", counterparty=self.owner, amount=amount, reason="fees", recorded_at=now),
        )
        self.recorder.record(FeesWithdrawn(owner=self.owner, amount=amount), now)
        try:
            self.transport.send(self.owner, amount, "fees")
        except Exception as e:
            raise TransferFailure(f"Could not send {amount} to operator: {e}") from e
        return amount
