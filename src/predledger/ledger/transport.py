"""Value transport - the external side of every value movement."""

from __future__ import annotations

from typing import Protocol

import structlog

log = structlog.get_logger(__name__)


class ValueTransport(Protocol):
    """Moves value between participants and the ledger. Raise to refuse; the ledger rolls back."""

    def collect(self, sender: str, amount: int, reason: str) -> None: ...
    def send(self, recipient: str, amount: int, reason: str) -> None: ...


class LoggingTransport:
    """Default transport: value is attached by the caller's environment, so only log the movement."""

    def collect(self, sender: str, amount: int, reason: str) -> None:
        log.debug("value_collected", sender=sender, amount=amount, reason=reason)

    def send(self, recipient: str, amount: int, reason: str) -> None:
        log.debug("value_sent", recipient=recipient, amount=amount, reason=reason)
