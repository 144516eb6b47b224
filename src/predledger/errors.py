"""Ledger error taxonomy. Every error aborts its operation with no partial effect."""

from __future__ import annotations


class LedgerError(Exception):
    """Base for all ledger rejections. `code` is the machine-readable name used by the API."""

    code = "ledger_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__doc__ or self.code)

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.code


class InvalidParameters(LedgerError):
    """Market creation input is malformed (empty question or non-positive duration)."""

    code = "invalid_parameters"


class InvalidMarket(LedgerError):
    """Market id out of range."""

    code = "invalid_market"


class MarketClosed(LedgerError):
    """Betting is closed for this market (end time passed or resolved)."""

    code = "market_closed"


class MarketStillActive(LedgerError):
    """Market end time has not been reached yet."""

    code = "market_still_active"


class AlreadyResolved(LedgerError):
    """Market has already been resolved."""

    code = "already_resolved"


class Unauthorized(LedgerError):
    """Caller is not allowed to perform this operation."""

    code = "unauthorized"


class InvalidOutcome(LedgerError):
    """Outcome index out of bounds, or fewer than two outcomes."""

    code = "invalid_outcome"


class StakeTooLow(LedgerError):
    """Stake is below the minimum."""

    code = "stake_too_low"


class NotResolved(LedgerError):
    """Market has not been resolved yet."""

    code = "not_resolved"


class AlreadyClaimed(LedgerError):
    """Winnings for this market were already claimed by this user."""

    code = "already_claimed"


class NoWinningStake(LedgerError):
    """Claimant has no stake on the winning outcome."""

    code = "no_winning_stake"


class EmptyWinningPool(LedgerError):
    """Nobody staked on the winning outcome; the pool is unclaimable."""

    code = "empty_winning_pool"


class TransferFailure(LedgerError):
    """Value transfer could not complete; the operation was rolled back."""

    code = "transfer_failure"


class LedgerIntegrityError(LedgerError):
    """Stored ledger state violates an invariant."""

    code = "integrity_error"
