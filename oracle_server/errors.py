"""
Exception hierarchy for the oracle coordination service.
"""

from typing import Optional


class OracleServiceError(Exception):
    """Base class for all service errors."""


class LedgerError(OracleServiceError):
    """Raised by ledger implementations when a call does not succeed."""


class LedgerRejectedError(LedgerError):
    """The ledger executed the call and rejected it (e.g. a contract revert)."""


class InsufficientFundsError(LedgerError):
    """The sending account cannot cover the value or gas of a transaction."""


class LedgerTransportError(LedgerError):
    """The ledger could not be reached or returned a transport-level failure."""


class PoolSealedError(OracleServiceError):
    """An identity was added after registration completed."""


class MalformedEventError(OracleServiceError):
    """An OracleRequest event is missing required fields or carries bad values."""

    def __init__(self, message: str, event: Optional[dict] = None):
        super().__init__(message)
        self.event = event


class ListenerTransportError(OracleServiceError):
    """The event subscription failed and the listener cannot continue."""


class RegistrationError(OracleServiceError):
    """Registration of a single oracle address failed."""

    def __init__(self, address: str, reason: str, detail: str):
        super().__init__(f"{address}: {reason}: {detail}")
        self.address = address
        self.reason = reason
        self.detail = detail


class ResponseError(OracleServiceError):
    """A single oracle's response submission failed."""

    def __init__(self, address: str, reason: str, detail: str):
        super().__init__(f"{address}: {reason}: {detail}")
        self.address = address
        self.reason = reason
        self.detail = detail
