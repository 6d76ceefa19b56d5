"""
Single-oracle response submission.
"""

import logging

from oracle_server.errors import LedgerError, LedgerTransportError, ResponseError
from oracle_server.ledger.base import Ledger
from oracle_server.schemas.oracle import OracleIdentity, ResponseOutcome, StatusRequest

logger = logging.getLogger(__name__)


def classify_response_error(identity: OracleIdentity, exc: LedgerError) -> ResponseError:
    """Turn a ledger failure into a ResponseError with a reason."""
    detail = str(exc)
    lowered = detail.lower()
    if isinstance(exc, LedgerTransportError):
        reason = "transport"
    elif "index does not match" in lowered:
        reason = "index_mismatch"
    elif "not registered" in lowered:
        reason = "unknown_oracle"
    else:
        reason = "rejected"
    return ResponseError(identity.address, reason, detail)


class Responder:
    """Submits one oracle's status answer; failures stay with that oracle."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    async def respond(self, identity: OracleIdentity, request: StatusRequest) -> ResponseOutcome:
        """
        Submit `identity.status_code` for the request, sent from the identity's address.

        Implementations MUST NOT throw for ledger failures: a rejection is
        returned as a 'rejected' outcome and is final for this pair.

        Args:
            identity: The answering oracle
            request: The flight status request being answered

        Returns:
            ResponseOutcome in state 'submitted' or 'rejected'
        """
        try:
            await self.ledger.submit_response(
                request.target_index,
                request.airline,
                request.flight,
                request.timestamp,
                int(identity.status_code),
                identity.address,
            )
        except LedgerError as exc:
            error = classify_response_error(identity, exc)
            logger.warning(f"Oracle response rejected: {error}")
            return ResponseOutcome(
                address=identity.address,
                request=request,
                status_code=identity.status_code,
                state="rejected",
                reason=error.reason,
                detail=error.detail,
            )

        logger.info(f"Oracle {identity.address} responded with {int(identity.status_code)}")
        return ResponseOutcome(
            address=identity.address,
            request=request,
            status_code=identity.status_code,
            state="submitted",
        )
