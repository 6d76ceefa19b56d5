"""
Oracle registration against the ledger.
"""

import logging
import random
from typing import Iterable, Optional

from pydantic import ValidationError

from oracle_server.errors import (
    InsufficientFundsError,
    LedgerError,
    LedgerTransportError,
    RegistrationError,
)
from oracle_server.ledger.base import Ledger
from oracle_server.oracles.pool import IdentityPool
from oracle_server.schemas.oracle import OracleIdentity, StatusCode
from oracle_server.schemas.registration import RegistrationFailure, RegistrationReport

logger = logging.getLogger(__name__)

STATUS_CODES = tuple(StatusCode)


class Registrar:
    """Registers oracle addresses one at a time and fills the identity pool."""

    def __init__(self, ledger: Ledger, pool: IdentityPool, rng: Optional[random.Random] = None):
        self.ledger = ledger
        self.pool = pool
        self.rng = rng if rng is not None else random.Random()

    async def register_all(self, addresses: Iterable[str]) -> RegistrationReport:
        """
        Register every address sequentially and seal the pool.

        A failing address is recorded in the report and does not stop the
        remaining registrations. Nothing is retried; a repeated address is
        reported as a duplicate without touching the ledger.

        Args:
            addresses: Funded accounts to register as oracles

        Returns:
            RegistrationReport with the registered identities and failures
        """
        report = RegistrationReport()
        attempted: set[str] = set()
        for address in addresses:
            try:
                if address in attempted or address in self.pool:
                    raise RegistrationError(address, "duplicate", "address appears more than once")
                attempted.add(address)
                identity = await self.register_one(address)
            except RegistrationError as exc:
                logger.warning(f"Oracle registration failed for {exc.address}: {exc.reason} ({exc.detail})")
                report.failures.append(
                    RegistrationFailure(address=exc.address, reason=exc.reason, detail=exc.detail)
                )
                continue
            self.pool.add(identity)
            report.registered.append(identity)
            logger.debug(f"Registered oracle {address} with indexes {identity.indexes}")

        self.pool.seal()
        logger.info(f"{self.pool.size()} Oracles Registered ({len(report.failures)} failed)")
        return report

    async def register_one(self, address: str) -> OracleIdentity:
        """
        Run the registration handshake for a single address.

        Raises:
            RegistrationError: tagged with the address and a failure reason
        """
        try:
            fee = await self.ledger.get_registration_fee()
            balance = await self.ledger.get_balance(address)
            if balance < fee:
                raise InsufficientFundsError(f"balance {balance} is below registration fee {fee}")
            await self.ledger.register_oracle(address, fee)
            indexes = await self.ledger.get_assigned_indexes(address)
        except LedgerError as exc:
            raise RegistrationError(address, _reason_for(exc), str(exc)) from exc

        status_code = self.rng.choice(STATUS_CODES)
        try:
            return OracleIdentity(address=address, indexes=indexes, status_code=status_code)
        except ValidationError as exc:
            raise RegistrationError(
                address, "invalid_indexes", f"ledger returned indexes {indexes!r}"
            ) from exc


def _reason_for(exc: LedgerError) -> str:
    if isinstance(exc, InsufficientFundsError):
        return "insufficient_funds"
    if isinstance(exc, LedgerTransportError):
        return "transport"
    return "rejected"
