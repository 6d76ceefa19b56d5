"""
Base ledger interface.

Defines the calls the coordinator makes against the FlightSurety contract.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator


class Ledger(ABC):
    """
    Abstract boundary to the on-chain FlightSurety application.

    Implementations raise subclasses of LedgerError
    (LedgerRejectedError, InsufficientFundsError, LedgerTransportError)
    and nothing else for failures of the remote call.
    """

    @abstractmethod
    async def get_accounts(self) -> list[str]:
        """Accounts available for funding oracle identities."""
        ...

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Balance of `address` in the ledger's smallest unit."""
        ...

    @abstractmethod
    async def get_registration_fee(self) -> int:
        """Current fee required to register an oracle."""
        ...

    @abstractmethod
    async def register_oracle(self, address: str, fee: int) -> None:
        """Register `address` as an oracle, paying `fee` from it."""
        ...

    @abstractmethod
    async def get_assigned_indexes(self, address: str) -> tuple[int, int, int]:
        """The 3 indexes the ledger assigned to a registered oracle."""
        ...

    @abstractmethod
    async def submit_response(
        self,
        target_index: int,
        airline: str,
        flight: str,
        timestamp: int,
        status_code: int,
        from_address: str,
    ) -> None:
        """Submit an oracle's flight status answer, sent as `from_address`."""
        ...

    @abstractmethod
    def oracle_requests(self, from_block: int = 0) -> AsyncIterator[dict]:
        """
        Stream OracleRequest events starting at `from_block`.

        Each event is a dict with an `args` mapping holding `index`,
        `airline`, `flight` and `timestamp`. The stream does not end on its
        own; a transport failure raises LedgerTransportError.
        """
        ...
