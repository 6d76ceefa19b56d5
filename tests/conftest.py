"""
Shared fixtures: an in-memory stand-in for the FlightSurety contract.
"""

import asyncio
import random
from typing import Optional

import pytest

from oracle_server.config import Settings
from oracle_server.errors import (
    InsufficientFundsError,
    LedgerRejectedError,
    LedgerTransportError,
)
from oracle_server.ledger.base import Ledger

ONE_ETHER = 10**18
_END_OF_STREAM = object()


def make_accounts(count: int) -> list[str]:
    return [f"0x{i:040x}" for i in range(1, count + 1)]


def oracle_request(index, airline="0xA1", flight="ND1309", timestamp=1700000000) -> dict:
    """Event dict shaped like the ones Web3Ledger.oracle_requests yields."""
    return {
        "event": "OracleRequest",
        "block_number": 1,
        "args": {"index": index, "airline": airline, "flight": flight, "timestamp": timestamp},
    }


class FakeLedger(Ledger):
    """In-memory FlightSurety contract with scriptable failures."""

    def __init__(
        self,
        accounts: Optional[list[str]] = None,
        fee: int = ONE_ETHER,
        balance: int = 100 * ONE_ETHER,
        indexes: Optional[dict] = None,
        seed: int = 7,
    ):
        self.accounts = accounts if accounts is not None else make_accounts(30)
        self.fee = fee
        self.balances = {address: balance for address in self.accounts}
        self.assigned_indexes = dict(indexes or {})
        self.rng = random.Random(seed)
        self.registered: dict[str, tuple[int, int, int]] = {}

        self.fee_queries = 0
        self.responses: list[dict] = []

        self.reject_registration: set[str] = set()
        self.fail_registration_transport: set[str] = set()
        self.reject_response: dict[str, str] = {}
        self.response_delay: dict[str, float] = {}

        self.history: list[dict] = []
        self.live: asyncio.Queue = asyncio.Queue()
        self.stream_error: Optional[Exception] = None
        self.seen_from_block: Optional[int] = None

    async def get_accounts(self) -> list[str]:
        return list(self.accounts)

    async def get_balance(self, address: str) -> int:
        return self.balances.get(address, 0)

    async def get_registration_fee(self) -> int:
        self.fee_queries += 1
        return self.fee

    async def register_oracle(self, address: str, fee: int) -> None:
        if address in self.fail_registration_transport:
            raise LedgerTransportError("registerOracle: connection refused")
        if address in self.reject_registration:
            raise LedgerRejectedError("registerOracle: execution reverted")
        if self.balances.get(address, 0) < fee:
            raise InsufficientFundsError("registerOracle: insufficient funds")
        self.balances[address] -= fee
        if address not in self.assigned_indexes:
            self.assigned_indexes[address] = tuple(self.rng.sample(range(10), 3))
        self.registered[address] = self.assigned_indexes[address]

    async def get_assigned_indexes(self, address: str) -> tuple[int, int, int]:
        if address not in self.registered:
            raise LedgerRejectedError("getMyIndexes: Not registered as an oracle")
        return self.registered[address]

    async def submit_response(
        self, target_index, airline, flight, timestamp, status_code, from_address
    ) -> None:
        delay = self.response_delay.get(from_address)
        if delay:
            await asyncio.sleep(delay)
        if from_address in self.reject_response:
            raise self.reject_response_error(from_address)
        if from_address not in self.registered:
            raise LedgerRejectedError("execution reverted: Not registered as an oracle")
        if target_index not in self.registered[from_address]:
            raise LedgerRejectedError("execution reverted: Index does not match oracle request")
        self.responses.append(
            {
                "index": target_index,
                "airline": airline,
                "flight": flight,
                "timestamp": timestamp,
                "status": status_code,
                "from": from_address,
            }
        )

    def reject_response_error(self, address):
        message = self.reject_response[address]
        if message == "transport":
            return LedgerTransportError("submitOracleResponse: connection reset")
        return LedgerRejectedError(message)

    def emit(self, event: dict) -> None:
        self.live.put_nowait(event)

    def close_stream(self) -> None:
        self.live.put_nowait(_END_OF_STREAM)

    async def oracle_requests(self, from_block: int = 0):
        self.seen_from_block = from_block
        for event in self.history:
            yield event
        if self.stream_error is not None:
            raise self.stream_error
        while True:
            event = await self.live.get()
            if event is _END_OF_STREAM:
                return
            yield event


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def settings():
    return Settings(oracle_count=21, seed=1234)
