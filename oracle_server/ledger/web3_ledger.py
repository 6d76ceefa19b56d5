"""
web3.py implementation of the ledger boundary.

Talks JSON-RPC to an EVM node hosting the FlightSuretyApp contract.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Union

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, Web3Exception

from oracle_server.errors import (
    InsufficientFundsError,
    LedgerRejectedError,
    LedgerTransportError,
)
from oracle_server.ledger.base import Ledger

logger = logging.getLogger(__name__)

INSUFFICIENT_FUNDS_MARKERS = ("insufficient funds", "doesn't have enough funds")


def load_abi(path: Union[str, Path]) -> list:
    """
    Load a contract ABI from a truffle build artifact or a bare ABI file.

    Args:
        path: Path to `FlightSuretyApp.json` or a JSON list of ABI entries

    Returns:
        The ABI as a list of entries
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        if "abi" not in data:
            raise ValueError(f"{path} has no 'abi' entry")
        return data["abi"]
    return data


def translate_error(exc: Exception, operation: str) -> Exception:
    """Map a web3/transport exception onto the LedgerError hierarchy."""
    message = str(exc)
    if isinstance(exc, ContractLogicError):
        return LedgerRejectedError(f"{operation}: {message}")
    if any(marker in message.lower() for marker in INSUFFICIENT_FUNDS_MARKERS):
        return InsufficientFundsError(f"{operation}: {message}")
    return LedgerTransportError(f"{operation}: {message}")


def checksum(address: str, operation: str) -> str:
    """Checksum an account address; a malformed address is a rejected call."""
    try:
        return AsyncWeb3.to_checksum_address(address)
    except (ValueError, TypeError) as exc:
        raise LedgerRejectedError(f"{operation}: invalid address {address!r}: {exc}") from exc


class Web3Ledger(Ledger):
    """Ledger backed by the FlightSuretyApp contract over HTTP JSON-RPC."""

    def __init__(
        self,
        url: str,
        app_address: str,
        abi: list,
        register_gas: int = 3_000_000,
        response_gas: int = 6_000_000,
        poll_interval: float = 1.0,
    ):
        self.w3 = AsyncWeb3(AsyncHTTPProvider(url))
        self.contract = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(app_address), abi=abi
        )
        self.register_gas = register_gas
        self.response_gas = response_gas
        self.poll_interval = poll_interval

    @classmethod
    def from_settings(cls, settings) -> "Web3Ledger":
        if not settings.app_address:
            raise ValueError("APP_ADDRESS must be set to reach the FlightSuretyApp contract")
        return cls(
            url=settings.ledger_url,
            app_address=settings.app_address,
            abi=load_abi(settings.app_abi_path),
            register_gas=settings.register_gas,
            response_gas=settings.response_gas,
            poll_interval=settings.poll_interval,
        )

    @asynccontextmanager
    async def _call(self, operation: str):
        try:
            yield
        except (
            Web3Exception,
            aiohttp.ClientError,
            OSError,
            ValueError,
            asyncio.TimeoutError,
        ) as exc:
            raise translate_error(exc, operation) from exc

    async def _send(self, call, tx: dict, operation: str) -> None:
        """Send a transaction and wait for its receipt; run inside `_call`."""
        tx_hash = await call.transact(tx)
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] != 1:
            raise LedgerRejectedError(f"{operation}: transaction {tx_hash.hex()} reverted")

    async def get_accounts(self) -> list[str]:
        async with self._call("eth_accounts"):
            return list(await self.w3.eth.accounts)

    async def get_balance(self, address: str) -> int:
        async with self._call("eth_getBalance"):
            return await self.w3.eth.get_balance(checksum(address, "eth_getBalance"))

    async def get_registration_fee(self) -> int:
        async with self._call("REGISTRATION_FEE"):
            return await self.contract.functions.REGISTRATION_FEE().call()

    async def register_oracle(self, address: str, fee: int) -> None:
        async with self._call("registerOracle"):
            tx = {
                "from": checksum(address, "registerOracle"),
                "value": fee,
                "gas": self.register_gas,
            }
            await self._send(self.contract.functions.registerOracle(), tx, "registerOracle")

    async def get_assigned_indexes(self, address: str) -> tuple[int, int, int]:
        async with self._call("getMyIndexes"):
            indexes = await self.contract.functions.getMyIndexes().call(
                {"from": checksum(address, "getMyIndexes")}
            )
        return tuple(int(i) for i in indexes)

    async def submit_response(
        self,
        target_index: int,
        airline: str,
        flight: str,
        timestamp: int,
        status_code: int,
        from_address: str,
    ) -> None:
        operation = "submitOracleResponse"
        async with self._call(operation):
            tx = {"from": checksum(from_address, operation), "gas": self.response_gas}
            call = self.contract.functions.submitOracleResponse(
                target_index,
                checksum(airline, operation),
                flight,
                timestamp,
                status_code,
            )
            await self._send(call, tx, operation)

    async def oracle_requests(self, from_block: int = 0) -> AsyncIterator[dict]:
        """
        Poll OracleRequest logs from `from_block` onwards.

        Logs already on chain are replayed first; afterwards the node is polled
        every `poll_interval` seconds for new blocks.
        """
        next_block = from_block
        while True:
            async with self._call("eth_getLogs OracleRequest"):
                latest = await self.w3.eth.block_number
                logs = []
                if latest >= next_block:
                    logs = await self.contract.events.OracleRequest().get_logs(
                        from_block=next_block, to_block=latest
                    )
            for log in logs:
                yield {
                    "event": log["event"],
                    "block_number": log["blockNumber"],
                    "transaction_hash": log["transactionHash"].hex(),
                    "args": dict(log["args"]),
                }
            next_block = max(next_block, latest + 1)
            await asyncio.sleep(self.poll_interval)
