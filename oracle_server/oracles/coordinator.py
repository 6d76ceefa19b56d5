"""
Oracle coordinator.

Owns the identity pool and wires registration, listening, dispatch and
response submission together for the lifetime of the process.
"""

import asyncio
import logging
import random
from typing import Optional

from oracle_server.config import Settings
from oracle_server.errors import ListenerTransportError
from oracle_server.ledger.base import Ledger
from oracle_server.oracles.dispatcher import Dispatcher
from oracle_server.oracles.listener import RequestListener
from oracle_server.oracles.pool import IdentityPool
from oracle_server.oracles.registrar import Registrar
from oracle_server.oracles.responder import Responder
from oracle_server.schemas.registration import RegistrationReport
from oracle_server.schemas.status import PoolStatus

logger = logging.getLogger(__name__)


class OracleCoordinator:
    """Startup, shutdown and status for the simulated oracle network."""

    def __init__(self, ledger: Ledger, settings: Settings, rng: Optional[random.Random] = None):
        self.ledger = ledger
        self.settings = settings
        self.pool = IdentityPool()
        self.registrar = Registrar(
            ledger, self.pool, rng if rng is not None else random.Random(settings.seed)
        )
        self.dispatcher = Dispatcher(self.pool, Responder(ledger))
        self.listener = RequestListener(ledger, self.dispatcher, from_block=0)
        self.report: Optional[RegistrationReport] = None
        self.listener_task: Optional[asyncio.Task] = None
        self.listener_error: Optional[BaseException] = None

    @property
    def listening(self) -> bool:
        return self.listener_task is not None and not self.listener_task.done()

    async def select_accounts(self) -> list[str]:
        """Accounts funding the oracles; account 0 is left to the contract owner."""
        accounts = await self.ledger.get_accounts()
        start = self.settings.account_offset
        selected = accounts[start : start + self.settings.oracle_count]
        if len(selected) < self.settings.oracle_count:
            logger.warning(
                f"Only {len(selected)} accounts available for {self.settings.oracle_count} oracles"
            )
        return selected

    async def start(self) -> RegistrationReport:
        """
        Register the oracle pool, then attach the request listener.

        Registration always finishes before the listener starts, so every
        request is matched against a sealed pool.
        """
        addresses = await self.select_accounts()
        self.report = await self.registrar.register_all(addresses)
        self.listener_task = asyncio.create_task(self.listener.run(), name="oracle-request-listener")
        self.listener_task.add_done_callback(self._listener_done)
        return self.report

    def _listener_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.info("Request listener stopped")
            return
        exc = task.exception()
        if exc is None:
            logger.warning("Request listener ended without an error")
            return
        self.listener_error = exc
        if isinstance(exc, ListenerTransportError):
            logger.critical(f"Request listener lost its subscription: {exc}")
        else:
            logger.critical(f"Request listener crashed: {exc!r}")

    async def wait(self) -> None:
        """Block on the listener; re-raises the error that ended it."""
        if self.listener_task is None:
            raise RuntimeError("coordinator has not been started")
        await self.listener_task

    async def stop(self) -> None:
        """Detach the listener and let in-flight responses finish."""
        if self.listener_task is not None and not self.listener_task.done():
            self.listener_task.cancel()
            try:
                await self.listener_task
            except asyncio.CancelledError:
                pass
        await self.dispatcher.drain()

    def status(self) -> PoolStatus:
        pool_size = self.pool.size()
        return PoolStatus(
            pool_size=pool_size,
            active_oracles=pool_size if self.listening else 0,
            target_size=self.settings.oracle_count,
            listening=self.listening,
            registration_failures=len(self.report.failures) if self.report else 0,
            requests_received=self.listener.requests_received,
            malformed_events=self.listener.malformed_events,
            listener_error=str(self.listener_error) if self.listener_error else None,
        )
