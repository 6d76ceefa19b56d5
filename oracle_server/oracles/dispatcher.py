"""
Fan-out of flight status requests to eligible oracles.
"""

import asyncio
import logging

from oracle_server.oracles.pool import IdentityPool
from oracle_server.oracles.responder import Responder
from oracle_server.schemas.oracle import StatusRequest

logger = logging.getLogger(__name__)


class Dispatcher:
    """Starts one independent Responder task per oracle holding the request index."""

    def __init__(self, pool: IdentityPool, responder: Responder):
        self.pool = pool
        self.responder = responder
        self._inflight: set[asyncio.Task] = set()

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    def dispatch(self, request: StatusRequest) -> list[asyncio.Task]:
        """
        Fan the request out to every matching oracle without waiting.

        Repeated requests are dispatched again; there is no concurrency limit.
        Must be called from a running event loop.

        Args:
            request: The decoded flight status request

        Returns:
            The started Responder tasks (empty when no oracle holds the index)
        """
        matching = self.pool.matching(request.target_index)
        logger.info(f"{len(matching)} Matching Oracles will respond to index {request.target_index}")
        if not matching:
            return []

        tasks = []
        for identity in matching:
            task = asyncio.create_task(
                self.responder.respond(identity, request),
                name=f"respond-{identity.address}-{request.flight}",
            )
            self._inflight.add(task)
            task.add_done_callback(self._finished)
            tasks.append(task)
        return tasks

    def _finished(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Responder task {task.get_name()} failed unexpectedly: {exc!r}")

    async def drain(self) -> None:
        """Wait for every in-flight Responder task to finish."""
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
