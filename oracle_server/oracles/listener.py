"""
OracleRequest event listener.

Replays the event history from genesis, then follows new events and hands
each decoded request to the dispatcher.
"""

import logging

from pydantic import ValidationError

from oracle_server.errors import LedgerTransportError, ListenerTransportError, MalformedEventError
from oracle_server.ledger.base import Ledger
from oracle_server.oracles.dispatcher import Dispatcher
from oracle_server.schemas.oracle import StatusRequest

logger = logging.getLogger(__name__)

REQUIRED_ARGS = ("index", "airline", "flight", "timestamp")


def decode_event(event: dict) -> StatusRequest:
    """
    Decode an OracleRequest event into a StatusRequest.

    Raises:
        MalformedEventError: missing or invalid fields
    """
    args = event.get("args") if isinstance(event, dict) else None
    if not isinstance(args, dict) or not args:
        raise MalformedEventError("event has no returned values", event)

    missing = [name for name in REQUIRED_ARGS if args.get(name) is None]
    if missing:
        raise MalformedEventError(f"event is missing {', '.join(missing)}", event)

    try:
        return StatusRequest(
            target_index=args["index"],
            airline=args["airline"],
            flight=args["flight"],
            timestamp=args["timestamp"],
        )
    except ValidationError as exc:
        raise MalformedEventError(f"invalid event values: {exc.errors()}", event) from exc


class RequestListener:
    """Long-lived consumer of the ledger's OracleRequest stream."""

    def __init__(self, ledger: Ledger, dispatcher: Dispatcher, from_block: int = 0):
        self.ledger = ledger
        self.dispatcher = dispatcher
        self.from_block = from_block
        self.requests_received = 0
        self.malformed_events = 0

    def handle(self, event: dict) -> None:
        """Decode and dispatch one event; malformed events are dropped."""
        logger.debug(f"oracle-request {event}")
        try:
            request = decode_event(event)
        except MalformedEventError as exc:
            self.malformed_events += 1
            logger.warning(f"Dropping malformed OracleRequest event: {exc}")
            return

        self.requests_received += 1
        logger.info(
            f"Received request: index={request.target_index} airline={request.airline} "
            f"flight={request.flight} timestamp={request.timestamp}"
        )
        self.dispatcher.dispatch(request)

    async def run(self) -> None:
        """
        Consume events until the process stops.

        Raises:
            ListenerTransportError: the event subscription failed
        """
        logger.info(f"Listening for OracleRequest events from block {self.from_block}")
        try:
            async for event in self.ledger.oracle_requests(from_block=self.from_block):
                self.handle(event)
        except LedgerTransportError as exc:
            raise ListenerTransportError(f"OracleRequest subscription failed: {exc}") from exc
