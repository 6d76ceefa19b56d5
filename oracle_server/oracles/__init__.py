"""
Oracles module

Identity pool, registration, request listening, dispatch and response
submission for the simulated oracle network.
"""

from oracle_server.oracles.coordinator import OracleCoordinator
from oracle_server.oracles.dispatcher import Dispatcher
from oracle_server.oracles.listener import RequestListener, decode_event
from oracle_server.oracles.pool import IdentityPool
from oracle_server.oracles.registrar import Registrar
from oracle_server.oracles.responder import Responder

__all__ = [
    "OracleCoordinator",
    "Dispatcher",
    "RequestListener",
    "decode_event",
    "IdentityPool",
    "Registrar",
    "Responder",
]
