"""
Ledger module

Boundary to the FlightSurety contract: queries, transactions and the
OracleRequest event stream.
"""

from oracle_server.ledger.base import Ledger
from oracle_server.ledger.web3_ledger import Web3Ledger, load_abi

__all__ = ["Ledger", "Web3Ledger", "load_abi"]
