"""
FlightSurety oracle coordination service.

Simulates a pool of flight-status oracles that answer on-chain requests.
"""

__version__ = "0.1.0"
