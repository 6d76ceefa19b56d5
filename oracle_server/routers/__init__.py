"""
Routers module for the oracle coordination API

This module contains API route handlers.
"""

from oracle_server.routers import oracles

__all__ = ["oracles"]
