"""
Schemas module for the oracle coordination service

Contains Pydantic models for oracle records, reports and API responses.
"""

from oracle_server.schemas.oracle import (
    INDEX_RANGE,
    OracleIdentity,
    ResponseOutcome,
    StatusCode,
    StatusRequest,
)
from oracle_server.schemas.registration import RegistrationFailure, RegistrationReport
from oracle_server.schemas.status import PoolStatus

__all__ = [
    "INDEX_RANGE",
    "OracleIdentity",
    "ResponseOutcome",
    "StatusCode",
    "StatusRequest",
    "RegistrationFailure",
    "RegistrationReport",
    "PoolStatus",
]
