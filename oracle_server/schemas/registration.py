"""
Registration report models.
"""

from typing import Literal

from pydantic import BaseModel, Field

from oracle_server.schemas.oracle import OracleIdentity

RegistrationReason = Literal[
    "insufficient_funds", "rejected", "transport", "invalid_indexes", "duplicate"
]


class RegistrationFailure(BaseModel):
    """A single address that could not be registered."""

    address: str
    reason: RegistrationReason
    detail: str = ""


class RegistrationReport(BaseModel):
    """Outcome of one registration pass over a set of addresses."""

    registered: list[OracleIdentity] = Field(default_factory=list)
    failures: list[RegistrationFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
