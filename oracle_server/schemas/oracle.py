"""
Oracle identity and flight-status request models.
"""

from enum import IntEnum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Indexes are drawn on-chain as `random % 10`.
INDEX_RANGE = range(0, 10)


class StatusCode(IntEnum):
    """Flight status codes understood by the FlightSurety contract."""

    UNKNOWN = 0
    ON_TIME = 10
    LATE_AIRLINE = 20
    LATE_WEATHER = 30
    LATE_TECHNICAL = 40
    LATE_OTHER = 50


class OracleIdentity(BaseModel):
    """A registered simulated oracle."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1, description="Account the oracle signs with")
    indexes: tuple[int, int, int] = Field(
        ..., description="Routing indexes assigned by the ledger at registration"
    )
    status_code: StatusCode = Field(
        ..., description="Status this oracle reports for every request it answers"
    )

    @field_validator("indexes")
    @classmethod
    def _check_indexes(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if len(set(value)) != len(value):
            raise ValueError(f"indexes must be distinct, got {value}")
        for index in value:
            if index not in INDEX_RANGE:
                raise ValueError(
                    f"index {index} outside [{INDEX_RANGE.start}, {INDEX_RANGE.stop - 1}]"
                )
        return value

    def holds(self, target_index: int) -> bool:
        return target_index in self.indexes


class StatusRequest(BaseModel):
    """A decoded OracleRequest event."""

    model_config = ConfigDict(frozen=True)

    target_index: int = Field(..., ge=0, description="Index selecting which oracles respond")
    airline: str = Field(..., min_length=1)
    flight: str = Field(..., min_length=1)
    timestamp: int


class ResponseOutcome(BaseModel):
    """Terminal result of one oracle answering one request."""

    address: str
    request: StatusRequest
    status_code: StatusCode
    state: Literal["submitted", "rejected"]
    reason: Optional[Literal["rejected", "index_mismatch", "unknown_oracle", "transport"]] = None
    detail: Optional[str] = None

    @property
    def submitted(self) -> bool:
        return self.state == "submitted"
