"""
Operational status model returned by the HTTP surface.
"""

from typing import Optional

from pydantic import BaseModel, Field


class PoolStatus(BaseModel):
    """Snapshot of the oracle pool and the request listener."""

    pool_size: int = Field(..., ge=0, description="Number of registered oracles")
    active_oracles: int = Field(
        ..., ge=0, description="Registered oracles currently attached to the request stream"
    )
    target_size: int = Field(..., ge=0, description="Configured pool size")
    listening: bool = False
    registration_failures: int = 0
    requests_received: int = 0
    malformed_events: int = 0
    listener_error: Optional[str] = None
