"""
Oracle API router.

Read-only endpoints reporting on the oracle pool.
"""

from fastapi import APIRouter, HTTPException, Request

from oracle_server.oracles.coordinator import OracleCoordinator
from oracle_server.schemas.oracle import OracleIdentity
from oracle_server.schemas.status import PoolStatus

router = APIRouter(prefix="/oracles", tags=["oracles"])


def get_coordinator(request: Request) -> OracleCoordinator:
    coordinator = getattr(request.app.state, "coordinator", None)
    if coordinator is None:
        raise HTTPException(status_code=503, detail="Oracle coordinator is not running")
    return coordinator


@router.get("/status", response_model=PoolStatus)
async def pool_status(request: Request) -> PoolStatus:
    """
    Report pool size and how many oracles are actively participating.

    Informational only; has no effect on dispatch.
    """
    return get_coordinator(request).status()


@router.get("", response_model=list[OracleIdentity])
async def list_oracles(request: Request) -> list[OracleIdentity]:
    """Registered oracle identities in registration order."""
    return list(get_coordinator(request).pool.all())
