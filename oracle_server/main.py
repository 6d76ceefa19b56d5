"""
Oracle coordination FastAPI server

Main application entry point: registers the simulated oracles on startup,
follows OracleRequest events and exposes a small status API.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from oracle_server.config import Settings
from oracle_server.ledger.web3_ledger import Web3Ledger
from oracle_server.logging_config import configure_logging
from oracle_server.oracles.coordinator import OracleCoordinator
from oracle_server.routers.oracles import get_coordinator
from oracle_server.routers.oracles import router as oracles_router

logger = logging.getLogger(__name__)


def create_app(coordinator: Optional[OracleCoordinator] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        coordinator: Pre-built coordinator; when omitted one is created from
            environment settings against the web3 ledger at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = coordinator
        if active is None:
            settings = Settings.from_env()
            configure_logging(settings.log_level)
            active = OracleCoordinator(Web3Ledger.from_settings(settings), settings)
        app.state.coordinator = active
        await active.start()
        try:
            yield
        finally:
            await active.stop()

    app = FastAPI(
        title="FlightSurety Oracle Server",
        description="Simulated oracle network answering flight status requests",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(oracles_router)

    @app.get("/", response_class=PlainTextResponse)
    async def root(request: Request) -> str:
        """Human-readable pool summary"""
        status = get_coordinator(request).status()
        return (
            f"{status.pool_size} oracles are registered, "
            f"and {status.active_oracles} oracles are running"
        )

    @app.get("/api")
    async def api():
        """API banner"""
        return {"message": "An API for use with your Dapp!"}

    @app.get("/health")
    async def healthcheck(request: Request):
        """Health check endpoint; 503 once the request listener has died"""
        coordinator = get_coordinator(request)
        if not coordinator.listening:
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "service": "oracle-server",
                    "error": str(coordinator.listener_error) if coordinator.listener_error else None,
                },
            )
        return {"status": "healthy", "service": "oracle-server"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(app, host=settings.host, port=settings.port)
