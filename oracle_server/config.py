"""
Runtime configuration for the oracle coordination service.

Values are read from environment variables once at startup.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_ORACLE_COUNT = 21


class Settings(BaseModel):
    """Service settings."""

    oracle_count: int = Field(DEFAULT_ORACLE_COUNT, ge=1, description="Target pool size")
    account_offset: int = Field(
        1, ge=0, description="First ledger account used as an oracle (0 is the contract owner)"
    )
    ledger_url: str = "http://127.0.0.1:8545"
    app_address: Optional[str] = Field(None, description="FlightSuretyApp contract address")
    app_abi_path: str = "build/contracts/FlightSuretyApp.json"
    seed: Optional[int] = Field(None, description="Seed for oracle status-code draws")
    poll_interval: float = Field(1.0, gt=0.0, description="Seconds between event polls")
    register_gas: int = Field(3_000_000, gt=0)
    response_gas: int = Field(6_000_000, gt=0)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(3000, gt=0, lt=65536)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "Settings":
        """
        Build settings from environment variables.

        Unset variables fall back to the field defaults; malformed values raise
        a pydantic ValidationError.
        """
        env = os.environ if environ is None else environ
        mapping = {
            "oracle_count": "ORACLE_COUNT",
            "account_offset": "ACCOUNT_OFFSET",
            "ledger_url": "LEDGER_URL",
            "app_address": "APP_ADDRESS",
            "app_abi_path": "APP_ABI_PATH",
            "seed": "ORACLE_SEED",
            "poll_interval": "POLL_INTERVAL",
            "register_gas": "REGISTER_GAS",
            "response_gas": "RESPONSE_GAS",
            "log_level": "LOG_LEVEL",
            "host": "HOST",
            "port": "PORT",
        }
        values = {field: env[var] for field, var in mapping.items() if env.get(var)}
        return cls(**values)
