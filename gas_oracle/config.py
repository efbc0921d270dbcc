from __future__ import annotations

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from gas_oracle.models import SourceConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Runtime
    ENV: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Fuse explorer (Blockscout stats)
    FUSE_EXPLORER_API_KEY: str | None = None
    FUSE_EXPLORER_BASE_URL: str = Field(default="https://explorer.fuse.io/api/v2/stats")

    # JSON-RPC fallback
    NODE_RPC_URL: str | None = None

    # Polling / escalation
    GAS_PRICE_POLLING_INTERVAL_MS: int = Field(default=6000, gt=0)
    GAS_PRICE_MAX_ERROR_COUNT: int = Field(default=5, ge=0)

    # Transport
    HTTP_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)
    HTTP_MAX_ATTEMPTS: int = Field(default=3, ge=1)

    def source_config(self) -> SourceConfig:
        return SourceConfig(
            explorer_api_key=self.FUSE_EXPLORER_API_KEY or None,
            explorer_base_url=self.FUSE_EXPLORER_BASE_URL,
            rpc_url=self.NODE_RPC_URL or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
