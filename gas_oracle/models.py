from __future__ import annotations

from typing import Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt


class GasPriceEstimate(BaseModel):
    model_config = ConfigDict(frozen=True)

    fast_wei: int = Field(..., ge=0, description="Gas price in wei")
    l1_calldata_price_per_unit_wei: int | None = Field(default=None, ge=0)

    def merged_over(self, defaults: "GasPriceEstimate") -> "GasPriceEstimate":
        """Return ``defaults`` with every field this estimate sets taking precedence."""
        return defaults.model_copy(update=self.model_dump(exclude_none=True))


class SourceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    explorer_api_key: str | None = Field(default=None, repr=False)
    explorer_base_url: str
    rpc_url: str | None = None

    @property
    def registry_key(self) -> Tuple[str, Optional[str]]:
        return (self.explorer_base_url, self.rpc_url)


# Response shapes of the two gas price sources


class GasPriceBreakdown(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    fast: NonNegativeInt | NonNegativeFloat
    average: Optional[float] = None
    slow: Optional[float] = None


class ExplorerStats(BaseModel):
    gas_prices: GasPriceBreakdown


class RpcError(BaseModel):
    code: Optional[int] = None
    message: str = "unknown error"


class RpcResponse(BaseModel):
    jsonrpc: Optional[str] = None
    id: Any = None
    result: Optional[str] = None
    error: Optional[RpcError] = None
