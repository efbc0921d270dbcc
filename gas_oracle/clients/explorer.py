from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from gas_oracle.errors import ConfigMissingError, ProtocolError, TransportError
from gas_oracle.http import HttpClient
from gas_oracle.models import ExplorerStats, SourceConfig

logger = logging.getLogger(__name__)


async def fetch_explorer_gas_price(http: HttpClient, config: SourceConfig) -> int:
    """Fetch the "fast" gas price (wei) from the Fuse explorer stats endpoint."""
    if not config.explorer_api_key:
        raise ConfigMissingError("FUSE_EXPLORER_API_KEY is not set")
    try:
        resp = await http.get(config.explorer_base_url, params={"apikey": config.explorer_api_key})
    except httpx.HTTPError as e:
        raise TransportError(f"Explorer request failed: {e}") from e
    try:
        stats = ExplorerStats.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        raise ProtocolError(f"Explorer response is malformed: {e}") from e
    try:
        return int(stats.gas_prices.fast)
    except (OverflowError, ValueError) as e:
        raise ProtocolError(f"Explorer fast gas price is not finite: {stats.gas_prices.fast!r}") from e
