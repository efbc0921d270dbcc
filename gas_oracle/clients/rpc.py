from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from gas_oracle.errors import ConfigMissingError, ProtocolError, TransportError
from gas_oracle.http import HttpClient
from gas_oracle.models import RpcResponse, SourceConfig

logger = logging.getLogger(__name__)


async def _rpc(http: HttpClient, url: str, method: str, params: Optional[list] = None) -> Any:
    payload = {"jsonrpc": "2.0", "method": method, "params": params or [], "id": 1}
    try:
        resp = await http.post(url, json=payload)
    except httpx.HTTPError as e:
        raise TransportError(f"RPC request failed: {e}") from e
    try:
        data = RpcResponse.model_validate(resp.json())
    except (ValueError, ValidationError) as e:
        raise ProtocolError(f"RPC response is malformed: {e}") from e
    if data.error is not None:
        raise ProtocolError(f"RPC error: {data.error.message}")
    if data.result is None:
        raise ProtocolError(f"RPC response for {method} has no result")
    return data.result


async def fetch_rpc_gas_price(http: HttpClient, config: SourceConfig) -> int:
    """Query ``eth_gasPrice`` on the configured node; returns wei."""
    if not config.rpc_url:
        raise ConfigMissingError("NODE_RPC_URL is not set")
    wei_hex = await _rpc(http, config.rpc_url, "eth_gasPrice")
    try:
        wei = int(wei_hex, 16)
    except ValueError as e:
        raise ProtocolError(f"eth_gasPrice result is not a hex integer: {wei_hex!r}") from e
    if wei < 0:
        raise ProtocolError(f"eth_gasPrice result is negative: {wei_hex!r}")
    return wei
