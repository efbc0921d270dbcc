from __future__ import annotations

import logging

from gas_oracle.clients.explorer import fetch_explorer_gas_price
from gas_oracle.clients.rpc import fetch_rpc_gas_price
from gas_oracle.errors import GasPriceError
from gas_oracle.http import HttpClient
from gas_oracle.models import GasPriceEstimate, SourceConfig

logger = logging.getLogger(__name__)


class FallbackFetcher:
    """Explorer first, JSON-RPC node second.

    Never touches the estimate cache; the caller decides what a failure means.
    """

    def __init__(self, http: HttpClient, config: SourceConfig):
        self.http = http
        self.config = config

    async def fetch_best_effort(self) -> GasPriceEstimate:
        """Return a fresh estimate or raise the RPC error once both sources failed."""
        try:
            wei = await fetch_explorer_gas_price(self.http, self.config)
            source = "explorer"
        except GasPriceError as explorer_error:
            logger.warning(f"Fuse explorer failed: {explorer_error}")
            try:
                wei = await fetch_rpc_gas_price(self.http, self.config)
                source = "rpc"
            except GasPriceError as rpc_error:
                logger.warning(f"RPC fallback failed: {rpc_error}")
                raise
        logger.debug(f"Gas price from {source}: {wei} wei")
        # Calldata pricing is not observed separately; it mirrors the gas price.
        return GasPriceEstimate(fast_wei=wei, l1_calldata_price_per_unit_wei=wei)
