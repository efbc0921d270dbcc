from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, Query

from gas_oracle.config import get_settings
from gas_oracle.errors import GasPriceError
from gas_oracle.estimator import GasPriceEstimator
from gas_oracle.models import GasPriceEstimate
from gas_oracle.registry import EstimatorRegistry
from gas_oracle.utils.logging import setup_logging

app = FastAPI(title="Fuse Gas Price Oracle", version="1.0.0")

logger = logging.getLogger(__name__)


def _get_estimator() -> GasPriceEstimator:
    settings = get_settings()
    registry: EstimatorRegistry = app.state.registry
    return registry.get_or_create(settings.GAS_PRICE_POLLING_INTERVAL_MS, settings.source_config())


@app.on_event("startup")
async def startup_event() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    if getattr(app.state, "registry", None) is None:
        app.state.registry = EstimatorRegistry()
    # Starts the background refresher so the first request finds a warm cache
    _get_estimator()
    logger.info(f"Gas price oracle ready (interval={settings.GAS_PRICE_POLLING_INTERVAL_MS}ms)")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    registry: Optional[EstimatorRegistry] = getattr(app.state, "registry", None)
    if registry is not None:
        await registry.destroy_all()


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/gas-price", response_model=GasPriceEstimate)
async def get_gas_price():
    try:
        return await _get_estimator().get_or_throw()
    except GasPriceError as e:
        logger.warning(f"Gas price unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))


@app.get("/api/gas-price/default", response_model=GasPriceEstimate)
async def get_gas_price_or_default(
    fast_wei: int = Query(..., ge=0),
    l1_calldata_price_per_unit_wei: Optional[int] = Query(None, ge=0),
):
    defaults = GasPriceEstimate(fast_wei=fast_wei, l1_calldata_price_per_unit_wei=l1_calldata_price_per_unit_wei)
    return _get_estimator().get_or_default(defaults)
