from __future__ import annotations

import asyncio
import logging
from typing import Optional

from gas_oracle.background import GasPriceRefresher, SchedulerState
from gas_oracle.errors import EstimationFailedError, EstimatorStoppedError, GasPriceError
from gas_oracle.http import HttpClient
from gas_oracle.models import GasPriceEstimate, SourceConfig
from gas_oracle.services.cache import MAX_ERROR_COUNT, Escalation, EstimateCache
from gas_oracle.services.fetcher import FallbackFetcher

logger = logging.getLogger(__name__)


class GasPriceEstimator:
    """Cached gas price for one source configuration.

    Build instances through :class:`gas_oracle.registry.EstimatorRegistry` so
    that a configuration never gets two refreshers.
    """

    def __init__(
        self,
        poll_interval_ms: int,
        source_config: SourceConfig,
        http: Optional[HttpClient] = None,
        max_error_count: int = MAX_ERROR_COUNT,
    ):
        self.source_config = source_config
        self.http = http or HttpClient()
        self.fetcher = FallbackFetcher(self.http, source_config)
        self.cache = EstimateCache(max_error_count=max_error_count)
        self.refresher = GasPriceRefresher(self.refresh, poll_interval_ms, name=source_config.explorer_base_url)
        self._lock = asyncio.Lock()

    @property
    def poll_interval_ms(self) -> int:
        return self.refresher.poll_interval_ms

    @property
    def state(self) -> SchedulerState:
        return self.refresher.state

    @property
    def is_stopped(self) -> bool:
        return self.refresher.state is SchedulerState.STOPPED

    def start(self) -> None:
        self.refresher.start()

    def get_or_default(self, defaults: GasPriceEstimate) -> GasPriceEstimate:
        estimate = self.cache.estimate
        if estimate is None:
            return defaults
        return estimate.merged_over(defaults)

    async def get_or_throw(self) -> GasPriceEstimate:
        """Cached estimate, fetching once when nothing was cached yet.

        Raises :class:`EstimationFailedError` if that fetch fails.
        """
        estimate = self.cache.estimate
        if estimate is not None:
            return estimate
        async with self._lock:
            if not self.cache.has_estimate and not self.is_stopped:
                await self._refresh_locked()
        estimate = self.cache.estimate
        if estimate is None:
            raise EstimatorStoppedError("Gas price estimator was destroyed before obtaining an estimate")
        return estimate

    async def refresh(self) -> None:
        """One fetch cycle routed through the cache; scheduled ticks call this."""
        async with self._lock:
            await self._refresh_locked()

    async def _refresh_locked(self) -> None:
        try:
            estimate = await self.fetcher.fetch_best_effort()
        except GasPriceError as e:
            if self.is_stopped:
                return
            if self.cache.record_failure(e) is Escalation.FATAL:
                raise EstimationFailedError(f"Gas price estimation failed: {e}") from e
            return
        if self.is_stopped:
            logger.debug("Discarding gas price fetched after teardown")
            return
        self.cache.record_success(estimate)

    async def destroy(self) -> None:
        """Stop refreshing and release the HTTP client."""
        await self.refresher.stop()
        async with self._lock:
            if not self.http.is_closed:
                await self.http.aclose()
