from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Dict, Hashable, Optional

from gas_oracle.config import get_settings
from gas_oracle.estimator import GasPriceEstimator
from gas_oracle.http import HttpClient
from gas_oracle.models import SourceConfig

logger = logging.getLogger(__name__)


def default_http_factory() -> HttpClient:
    settings = get_settings()
    return HttpClient(timeout=settings.HTTP_TIMEOUT_SECONDS, max_attempts=settings.HTTP_MAX_ATTEMPTS)


class EstimatorRegistry:
    """One running :class:`GasPriceEstimator` per source endpoint identity.

    ``get_or_create`` is the only construction path and runs under a lock,
    so concurrent first callers for a key share a single refresher.
    Entries stay until :meth:`destroy` or :meth:`destroy_all` is called.
    """

    def __init__(
        self,
        http_factory: Callable[[], HttpClient] = default_http_factory,
        max_error_count: Optional[int] = None,
    ):
        self._http_factory = http_factory
        self._max_error_count = max_error_count
        self._instances: Dict[Hashable, GasPriceEstimator] = {}
        self._lock = threading.Lock()

    def get_or_create(self, poll_interval_ms: int, source_config: Optional[SourceConfig] = None) -> GasPriceEstimator:
        """Must be called from a running event loop; a new instance starts refreshing immediately."""
        # fail before building an HTTP client that nothing would close
        asyncio.get_running_loop()
        config = source_config or get_settings().source_config()
        key = config.registry_key
        with self._lock:
            instance = self._instances.get(key)
            if instance is not None:
                if instance.poll_interval_ms != poll_interval_ms:
                    logger.debug(
                        f"Gas price estimator for {key} already polls every {instance.poll_interval_ms}ms; "
                        f"ignoring requested {poll_interval_ms}ms"
                    )
                return instance
            max_error_count = self._max_error_count
            if max_error_count is None:
                max_error_count = get_settings().GAS_PRICE_MAX_ERROR_COUNT
            instance = GasPriceEstimator(
                poll_interval_ms,
                config,
                http=self._http_factory(),
                max_error_count=max_error_count,
            )
            instance.start()
            self._instances[key] = instance
            logger.info(f"Created gas price estimator for {config.explorer_base_url} (interval={poll_interval_ms}ms)")
            return instance

    def get(self, key: Hashable) -> Optional[GasPriceEstimator]:
        with self._lock:
            return self._instances.get(key)

    async def destroy(self, key: Hashable) -> None:
        with self._lock:
            instance = self._instances.pop(key, None)
        if instance is not None:
            await instance.destroy()

    async def destroy_all(self) -> None:
        with self._lock:
            instances = list(self._instances.values())
            self._instances.clear()
        for instance in instances:
            await instance.destroy()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._instances

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)
