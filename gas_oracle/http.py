from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (httpx.HTTPError, httpx.ConnectError, httpx.ReadTimeout)


class HttpClient:
    def __init__(
        self,
        timeout: float = 15.0,
        max_attempts: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._max_attempts = max_attempts

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
        )

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        logger.debug(f"HTTP GET {url} params={list(params.keys()) if params else None}")
        async for attempt in self._retrying():
            with attempt:
                resp = await self._client.get(url, params=params, headers=headers)
                resp.raise_for_status()
        return resp

    async def post(self, url: str, json: Optional[Dict[str, Any]] = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        logger.debug(f"HTTP POST {url} json_keys={list(json.keys()) if json else None}")
        async for attempt in self._retrying():
            with attempt:
                resp = await self._client.post(url, json=json, headers=headers)
                resp.raise_for_status()
        return resp

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()
