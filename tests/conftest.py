from __future__ import annotations

import json
from typing import Callable, Dict, List

import httpx
import pytest

from gas_oracle.config import get_settings
from gas_oracle.http import HttpClient
from gas_oracle.models import SourceConfig

EXPLORER_URL = "https://explorer.test/api/v2/stats"
RPC_URL = "https://rpc.test/"

Responder = Callable[[httpx.Request], httpx.Response]


def explorer_ok(fast) -> Responder:
    body = {"gas_prices": {"average": fast, "fast": fast, "slow": fast}, "total_blocks": "1"}
    return lambda request: httpx.Response(200, json=body)


def rpc_ok(wei: int) -> Responder:
    return lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": hex(wei)})


def rpc_error(message: str) -> Responder:
    body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": message}}
    return lambda request: httpx.Response(200, json=body)


def http_failure(status: int = 500) -> Responder:
    return lambda request: httpx.Response(status, json={"message": "unavailable"})


def raw_body(content: bytes) -> Responder:
    return lambda request: httpx.Response(200, content=content, headers={"content-type": "application/json"})


class FakeSources:
    """Routes explorer and RPC requests to swappable responders and counts calls."""

    def __init__(self) -> None:
        self.explorer: Responder = explorer_ok(10)
        self.rpc: Responder = rpc_ok(20)
        self.calls: Dict[str, int] = {"explorer": 0, "rpc": 0}
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host.startswith("explorer"):
            self.calls["explorer"] += 1
            return self.explorer(request)
        self.calls["rpc"] += 1
        return self.rpc(request)

    def rpc_payloads(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests if not r.url.host.startswith("explorer")]

    def http_client(self) -> HttpClient:
        return HttpClient(max_attempts=1, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def sources() -> FakeSources:
    return FakeSources()


@pytest.fixture
def http(sources: FakeSources) -> HttpClient:
    return sources.http_client()


@pytest.fixture
def source_config() -> SourceConfig:
    return SourceConfig(explorer_api_key="test-key", explorer_base_url=EXPLORER_URL, rpc_url=RPC_URL)


@pytest.fixture
def settings_env(monkeypatch):
    monkeypatch.setenv("FUSE_EXPLORER_API_KEY", "test-key")
    monkeypatch.setenv("FUSE_EXPLORER_BASE_URL", EXPLORER_URL)
    monkeypatch.setenv("NODE_RPC_URL", RPC_URL)
    monkeypatch.setenv("GAS_PRICE_POLLING_INTERVAL_MS", "60000")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
