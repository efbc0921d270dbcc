import pytest

from gas_oracle.errors import ConfigMissingError, ProtocolError, TransportError
from gas_oracle.models import GasPriceEstimate, SourceConfig
from gas_oracle.services.fetcher import FallbackFetcher

from tests.conftest import EXPLORER_URL, RPC_URL, explorer_ok, http_failure, raw_body, rpc_error, rpc_ok


@pytest.mark.asyncio
async def test_explorer_success_skips_rpc(sources, http, source_config):
    sources.explorer = explorer_ok(42)
    estimate = await FallbackFetcher(http, source_config).fetch_best_effort()
    assert estimate == GasPriceEstimate(fast_wei=42, l1_calldata_price_per_unit_wei=42)
    assert sources.calls == {"explorer": 1, "rpc": 0}


@pytest.mark.asyncio
async def test_explorer_failure_falls_back_to_rpc(sources, http, source_config):
    sources.explorer = http_failure(500)
    sources.rpc = rpc_ok(77)
    estimate = await FallbackFetcher(http, source_config).fetch_best_effort()
    assert estimate.fast_wei == 77
    assert estimate.l1_calldata_price_per_unit_wei == 77
    assert sources.calls == {"explorer": 1, "rpc": 1}


@pytest.mark.asyncio
async def test_missing_explorer_key_falls_back_to_rpc(sources, http):
    config = SourceConfig(explorer_base_url=EXPLORER_URL, rpc_url=RPC_URL)
    sources.rpc = rpc_ok(5)
    estimate = await FallbackFetcher(http, config).fetch_best_effort()
    assert estimate.fast_wei == 5
    assert sources.calls == {"explorer": 0, "rpc": 1}


@pytest.mark.asyncio
async def test_both_failing_raises_rpc_error(sources, http, source_config):
    sources.explorer = http_failure(500)
    sources.rpc = rpc_error("node is syncing")
    with pytest.raises(ProtocolError, match="node is syncing"):
        await FallbackFetcher(http, source_config).fetch_best_effort()


@pytest.mark.asyncio
async def test_last_error_wins(sources, http):
    config = SourceConfig(explorer_base_url=EXPLORER_URL, rpc_url=RPC_URL)
    sources.rpc = http_failure(503)
    with pytest.raises(TransportError):
        await FallbackFetcher(http, config).fetch_best_effort()


@pytest.mark.asyncio
async def test_nothing_configured_raises_rpc_config_error(sources, http):
    config = SourceConfig(explorer_base_url=EXPLORER_URL)
    with pytest.raises(ConfigMissingError, match="NODE_RPC_URL"):
        await FallbackFetcher(http, config).fetch_best_effort()
    assert sources.requests == []


@pytest.mark.asyncio
async def test_infinite_explorer_price_falls_back_to_rpc(sources, http, source_config):
    sources.explorer = raw_body(b'{"gas_prices": {"fast": Infinity}}')
    sources.rpc = rpc_ok(0x4D)
    estimate = await FallbackFetcher(http, source_config).fetch_best_effort()
    assert estimate.fast_wei == 77
    assert sources.calls == {"explorer": 1, "rpc": 1}
