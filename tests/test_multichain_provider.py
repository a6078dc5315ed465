import asyncio

import pytest

from collateral_reader.app.domain.cache_keys import STATS_STORAGE_KEY, WORK_IN_PROGRESS_STORAGE_KEY
from collateral_reader.app.domain.errors import ProviderError
from collateral_reader.app.infrastructure.adapters.multichain.assets_stats_job import AssetsStatsJob
from collateral_reader.app.infrastructure.adapters.multichain.balance_aggregator import (
    BalanceAggregator,
)
from collateral_reader.app.infrastructure.adapters.multichain.multichain_provider import (
    MultichainBridgeProvider,
)
from collateral_reader.app.infrastructure.adapters.multichain.registry_cache import RegistryCache

from .conftest import (
    BSC_ANYTOKEN,
    BSC_FROMANYTOKEN,
    BSC_RPC,
    CHAIN_DIRECTORY_URL,
    ETH_RPC,
    FTM_ANYTOKEN,
    FTM_FROMANYTOKEN,
    FTM_RPC,
    TOKEN_DIRECTORY_URL,
    balances_handler,
)


@pytest.fixture
def registry(store, fetch_client) -> RegistryCache:
    return RegistryCache(
        store=store,
        fetch_client=fetch_client,
        chain_directory_url=CHAIN_DIRECTORY_URL,
        token_directory_url=TOKEN_DIRECTORY_URL,
        whitelisted_symbols=("USDC", "DAI"),
    )


@pytest.fixture
def provider(store, fetch_client, registry) -> MultichainBridgeProvider:
    fetch_client.post_handlers[BSC_RPC] = balances_handler({BSC_ANYTOKEN: 60})
    fetch_client.post_handlers[FTM_RPC] = balances_handler({FTM_ANYTOKEN: 40})
    fetch_client.post_handlers[ETH_RPC] = balances_handler({BSC_FROMANYTOKEN: 30, FTM_FROMANYTOKEN: 20})
    job = AssetsStatsJob(
        store=store,
        registry=registry,
        aggregator=BalanceAggregator(fetch_client=fetch_client),
    )
    return MultichainBridgeProvider(registry=registry, job=job)


class TestSupportedAssets:
    def test_populates_registry(self, provider, registry):
        assets = asyncio.run(provider.supported_assets())

        assert [a.symbol for a in assets] == ["USDC"]
        assert asyncio.run(registry.cached_associated_assets())

    def test_registry_failure(self, provider, fetch_client):
        del fetch_client.get_responses[TOKEN_DIRECTORY_URL]

        with pytest.raises(ProviderError):
            asyncio.run(provider.supported_assets())


class TestLockedIssued:
    def test_before_registry_is_populated(self, provider):
        assert asyncio.run(provider.locked("USDC")) == 0
        assert asyncio.run(provider.issued("USDC")) == 0

    def test_after_refresh(self, provider):
        asyncio.run(provider.supported_assets())

        assert asyncio.run(provider.locked("USDC")) == 100
        assert asyncio.run(provider.issued("USDC")) == 50

    def test_unknown_asset_with_a_snapshot(self, provider):
        asyncio.run(provider.supported_assets())

        with pytest.raises(ProviderError):
            asyncio.run(provider.locked("WBTC"))

    def test_reads_stale_snapshot_while_refresh_runs(self, provider, store):
        asyncio.run(store.set(WORK_IN_PROGRESS_STORAGE_KEY, True))
        asyncio.run(store.set(STATS_STORAGE_KEY, [{"asset_id": "USDC", "locked": 9, "issued": 4}]))

        assert asyncio.run(provider.locked("USDC")) == 9
        assert asyncio.run(provider.issued("USDC")) == 4


class TestAssociations:
    def test_minted_asset_before_registry_is_populated(self, provider):
        assert asyncio.run(provider.minted_asset("USDC")) == ""

    def test_minted_asset(self, provider):
        asyncio.run(provider.supported_assets())

        assert asyncio.run(provider.minted_asset("USDC")) == "USDC"

    def test_minted_asset_unknown(self, provider):
        asyncio.run(provider.supported_assets())

        with pytest.raises(ProviderError):
            asyncio.run(provider.minted_asset("DAI"))

    def test_associated_assets(self, provider):
        asyncio.run(provider.supported_assets())

        assert asyncio.run(provider.associated_assets("anyUSDC")) == "USDC"
        with pytest.raises(ProviderError):
            asyncio.run(provider.associated_assets("anyDAI"))
