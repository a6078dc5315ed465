from __future__ import annotations

from dataclasses import dataclass

from collateral_reader.app.application.services.collectors.collector_chain import CollectorChain
from collateral_reader.app.config import Settings, settings as app_settings
from collateral_reader.app.domain.ports.out import KeyValueStore, RemoteFetchClient
from collateral_reader.app.infrastructure.adapters.multichain.assets_stats_job import AssetsStatsJob
from collateral_reader.app.infrastructure.adapters.multichain.balance_aggregator import (
    BalanceAggregator,
)
from collateral_reader.app.infrastructure.adapters.multichain.multichain_provider import (
    MultichainBridgeProvider,
)
from collateral_reader.app.infrastructure.adapters.multichain.registry_cache import RegistryCache
from collateral_reader.app.infrastructure.adapters.native.interlay_provider import (
    InterlayStorageProvider,
)
from collateral_reader.app.infrastructure.fetchers.substrate_storage_reader import (
    SubstrateStorageReader,
)

NATIVE_FAMILY = "native"
MULTICHAIN_FAMILY = "multichain"


@dataclass(frozen=True)
class MultichainComponents:
    registry: RegistryCache
    aggregator: BalanceAggregator
    job: AssetsStatsJob


def multichain_components_factory(
    *,
    store: KeyValueStore,
    fetch_client: RemoteFetchClient,
    settings: Settings = app_settings,
) -> MultichainComponents:
    """
    Wire the multichain pipeline around one shared store:
    - registry cache (chain + token directories, association index),
    - balance aggregator (eth_call balanceOf over each chain RPC),
    - single-flight stats job.
    """
    registry = RegistryCache(
        store=store,
        fetch_client=fetch_client,
        chain_directory_url=settings.chain_directory_url,
        token_directory_url=settings.token_directory_url,
        eth_chain_id=settings.eth_chain_id,
        whitelisted_symbols=settings.whitelisted_symbols,
    )
    aggregator = BalanceAggregator(
        fetch_client=fetch_client,
        concurrency=settings.balance_query_concurrency,
    )
    job = AssetsStatsJob(store=store, registry=registry, aggregator=aggregator)
    return MultichainComponents(registry=registry, aggregator=aggregator, job=job)


def collectors_factory(
    *,
    store: KeyValueStore,
    fetch_client: RemoteFetchClient,
    settings: Settings = app_settings,
) -> list[CollectorChain]:
    """
    Collector chains in submission order: native chain first, then multichain.

    Native providers are one per configured node URL (primary, then fallbacks).
    """
    native_providers = [
        InterlayStorageProvider(
            reader=SubstrateStorageReader(fetch_client=fetch_client, rpc_url=rpc_url),
        )
        for rpc_url in settings.native_rpc_urls
    ]
    multichain = multichain_components_factory(
        store=store,
        fetch_client=fetch_client,
        settings=settings,
    )

    return [
        CollectorChain(family=NATIVE_FAMILY, providers=native_providers),
        CollectorChain(
            family=MULTICHAIN_FAMILY,
            providers=[MultichainBridgeProvider(registry=multichain.registry, job=multichain.job)],
        ),
    ]
