from __future__ import annotations

from collateral_reader.app.domain.entities import AggregateStats
from collateral_reader.app.infrastructure.adapters.multichain.assets_stats_job import AssetsStatsJob
from collateral_reader.app.infrastructure.adapters.multichain.registry_cache import RegistryCache


async def refresh_assets_stats(
    *,
    registry: RegistryCache,
    job: AssetsStatsJob,
    warm_registry: bool = True,
) -> list[AggregateStats]:
    """
    Populate the registries if asked, run one single-flight refresh and return the snapshot.

    Registry fetch errors propagate when warming; a skipped refresh returns
    whatever snapshot is cached.
    """
    if warm_registry:
        await registry.get_assets()

    await job.get_assets_stats_job()
    return await job.snapshot() or []
