from __future__ import annotations

import logging

from collateral_reader.app.application.services.multichain.refresh_assets_stats import (
    refresh_assets_stats,
)
from collateral_reader.app.infrastructure.factories.collectors.collectors_factory import (
    multichain_components_factory,
)
from collateral_reader.app.interface.tasks.runtime import task_runtime

logger = logging.getLogger(__name__)


async def refresh_stats_task(*, backend: str | None = None) -> None:
    """
    Task: refresh the multichain stats snapshot.

    - fetches chain + token directories when they are not cached,
    - sums custodial balances per asset via eth_call balanceOf,
    - stores the new snapshot (keeping previous values for inconclusive reads).
    """
    async with task_runtime(backend=backend) as runtime:
        components = multichain_components_factory(
            store=runtime.store,
            fetch_client=runtime.fetch_client,
        )
        snapshot = await refresh_assets_stats(registry=components.registry, job=components.job)

    for stats in snapshot:
        logger.info("%s: locked=%s issued=%s", stats.asset_id, stats.locked, stats.issued)
