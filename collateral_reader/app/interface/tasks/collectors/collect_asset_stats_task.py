from __future__ import annotations

from collateral_reader.app.application.services.collectors.collect_asset_stats import (
    collect_asset_stats,
)
from collateral_reader.app.infrastructure.adapters.sinks.json_lines_sink import (
    JsonLinesAssetStatsSink,
)
from collateral_reader.app.infrastructure.factories.collectors.collectors_factory import (
    collectors_factory,
)
from collateral_reader.app.interface.tasks.runtime import task_runtime


async def collect_asset_stats_task(*, backend: str | None = None) -> None:
    """
    Task: collect {locked, issued, minted_asset} for every supported asset.

    Native chain first, then multichain; each record is written as a JSON line.
    """
    async with task_runtime(backend=backend) as runtime:
        collectors = collectors_factory(
            store=runtime.store,
            fetch_client=runtime.fetch_client,
        )
        await collect_asset_stats(collectors=collectors, sink=JsonLinesAssetStatsSink())
