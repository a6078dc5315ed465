from __future__ import annotations

import logging
from typing import Sequence

from collateral_reader.app.application.services.collectors.collector_chain import CollectorChain
from collateral_reader.app.domain.entities import AssetStats
from collateral_reader.app.domain.ports.out import AssetStatsSink

logger = logging.getLogger(__name__)


async def collect_asset_stats(
    *,
    collectors: Sequence[CollectorChain],
    sink: AssetStatsSink,
) -> list[AssetStats]:
    """
    Build one AssetStats per supported asset of every collector and hand it to the sink.

    A sink failure is logged for that asset and the run goes on.
    """
    collected: list[AssetStats] = []
    for collector in collectors:
        for asset in await collector.supported_assets():
            logger.info("%s: collecting %s", collector.family, asset.symbol)
            stats = AssetStats(
                asset=asset.symbol,
                locked=await collector.locked(asset.symbol),
                issued=await collector.issued(asset.symbol),
                minted_asset=await collector.minted_asset(asset.symbol),
            )
            collected.append(stats)

            try:
                await sink.submit(family=collector.family, stats=stats)
            except Exception:
                logger.exception("Failed to submit %s stats for %s", collector.family, asset.symbol)

    return collected
