from __future__ import annotations

import logging

from collateral_reader.app.domain.entities import AggregateStats, Asset, AssociatedAsset
from collateral_reader.app.domain.errors import CollateralReaderError, ProviderError
from collateral_reader.app.domain.ports.out import CollateralProvider
from collateral_reader.app.infrastructure.adapters.multichain.assets_stats_job import AssetsStatsJob
from collateral_reader.app.infrastructure.adapters.multichain.bridge_association_index import (
    find_minted_asset,
    find_origin_of,
)
from collateral_reader.app.infrastructure.adapters.multichain.registry_cache import RegistryCache

logger = logging.getLogger(__name__)


class MultichainBridgeProvider(CollateralProvider):
    """
    Collector provider backed by the multichain bridge registries.

    locked()/issued() trigger a (single-flight) stats refresh and then read
    the cached snapshot, which may be stale while another refresh runs.
    """

    name = "multichain"

    def __init__(self, *, registry: RegistryCache, job: AssetsStatsJob) -> None:
        self._registry = registry
        self._job = job

    async def supported_assets(self) -> list[Asset]:
        try:
            return await self._registry.get_assets()
        except CollateralReaderError as exc:
            raise ProviderError("MultichainRPC, error getting supported assets.") from exc

    async def locked(self, asset: str) -> int:
        stats = await self._refreshed_stats(asset)
        return 0 if stats is None else stats.locked

    async def issued(self, asset: str) -> int:
        stats = await self._refreshed_stats(asset)
        return 0 if stats is None else stats.issued

    async def minted_asset(self, asset: str) -> str:
        associated_assets = await self._associated_assets()
        if associated_assets is None:
            # associations not fetched yet: nothing minted to report
            return ""

        associated_asset = find_minted_asset(associated_assets, asset)
        if associated_asset is None:
            raise ProviderError(f"MultichainRPCHelper, minted asset of {asset!r} not recognized.")
        return associated_asset.asset_id

    async def associated_assets(self, minted_asset: str) -> str:
        associated_assets = await self._associated_assets()
        associated_asset = find_origin_of(associated_assets or [], minted_asset)
        if associated_asset is None:
            raise ProviderError(f"MultichainRPCHelper, {minted_asset!r} is not an associated asset.")
        return associated_asset.origin_symbol

    async def _refreshed_stats(self, asset: str) -> AggregateStats | None:
        """
        Stats of `asset` after a refresh attempt.

        None when no snapshot exists yet (reported as 0); ProviderError when
        a snapshot exists but does not know the asset.
        """
        await self._job.get_assets_stats_job()
        try:
            snapshot = await self._job.snapshot()
        except CollateralReaderError as exc:
            raise ProviderError("MultichainRPCHelper, error getting asset stats.") from exc

        if snapshot is None:
            return None
        for stats in snapshot:
            if stats.asset_id == asset:
                return stats
        raise ProviderError(f"MultichainRPCHelper, no stats for {asset!r}.")

    async def _associated_assets(self) -> list[AssociatedAsset] | None:
        try:
            return await self._registry.cached_associated_assets()
        except CollateralReaderError as exc:
            raise ProviderError("MultichainRPCHelper, error getting assets.") from exc
