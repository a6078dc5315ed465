from __future__ import annotations

import logging

from collateral_reader.app.domain.cache_keys import (
    STATS_STORAGE_KEY,
    WORK_IN_PROGRESS_STORAGE_KEY,
)
from collateral_reader.app.domain.entities import AggregateStats, Asset, AssociatedAsset, Chain
from collateral_reader.app.domain.errors import CollateralReaderError, RegistryNotReadyError
from collateral_reader.app.domain.ports.out import KeyValueStore
from collateral_reader.app.infrastructure.adapters.multichain.balance_aggregator import (
    BalanceAggregator,
    BalanceTarget,
)
from collateral_reader.app.infrastructure.adapters.multichain.bridge_association_index import (
    associations_of,
)
from collateral_reader.app.infrastructure.adapters.multichain.registry_cache import RegistryCache

logger = logging.getLogger(__name__)


class AssetsStatsJob:
    """
    Single-flight refresh of the multichain stats snapshot.

    States: IDLE -> RUNNING -> IDLE, tracked by the work-in-progress flag in
    the shared store. The flag is taken with compare_and_set, so of several
    concurrent get_assets_stats_job() calls exactly one runs the refresh and
    the others return immediately.

    Only cached registries are used: if assets or chains are not cached yet
    the refresh is a no-op (the registry is populated by supported_assets()).
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        registry: RegistryCache,
        aggregator: BalanceAggregator,
    ) -> None:
        self._store = store
        self._registry = registry
        self._aggregator = aggregator

    async def get_assets_stats_job(self) -> bool:
        """Run one refresh unless another one is in progress. Returns True if it ran."""
        if not await self._acquire():
            logger.debug("Assets stats refresh already in progress, skipping")
            return False

        try:
            await self.get_assets_stats()
        except RegistryNotReadyError as exc:
            logger.info("Registries not ready, skipping refresh: %s", exc)
        except CollateralReaderError:
            logger.exception("Error getting assets stats")
        finally:
            await self._store.set(WORK_IN_PROGRESS_STORAGE_KEY, False)
        return True

    async def get_assets_stats(self) -> list[AggregateStats] | None:
        """
        Recompute and persist the stats snapshot.

        Returns the new snapshot, or None when registries are not cached yet.
        """
        assets = await self._registry.cached_assets()
        if assets is None:
            # early return for when assets are not ready yet
            return None
        chains = await self._registry.cached_chains()
        if chains is None:
            # early return for when chains are not ready yet
            return None

        associated_assets = await self._registry.cached_associated_assets() or []
        prev_stats = {s.asset_id: s for s in await self.snapshot() or []}
        eth_rpc_url = self._eth_rpc_url(chains)
        rpc_by_chain = {c.id: c.rpc for c in chains}

        logger.info(
            "Starting assets stats refresh",
            extra={"assets": len(assets), "associated_assets": len(associated_assets)},
        )

        all_stats: list[AggregateStats] = []
        for asset in assets:
            stats = await self._asset_stats(
                asset,
                associations_of(associated_assets, asset.symbol),
                rpc_by_chain=rpc_by_chain,
                eth_rpc_url=eth_rpc_url,
            )
            if stats is not None:
                all_stats.append(stats)
                continue

            previous = prev_stats.get(asset.symbol)
            if previous is not None:
                logger.info("Inconclusive read for %s, keeping previous stats", asset.symbol)
                all_stats.append(previous)

        await self._store.set(STATS_STORAGE_KEY, [s.to_dict() for s in all_stats])
        logger.info(
            "Finished assets stats refresh",
            extra={"stats": len(all_stats)},
        )
        return all_stats

    async def snapshot(self) -> list[AggregateStats] | None:
        raw = await self._store.get(STATS_STORAGE_KEY)
        return None if raw is None else [AggregateStats.from_dict(item) for item in raw]

    async def reset_work_in_progress(self) -> None:
        """Clear a flag left behind by a process that died mid-refresh."""
        await self._store.delete(WORK_IN_PROGRESS_STORAGE_KEY)

    async def _acquire(self) -> bool:
        if await self._store.compare_and_set(WORK_IN_PROGRESS_STORAGE_KEY, None, True):
            return True
        return await self._store.compare_and_set(WORK_IN_PROGRESS_STORAGE_KEY, False, True)

    def _eth_rpc_url(self, chains: list[Chain]) -> str:
        eth_chain_id = self._registry.eth_chain_id
        for chain in chains:
            if chain.id == eth_chain_id:
                return chain.rpc
        raise RegistryNotReadyError(f"chain {eth_chain_id!r} missing from the chain registry")

    async def _asset_stats(
        self,
        asset: Asset,
        associations: list[AssociatedAsset],
        *,
        rpc_by_chain: dict[str, str],
        eth_rpc_url: str,
    ) -> AggregateStats | None:
        # keyed by custodian so a custodian shared by several associations is queried once
        locked_addresses: dict[str, BalanceTarget] = {}
        issued_addresses: dict[str, BalanceTarget] = {}

        for association in associations:
            chain_rpc_url = rpc_by_chain.get(association.chain_id)
            if chain_rpc_url is None:
                continue
            locked_addresses[association.locked_address] = BalanceTarget(
                rpc_url=chain_rpc_url,
                token_address=association.address,
            )
            issued_addresses[association.issued_address] = BalanceTarget(
                rpc_url=eth_rpc_url,
                token_address=asset.address,
            )

        total_issued = await self._aggregator.get_total_amount(issued_addresses)
        total_locked = await self._aggregator.get_total_amount(locked_addresses)
        logger.debug(
            "%s: locked=%s issued=%s (%s locked / %s issued custodians)",
            asset.symbol,
            total_locked,
            total_issued,
            len(locked_addresses),
            len(issued_addresses),
        )

        if total_locked > 0 and total_issued > 0:
            return AggregateStats(asset_id=asset.symbol, locked=total_locked, issued=total_issued)
        return None
