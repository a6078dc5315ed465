from __future__ import annotations

import logging
from typing import Iterable

from collateral_reader.app.domain.cache_keys import (
    ASSETS_STORAGE_KEY,
    ASSOCIATED_ASSETS_STORAGE_KEY,
    CHAINS_STORAGE_KEY,
    REGISTRY_STORAGE_KEYS,
)
from collateral_reader.app.domain.entities import Asset, AssociatedAsset, Chain
from collateral_reader.app.domain.errors import CollateralReaderError
from collateral_reader.app.domain.ports.out import KeyValueStore, RemoteFetchClient
from collateral_reader.app.infrastructure.adapters.multichain.bridge_association_index import (
    build_bridge_association_index,
)
from collateral_reader.app.infrastructure.decoders.multichain.registry_payloads import (
    parse_chain_directory,
    parse_token_directory,
)

logger = logging.getLogger(__name__)

DEFAULT_WHITELISTED_SYMBOLS: tuple[str, ...] = ("ETH", "WETH", "WBTC", "USDC", "USDT", "DAI")


class RegistryCache:
    """
    Chain directory + bridged-token directory, fetched once and cached.

    Strategy:
    - get_chains(): cached list, or GET the chain directory and cache it.
    - get_assets(): attempts get_chains() first (failure is only logged),
      then cached list, or GET the token directory, keep whitelisted symbols,
      and cache both the assets and the bridge association index built in
      the same pass.
    - Entries are write-once; invalidate() is the only way to refresh them.

    FetchError / DeserializeError from the directories propagate: a partial
    registry is never cached.
    """

    def __init__(
        self,
        *,
        store: KeyValueStore,
        fetch_client: RemoteFetchClient,
        chain_directory_url: str,
        token_directory_url: str,
        eth_chain_id: str = "1",
        whitelisted_symbols: Iterable[str] = DEFAULT_WHITELISTED_SYMBOLS,
    ) -> None:
        self._store = store
        self._fetch_client = fetch_client
        self._chain_directory_url = chain_directory_url
        self._token_directory_url = token_directory_url
        self._eth_chain_id = eth_chain_id
        self._whitelisted_symbols = frozenset(whitelisted_symbols)

    @property
    def eth_chain_id(self) -> str:
        return self._eth_chain_id

    async def get_chains(self) -> list[Chain]:
        cached = await self.cached_chains()
        if cached is not None:
            # chains have already been fetched
            return cached

        body = await self._fetch_client.get(self._chain_directory_url)
        chains = parse_chain_directory(body)

        await self._store.set(CHAINS_STORAGE_KEY, [c.to_dict() for c in chains])
        logger.info("Cached %s chains from the chain directory", len(chains))
        return chains

    async def get_assets(self) -> list[Asset]:
        try:
            await self.get_chains()
        except CollateralReaderError:
            logger.exception("Error getting chains")

        cached = await self.cached_assets()
        if cached is not None:
            return cached

        body = await self._fetch_client.get(self._token_directory_url)
        tokens = parse_token_directory(body)

        whitelisted = [t for t in tokens.values() if t.symbol in self._whitelisted_symbols]
        assets = [
            Asset(
                address=t.address,
                chain=t.chain_id,
                symbol=t.symbol,
                name=t.name,
                decimals=t.decimals,
            )
            for t in whitelisted
        ]
        associated_assets = build_bridge_association_index(
            whitelisted,
            eth_chain_id=self._eth_chain_id,
        )

        await self._store.set(ASSETS_STORAGE_KEY, [a.to_dict() for a in assets])
        await self._store.set(
            ASSOCIATED_ASSETS_STORAGE_KEY,
            [a.to_dict() for a in associated_assets],
        )
        logger.info(
            "Cached %s assets and %s associated assets (%s tokens in directory)",
            len(assets),
            len(associated_assets),
            len(tokens),
        )
        return assets

    async def cached_chains(self) -> list[Chain] | None:
        raw = await self._store.get(CHAINS_STORAGE_KEY)
        return None if raw is None else [Chain.from_dict(item) for item in raw]

    async def cached_assets(self) -> list[Asset] | None:
        raw = await self._store.get(ASSETS_STORAGE_KEY)
        return None if raw is None else [Asset.from_dict(item) for item in raw]

    async def cached_associated_assets(self) -> list[AssociatedAsset] | None:
        raw = await self._store.get(ASSOCIATED_ASSETS_STORAGE_KEY)
        return None if raw is None else [AssociatedAsset.from_dict(item) for item in raw]

    async def invalidate(self) -> None:
        """Drop cached registries; the next get_* call fetches them again."""
        for key in REGISTRY_STORAGE_KEYS:
            await self._store.delete(key)
        logger.info("Invalidated registry cache", extra={"keys": list(REGISTRY_STORAGE_KEYS)})
