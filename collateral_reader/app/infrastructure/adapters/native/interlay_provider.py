from __future__ import annotations

import logging
from typing import Final

from collateral_reader.app.domain.entities import Asset
from collateral_reader.app.domain.errors import CollateralReaderError, ProviderError
from collateral_reader.app.domain.ports.out import CollateralProvider
from collateral_reader.app.infrastructure.fetchers.substrate_storage_reader import (
    SubstrateStorageReader,
)

logger = logging.getLogger(__name__)

_INTERLAY_CHAIN: Final[str] = "interlay"
_DOT_CURRENCY_SUFFIX: Final[str] = "d67c5ba80ba065480001"
_MINTED_ASSET: Final[str] = "IBTC"
_COLLATERAL_CURRENCIES: Final[tuple[str, ...]] = ("DOT", "USDT")

_SUPPORTED_ASSETS: Final[tuple[Asset, ...]] = (
    Asset(
        address="2",
        chain=_INTERLAY_CHAIN,
        symbol="DOT",
        name="DOT",
        decimals=0,
        metadata=_DOT_CURRENCY_SUFFIX,
    ),
)


class InterlayStorageProvider(CollateralProvider):
    """
    Collector provider reading Interlay runtime storage through one node.

    - locked: Tokens.TotalIssuance under the asset's currency sub-key,
    - issued: sum of VaultRegistry.TotalUserVaultCollateral over the
      collateral currencies, as raw on-chain amounts (no oracle scaling),
    - minted asset: IBTC, backed by DOT.

    One instance per node URL; the collector chain tries them in order.
    """

    def __init__(self, *, reader: SubstrateStorageReader) -> None:
        self._reader = reader
        self.name = f"interlay@{reader.rpc_url}"

    async def supported_assets(self) -> list[Asset]:
        return list(_SUPPORTED_ASSETS)

    async def locked(self, asset: str) -> int:
        supported = self._supported(asset)
        try:
            return await self._reader.total_issuance(supported.metadata)
        except CollateralReaderError as exc:
            raise ProviderError(f"{self.name}: cannot read locked {asset!r}: {exc}") from exc

    async def issued(self, asset: str) -> int:
        self._supported(asset)
        total = 0
        try:
            for currency in _COLLATERAL_CURRENCIES:
                collateral = await self._reader.total_user_vault_collateral(currency)
                logger.debug("%s vault collateral %s=%s", self.name, currency, collateral)
                total += collateral
        except CollateralReaderError as exc:
            raise ProviderError(f"{self.name}: cannot read issued {asset!r}: {exc}") from exc
        return total

    async def minted_asset(self, asset: str) -> str:
        self._supported(asset)
        return _MINTED_ASSET

    async def associated_assets(self, minted_asset: str) -> str:
        if minted_asset != _MINTED_ASSET:
            raise ProviderError(f"{self.name}: {minted_asset!r} is not minted on {_INTERLAY_CHAIN}")
        return _SUPPORTED_ASSETS[0].symbol

    def _supported(self, asset: str) -> Asset:
        for supported in _SUPPORTED_ASSETS:
            if supported.symbol == asset:
                return supported
        raise ProviderError(f"{self.name}: asset {asset!r} not recognized")
