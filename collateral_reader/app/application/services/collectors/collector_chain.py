from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

from collateral_reader.app.domain.entities import Asset
from collateral_reader.app.domain.errors import CollateralReaderError, ProviderExhaustedError
from collateral_reader.app.domain.ports.out import CollateralProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CollectorOutcome(Generic[T]):
    """
    Result of one collector query.

    `provider` names the provider that answered; it is None when every
    provider failed and `value` is the documented default.
    """

    value: T
    provider: str | None = None
    error: ProviderExhaustedError | None = None

    @property
    def exhausted(self) -> bool:
        return self.error is not None


class CollectorChain:
    """
    Ordered fallback over providers of one asset family.

    Providers are tried top to bottom; the first one that answers wins.
    A failing provider is logged and the next one is tried. When all fail
    the query resolves to a default ([] / 0 / b"") instead of raising,
    so callers always get a value.
    """

    def __init__(self, *, family: str, providers: Sequence[CollateralProvider]) -> None:
        self.family = family
        self._providers = list(providers)

    @property
    def providers(self) -> list[CollateralProvider]:
        return list(self._providers)

    async def query(
        self,
        operation: str,
        call: Callable[[CollateralProvider], Awaitable[T]],
        *,
        default: T,
    ) -> CollectorOutcome[T]:
        errors: list[Exception] = []
        for provider in self._providers:
            try:
                value = await call(provider)
            except CollateralReaderError as exc:
                logger.info("%s/%s failed %s: %s", self.family, provider.name, operation, exc)
                errors.append(exc)
                continue
            except Exception as exc:
                logger.exception("%s/%s crashed on %s", self.family, provider.name, operation)
                errors.append(exc)
                continue
            return CollectorOutcome(value=value, provider=provider.name)

        error = ProviderExhaustedError(operation, errors)
        logger.warning("%s: %s, using default %r", self.family, error, default)
        return CollectorOutcome(value=default, error=error)

    async def supported_assets_outcome(self) -> CollectorOutcome[list[Asset]]:
        return await self.query("supported_assets", lambda p: p.supported_assets(), default=[])

    async def locked_outcome(self, asset: str) -> CollectorOutcome[int]:
        return await self.query("locked", lambda p: p.locked(asset), default=0)

    async def issued_outcome(self, asset: str) -> CollectorOutcome[int]:
        return await self.query("issued", lambda p: p.issued(asset), default=0)

    async def minted_asset_outcome(self, asset: str) -> CollectorOutcome[bytes]:
        return await self.query(
            "minted_asset",
            lambda p: _encode(p.minted_asset(asset)),
            default=b"",
        )

    async def associated_assets_outcome(self, minted_asset: str) -> CollectorOutcome[bytes]:
        return await self.query(
            "associated_assets",
            lambda p: _encode(p.associated_assets(minted_asset)),
            default=b"",
        )

    async def supported_assets(self) -> list[Asset]:
        return (await self.supported_assets_outcome()).value

    async def locked(self, asset: str) -> int:
        return (await self.locked_outcome(asset)).value

    async def issued(self, asset: str) -> int:
        return (await self.issued_outcome(asset)).value

    async def minted_asset(self, asset: str) -> bytes:
        return (await self.minted_asset_outcome(asset)).value

    async def associated_assets(self, minted_asset: str) -> bytes:
        return (await self.associated_assets_outcome(minted_asset)).value


async def _encode(symbol: Awaitable[str]) -> bytes:
    return (await symbol).encode("utf-8")
