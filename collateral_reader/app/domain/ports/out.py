from __future__ import annotations

from typing import Any, Mapping, Protocol

from collateral_reader.app.domain.entities import Asset, AssetStats


class RemoteFetchClient(Protocol):
    """
    Port for plain HTTP access to registries and JSON-RPC endpoints.

    Every call is bounded by the client's deadline. Implementations raise
    FetchError on timeout, transport failure or a non-200 status and never
    retry; retry/fallback policy belongs to the callers.
    """

    async def get(self, url: str) -> bytes:
        ...

    async def post(
        self,
        url: str,
        body: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        ...


class KeyValueStore(Protocol):
    """
    Port for the process-wide cache (registries, stats snapshot, WIP flag).

    Values are JSON documents. Reads and writes are atomic per key, never
    across keys. compare_and_set is the only read-modify-write primitive:
    it writes `new` only if the current value equals `expected`
    (None = key absent) and reports whether it did.
    """

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def compare_and_set(self, key: str, expected: Any | None, new: Any) -> bool:
        ...


class CollateralProvider(Protocol):
    """
    One implementation of the collector capability for an asset family.

    Each method either returns a value or raises ProviderError; the
    CollectorChain decides what to do with the failure.
    """

    name: str

    async def supported_assets(self) -> list[Asset]:
        ...

    async def locked(self, asset: str) -> int:
        ...

    async def issued(self, asset: str) -> int:
        ...

    async def minted_asset(self, asset: str) -> str:
        ...

    async def associated_assets(self, minted_asset: str) -> str:
        ...


class AssetStatsSink(Protocol):
    """
    Port for the ledger-side consumer of collected stats.

    Signing and submitting the record is the sink's business.
    """

    async def submit(self, *, family: str, stats: AssetStats) -> None:
        ...
