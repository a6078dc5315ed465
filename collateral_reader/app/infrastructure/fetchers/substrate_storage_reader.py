from __future__ import annotations

import logging
from typing import Final

from collateral_reader.app.domain.ports.out import RemoteFetchClient
from collateral_reader.app.infrastructure.decoders.json_rpc.envelope import (
    JSON_RPC_HEADERS,
    build_request,
)
from collateral_reader.app.infrastructure.decoders.substrate.balance import parse_storage_balance
from collateral_reader.app.infrastructure.decoders.substrate.storage_keys import storage_key_hex

logger = logging.getLogger(__name__)

STATE_GET_STORAGE: Final[str] = "state_getStorage"

# Pre-encoded map sub-keys (hashed currency ids) on the Interlay runtime.
_VAULT_COLLATERAL_SUFFIXES: Final[dict[str, str]] = {
    "DOT": "d6bfa4fbbbb302d0f4e13a890467318100000001",
    "USDT": "ed11b90b07067c86130c95aabfcb699c01020000000001",
}
_ORACLE_AGGREGATE_SUFFIXES: Final[dict[str, str]] = {
    "DOT": "7b79be5e9b370ba6d080e4e2af7b7b89000000",
    "USDT": "e8ee4335018f6743c682ee73dfe0674c000102000000",
}


class SubstrateStorageReader:
    """
    Reads u128 balances straight from a Substrate node's storage.

    The node is asked with a raw JSON-RPC state query; the hex it returns
    is a SCALE (little-endian) u128. A missing key (null result) reads as 0.
    FetchError and DeserializeError propagate to the caller.
    """

    def __init__(self, *, fetch_client: RemoteFetchClient, rpc_url: str) -> None:
        self._fetch_client = fetch_client
        self._rpc_url = rpc_url

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def read_balance(self, storage_key: str, *, method: str = STATE_GET_STORAGE) -> int:
        body = await self._fetch_client.post(
            self._rpc_url,
            build_request(method, [storage_key]),
            JSON_RPC_HEADERS,
        )
        balance = parse_storage_balance(body)
        logger.debug("Read %s=%s from %s via %s", storage_key, balance, self._rpc_url, method)
        return balance

    async def read_item(
        self,
        module_prefix: str,
        storage_item_prefix: str,
        *,
        suffix: str = "",
        method: str = STATE_GET_STORAGE,
    ) -> int:
        return await self.read_balance(
            storage_key_hex(module_prefix, storage_item_prefix, suffix),
            method=method,
        )

    async def total_issuance(self, currency_suffix: str) -> int:
        return await self.read_item(
            "Tokens",
            "TotalIssuance",
            suffix=currency_suffix,
        )

    async def total_user_vault_collateral(self, token: str) -> int:
        """Collateral locked in vaults for `token` (DOT, anything else reads the USDT entry)."""
        suffix = _VAULT_COLLATERAL_SUFFIXES["DOT" if token == "DOT" else "USDT"]
        return await self.read_item(
            "VaultRegistry",
            "TotalUserVaultCollateral",
            suffix=suffix,
        )

    async def oracle_aggregate(self, token: str) -> int:
        """Raw oracle aggregate for `token`; no price scaling is applied."""
        suffix = _ORACLE_AGGREGATE_SUFFIXES["DOT" if token == "DOT" else "USDT"]
        return await self.read_item(
            "Oracle",
            "Aggregate",
            suffix=suffix,
        )
