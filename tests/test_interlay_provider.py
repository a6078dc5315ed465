import asyncio

import pytest

from collateral_reader.app.domain.errors import FetchError, FetchErrorKind, ProviderError
from collateral_reader.app.infrastructure.adapters.native.interlay_provider import (
    InterlayStorageProvider,
)
from collateral_reader.app.infrastructure.decoders.substrate.balance import balance_to_hex
from collateral_reader.app.infrastructure.decoders.substrate.storage_keys import storage_key_hex
from collateral_reader.app.infrastructure.fetchers.substrate_storage_reader import (
    STATE_GET_STORAGE,
    SubstrateStorageReader,
)

from .conftest import FakeFetchClient, rpc_result

NODE = "https://interlay.node.test"

TOTAL_ISSUANCE_DOT = storage_key_hex("Tokens", "TotalIssuance", "d67c5ba80ba065480001")
VAULT_COLLATERAL_DOT = storage_key_hex(
    "VaultRegistry", "TotalUserVaultCollateral", "d6bfa4fbbbb302d0f4e13a890467318100000001"
)
VAULT_COLLATERAL_USDT = storage_key_hex(
    "VaultRegistry", "TotalUserVaultCollateral", "ed11b90b07067c86130c95aabfcb699c01020000000001"
)


def _node(storage):
    client = FakeFetchClient()

    def handler(request):
        assert request["method"] == STATE_GET_STORAGE
        value = storage.get(request["params"][0])
        if isinstance(value, Exception):
            return value
        return rpc_result(None if value is None else "0x" + balance_to_hex(value))

    client.post_handlers[NODE] = handler
    return client


def _provider(client):
    return InterlayStorageProvider(reader=SubstrateStorageReader(fetch_client=client, rpc_url=NODE))


class TestInterlayStorageProvider:
    def test_supported_assets(self):
        provider = _provider(_node({}))

        assets = asyncio.run(provider.supported_assets())

        assert [(a.symbol, a.address, a.chain) for a in assets] == [("DOT", "2", "interlay")]
        assert provider.name == f"interlay@{NODE}"

    def test_locked_reads_total_issuance(self):
        provider = _provider(_node({TOTAL_ISSUANCE_DOT: 1_234}))

        assert asyncio.run(provider.locked("DOT")) == 1_234

    def test_issued_sums_vault_collateral(self):
        client = _node({VAULT_COLLATERAL_DOT: 500, VAULT_COLLATERAL_USDT: 70})
        provider = _provider(client)

        assert asyncio.run(provider.issued("DOT")) == 570
        assert [c["params"][0] for c in client.posts_to(NODE)] == [
            VAULT_COLLATERAL_DOT,
            VAULT_COLLATERAL_USDT,
        ]

    def test_missing_storage_entry_reads_zero(self):
        provider = _provider(_node({}))

        assert asyncio.run(provider.locked("DOT")) == 0

    def test_node_failure_is_a_provider_error(self):
        provider = _provider(
            _node({TOTAL_ISSUANCE_DOT: FetchError(FetchErrorKind.TIMEOUT, url=NODE)})
        )

        with pytest.raises(ProviderError):
            asyncio.run(provider.locked("DOT"))

    def test_unknown_asset(self):
        provider = _provider(_node({}))

        with pytest.raises(ProviderError):
            asyncio.run(provider.locked("KSM"))
        with pytest.raises(ProviderError):
            asyncio.run(provider.minted_asset("KSM"))

    def test_minted_and_associated_assets(self):
        provider = _provider(_node({}))

        assert asyncio.run(provider.minted_asset("DOT")) == "IBTC"
        assert asyncio.run(provider.associated_assets("IBTC")) == "DOT"
        with pytest.raises(ProviderError):
            asyncio.run(provider.associated_assets("KBTC"))
