"""Shared fixtures: fake remote endpoints and registry payloads."""

import json
from typing import Any, Callable, Mapping

import pytest

from collateral_reader.app.domain.errors import FetchError, FetchErrorKind
from collateral_reader.app.infrastructure.adapters.cache.in_memory_store import InMemoryKeyValueStore

ETH_RPC = "https://eth.rpc.test"
BSC_RPC = "https://bsc.rpc.test"
FTM_RPC = "https://ftm.rpc.test"
CHAIN_DIRECTORY_URL = "https://directory.test/chains"
TOKEN_DIRECTORY_URL = "https://directory.test/tokens"

USDC_ETH = "0x" + "a0" * 20
USDC_BSC = "0x" + "b1" * 20
USDC_FTM = "0x" + "f2" * 20
BSC_ANYTOKEN = "0x" + "c3" * 20
BSC_FROMANYTOKEN = "0x" + "d4" * 20
FTM_ANYTOKEN = "0x" + "e5" * 20
FTM_FROMANYTOKEN = "0x" + "06" * 20


def rpc_result(result: str | None) -> bytes:
    return json.dumps({"jsonrpc": "2.0", "id": "1", "result": result}).encode()


def uint256_result(amount: int) -> bytes:
    return rpc_result("0x" + f"{amount:064x}")


class FakeFetchClient:
    """
    In-memory RemoteFetchClient.

    GET responses are keyed by URL; POST responses are produced by a handler
    per URL receiving the decoded JSON-RPC request. Exceptions are raised.
    """

    def __init__(self) -> None:
        self.get_responses: dict[str, bytes | Exception] = {}
        self.post_handlers: dict[str, Callable[[dict[str, Any]], bytes | Exception]] = {}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []

    async def get(self, url: str) -> bytes:
        self.calls.append(("GET", url, None))
        response = self.get_responses.get(url)
        if response is None:
            raise FetchError(FetchErrorKind.NON_SUCCESS_STATUS, url=url, status_code=404)
        if isinstance(response, Exception):
            raise response
        return response

    async def post(self, url: str, body: bytes, headers: Mapping[str, str] | None = None) -> bytes:
        request = json.loads(body)
        self.calls.append(("POST", url, request))
        handler = self.post_handlers.get(url)
        if handler is None:
            raise FetchError(FetchErrorKind.TRANSPORT, url=url, detail="connection refused")
        response = handler(request)
        if isinstance(response, Exception):
            raise response
        return response

    def posts_to(self, url: str) -> list[dict[str, Any]]:
        return [request for method, u, request in self.calls if method == "POST" and u == url]


def balance_of_holder(request: dict[str, Any]) -> str:
    """Holder address (lowercase, 0x-prefixed) of an eth_call balanceOf request."""
    data = request["params"][0]["data"]
    return "0x" + data[-40:]


def balances_handler(balances: Mapping[str, int | Exception]) -> Callable[[dict[str, Any]], bytes | Exception]:
    def _handler(request: dict[str, Any]) -> bytes | Exception:
        value = balances.get(balance_of_holder(request), 0)
        if isinstance(value, Exception):
            return value
        return uint256_result(value)

    return _handler


def chain_directory() -> dict[str, Any]:
    return {
        "1": {"name": "Ethereum", "rpc": ETH_RPC},
        "56": {"name": "BNB Chain", "rpc": BSC_RPC},
        "250": {"name": "Fantom", "rpc": FTM_RPC},
    }


def _bridge_contract(address: str, chain_id: str | None) -> dict[str, Any]:
    contract: dict[str, Any] = {
        "name": "anyUSDC",
        "symbol": "anyUSDC",
        "decimals": 6,
        "address": address,
    }
    if chain_id is not None:
        contract["chainId"] = chain_id
    return contract


def token_directory() -> dict[str, Any]:
    return {
        "evm1_usdc": {
            "chainId": "1",
            "name": "USD Coin",
            "symbol": "USDC",
            "address": USDC_ETH,
            "decimals": 6,
            "destChains": {
                "56": {
                    "bsc_usdc": {
                        "address": USDC_BSC,
                        "router": "0x" + "99" * 20,
                        "chainId": "56",
                        "symbol": "USDC",
                        "anytoken": _bridge_contract(BSC_ANYTOKEN, "56"),
                        "fromanytoken": _bridge_contract(BSC_FROMANYTOKEN, "1"),
                    },
                    "bsc_usdc_unwrapped": {
                        "address": "0x" + "09" * 20,
                        "router": "0x" + "96" * 20,
                        "chainId": "56",
                        "symbol": "USDC.unwrapped",
                        "fromanytoken": _bridge_contract("0x" + "0d" * 20, "1"),
                    },
                },
                "250": {
                    "ftm_usdc": {
                        "address": USDC_FTM,
                        "router": "0x" + "98" * 20,
                        "chainId": "250",
                        "symbol": "anyUSDC",
                        "anytoken": _bridge_contract(FTM_ANYTOKEN, "250"),
                        "fromanytoken": _bridge_contract(FTM_FROMANYTOKEN, "250"),
                    },
                    "ftm_usdc_legacy": {
                        "address": "0x" + "07" * 20,
                        "router": "0x" + "97" * 20,
                        "chainId": "250",
                        "symbol": "USDC.legacy",
                        "anytoken": _bridge_contract("0x" + "08" * 20, "250"),
                    },
                },
            },
        },
        "evm1_shib": {
            "chainId": "1",
            "name": "Shiba Inu",
            "symbol": "SHIB",
            "address": "0x" + "5b" * 20,
            "decimals": 18,
            "destChains": {},
        },
    }


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def fetch_client() -> FakeFetchClient:
    client = FakeFetchClient()
    client.get_responses[CHAIN_DIRECTORY_URL] = json.dumps(chain_directory()).encode()
    client.get_responses[TOKEN_DIRECTORY_URL] = json.dumps(token_directory()).encode()
    return client
