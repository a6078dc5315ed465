from __future__ import annotations

import asyncio
import logging
from typing import Mapping, NamedTuple

from collateral_reader.app.domain.entities import U128_MAX
from collateral_reader.app.domain.errors import CollateralReaderError
from collateral_reader.app.domain.ports.out import RemoteFetchClient
from collateral_reader.app.infrastructure.decoders.json_rpc.envelope import JSON_RPC_HEADERS
from collateral_reader.app.infrastructure.decoders.json_rpc.erc20_balance import (
    build_balance_of_request,
    parse_balance_of_response,
)

logger = logging.getLogger(__name__)


class BalanceTarget(NamedTuple):
    """Where to ask for a custodian's balance: chain RPC + ERC-20 contract."""

    rpc_url: str
    token_address: str


AddressMap = Mapping[str, BalanceTarget]


class BalanceAggregator:
    """
    Sums ERC-20 balances of custodial addresses across chains.

    Each address gets one `eth_call balanceOf` against its own chain RPC.
    A failing address (transport, timeout, non-200, bad payload, bad
    address) is logged and counts as 0; the aggregation always completes.
    Queries run concurrently, bounded by `concurrency`. The total saturates
    at u128 max.
    """

    def __init__(self, *, fetch_client: RemoteFetchClient, concurrency: int = 4) -> None:
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._fetch_client = fetch_client
        self._concurrency = concurrency

    async def get_total_amount(self, address_map: AddressMap) -> int:
        if not address_map:
            return 0

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _bounded(address: str, target: BalanceTarget) -> int:
            async with semaphore:
                return await self._balance_or_zero(address, target)

        amounts = await asyncio.gather(
            *(_bounded(address, target) for address, target in address_map.items())
        )
        total = sum(amounts)
        if total > U128_MAX:
            logger.warning(
                "Total of %s custodians overflows u128 (%s), capping",
                len(address_map),
                total,
            )
            return U128_MAX
        return total

    async def get_balance(self, address: str, target: BalanceTarget) -> int:
        try:
            body = build_balance_of_request(
                token_address=target.token_address,
                holder_address=address,
            )
        except (ValueError, TypeError) as exc:
            raise CollateralReaderError(f"cannot encode balanceOf({address!r}): {exc}") from exc

        response = await self._fetch_client.post(target.rpc_url, body, JSON_RPC_HEADERS)
        return parse_balance_of_response(response)

    async def _balance_or_zero(self, address: str, target: BalanceTarget) -> int:
        try:
            return await self.get_balance(address, target)
        except CollateralReaderError as exc:
            logger.warning(
                "Skipping balance of %s on %s (token %s): %s",
                address,
                target.rpc_url,
                target.token_address,
                exc,
            )
            return 0
