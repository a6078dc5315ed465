from __future__ import annotations

import logging
from typing import Iterable

from collateral_reader.app.domain.entities import AssociatedAsset
from collateral_reader.app.infrastructure.decoders.multichain.registry_payloads import (
    TokenDirectoryEntry,
)

logger = logging.getLogger(__name__)


def associated_assets_of_token(
    token: TokenDirectoryEntry,
    *,
    eth_chain_id: str,
) -> list[AssociatedAsset]:
    """
    Associations of one origin token across all its destination chains.

    A destination entry is only usable when it carries both bridge contracts:
    `anytoken` (custodian of the locked collateral) and `fromanytoken`
    (custodian of the issued supply). Entries missing either side are skipped.
    """
    associations: list[AssociatedAsset] = []
    for dest_chain_id, destinations in token.dest_chains.items():
        for dest_token_id, dest in destinations.items():
            if dest.anytoken is None or dest.fromanytoken is None:
                logger.debug(
                    "Skipping %s -> %s/%s: missing bridge contract pair",
                    token.symbol,
                    dest_chain_id,
                    dest_token_id,
                )
                continue

            associations.append(
                AssociatedAsset(
                    origin_symbol=token.symbol,
                    asset_id=dest.symbol,
                    chain_id=dest.chain_id,
                    address=dest.address,
                    locked_address=dest.anytoken.address,
                    issued_address=dest.fromanytoken.address,
                    minted=dest.fromanytoken.chain_id == eth_chain_id,
                )
            )
    return associations


def build_bridge_association_index(
    tokens: Iterable[TokenDirectoryEntry],
    *,
    eth_chain_id: str,
) -> list[AssociatedAsset]:
    index: list[AssociatedAsset] = []
    for token in tokens:
        index.extend(associated_assets_of_token(token, eth_chain_id=eth_chain_id))
    return index


def associations_of(index: Iterable[AssociatedAsset], origin_symbol: str) -> list[AssociatedAsset]:
    return [a for a in index if a.origin_symbol == origin_symbol]


def find_minted_asset(index: Iterable[AssociatedAsset], origin_symbol: str) -> AssociatedAsset | None:
    """The association that mints `origin_symbol` back on Ethereum, if any."""
    return next((a for a in index if a.origin_symbol == origin_symbol and a.minted), None)


def find_origin_of(index: Iterable[AssociatedAsset], minted_symbol: str) -> AssociatedAsset | None:
    return next((a for a in index if a.asset_id == minted_symbol), None)
