from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

U128_MAX = 2**128 - 1


@dataclass(frozen=True)
class Chain:
    """One entry of the chain directory: chain id -> name + RPC endpoint."""

    id: str
    name: str
    rpc: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chain:
        return cls(id=data["id"], name=data["name"], rpc=data["rpc"])


@dataclass(frozen=True)
class Asset:
    """
    A bridged (or native) asset known to a collector.

    `chain` is the chain id the asset lives on, `address` its token contract
    (or an opaque index for native assets), `metadata` an optional encoded
    storage sub-key used by native-chain readers.
    """

    address: str
    chain: str
    symbol: str
    name: str
    decimals: int = 0
    metadata: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Asset:
        return cls(
            address=data["address"],
            chain=data["chain"],
            symbol=data["symbol"],
            name=data["name"],
            decimals=int(data.get("decimals", 0)),
            metadata=data.get("metadata", ""),
        )


@dataclass(frozen=True)
class AssociatedAsset:
    """
    Link between an origin asset and one of its representations on another chain.

    - origin_symbol: symbol of the asset on the origin (Ethereum) side
    - asset_id: symbol of the representation on the destination chain
    - chain_id: destination chain id
    - address: bridge router / token contract on the destination chain
    - locked_address: custodian holding locked collateral ("to-wrapped" contract)
    - issued_address: custodian holding issued supply ("from-wrapped" contract)
    - minted: True when the from-wrapped side lives on Ethereum (mint-back to origin)
    """

    origin_symbol: str
    asset_id: str
    chain_id: str
    address: str
    locked_address: str
    issued_address: str
    minted: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AssociatedAsset:
        return cls(
            origin_symbol=data["origin_symbol"],
            asset_id=data["asset_id"],
            chain_id=data["chain_id"],
            address=data["address"],
            locked_address=data["locked_address"],
            issued_address=data["issued_address"],
            minted=bool(data["minted"]),
        )


@dataclass(frozen=True)
class AggregateStats:
    asset_id: str
    locked: int
    issued: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AggregateStats:
        return cls(
            asset_id=data["asset_id"],
            locked=int(data["locked"]),
            issued=int(data["issued"]),
        )


@dataclass(frozen=True)
class AssetStats:
    """Per-asset record handed over to the ledger side."""

    asset: str
    locked: int
    issued: int
    minted_asset: bytes

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset": self.asset,
            "locked": self.locked,
            "issued": self.issued,
            "minted_asset": self.minted_asset.decode("utf-8", errors="replace"),
        }
