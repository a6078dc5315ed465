from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from collateral_reader.app.domain.entities import Chain
from collateral_reader.app.domain.errors import DeserializeError


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ChainDirectoryEntry(_Payload):
    name: str
    rpc: str


class BridgeContract(_Payload):
    """`anytoken` / `fromanytoken` descriptor of a destination entry."""

    name: str
    symbol: str
    decimals: int
    address: str
    chain_id: str | None = Field(None, alias="chainId")


class DestinationToken(_Payload):
    """Representation of a token on one destination chain."""

    address: str
    router: str
    chain_id: str = Field(alias="chainId")
    symbol: str
    anytoken: BridgeContract | None = None
    fromanytoken: BridgeContract | None = None


class TokenDirectoryEntry(_Payload):
    chain_id: str = Field(alias="chainId")
    name: str
    symbol: str
    address: str
    decimals: int
    # destination chain id -> destination token id -> descriptor
    dest_chains: dict[str, dict[str, DestinationToken]] = Field(alias="destChains")


_CHAIN_DIRECTORY = TypeAdapter(dict[str, ChainDirectoryEntry])
_TOKEN_DIRECTORY = TypeAdapter(dict[str, TokenDirectoryEntry])


def parse_chain_directory(body: bytes) -> list[Chain]:
    """`{chainId: {name, rpc}}` -> Chain records, ordered by chain id as returned."""
    try:
        entries = _CHAIN_DIRECTORY.validate_json(body)
    except ValidationError as exc:
        raise DeserializeError(f"invalid chain directory payload: {exc}") from exc

    return [Chain(id=chain_id, name=entry.name, rpc=entry.rpc) for chain_id, entry in entries.items()]


def parse_token_directory(body: bytes) -> dict[str, TokenDirectoryEntry]:
    """`{tokenId: token}`; one malformed entry rejects the whole directory."""
    try:
        return _TOKEN_DIRECTORY.validate_json(body)
    except ValidationError as exc:
        raise DeserializeError(f"invalid token directory payload: {exc}") from exc
