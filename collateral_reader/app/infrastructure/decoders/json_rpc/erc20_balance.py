from __future__ import annotations

from typing import Any

from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from collateral_reader.app.domain.entities import U128_MAX
from collateral_reader.app.domain.errors import DeserializeError
from collateral_reader.app.infrastructure.decoders.json_rpc.envelope import (
    build_request,
    parse_hex_digits,
    parse_result,
    strip_hex_prefix,
)

# 0x70a08231
BALANCE_OF_SELECTOR: bytes = function_signature_to_4byte_selector("balanceOf(address)")


def build_balance_of_call_data(holder_address: str) -> str:
    """
    ABI call data for `balanceOf(holder_address)`:
    selector + address left-padded to a 32-byte word, as 0x-prefixed hex.

    Raises ValueError for anything that is not a 20-byte hex address.
    """
    # to_checksum_address normalizes case, abi encoding then lowercases it again
    encoded_args = abi_encode(["address"], [to_checksum_address(holder_address)])
    return "0x" + (BALANCE_OF_SELECTOR + encoded_args).hex()


def build_balance_of_request(*, token_address: str, holder_address: str) -> bytes:
    params: list[Any] = [
        {"to": token_address, "data": build_balance_of_call_data(holder_address)},
        "latest",
    ]
    return build_request("eth_call", params)


def parse_balance_of_response(body: bytes) -> int:
    """
    Decode an `eth_call` balanceOf response.

    The result is the ABI big-endian uint256 word; it is used as-is
    (no byte swap) and must fit into 128 bits.
    """
    result = parse_result(body)
    if result is None:
        raise DeserializeError("eth_call returned a null result")

    amount = parse_hex_digits(strip_hex_prefix(result))
    if amount > U128_MAX:
        raise DeserializeError(f"balance does not fit into 128 bits: {result!r}")
    return amount
