from __future__ import annotations

from collateral_reader.app.domain.entities import U128_MAX
from collateral_reader.app.domain.errors import DeserializeError
from collateral_reader.app.infrastructure.decoders.json_rpc.envelope import (
    parse_hex_digits,
    parse_result,
    strip_hex_prefix,
)


def swap_bytes_u128(value: int) -> int:
    """Reverse the byte order of a 128-bit unsigned integer."""
    if not 0 <= value <= U128_MAX:
        raise ValueError(f"not a u128: {value}")
    return int.from_bytes(value.to_bytes(16, "big"), "little")


def hex_to_balance(digits: str) -> int:
    """
    Decode SCALE-encoded u128 storage bytes given as hex digits.

    The digits are read as a big-endian number and byte-swapped, which yields
    the little-endian value the node actually stored.
    """
    value = parse_hex_digits(digits)
    if value > U128_MAX:
        raise DeserializeError(f"storage value does not fit into 128 bits: {digits!r}")
    return swap_bytes_u128(value)


def balance_to_hex(balance: int) -> str:
    """Inverse of hex_to_balance: 32 hex digits as stored by the node."""
    return f"{swap_bytes_u128(balance):032x}"


def parse_storage_balance(body: bytes) -> int:
    """Balance held under a storage key; a null result (key not found) is 0."""
    result = parse_result(body)
    if result is None:
        return 0
    return hex_to_balance(strip_hex_prefix(result))
