from __future__ import annotations

import xxhash


def twox_64(data: bytes) -> bytes:
    return xxhash.xxh64(data, seed=0).intdigest().to_bytes(8, "little")


def twox_128(data: bytes) -> bytes:
    return b"".join(
        xxhash.xxh64(data, seed=seed).intdigest().to_bytes(8, "little")
        for seed in (0, 1)
    )


def twox_64_concat(data: bytes) -> bytes:
    return twox_64(data) + data


def generate_storage_key(module_prefix: str, storage_item_prefix: str) -> bytes:
    """Storage key of a plain storage value: twox128(module) ++ twox128(item)."""
    return twox_128(module_prefix.encode("utf-8")) + twox_128(storage_item_prefix.encode("utf-8"))


def generate_double_storage_key(module_prefix: str, storage_item_prefix: str, key: str) -> bytes:
    """Storage key of a map entry hashed with Twox64Concat."""
    return generate_storage_key(module_prefix, storage_item_prefix) + twox_64_concat(
        key.encode("utf-8")
    )


def generate_double_storage_keys(
    module_prefix: str,
    storage_item_prefix: str,
    key1: str,
    key2: str,
) -> bytes:
    """Storage key of a double map entry, both keys hashed with Twox64Concat."""
    return (
        generate_storage_key(module_prefix, storage_item_prefix)
        + twox_64_concat(key1.encode("utf-8"))
        + twox_64_concat(key2.encode("utf-8"))
    )


def to_hex(storage_key: bytes) -> str:
    return storage_key.hex()


def storage_key_hex(module_prefix: str, storage_item_prefix: str, suffix: str = "") -> str:
    """
    0x-prefixed hex key for `module.item`, with an optional pre-encoded hex suffix.

    The suffix selects an entry of a complex map whose hashed key is known
    in advance (e.g. a currency id).
    """
    return "0x" + to_hex(generate_storage_key(module_prefix, storage_item_prefix)) + suffix
