from __future__ import annotations

from typing import Any

from collateral_reader.app.domain.ports.out import KeyValueStore
from collateral_reader.app.infrastructure.adapters.cache.json_codec import freeze, thaw


class InMemoryKeyValueStore(KeyValueStore):
    """
    Process-local cache.

    Values are kept JSON-encoded so callers never share mutable state with
    the store, and compare_and_set compares documents, not identities.
    None of the methods awaits, so each one is atomic on the event loop.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else thaw(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = freeze(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def compare_and_set(self, key: str, expected: Any | None, new: Any) -> bool:
        current = self._data.get(key)
        if current != (None if expected is None else freeze(expected)):
            return False
        self._data[key] = freeze(new)
        return True
