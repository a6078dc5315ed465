from __future__ import annotations

from typing import Callable, Dict

from sqlalchemy.ext.asyncio import AsyncEngine

from collateral_reader.app.domain.ports.out import KeyValueStore
from collateral_reader.app.infrastructure.adapters.cache.in_memory_store import InMemoryKeyValueStore
from collateral_reader.app.infrastructure.adapters.cache.sqlalchemy_store import (
    SqlAlchemyKeyValueStore,
)

KeyValueStoreFactory = Callable[[AsyncEngine | None], KeyValueStore]


def _make_sqlalchemy_store(engine: AsyncEngine | None) -> KeyValueStore:
    if engine is None:
        raise ValueError("The sqlalchemy cache backend needs an AsyncEngine")
    return SqlAlchemyKeyValueStore(engine)


_KEY_VALUE_STORE_REGISTRY: Dict[str, KeyValueStoreFactory] = {
    "memory": lambda engine: InMemoryKeyValueStore(),
    "sqlalchemy": _make_sqlalchemy_store,
}


def key_value_store_factory(
    *,
    backend: str,
    engine: AsyncEngine | None = None,
) -> KeyValueStore:
    try:
        factory = _KEY_VALUE_STORE_REGISTRY[backend]
    except KeyError:
        raise ValueError(f"Unsupported cache backend: {backend!r}")
    return factory(engine)
