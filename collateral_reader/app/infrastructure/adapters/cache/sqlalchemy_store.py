from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncEngine

from collateral_reader.app.domain.ports.out import KeyValueStore
from collateral_reader.app.infrastructure.adapters.cache.json_codec import freeze, thaw
from collateral_reader.app.infrastructure.db.models.cache.cache_entries import CacheEntriesDB

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SqlAlchemyKeyValueStore(KeyValueStore):
    """
    Cache adapter persisting entries into the cache_entries table.

    - one row per key, value stored as canonical JSON text,
    - set() is an upsert (ON CONFLICT DO UPDATE),
    - compare_and_set() is a conditional INSERT ... ON CONFLICT DO NOTHING
      (expected=None) or UPDATE ... WHERE value = :expected, so the check and
      the write happen in one statement.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        try:
            self._insert = _INSERTS[engine.dialect.name]
        except KeyError:
            raise ValueError(f"Unsupported cache store dialect: {engine.dialect.name!r}")

    async def get(self, key: str) -> Any | None:
        stmt = select(CacheEntriesDB.value).where(CacheEntriesDB.key == key)
        async with self._engine.connect() as conn:
            raw = (await conn.execute(stmt)).scalar_one_or_none()
        return None if raw is None else thaw(raw)

    async def set(self, key: str, value: Any) -> None:
        now = datetime.now(timezone.utc)
        stmt = self._insert(CacheEntriesDB).values(key=key, value=freeze(value), updated_at=now)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntriesDB.key],
            set_={"value": stmt.excluded.value, "updated_at": stmt.excluded.updated_at},
        )
        async with self._engine.begin() as conn:
            await conn.execute(stmt)

    async def delete(self, key: str) -> None:
        async with self._engine.begin() as conn:
            await conn.execute(delete(CacheEntriesDB).where(CacheEntriesDB.key == key))

    async def compare_and_set(self, key: str, expected: Any | None, new: Any) -> bool:
        now = datetime.now(timezone.utc)
        if expected is None:
            stmt = (
                self._insert(CacheEntriesDB)
                .values(key=key, value=freeze(new), updated_at=now)
                .on_conflict_do_nothing(index_elements=[CacheEntriesDB.key])
            )
        else:
            stmt = (
                update(CacheEntriesDB)
                .where(CacheEntriesDB.key == key, CacheEntriesDB.value == freeze(expected))
                .values(value=freeze(new), updated_at=now)
            )

        async with self._engine.begin() as conn:
            result = await conn.execute(stmt)

        swapped = result.rowcount == 1
        logger.debug("compare_and_set %s -> %s", key, swapped)
        return swapped
