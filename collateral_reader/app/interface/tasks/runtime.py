from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from collateral_reader.app.config import settings
from collateral_reader.app.domain.ports.out import KeyValueStore
from collateral_reader.app.infrastructure.db.engine import create_app_async_engine
from collateral_reader.app.infrastructure.factories.cache.key_value_store_factory import (
    key_value_store_factory,
)
from collateral_reader.app.infrastructure.fetchers.http_fetch_client import HttpxFetchClient


@dataclass(frozen=True)
class TaskRuntime:
    store: KeyValueStore
    fetch_client: HttpxFetchClient


@asynccontextmanager
async def task_runtime(*, backend: str | None = None) -> AsyncIterator[TaskRuntime]:
    """
    Shared store + fetch client for one task run.

    The engine is only created for the sqlalchemy backend and always disposed.
    """
    backend = backend or settings.cache_backend
    engine = create_app_async_engine() if backend == "sqlalchemy" else None
    try:
        async with HttpxFetchClient(timeout_s=settings.fetch_timeout_s) as fetch_client:
            yield TaskRuntime(
                store=key_value_store_factory(backend=backend, engine=engine),
                fetch_client=fetch_client,
            )
    finally:
        if engine is not None:
            await engine.dispose()
