import asyncio
import logging

from collateral_reader.app.config import settings
from collateral_reader.app.infrastructure.adapters.cache.sqlalchemy_store import (
    SqlAlchemyKeyValueStore,
)
from collateral_reader.app.infrastructure.db.engine import create_app_async_engine
from collateral_reader.app.infrastructure.factories.collectors.collectors_factory import (
    multichain_components_factory,
)
from collateral_reader.app.infrastructure.fetchers.http_fetch_client import HttpxFetchClient


async def warm_registry_cache() -> None:
    engine = create_app_async_engine()
    try:
        async with HttpxFetchClient(timeout_s=settings.fetch_timeout_s) as fetch_client:
            components = multichain_components_factory(
                store=SqlAlchemyKeyValueStore(engine),
                fetch_client=fetch_client,
            )
            # refetch even if rows already exist
            await components.registry.invalidate()
            assets = await components.registry.get_assets()
            associated = await components.registry.cached_associated_assets() or []
    finally:
        await engine.dispose()

    print(f"cached {len(assets)} assets, {len(associated)} associated assets")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(warm_registry_cache())
