from __future__ import annotations

import logging

from collateral_reader.app.config import settings
from collateral_reader.app.infrastructure.factories.collectors.collectors_factory import (
    multichain_components_factory,
)
from collateral_reader.app.interface.tasks.runtime import task_runtime

logger = logging.getLogger(__name__)


async def invalidate_registry_task(
    *,
    backend: str | None = None,
    reset_work_in_progress: bool = False,
) -> None:
    """
    Task: drop cached chain/asset/association registries.

    Optionally clears a work-in-progress flag left by a crashed refresh.
    The stats snapshot is kept. Only meaningful for a persistent backend:
    the memory store starts empty on every run.
    """
    backend = backend or settings.cache_backend
    if backend == "memory":
        logger.warning(
            "Cache backend 'memory' is process-local, nothing persisted to invalidate; "
            "use --backend sqlalchemy"
        )
        return

    async with task_runtime(backend=backend) as runtime:
        components = multichain_components_factory(
            store=runtime.store,
            fetch_client=runtime.fetch_client,
        )
        await components.registry.invalidate()
        if reset_work_in_progress:
            await components.job.reset_work_in_progress()
