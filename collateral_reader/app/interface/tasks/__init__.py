from __future__ import annotations

from collections.abc import Awaitable, Callable

from .collectors.collect_asset_stats_task import collect_asset_stats_task as collectors__collect_asset_stats_task
from .multichain.invalidate_registry_task import invalidate_registry_task as multichain__invalidate_registry_task
from .multichain.refresh_stats_task import refresh_stats_task as multichain__refresh_stats_task

TaskFn = Callable[..., Awaitable[None]]

TASKS: dict[str, TaskFn] = {
    "collectors__collect_asset_stats_task": collectors__collect_asset_stats_task,
    "multichain__refresh_stats_task": multichain__refresh_stats_task,
    "multichain__invalidate_registry_task": multichain__invalidate_registry_task,
}
