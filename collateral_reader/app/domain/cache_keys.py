from __future__ import annotations

from typing import Final

CHAINS_STORAGE_KEY: Final[str] = "collateral-reader::multichain-chains-store"
ASSETS_STORAGE_KEY: Final[str] = "collateral-reader::multichain-assets-store"
ASSOCIATED_ASSETS_STORAGE_KEY: Final[str] = "collateral-reader::multichain-associated-assets-store"
STATS_STORAGE_KEY: Final[str] = "collateral-reader::multichain-stats-store"
WORK_IN_PROGRESS_STORAGE_KEY: Final[str] = "collateral-reader::multichain-work-in-progress"

REGISTRY_STORAGE_KEYS: Final[tuple[str, ...]] = (
    CHAINS_STORAGE_KEY,
    ASSETS_STORAGE_KEY,
    ASSOCIATED_ASSETS_STORAGE_KEY,
)
