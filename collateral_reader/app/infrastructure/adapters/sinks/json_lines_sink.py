from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

from collateral_reader.app.domain.entities import AssetStats
from collateral_reader.app.domain.ports.out import AssetStatsSink

logger = logging.getLogger(__name__)


class JsonLinesAssetStatsSink(AssetStatsSink):
    """Writes each record as one JSON line; stands in for the ledger submission."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    async def submit(self, *, family: str, stats: AssetStats) -> None:
        logger.info("Submitting %s stats for %s", family, stats.asset)
        self._stream.write(json.dumps({"family": family, **stats.to_dict()}) + "\n")
        self._stream.flush()
