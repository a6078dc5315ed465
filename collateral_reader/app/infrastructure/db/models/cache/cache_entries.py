from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from collateral_reader.app.infrastructure.db.db_base import BaseDB


class CacheEntriesDB(BaseDB):
    """
    Persistent key-value cache.

    One row = one cache key (chain registry, asset registry, associations,
    stats snapshot, work-in-progress flag) holding a JSON document.
    """

    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(Text, primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
