from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from terradocs.models.docs import DocumentRecord


class CacheEntry(BaseModel):
    """A cached document bound to the provider version it was fetched for."""

    model_config = ConfigDict(frozen=True)

    record: DocumentRecord
    version: str  # Valid only while this equals the provider's bound version
    stored_at: datetime


class CacheStats(BaseModel):
    hits: int = 0
    misses: int = 0
    requests: int = 0
    hit_rate: float = 0.0  # 0.0–100.0
    entries: int = 0
    in_flight: int = 0
