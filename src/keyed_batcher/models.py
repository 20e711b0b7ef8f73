"""Domain entities for keyed_batcher."""
from __future__ import annotations

from pydantic import BaseModel, Field


class AccumulatorStatus(BaseModel):
    """Point-in-time counters of a keyed accumulator.

    Carries derived scalars only; accumulated items are never exposed.
    """
    batch_size: int
    total_items: int = 0
    item_counts: dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def active_keys_count(self) -> int:
        return len(self.item_counts)

    @property
    def is_empty(self) -> bool:
        return not self.item_counts
