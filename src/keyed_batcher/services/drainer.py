"""Periodic extraction and bulk publish of accumulated batches."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic

from keyed_batcher.batching import KeyedBatchedAccumulator
from keyed_batcher.batching.batch_accumulator import ItemT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPublishResult:
    """Result for one batch publish attempt."""

    key: str
    batch_index: int
    size: int
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DrainSummary:
    """Aggregate counters over the results of one or more drains."""

    batches: int = 0
    items: int = 0
    failed_batches: int = 0
    failed_items: int = 0

    @property
    def published_items(self) -> int:
        return self.items - self.failed_items


def summarize(results: Iterable[BatchPublishResult]) -> DrainSummary:
    batches = items = failed_batches = failed_items = 0
    for result in results:
        batches += 1
        items += result.size
        if not result.success:
            failed_batches += 1
            failed_items += result.size
    return DrainSummary(
        batches=batches,
        items=items,
        failed_batches=failed_batches,
        failed_items=failed_items,
    )


class BatchDrainer(Generic[ItemT]):
    """Extracts an accumulator and hands each batch to ``publish_fn``.

    Meant to be called from an external recurring task. Batches of a key are
    published in order; a failed publish is recorded and the drain moves on.
    """

    def __init__(
        self,
        accumulator: KeyedBatchedAccumulator[ItemT],
        publish_fn: Callable[[str, list[ItemT]], None],
        *,
        min_items: int = 0,
    ) -> None:
        if min_items < 0:
            raise ValueError("min_items must be greater than or equal to 0")
        self._accumulator = accumulator
        self._publish_fn = publish_fn
        self.min_items = min_items

    @property
    def accumulator(self) -> KeyedBatchedAccumulator[ItemT]:
        return self._accumulator

    def should_drain(self) -> bool:
        """True when items are pending and at least ``min_items`` piled up."""

        if self._accumulator.is_empty:
            return False
        return self._accumulator.total_accumulated_items_count >= self.min_items

    def drain(self, *, force: bool = False) -> list[BatchPublishResult]:
        """Extract and publish everything, if the threshold allows it.

        Args:
            force: Drain whenever anything is pending, ignoring ``min_items``.

        Returns:
            One result per published batch, in publish order. Empty when
            nothing was drained.
        """
        if self._accumulator.is_empty:
            return []
        if not force and not self.should_drain():
            return []

        key_to_batches = self._accumulator.extract_all()
        results: list[BatchPublishResult] = []
        for key, batches in key_to_batches.items():
            for batch_index, batch in enumerate(batches):
                results.append(self._publish(key, batch_index, batch))

        summary = summarize(results)
        logger.debug(
            "Drained %d items in %d batches across %d keys (%d batches failed)",
            summary.items,
            summary.batches,
            len(key_to_batches),
            summary.failed_batches,
        )
        return results

    def _publish(
        self, key: str, batch_index: int, batch: list[ItemT]
    ) -> BatchPublishResult:
        try:
            self._publish_fn(key, batch)
        except Exception as exc:
            logger.warning(
                "Publish failed for batch %d of key %r (%d items): %s",
                batch_index,
                key,
                len(batch),
                exc,
            )
            return BatchPublishResult(
                key=key, batch_index=batch_index, size=len(batch), error=str(exc)
            )
        return BatchPublishResult(key=key, batch_index=batch_index, size=len(batch))
