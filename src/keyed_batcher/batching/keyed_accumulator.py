"""Per-key batching accumulator."""

from __future__ import annotations

import logging
from typing import Generic

from keyed_batcher.batching.batch_accumulator import BatchedAccumulator, ItemT
from keyed_batcher.batching.validation import validate_batch_size, validate_key
from keyed_batcher.models import AccumulatorStatus

logger = logging.getLogger(__name__)


class KeyedBatchedAccumulator(Generic[ItemT]):
    """Accumulates items into fixed-size batches per key.

    Items are streamed straight into their key's open batch as they arrive, so
    no flat list ever has to be chunked afterwards. Order is preserved within a
    key; nothing is promised across keys.

    Accumulated batches cannot be inspected in place. Exposing them would let a
    caller append to a full batch, so :meth:`extract_all` is the only way to
    reach them: it transfers ownership of every batch and resets the instance.
    Use the count getters to decide whether an extraction is worthwhile.

    Example, with ``batch_size=3``::

        acc.push("A", "x"); acc.push("B", "x"); acc.push("C", "y"); acc.push("D", "x")
        acc.extract_all()  # {"x": [["A", "B", "D"]], "y": [["C"]]}
    """

    def __init__(self, batch_size: int) -> None:
        self._batch_size = validate_batch_size(batch_size)
        self._key_to_accumulator: dict[str, BatchedAccumulator[ItemT]] = {}
        self._total_items_count = 0

    def __len__(self) -> int:
        return self._total_items_count

    def __contains__(self, key: object) -> bool:
        return self.is_active_key(key)  # type: ignore[arg-type]

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def active_keys_count(self) -> int:
        """Number of keys holding at least one accumulated item. O(1)."""

        return len(self._key_to_accumulator)

    @property
    def active_keys(self) -> list[str]:
        """Snapshot of the active keys, in the order they were first pushed."""

        return list(self._key_to_accumulator)

    @property
    def total_accumulated_items_count(self) -> int:
        """Total items across all keys.

        Handy for conditional extraction: skip a bulk operation until enough
        items have piled up.
        """

        return self._total_items_count

    @property
    def is_empty(self) -> bool:
        return not self._key_to_accumulator

    def is_active_key(self, key: str) -> bool:
        """Return True if ``key`` currently has at least one accumulated item."""

        if not isinstance(key, str):
            return False
        return key in self._key_to_accumulator

    def get_accumulated_items_count(self, key: str) -> int:
        """Return the number of items accumulated for ``key``, 0 if inactive."""

        if not isinstance(key, str):
            return 0
        accumulator = self._key_to_accumulator.get(key)
        if accumulator is None:
            return 0
        return accumulator.item_count

    def push(self, item: ItemT, key: str) -> None:
        """Add ``item`` to the open batch of ``key``.

        Args:
            item: The item to accumulate. Stored as-is.
            key: Non-empty string naming the partition.

        Raises:
            InvalidArgumentError: If ``key`` is not a non-empty string. Nothing
                is mutated in that case.
        """
        validate_key(key)
        accumulator = self._key_to_accumulator.get(key)
        if accumulator is None:
            accumulator = BatchedAccumulator(self._batch_size, validate=False)
            self._key_to_accumulator[key] = accumulator
            logger.debug("Activated key %r", key)
        accumulator.push(item)
        self._total_items_count += 1

    def status(self) -> AccumulatorStatus:
        """Return a frozen snapshot of the current counters."""
        return AccumulatorStatus(
            batch_size=self._batch_size,
            total_items=self._total_items_count,
            item_counts={
                key: accumulator.item_count
                for key, accumulator in self._key_to_accumulator.items()
            },
        )

    def extract_all(self) -> dict[str, list[list[ItemT]]]:
        """Extract every accumulated batch and reset the accumulator.

        Returns:
            A new dict mapping each active key to its batches, in push order.
            Every batch but the last of a key holds exactly ``batch_size``
            items. The dict is empty when nothing was accumulated, and is a
            fresh object on every call.

        The caller owns the returned structure; afterwards ``is_empty`` is
        True and every previously active key reports a count of 0.
        """
        key_to_batches = {
            key: accumulator.extract()
            for key, accumulator in self._key_to_accumulator.items()
        }
        if key_to_batches:
            logger.debug(
                "Extracted %d items across %d keys",
                self._total_items_count,
                len(key_to_batches),
            )
        self._key_to_accumulator = {}
        self._total_items_count = 0
        return key_to_batches
