"""Fixed-size batch builder for the items of a single key."""

from __future__ import annotations

from typing import Generic, TypeVar

from keyed_batcher.batching.validation import validate_batch_size

ItemT = TypeVar("ItemT")

DEFAULT_BATCH_SIZE = 100


class BatchedAccumulator(Generic[ItemT]):
    """Accumulates items into fixed-size batches, preserving arrival order.

    Every batch except the last holds exactly ``batch_size`` items. Batches are
    only observable through :meth:`extract`, which hands them to the caller.
    """

    def __init__(
        self,
        batch_size: int = DEFAULT_BATCH_SIZE,
        *,
        validate: bool = True,
    ) -> None:
        # Owners that already checked batch_size pass validate=False.
        self._batch_size = validate_batch_size(batch_size) if validate else batch_size
        self._batches: list[list[ItemT]] = []
        self._item_count = 0

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def item_count(self) -> int:
        """Number of items accumulated since creation or the last extraction."""

        return self._item_count

    @property
    def batches_count(self) -> int:
        return len(self._batches)

    @property
    def is_empty(self) -> bool:
        return self._item_count == 0

    def push(self, item: ItemT) -> None:
        """Append one item, opening a new batch when the last one is full."""

        if not self._batches or len(self._batches[-1]) == self._batch_size:
            self._batches.append([])
        self._batches[-1].append(item)
        self._item_count += 1

    def extract(self) -> list[list[ItemT]]:
        """Hand over all batches and reset to empty.

        The returned list is owned by the caller; this accumulator keeps no
        reference to it or to any of its batches.
        """

        batches = self._batches
        self._batches = []
        self._item_count = 0
        return batches
