"""Per-key fixed-size batching."""
from keyed_batcher.batching.batch_accumulator import DEFAULT_BATCH_SIZE, BatchedAccumulator
from keyed_batcher.batching.keyed_accumulator import KeyedBatchedAccumulator
from keyed_batcher.batching.validation import validate_batch_size, validate_key

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "BatchedAccumulator",
    "KeyedBatchedAccumulator",
    "validate_batch_size",
    "validate_key",
]
