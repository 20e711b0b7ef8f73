"""keyed_batcher - Per-key fixed-size batching accumulator."""
from keyed_batcher.batching import BatchedAccumulator, KeyedBatchedAccumulator
from keyed_batcher.exceptions import InvalidArgumentError, KeyedBatcherError
from keyed_batcher.models import AccumulatorStatus

__version__ = "0.1.0"

__all__ = [
    "AccumulatorStatus",
    "BatchedAccumulator",
    "InvalidArgumentError",
    "KeyedBatchedAccumulator",
    "KeyedBatcherError",
]
