"""Service factory for dependency injection."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from keyed_batcher.batching import KeyedBatchedAccumulator
from keyed_batcher.config import KeyedBatcherConfig, get_config
from keyed_batcher.services.drainer import BatchDrainer


class ServiceFactory:
    """Factory for creating accumulators and drainers from configuration."""

    def __init__(self, config: KeyedBatcherConfig | None = None):
        """Initialize the service factory."""
        self._config = config if config is not None else get_config()

    @property
    def config(self) -> KeyedBatcherConfig:
        return self._config

    def create_accumulator(self) -> KeyedBatchedAccumulator[Any]:
        """Create a KeyedBatchedAccumulator.

        Returns:
            An empty accumulator using the configured batch size.
        """
        return KeyedBatchedAccumulator(self._config.batch_size)

    def create_drainer(
        self,
        publish_fn: Callable[[str, list[Any]], None],
        accumulator: KeyedBatchedAccumulator[Any] | None = None,
    ) -> BatchDrainer[Any]:
        """Create a BatchDrainer.

        Args:
            publish_fn: Bulk operation invoked once per extracted batch.
            accumulator: Accumulator to drain. A new one is created if omitted.

        Returns:
            A BatchDrainer gated by the configured ``min_items_to_drain``.
        """
        if accumulator is None:
            accumulator = self.create_accumulator()
        return BatchDrainer(
            accumulator,
            publish_fn,
            min_items=self._config.min_items_to_drain,
        )


def get_service_factory(config: KeyedBatcherConfig | None = None) -> ServiceFactory:
    """Create a ServiceFactory instance.

    Returns:
        A ServiceFactory instance.
    """
    return ServiceFactory(config=config)
