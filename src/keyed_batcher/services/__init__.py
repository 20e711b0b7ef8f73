"""Service layer for keyed_batcher."""
from keyed_batcher.services.drainer import (
    BatchDrainer,
    BatchPublishResult,
    DrainSummary,
    summarize,
)
from keyed_batcher.services.factory import ServiceFactory, get_service_factory

__all__ = [
    "BatchDrainer",
    "BatchPublishResult",
    "DrainSummary",
    "ServiceFactory",
    "get_service_factory",
    "summarize",
]
