"""Argument validation for the batching accumulators."""

from __future__ import annotations

from typing import Any

from keyed_batcher.exceptions import InvalidArgumentError


def validate_batch_size(batch_size: Any) -> int:
    """Return ``batch_size`` if it is a natural number, else raise.

    ``bool`` is rejected even though it subclasses ``int``, and integral
    floats such as ``3.0`` are rejected as well.
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise InvalidArgumentError(
            f"batch_size must be a natural number, got {batch_size!r}"
        )
    if batch_size < 1:
        raise InvalidArgumentError(
            f"batch_size must be greater than 0, got {batch_size}"
        )
    return batch_size


def validate_key(key: Any) -> str:
    """Return ``key`` if it is a non-empty string, else raise."""
    if not isinstance(key, str) or not key:
        raise InvalidArgumentError(f"key must be a non-empty string, got {key!r}")
    return key
