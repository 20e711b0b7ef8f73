"""CLI service layer for keyed_batcher.

Shared console handles, exit codes, and JSON-lines ingestion used by the
kbatch commands.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from typing import Any

from rich.console import Console

from keyed_batcher.batching import KeyedBatchedAccumulator
from keyed_batcher.exceptions import InvalidArgumentError, KeyedBatcherError

logger = logging.getLogger(__name__)

# Exit codes
EXIT_ERROR = 1
EXIT_INVALID_ARG = 2

console = Console(stderr=False)  # stdout for normal output
error_console = Console(stderr=True)  # stderr for errors


def _escape_rich(text: str) -> str:
    """Escape brackets to prevent Rich markup interpretation."""
    return text.replace("[", "\\[").replace("]", "\\]")


class RecordError(KeyedBatcherError):
    """A JSON-lines input record could not be accumulated."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def iter_records(lines: Iterable[str]) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield ``(line_number, record)`` for each non-blank JSON-lines entry.

    Raises:
        RecordError: On malformed JSON or a record that is not an object.
    """
    for line_number, line in enumerate(lines, start=1):
        stripped = line.strip()
        if not stripped:
            continue
        try:
            record = json.loads(stripped)
        except json.JSONDecodeError as e:
            raise RecordError(line_number, f"invalid JSON ({e.msg})") from e
        if not isinstance(record, dict):
            raise RecordError(line_number, "record must be a JSON object")
        yield line_number, record


def accumulate_records(
    lines: Iterable[str],
    *,
    key_field: str,
    batch_size: int,
) -> KeyedBatchedAccumulator[dict[str, Any]]:
    """Push every record of a JSON-lines stream under ``record[key_field]``.

    The whole input is accumulated before anything is returned, so a bad
    record aborts the command without partial output.
    """
    accumulator: KeyedBatchedAccumulator[dict[str, Any]] = KeyedBatchedAccumulator(
        batch_size
    )
    for line_number, record in iter_records(lines):
        try:
            accumulator.push(record, record.get(key_field))
        except InvalidArgumentError as e:
            raise RecordError(
                line_number, f"field {key_field!r} must be a non-empty string"
            ) from e
    logger.debug(
        "Accumulated %d records across %d keys",
        accumulator.total_accumulated_items_count,
        accumulator.active_keys_count,
    )
    return accumulator
