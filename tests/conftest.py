"""Pytest configuration and fixtures for keyed_batcher tests."""
from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from keyed_batcher.batching import KeyedBatchedAccumulator
from keyed_batcher.config import KeyedBatcherConfig, clear_config_cache

_ENV_VARS = (
    "KEYED_BATCHER_BATCH_SIZE",
    "KEYED_BATCHER_MIN_ITEMS_TO_DRAIN",
    "KEYED_BATCHER_KEY_FIELD",
    "KEYED_BATCHER_VERBOSE",
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host environment and stray .env files out of config lookups."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def accumulator() -> KeyedBatchedAccumulator[str]:
    """Create an empty accumulator with batch size 3."""
    return KeyedBatchedAccumulator(3)


@pytest.fixture
def mock_config() -> KeyedBatcherConfig:
    """Create a config with small batches and a drain threshold."""
    return KeyedBatcherConfig(
        batch_size=2,
        min_items_to_drain=3,
        key_field="topic",
        verbose=False,
    )


@pytest.fixture
def sample_jsonl(tmp_path: Path) -> Path:
    """JSON-lines input with records spread over two topics."""
    path = tmp_path / "events.jsonl"
    path.write_text(
        "\n".join(
            [
                '{"topic": "auth-logs", "id": 0}',
                '{"topic": "threat-events", "id": 1}',
                '{"topic": "auth-logs", "id": 2}',
                "",
                '{"topic": "auth-logs", "id": 3}',
                '{"topic": "threat-events", "id": 4}',
            ]
        )
    )
    return path
