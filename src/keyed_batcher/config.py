"""Configuration management."""
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from keyed_batcher.batching.batch_accumulator import DEFAULT_BATCH_SIZE
from keyed_batcher.exceptions import ConfigError


class KeyedBatcherConfig(BaseSettings):
    """Configuration for keyed_batcher services and the kbatch CLI."""

    model_config = SettingsConfigDict(
        env_prefix="KEYED_BATCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Batching settings
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)

    # Draining settings
    min_items_to_drain: int = Field(default=0, ge=0)

    # Input settings
    key_field: str = Field(default="key", min_length=1)

    # Logging
    verbose: bool = False


def _build_config(**overrides: object) -> KeyedBatcherConfig:
    try:
        return KeyedBatcherConfig(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid keyed_batcher configuration: {e}") from e


@lru_cache
def _get_config_cached() -> KeyedBatcherConfig:
    """Cached configuration lookup from the environment."""
    return _build_config()


def clear_config_cache() -> None:
    """Drop the cached environment config without loading a new one."""
    _get_config_cached.cache_clear()


def get_config(
    batch_size: int | None = None,
    clear_cache: bool = False,
) -> KeyedBatcherConfig:
    """Get configuration instance.

    Args:
        batch_size: Optional batch size. If provided, overrides the environment.
        clear_cache: If True, clear the cache before returning config.

    Note: explicit overrides are never cached, so a one-off batch size does
    not leak into later lookups.
    """
    if clear_cache:
        clear_config_cache()

    if batch_size is not None:
        return _build_config(batch_size=batch_size)

    return _get_config_cached()
