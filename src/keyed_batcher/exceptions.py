"""Custom exceptions for keyed_batcher."""


class KeyedBatcherError(Exception):
    """Base exception for keyed_batcher."""
    pass


class InvalidArgumentError(KeyedBatcherError, ValueError):
    """Invalid batch size or key passed to an accumulator."""
    pass


class ConfigError(KeyedBatcherError):
    """Configuration errors."""
    pass


class PublishError(KeyedBatcherError):
    """Bulk publish of an extracted batch failed."""
    pass
