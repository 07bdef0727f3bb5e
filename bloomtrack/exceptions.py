"""
Exception hierarchy for the bloom tracker.
"""


class FarmTrackerError(Exception):
    """Base class for all tracker errors."""
    pass


class EntryValidationError(FarmTrackerError, ValueError):
    """Raised when caller-supplied entry data is rejected before persistence."""
    pass


class BloomNotFoundError(FarmTrackerError):
    """Raised when a write references a bloom id that does not exist."""

    def __init__(self, bloom_id: str):
        self.bloom_id = bloom_id
        super().__init__(f"Bloom entry '{bloom_id}' not found")


class StorageError(FarmTrackerError):
    """Base class for storage failures."""
    pass


class StorageReadError(StorageError):
    """Raised by the key-value layer when a read fails."""
    pass


class StorageWriteError(StorageError):
    """Raised when persisting a collection fails."""
    pass
