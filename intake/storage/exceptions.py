class StorageError(Exception):
    """Base exception for object store failures."""


class StorageSizeLimitError(StorageError):
    """Raised when the store rejects an object for exceeding its size limit."""
