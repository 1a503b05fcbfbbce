from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Contract for all object storage adapters."""

    @abstractmethod
    def write(self, locator: str, data: bytes, content_type: str) -> str:
        """Store bytes under a locator without overwriting existing objects.

        Returns:
            The locator the object was stored under.

        Raises:
            StorageSizeLimitError: if the store rejects the object as too large.
            StorageError: for any other write failure.
        """

    @abstractmethod
    def public_url(self, locator: str) -> str:
        """Return a publicly retrievable URL for a stored object."""

    @abstractmethod
    def delete(self, locator: str) -> None:
        """Remove an object.

        Raises:
            StorageError: if the store reports a failure.
        """
