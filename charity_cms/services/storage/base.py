"""
Base storage protocol for image file operations.

Post image lifecycle code depends only on this interface, so the backing
store (local disk today) can be swapped without touching it.
"""

from abc import abstractmethod
from typing import Protocol


class StorageService(Protocol):
    """
    Protocol defining the interface for storage services.

    Files are addressed by bare file name within the backend's namespace.
    """

    @abstractmethod
    async def save(self, filename: str, data: bytes) -> None:
        """
        Persist `data` under `filename`, replacing any existing file.

        Args:
            filename: Bare file name (no directory parts)
            data: Raw file bytes
        """
        ...

    @abstractmethod
    async def exists(self, filename: str) -> bool:
        """Return True if `filename` is stored."""
        ...

    @abstractmethod
    async def remove(self, filename: str) -> bool:
        """
        Delete `filename`.

        Removing a file that does not exist is not an error.

        Returns:
            bool: True if a file was deleted, False if there was nothing to delete
        """
        ...

    @abstractmethod
    async def read(self, filename: str) -> bytes | None:
        """Return the file's bytes, or None if it does not exist."""
        ...
