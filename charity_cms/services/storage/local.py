"""
Local filesystem storage implementation.

Images are stored flat under the configured uploads directory and served
back through the posts router.
"""

from logging import getLogger
from pathlib import Path

import aiofiles
import aiofiles.os

from charity_cms.configs import file_logger

logger = file_logger(getLogger(__name__))


class LocalStorage:
    """
    Local filesystem storage implementation.

    Stores files in a single directory. Suitable for single-host
    deployments, development and testing.
    """

    def __init__(self, base_path: Path) -> None:
        """Initialize local storage rooted at `base_path`."""
        self.base_path = base_path
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the upload directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, filename: str) -> Path:
        return self.base_path / filename

    async def save(self, filename: str, data: bytes) -> None:
        async with aiofiles.open(self._get_file_path(filename), "wb") as f:
            await f.write(data)
        logger.info(f"Stored image {filename} ({len(data)} bytes)")

    async def exists(self, filename: str) -> bool:
        return await aiofiles.os.path.isfile(self._get_file_path(filename))

    async def remove(self, filename: str) -> bool:
        try:
            await aiofiles.os.remove(self._get_file_path(filename))
        except FileNotFoundError:
            return False
        logger.info(f"Removed image {filename}")
        return True

    async def read(self, filename: str) -> bytes | None:
        try:
            async with aiofiles.open(self._get_file_path(filename), "rb") as f:
                return await f.read()
        except FileNotFoundError:
            return None
