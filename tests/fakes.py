# tests/fakes.py
"""Hand-written test doubles and builders shared across test packages."""

from charity_cms.models import PostDB


class InMemoryStorage:
    """Storage backend keeping files in a dict, for asset lifecycle tests."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.removed: list[str] = []

    async def save(self, filename: str, data: bytes) -> None:
        self.files[filename] = data

    async def exists(self, filename: str) -> bool:
        return filename in self.files

    async def remove(self, filename: str) -> bool:
        if self.files.pop(filename, None) is None:
            return False
        self.removed.append(filename)
        return True

    async def read(self, filename: str) -> bytes | None:
        return self.files.get(filename)


def make_post(**overrides: object) -> PostDB:
    """Build a stored-looking post; keyword arguments override the defaults."""
    fields: dict[str, object] = {
        "id": 1,
        "author_id": 1,
        "title": "Hello, World!",
        "slug": "hello-world",
        "content": "First post",
        "status": "published",
        "tags": ["news"],
    }
    fields.update(overrides)
    return PostDB(**fields)
