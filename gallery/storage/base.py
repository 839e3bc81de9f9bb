"""Abstract storage backend."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """A storage operation failed."""


class InvalidStorageKey(StorageError):
    """The key is empty or points outside the storage root."""


class StoredFileNotFound(StorageError):
    """No file is stored under the key."""


@dataclass(frozen=True)
class StoredFile:
    """A stored file: name is the key used to delete it, url is where it is served."""

    name: str
    url: str


class StorageBackend(ABC):
    """Interface for artwork storage (local directory or cloud bucket)."""

    @abstractmethod
    async def list(self) -> list[StoredFile]:
        """Return every visible file, sorted by name."""
        ...

    @abstractmethod
    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        """Store file under key and return the URL used to reference it."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove file at key. Key is a name as returned from list()."""
        ...
