"""Local filesystem storage."""

import logging
from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiofiles.os

from gallery.config import LOCAL_FILES_BASE_URL, LOCAL_STORAGE_PATH
from gallery.storage.base import (
    InvalidStorageKey,
    StorageBackend,
    StorageError,
    StoredFile,
    StoredFileNotFound,
)

logger = logging.getLogger(__name__)


class LocalStorage(StorageBackend):
    """Store files in one flat directory. URLs look like /artworks/<name>."""

    def __init__(self, root: Path | None = None, base_url: str | None = None) -> None:
        self.root = Path(root or LOCAL_STORAGE_PATH).resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = (LOCAL_FILES_BASE_URL if base_url is None else base_url).rstrip("/")

    def url_for(self, key: str) -> str:
        if self.base_url:
            return f"{self.base_url}/{quote(key)}"
        return f"/artworks/{quote(key)}"

    def path_for(self, key: str) -> Path:
        """Resolve key to a path directly under root. Prevents path traversal."""
        if not key or key in (".", "..") or any(c in key for c in "/\\\0"):
            raise InvalidStorageKey(f"Invalid storage key: {key!r}")
        path = (self.root / key).resolve()
        if path.parent != self.root:
            raise InvalidStorageKey(f"Invalid storage key: {key!r}")
        return path

    async def list(self) -> list[StoredFile]:
        try:
            names = await aiofiles.os.listdir(self.root)
            files = []
            for name in sorted(names):
                if name.startswith("."):
                    continue
                if not await aiofiles.os.path.isfile(self.root / name):
                    continue
                files.append(StoredFile(name=name, url=self.url_for(name)))
        except OSError as e:
            raise StorageError(f"Could not list {self.root}: {e}") from e
        return files

    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        path = self.path_for(key)
        try:
            async with aiofiles.open(path, "xb") as f:
                await f.write(content)
        except FileExistsError as e:
            raise StorageError(f"{key} already exists") from e
        except OSError as e:
            raise StorageError(f"Could not write {key}: {e}") from e
        logger.info("Stored %s (%d bytes)", key, len(content))
        return self.url_for(key)

    async def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError as e:
            raise StoredFileNotFound(key) from e
        except OSError as e:
            raise StorageError(f"Could not delete {key}: {e}") from e
        logger.info("Deleted %s", key)
