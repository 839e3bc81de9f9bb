"""Supabase Storage backend."""

import logging
from urllib.parse import unquote

from supabase import Client, create_client

from gallery.config import SUPABASE_BUCKET, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL
from gallery.storage.base import (
    InvalidStorageKey,
    StorageBackend,
    StorageError,
    StoredFile,
    StoredFileNotFound,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = ".emptyFolderPlaceholder"
LIST_LIMIT = 1000


def url_to_storage_key(file_url: str, bucket: str) -> str | None:
    """Extract the object key from a public URL of bucket. URLs of other buckets give None."""
    if "/object/public/" not in file_url:
        return None
    bucket_and_path = file_url.split("/object/public/", 1)[1].split("?")[0].split("#")[0]
    segments = bucket_and_path.split("/")
    if len(segments) < 2 or unquote(segments[0]) != bucket:
        return None
    return unquote("/".join(segments[1:])) or None


class SupabaseStorage(StorageBackend):
    """Store files in a Supabase Storage bucket. Returns public URLs."""

    def __init__(self, client: Client | None = None, bucket: str | None = None) -> None:
        if client is None:
            if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
                raise RuntimeError(
                    "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set when STORAGE_BACKEND=supabase"
                )
            client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
        self.client = client
        self.bucket = bucket or SUPABASE_BUCKET

    def _bucket(self):
        return self.client.storage.from_(self.bucket)

    def _key(self, key: str) -> str:
        if key.startswith(("http://", "https://")):
            resolved = url_to_storage_key(key, self.bucket)
            if not resolved:
                raise InvalidStorageKey(f"Not a public URL of bucket {self.bucket}: {key}")
            key = resolved
        key = key.strip("/")
        if not key or ".." in key.split("/"):
            raise InvalidStorageKey(f"Invalid storage key: {key!r}")
        return key

    async def list(self) -> list[StoredFile]:
        try:
            files = []
            offset = 0
            while True:
                page = self._bucket().list(
                    options={
                        "limit": LIST_LIMIT,
                        "offset": offset,
                        "sortBy": {"column": "name", "order": "asc"},
                    }
                )
                for entry in page:
                    name = entry.get("name")
                    # Folders come back without an id
                    if not name or name == PLACEHOLDER_NAME or entry.get("id") is None:
                        continue
                    files.append(StoredFile(name=name, url=self._bucket().get_public_url(name)))
                if len(page) < LIST_LIMIT:
                    break
                offset += LIST_LIMIT
        except Exception as e:
            raise StorageError(f"Could not list bucket {self.bucket}: {e}") from e
        return sorted(files, key=lambda f: f.name)

    async def upload(
        self,
        content: bytes,
        key: str,
        content_type: str | None = None,
    ) -> str:
        key = self._key(key)
        opts: dict = {}
        if content_type:
            opts["content-type"] = content_type
        try:
            self._bucket().upload(key, content, opts)
            url = self._bucket().get_public_url(key)
        except Exception as e:
            raise StorageError(f"Could not upload {key}: {e}") from e
        logger.info("Uploaded %s to bucket %s (%d bytes)", key, self.bucket, len(content))
        return url

    async def delete(self, key: str) -> None:
        key = self._key(key)
        try:
            removed = self._bucket().remove([key])
        except Exception as e:
            raise StorageError(f"Could not delete {key}: {e}") from e
        if not removed:
            raise StoredFileNotFound(key)
        logger.info("Deleted %s from bucket %s", key, self.bucket)
