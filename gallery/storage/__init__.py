# Storage backends

import logging
from functools import lru_cache

from gallery.config import STORAGE_BACKEND
from gallery.storage.base import (
    InvalidStorageKey,
    StorageBackend,
    StorageError,
    StoredFile,
    StoredFileNotFound,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_storage() -> StorageBackend:
    """Backend selected by STORAGE_BACKEND. Used as a FastAPI dependency."""
    if STORAGE_BACKEND == "supabase":
        from gallery.storage.supabase_storage import SupabaseStorage

        return SupabaseStorage()
    if STORAGE_BACKEND != "local":
        logger.warning("Unknown STORAGE_BACKEND %r, using local storage", STORAGE_BACKEND)
    from gallery.storage.local_storage import LocalStorage

    return LocalStorage()


__all__ = [
    "get_storage",
    "InvalidStorageKey",
    "StorageBackend",
    "StorageError",
    "StoredFile",
    "StoredFileNotFound",
]
