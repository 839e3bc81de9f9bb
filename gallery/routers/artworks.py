"""Artworks API: list, upload, delete."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from gallery.core.auth import get_current_user
from gallery.core.filenames import build_artwork_filename, title_from_filename
from gallery.core.upload_validation import validate_image_upload
from gallery.schemas.artwork import Artwork, DeleteRequest, DeleteResponse, UploadResponse
from gallery.schemas.auth import SessionUser
from gallery.storage import (
    InvalidStorageKey,
    StorageBackend,
    StorageError,
    StoredFile,
    StoredFileNotFound,
    get_storage,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["artworks"])


def _to_artwork(f: StoredFile) -> Artwork:
    return Artwork(filename=f.name, title=title_from_filename(f.name), path=f.url)


@router.get("/artworks", response_model=list[Artwork])
async def list_artworks(
    storage: Annotated[StorageBackend, Depends(get_storage)],
) -> list[Artwork]:
    """List all artworks. Storage failures yield an empty gallery."""
    try:
        files = await storage.list()
    except StorageError:
        logger.exception("Failed to list artworks")
        return []
    return [_to_artwork(f) for f in files]


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_artwork(
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
) -> UploadResponse:
    """
    Upload one image (multipart field "file"), optionally named by "title".
    The stored name is the sanitized title (or original filename) plus a timestamp.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    content = await file.read()
    rejection = validate_image_upload(file.content_type, len(content))
    if rejection:
        status_code, detail = rejection
        raise HTTPException(status_code=status_code, detail=detail)

    key = build_artwork_filename(title, file.filename, file.content_type)
    try:
        url = await storage.upload(content, key, content_type=file.content_type)
    except StorageError as e:
        logger.exception("Failed to upload %s", key)
        raise HTTPException(status_code=500, detail="Failed to upload") from e

    logger.info("%s uploaded %s", current_user.email, key)
    return UploadResponse(
        message="Artifact summoned successfully!",
        artwork=_to_artwork(StoredFile(name=key, url=url)),
    )


@router.delete("/artworks", response_model=DeleteResponse)
async def delete_artwork(
    current_user: Annotated[SessionUser, Depends(get_current_user)],
    storage: Annotated[StorageBackend, Depends(get_storage)],
    body: Optional[DeleteRequest] = None,
) -> DeleteResponse:
    """Delete an artwork by the filename returned from the listing."""
    if body is None or not body.filename:
        raise HTTPException(status_code=400, detail="Filename required")
    try:
        await storage.delete(body.filename)
    except InvalidStorageKey as e:
        raise HTTPException(status_code=400, detail="Invalid filename") from e
    except StoredFileNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Artwork not found") from e
    except StorageError as e:
        logger.exception("Failed to delete %s", body.filename)
        raise HTTPException(status_code=500, detail="Failed to delete") from e

    logger.info("%s deleted %s", current_user.email, body.filename)
    return DeleteResponse(message="Artifact banished.")
