"""Pydantic schemas for the artworks API."""

from typing import Optional

from pydantic import BaseModel, Field


class Artwork(BaseModel):
    """An artwork as listed by the API."""

    filename: str = Field(..., description="Storage identifier, used for deletion")
    title: str
    path: str = Field(..., description="URL the image is served from")


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    artwork: Artwork


class DeleteRequest(BaseModel):
    """Payload for deleting an artwork. filename is checked by the route so a missing one is a 400."""

    filename: Optional[str] = None


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
