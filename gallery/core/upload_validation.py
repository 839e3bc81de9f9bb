"""Validation for image uploads."""

from gallery.config import MAX_FILE_SIZE_IMAGE

# (status_code, message)
UploadRejection = tuple[int, str]


def base_mime_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";")[0].strip().lower()


def is_image(content_type: str | None) -> bool:
    return base_mime_type(content_type).startswith("image/")


def validate_image_upload(
    content_type: str | None,
    size: int,
    max_size: int | None = None,
) -> UploadRejection | None:
    """
    Validate an upload and return (status_code, error_message).
    If valid, returns None.
    """
    if not is_image(content_type):
        return 400, "Must be an image"
    if size <= 0:
        return 400, "Uploaded file is empty"
    limit = MAX_FILE_SIZE_IMAGE if max_size is None else max_size
    if size > limit:
        return 413, f"File too large. Max size for images: {limit // (1024 * 1024)} MB"
    return None
