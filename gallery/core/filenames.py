"""Turn user-supplied titles and filenames into safe storage names, and back."""

import mimetypes
import re
import time
from pathlib import PurePosixPath
from urllib.parse import unquote

MAX_TITLE_LENGTH = 64
DEFAULT_STEM = "artwork"
DEFAULT_EXTENSION = ".png"

_UNSAFE_TITLE_CHARS = re.compile(r"[^\w \-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_UPLOAD_TIMESTAMP = re.compile(r"-\d{10,}$")


def sanitize_title(raw: str | None) -> str:
    """Keep letters, digits, spaces, '-' and '_'; collapse whitespace."""
    if not raw:
        return ""
    cleaned = _UNSAFE_TITLE_CHARS.sub("", raw)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned[:MAX_TITLE_LENGTH].strip()


def _is_image_extension(ext: str) -> bool:
    guessed, _ = mimetypes.guess_type(f"file{ext}")
    return bool(guessed and guessed.startswith("image/"))


def _extension(original_filename: str | None, content_type: str | None) -> str:
    """Image extension for the upload; non-image suffixes such as .html are never kept."""
    if original_filename:
        suffix = PurePosixPath(original_filename.replace("\\", "/")).suffix.lower()
        suffix = "".join(c for c in suffix[1:] if c.isascii() and c.isalnum())
        if suffix and _is_image_extension(f".{suffix}"):
            return f".{suffix}"
    if content_type:
        guessed = mimetypes.guess_extension(content_type.split(";")[0].strip().lower())
        if guessed and _is_image_extension(guessed):
            return guessed
    return DEFAULT_EXTENSION


def build_artwork_filename(
    title: str | None,
    original_filename: str | None,
    content_type: str | None,
    now: float | None = None,
) -> str:
    """
    Build the storage name for an upload: <stem>-<epoch millis><ext>.
    The stem comes from the title, else the original filename, else "artwork".
    """
    stem = sanitize_title(title)
    if not stem and original_filename:
        stem = sanitize_title(PurePosixPath(original_filename.replace("\\", "/")).stem)
    if not stem:
        stem = DEFAULT_STEM
    millis = int((time.time() if now is None else now) * 1000)
    return f"{stem}-{millis}{_extension(original_filename, content_type)}"


def title_from_filename(name: str) -> str:
    """Display title for a stored file, e.g. 'The%20Oracle-1700000000000.jpg' -> 'The Oracle'."""
    raw_stem = PurePosixPath(name.split("?")[0]).stem
    title = _UPLOAD_TIMESTAMP.sub("", unquote(raw_stem)).strip()
    return title or raw_stem
