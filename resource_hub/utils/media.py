"""Media type helpers."""
import mimetypes
import os
from pathlib import Path
from typing import Optional, Union

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
DOCUMENT_EXTENSIONS = {"pdf", "doc", "docx", "xls", "xlsx", "txt"}
VIDEO_EXTENSIONS = {"mp4", "avi", "mov", "wmv", "flv"}


def get_extension(filename: str) -> str:
    """Lower-cased extension without the dot ('' if none)."""
    return os.path.splitext(filename)[1].lstrip(".").lower()


def classify_media(filename: str, content_type: Optional[str] = None) -> str:
    """
    Classify a file as image, document, video or other.

    The extension decides first; the content type is only consulted when the
    extension is unknown. The result is a rendering hint, nothing more.
    """
    ext = get_extension(filename)
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext in DOCUMENT_EXTENSIONS:
        return "document"
    if ext in VIDEO_EXTENSIONS:
        return "video"

    if content_type:
        major = content_type.split("/", 1)[0].lower()
        if major == "image":
            return "image"
        if major == "video":
            return "video"
        if content_type.lower() in ("application/pdf", "text/plain"):
            return "document"
    return "other"


def guess_content_type(filename: str) -> str:
    """Content type for an upload, falling back to octet-stream."""
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or "application/octet-stream"


def local_preview_url(path: Union[str, Path]) -> str:
    """Temporary preview location for a file that is not uploaded yet."""
    return Path(path).resolve().as_uri()
