"""Utility functions."""
from resource_hub.utils.media import (
    classify_media,
    get_extension,
    guess_content_type,
    local_preview_url,
)

__all__ = [
    "classify_media",
    "get_extension",
    "guess_content_type",
    "local_preview_url",
]
