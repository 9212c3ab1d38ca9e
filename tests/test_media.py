"""Tests for resource_hub.utils.media and MediaFile hints."""
import pytest

from resource_hub.schemas.resource_schemas import MediaFile
from resource_hub.utils.media import classify_media, get_extension, guess_content_type


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("photo.JPG", "image"),
        ("banner.webp", "image"),
        ("agenda.pdf", "document"),
        ("budget.xlsx", "document"),
        ("notes.txt", "document"),
        ("keynote.mov", "video"),
        ("archive.zip", "other"),
        ("README", "other"),
    ],
)
def test_classify_by_extension(filename, expected):
    assert classify_media(filename) == expected


def test_content_type_used_when_extension_unknown():
    assert classify_media("capture", "image/heic") == "image"
    assert classify_media("clip.mkv", "video/x-matroska") == "video"
    assert classify_media("blob", "application/pdf") == "document"
    # Extension wins over content type
    assert classify_media("photo.png", "application/octet-stream") == "image"


def test_get_extension():
    assert get_extension("a.b.PDF") == "pdf"
    assert get_extension("noext") == ""


def test_guess_content_type_fallback():
    assert guess_content_type("a.png") == "image/png"
    assert guess_content_type("mystery.unknownext") == "application/octet-stream"


def test_media_file_from_wire_payload():
    media = MediaFile.model_validate(
        {
            "uuid": "f1",
            "folder": "A",
            "file": "https://cdn.example.com/f1/photo.png",
            "name": "photo.png",
            "size": 120,
            "content_type": "image/png",
            "created_date": "2026-01-15T10:30:00",
            "extra_key": "ignored",
        }
    )
    assert media.id == "f1"
    assert media.folder_id == "A"
    assert media.type == "image"
    assert media.source_url == "https://cdn.example.com/f1/photo.png"
    assert media.preview_url == media.source_url
    assert not media.is_local


def test_non_image_has_no_preview():
    media = MediaFile.model_validate({"uuid": "f2", "name": "deck.pdf", "file": "https://x/deck.pdf"})
    assert media.type == "document"
    assert media.preview_url is None
