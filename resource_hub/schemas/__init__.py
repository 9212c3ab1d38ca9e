"""Pydantic schemas for resource API payloads and views."""
from resource_hub.schemas.resource_schemas import (
    MediaType,
    FolderCreate,
    FolderUpdate,
    FileUpdate,
    Folder,
    MediaFile,
    Breadcrumb,
    LevelView,
    PendingDeletion,
    UploadReport,
)

__all__ = [
    "MediaType",
    "FolderCreate",
    "FolderUpdate",
    "FileUpdate",
    "Folder",
    "MediaFile",
    "Breadcrumb",
    "LevelView",
    "PendingDeletion",
    "UploadReport",
]
