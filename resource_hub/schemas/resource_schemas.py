"""Folder and media file Pydantic schemas."""
from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, model_validator

from resource_hub.utils.media import classify_media

MediaType = Literal["image", "document", "video", "other"]


class FolderCreate(BaseModel):
    """Schema for creating a folder."""
    name: str = Field(..., min_length=1, max_length=255)
    event_uuid: str
    parent: Optional[str] = None


class FolderUpdate(BaseModel):
    """Schema for renaming a folder."""
    name: str = Field(..., min_length=1, max_length=255)
    event_uuid: str


class FileUpdate(BaseModel):
    """Schema for renaming or moving a file. Unset fields are left alone."""
    event_uuid: str
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    folder: Optional[str] = None


class Folder(BaseModel):
    """A folder as returned by the resource API."""
    id: str = Field(..., alias="uuid")
    name: str
    event_id: Optional[str] = Field(None, alias="event_uuid")
    parent_id: Optional[str] = Field(None, alias="parent")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class MediaFile(BaseModel):
    """A media file, either persisted remotely or selected locally."""
    id: str = Field(..., alias="uuid")
    name: str
    type: MediaType = "other"
    folder_id: Optional[str] = Field(None, alias="folder")
    source_url: Optional[str] = Field(None, alias="file")
    preview_url: Optional[str] = None
    size: int = 0
    content_type: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="created_date")
    is_local: bool = False

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def derive_rendering_hints(cls, data):
        """Fill in type and preview from the name when the payload lacks them."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        name = data.get("name") or ""
        if not data.get("type"):
            data["type"] = classify_media(name, data.get("content_type"))
        if not data.get("preview_url") and data["type"] == "image":
            data["preview_url"] = data.get("file") or data.get("source_url")
        return data


class Breadcrumb(BaseModel):
    """One step of the root-to-current path. The root has id None."""
    id: Optional[str] = None
    name: str


class LevelView(BaseModel):
    """Folders and files directly under one folder (or the root)."""
    folder_id: Optional[str] = None
    folders: List[Folder] = []
    files: List[MediaFile] = []

    @property
    def is_empty(self) -> bool:
        return not self.folders and not self.files


class PendingDeletion(BaseModel):
    """A delete waiting for the user's confirmation."""
    kind: Literal["folder", "file"]
    item_id: str
    name: str


class UploadReport(BaseModel):
    """Outcome of a batch upload: what was persisted, what was not."""
    uploaded: List[MediaFile] = []
    failed: List[str] = []  # File names
