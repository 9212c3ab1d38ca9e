"""Level-scoped filtering of folders and files."""
from typing import Iterable, Optional

from resource_hub.schemas.resource_schemas import Folder, LevelView, MediaFile

ALL_MEDIA = "all"


def name_matches(name: str, query: str) -> bool:
    """Case-insensitive substring match."""
    return query.lower() in name.lower()


def filter_level(
    query: str,
    folders: Iterable[Folder],
    files: Iterable[MediaFile],
    current_folder_id: Optional[str] = None,
    file_type: Optional[str] = None,
) -> LevelView:
    """
    Filter one level by name and, for files, by media type.

    Only items whose parent is current_folder_id are considered; nothing in
    nested folders is searched. An empty query filters nothing.
    """
    query = query or ""
    level_folders = [f for f in folders if f.parent_id == current_folder_id]
    level_files = [f for f in files if f.folder_id == current_folder_id]

    if file_type and file_type != ALL_MEDIA:
        level_files = [f for f in level_files if f.type == file_type]

    if query:
        level_folders = [f for f in level_folders if name_matches(f.name, query)]
        level_files = [f for f in level_files if name_matches(f.name, query)]

    return LevelView(folder_id=current_folder_id, folders=level_folders, files=level_files)
