"""Canonical in-memory store for one event's folders and files.

The Full Tree view and the Level view are both derived from the same two maps,
so a mutation can never update one view and forget the other. The views may
still disagree with the server for a while; reloads reconcile them.
"""
import logging
from typing import Dict, Iterable, List, Optional

from resource_hub.schemas.resource_schemas import Folder, LevelView, MediaFile
from resource_hub.services.resources.cascade import CascadePlan

logger = logging.getLogger(__name__)


class TreeStore:
    """Folders and files keyed by id."""

    def __init__(self):
        self._folders: Dict[str, Folder] = {}
        self._files: Dict[str, MediaFile] = {}

    # -- Views --

    def all_folders(self) -> List[Folder]:
        """Full Tree view: every known folder of the event."""
        return list(self._folders.values())

    def all_files(self) -> List[MediaFile]:
        return list(self._files.values())

    def get_folder(self, folder_id: Optional[str]) -> Optional[Folder]:
        if folder_id is None:
            return None
        return self._folders.get(folder_id)

    def get_file(self, file_id: str) -> Optional[MediaFile]:
        return self._files.get(file_id)

    def level(self, folder_id: Optional[str]) -> LevelView:
        """Level view: folders and files whose parent is folder_id."""
        return LevelView(
            folder_id=folder_id,
            folders=[f for f in self._folders.values() if f.parent_id == folder_id],
            files=[f for f in self._files.values() if f.folder_id == folder_id],
        )

    # -- Reload results --

    def replace_tree(self, folders: Iterable[Folder]) -> None:
        """Swap in a freshly loaded whole tree."""
        self._folders = {folder.id: folder for folder in folders}
        logger.debug(f"Whole tree replaced: {len(self._folders)} folders")

    def replace_level(
        self,
        folder_id: Optional[str],
        folders: Iterable[Folder],
        files: Iterable[MediaFile],
    ) -> None:
        """Swap in a freshly loaded level, leaving other scopes untouched.

        Local, not yet uploaded files in the level survive the swap.
        """
        self._folders = {
            fid: f for fid, f in self._folders.items() if f.parent_id != folder_id
        }
        for folder in folders:
            self._folders[folder.id] = folder

        self._files = {
            fid: f
            for fid, f in self._files.items()
            if f.folder_id != folder_id or f.is_local
        }
        for media in files:
            self._files[media.id] = media

    # -- Mutations --

    def upsert_folder(self, folder: Folder) -> None:
        self._folders[folder.id] = folder

    def upsert_file(self, media: MediaFile) -> None:
        self._files[media.id] = media

    def update_folder(self, folder_id: str, **changes) -> Optional[Folder]:
        folder = self._folders.get(folder_id)
        if folder is None:
            return None
        folder = folder.model_copy(update=changes)
        self._folders[folder_id] = folder
        return folder

    def update_file(self, file_id: str, **changes) -> Optional[MediaFile]:
        media = self._files.get(file_id)
        if media is None:
            return None
        media = media.model_copy(update=changes)
        self._files[file_id] = media
        return media

    def remove_file(self, file_id: str) -> Optional[MediaFile]:
        return self._files.pop(file_id, None)

    def apply_cascade(self, plan: CascadePlan) -> None:
        """Prune every folder and file a cascading delete removes."""
        for folder_id in plan.folder_ids:
            self._folders.pop(folder_id, None)
        for file_id in plan.file_ids:
            self._files.pop(file_id, None)
        logger.info(
            f"Pruned {len(plan.folder_ids)} folders and {len(plan.file_ids)} files "
            f"under {plan.target_id}"
        )
