"""Cascading folder deletion: transitive closure over child links."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from resource_hub.schemas.resource_schemas import Folder, MediaFile


@dataclass(frozen=True)
class CascadePlan:
    """Everything a folder deletion removes locally."""
    target_id: str
    folder_ids: FrozenSet[str]
    file_ids: FrozenSet[str]

    def removes_folder(self, folder_id: Optional[str]) -> bool:
        return folder_id is not None and folder_id in self.folder_ids


def collect_descendants(folder_id: str, folders: Iterable[Folder]) -> Set[str]:
    """All folder ids reachable from folder_id by following child links.

    The target itself is never part of the result, even if the data is cyclic.
    """
    children: Dict[Optional[str], List[str]] = defaultdict(list)
    for folder in folders:
        children[folder.parent_id].append(folder.id)

    descendants: Set[str] = set()
    stack = [folder_id]
    while stack:
        current = stack.pop()
        for child_id in children.get(current, []):
            if child_id == folder_id or child_id in descendants:
                continue
            descendants.add(child_id)
            stack.append(child_id)
    return descendants


def plan_cascade(
    folder_id: str,
    folders: Iterable[Folder],
    files: Iterable[MediaFile],
) -> CascadePlan:
    """Compute {folder} + descendants and every file inside them."""
    removed = {folder_id} | collect_descendants(folder_id, folders)
    file_ids = {media.id for media in files if media.folder_id in removed}
    return CascadePlan(
        target_id=folder_id,
        folder_ids=frozenset(removed),
        file_ids=frozenset(file_ids),
    )
