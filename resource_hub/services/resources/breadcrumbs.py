"""Root-to-current path resolution over the Full Tree view."""
import logging
from typing import Iterable, List, Optional, Set

from resource_hub.schemas.resource_schemas import Breadcrumb, Folder

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "All media"


def resolve_breadcrumbs(
    current_folder_id: Optional[str],
    folders: Iterable[Folder],
    root_name: str = DEFAULT_ROOT_NAME,
) -> List[Breadcrumb]:
    """
    Build [root, ..., current] for the folder being viewed.

    Walks parent links upward and stops at the first folder missing from
    the tree (stale cache) or the first id seen twice (cyclic data), keeping
    whatever part of the path was resolved so far.
    """
    root = Breadcrumb(id=None, name=root_name)
    if current_folder_id is None:
        return [root]

    by_id = {folder.id: folder for folder in folders}
    path: List[Breadcrumb] = []
    visited: Set[str] = set()

    folder_id = current_folder_id
    while folder_id is not None:
        if folder_id in visited:
            logger.warning(f"Cycle in folder parents at {folder_id}; breadcrumb truncated")
            break
        visited.add(folder_id)

        folder = by_id.get(folder_id)
        if folder is None:
            break
        path.append(Breadcrumb(id=folder.id, name=folder.name))
        folder_id = folder.parent_id

    path.append(root)
    path.reverse()
    return path
