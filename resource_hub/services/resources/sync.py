"""Remote loads for the tree store: whole tree, one level, request fencing."""
import asyncio
import logging
from typing import List, Optional, Set

from resource_hub.schemas.resource_schemas import Folder, LevelView
from resource_hub.services.gateway import ResourceGateway

logger = logging.getLogger(__name__)


async def _gather_all(*aws):
    """Await every call, then raise the first failure.

    No sibling request is left running unobserved when one of them fails.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class RequestFence:
    """Monotonic tickets for one kind of load.

    Only the response to the latest issued ticket may be applied; anything
    older was superseded by a later navigation or reload.
    """

    def __init__(self, name: str):
        self.name = name
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest


async def fetch_whole_tree(
    gateway: ResourceGateway,
    event_id: str,
    max_depth: int = 32,
) -> List[Folder]:
    """
    Compose every folder of the event from level-scoped listings.

    Breadth-first: each round lists the children of all folders found in the
    previous round. A folder id seen twice is kept once and not expanded
    again, and nothing deeper than max_depth levels is requested.
    """
    collected: List[Folder] = []
    seen: Set[str] = set()
    frontier: List[Optional[str]] = [None]
    depth = 0

    while frontier:
        if depth >= max_depth:
            logger.warning(
                f"Folder tree of event {event_id} deeper than {max_depth} levels; "
                f"{len(frontier)} folders not expanded"
            )
            break

        results = await _gather_all(
            *(gateway.list_folders(event_id, parent_id) for parent_id in frontier)
        )

        next_frontier: List[Optional[str]] = []
        for children in results:
            for folder in children:
                if folder.id in seen:
                    logger.warning(f"Folder {folder.id} listed more than once; not expanding again")
                    continue
                seen.add(folder.id)
                collected.append(folder)
                next_frontier.append(folder.id)

        frontier = next_frontier
        depth += 1

    logger.debug(f"Fetched whole tree for event {event_id}: {len(collected)} folders")
    return collected


async def fetch_level(
    gateway: ResourceGateway,
    event_id: str,
    folder_id: Optional[str],
) -> LevelView:
    """Folders and files directly under folder_id, fetched concurrently."""
    folders, files = await _gather_all(
        gateway.list_folders(event_id, folder_id),
        gateway.list_files(folder_id),
    )
    return LevelView(folder_id=folder_id, folders=folders, files=files)
