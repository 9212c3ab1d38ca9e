"""Resource tree: store, synchronization and the page-level coordinator."""
from resource_hub.services.resources.breadcrumbs import resolve_breadcrumbs
from resource_hub.services.resources.cascade import CascadePlan, collect_descendants, plan_cascade
from resource_hub.services.resources.editing import DragSession, EditState, RenameController
from resource_hub.services.resources.search import filter_level
from resource_hub.services.resources.service import ResourceManager
from resource_hub.services.resources.store import TreeStore
from resource_hub.services.resources.sync import RequestFence, fetch_level, fetch_whole_tree

__all__ = [
    "resolve_breadcrumbs",
    "CascadePlan",
    "collect_descendants",
    "plan_cascade",
    "DragSession",
    "EditState",
    "RenameController",
    "filter_level",
    "ResourceManager",
    "TreeStore",
    "RequestFence",
    "fetch_level",
    "fetch_whole_tree",
]
