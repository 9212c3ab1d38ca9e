"""Command line entry point: inspect an event's resource tree.

Usage examples:
  resource-hub tree --event <event-uuid>
  resource-hub ls --event <event-uuid> --folder <folder-uuid> --query slides --type image
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections import defaultdict
from typing import Dict, List, Optional

from resource_hub.config import get_settings
from resource_hub.core.errors import ResourceError
from resource_hub.schemas.resource_schemas import Folder
from resource_hub.services.resources.service import ResourceManager

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def render_tree(folders: List[Folder], root_label: str) -> List[str]:
    """Indented outline of the folder forest, siblings sorted by name."""
    children: Dict[Optional[str], List[Folder]] = defaultdict(list)
    known = {f.id for f in folders}
    for folder in folders:
        # Folders whose parent is unknown are shown at the root
        parent = folder.parent_id if folder.parent_id in known else None
        children[parent].append(folder)

    lines = [root_label]
    stack = [(f, 1) for f in sorted(children[None], key=lambda f: f.name.lower(), reverse=True)]
    seen = set()
    while stack:
        folder, depth = stack.pop()
        if folder.id in seen:
            continue
        seen.add(folder.id)
        lines.append(f"{'  ' * depth}{folder.name}/")
        for child in sorted(children[folder.id], key=lambda f: f.name.lower(), reverse=True):
            stack.append((child, depth + 1))
    return lines


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    async with ResourceManager(event_id=args.event or settings.event_uuid) as manager:
        if args.command == "tree":
            await manager.load_whole_tree()
            for line in render_tree(manager.store.all_folders(), settings.root_label):
                print(line)
            return 0

        await manager.load_whole_tree()
        await manager.navigate(args.folder)
        manager.set_search(args.query or "")
        manager.set_media_type(args.type)

        print(" / ".join(crumb.name for crumb in manager.breadcrumbs))
        visible = manager.visible
        for folder in visible.folders:
            print(f"  [dir]  {folder.name}")
        for media in visible.files:
            print(f"  [{media.type}]  {media.name}")
        if visible.is_empty:
            print("  (empty)")
        return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="resource-hub")
    parser.add_argument("--event", help="Event UUID (defaults to EVENT_UUID from the environment).")
    subcommands = parser.add_subparsers(dest="command", required=True)

    subcommands.add_parser("tree", help="Print every folder of the event.")

    ls = subcommands.add_parser("ls", help="List one folder level.")
    ls.add_argument("--folder", default=None, help="Folder UUID (root when omitted).")
    ls.add_argument("--query", default="", help="Case-insensitive name filter.")
    ls.add_argument(
        "--type",
        default="all",
        choices=["all", "image", "document", "video", "other"],
        help="Only show files of this media type.",
    )

    args = parser.parse_args()
    configure_logging(get_settings().log_level)

    try:
        return asyncio.run(_run(args))
    except ResourceError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
