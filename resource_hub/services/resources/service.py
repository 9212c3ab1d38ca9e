"""ResourceManager -- page-level coordinator for an event's resource tree."""
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Union

from resource_hub.config import Settings, get_settings
from resource_hub.core.errors import ConflictError, NotFoundError, ResourceError
from resource_hub.core.notifications import Notifier
from resource_hub.core.responses import ResponseMessages
from resource_hub.schemas.resource_schemas import (
    Breadcrumb,
    Folder,
    LevelView,
    MediaFile,
    PendingDeletion,
    UploadReport,
)
from resource_hub.services.gateway import ResourceGateway
from resource_hub.services.resources import sync
from resource_hub.services.resources.breadcrumbs import resolve_breadcrumbs
from resource_hub.services.resources.cascade import CascadePlan, plan_cascade
from resource_hub.services.resources.editing import DragSession, RenameController
from resource_hub.services.resources.search import ALL_MEDIA, filter_level
from resource_hub.services.resources.store import TreeStore
from resource_hub.utils.media import classify_media, guess_content_type, local_preview_url

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ResourceManager:
    """Coordinates navigation, CRUD and cache reconciliation for one event.

    This class is a thin coordinator: tree algorithms live in pure modules
    (breadcrumbs, cascade, search) and remote calls in ResourceGateway.
    Every remote failure is sent to the notifier and re-raised. Local state
    changes that depend on the server only happen after it has answered.
    """

    def __init__(
        self,
        event_id: Optional[str] = None,
        gateway: Optional[ResourceGateway] = None,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.event_id = event_id or self.settings.event_uuid
        self.gateway = gateway or ResourceGateway(self.settings)
        self.notifier = notifier or Notifier()

        self.store = TreeStore()
        self.current_folder_id: Optional[str] = None
        self.search_query = ""
        self.media_type = ALL_MEDIA

        self.folder_rename = RenameController("folder")
        self.file_rename = RenameController("file")
        self.drag = DragSession()
        self.pending_deletion: Optional[PendingDeletion] = None

        self._level_fence = sync.RequestFence("level")
        self._tree_fence = sync.RequestFence("tree")

    async def __aenter__(self) -> "ResourceManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.gateway.aclose()

    def _report(self, error: ResourceError) -> None:
        self.notifier.error(error)

    # -- Derived views --

    @property
    def breadcrumbs(self) -> List[Breadcrumb]:
        return resolve_breadcrumbs(
            self.current_folder_id, self.store.all_folders(), self.settings.root_label
        )

    @property
    def level(self) -> LevelView:
        """Everything in the current folder, unfiltered."""
        return self.store.level(self.current_folder_id)

    @property
    def visible(self) -> LevelView:
        """The current level after search and media-type filtering."""
        level = self.level
        return filter_level(
            self.search_query,
            level.folders,
            level.files,
            self.current_folder_id,
            self.media_type,
        )

    def set_search(self, query: str) -> None:
        self.search_query = query or ""

    def set_media_type(self, media_type: str) -> None:
        self.media_type = media_type or ALL_MEDIA

    # -- Loading --

    async def load_whole_tree(self) -> bool:
        """
        Reload every folder of the event into the store.

        Returns False when a newer whole-tree load superseded this one. Then
        its result is dropped, failure included. Otherwise on failure the
        previous tree stays in place and the error is raised.
        """
        ticket = self._tree_fence.issue()
        try:
            folders = await sync.fetch_whole_tree(
                self.gateway, self.event_id, self.settings.max_tree_depth
            )
        except ResourceError as e:
            if not self._tree_fence.is_current(ticket):
                logger.debug(f"Discarding failed superseded whole-tree load #{ticket}: {e.message}")
                return False
            self._report(e)
            raise

        if not self._tree_fence.is_current(ticket):
            logger.debug(f"Discarding superseded whole-tree load #{ticket}")
            return False
        self.store.replace_tree(folders)
        return True

    async def load_level(self) -> bool:
        """Reload the folders and files of the folder being viewed.

        Returns False when a later level load superseded this one.
        """
        ticket = self._level_fence.issue()
        folder_id = self.current_folder_id
        try:
            level = await sync.fetch_level(self.gateway, self.event_id, folder_id)
        except ResourceError as e:
            if not self._level_fence.is_current(ticket):
                logger.debug(f"Discarding failed superseded level load #{ticket} for {folder_id}")
                return False
            self._report(e)
            raise

        if not self._level_fence.is_current(ticket):
            logger.debug(f"Discarding superseded level load #{ticket} for {folder_id}")
            return False
        self.store.replace_level(folder_id, level.folders, level.files)
        return True

    async def open(self) -> None:
        """Initial load: the root level plus the whole tree."""
        await self.load_level()
        await self.load_whole_tree()

    async def refresh(self) -> None:
        """Reconcile both views with the server after a mutation.

        Failures were already reported by the loaders; the mutation that
        triggered the refresh succeeded, so they are not raised again.
        """
        for loader in (self.load_level, self.load_whole_tree):
            try:
                await loader()
            except ResourceError as e:
                logger.warning(f"Reload after mutation failed: {e.code.value} - {e.message}")

    async def navigate(self, folder_id: Optional[str]) -> bool:
        """Show folder_id (None for the root)."""
        self.current_folder_id = folder_id
        return await self.load_level()

    # -- Folders --

    async def create_folder(self, name: str) -> Folder:
        """Create a folder inside the folder being viewed."""
        try:
            folder = await self.gateway.create_folder(
                name, self.event_id, self.current_folder_id
            )
        except ConflictError as e:
            # Duplicate-name failures may be spurious; reload so an existing
            # folder of that name becomes visible.
            self._report(e)
            await self.refresh()
            raise
        except ResourceError as e:
            self._report(e)
            raise

        self.store.upsert_folder(folder)
        self.notifier.success(ResponseMessages.CREATED.format(resource="Folder"))
        await self.refresh()
        return folder

    async def delete_folder(self, folder_id: str) -> CascadePlan:
        """
        Delete a folder with its whole subtree and every file inside it.

        The remote delete goes first; the local cascade is applied only once
        it succeeded. If the folder being viewed was removed, the view goes
        back to the root.
        """
        try:
            await self.gateway.delete_folder(folder_id, self.event_id)
        except ResourceError as e:
            self._report(e)
            raise

        plan = plan_cascade(folder_id, self.store.all_folders(), self.store.all_files())
        self.store.apply_cascade(plan)

        if plan.removes_folder(self.current_folder_id):
            logger.info(f"Viewed folder {self.current_folder_id} was deleted; back to root")
            self.current_folder_id = None
        if plan.removes_folder(self.folder_rename.item_id):
            self.folder_rename.cancel()
        if self.file_rename.item_id in plan.file_ids:
            self.file_rename.cancel()

        self.notifier.success(ResponseMessages.DELETED.format(resource="Folder"))
        await self.refresh()
        return plan

    def begin_folder_rename(self, folder_id: str) -> None:
        folder = self._require_folder(folder_id)
        self.folder_rename.begin(folder.id, folder.name)

    def cancel_folder_rename(self) -> None:
        self.folder_rename.cancel()

    async def commit_folder_rename(self) -> Optional[Folder]:
        """Apply the edit buffer; None when the edit was empty or unchanged."""
        folder_id = self.folder_rename.item_id
        name = self.folder_rename.commit()
        if folder_id is None or name is None:
            return None

        try:
            folder = await self.gateway.rename_folder(folder_id, self.event_id, name)
        except ResourceError as e:
            self._report(e)
            raise

        self.store.update_folder(folder_id, name=folder.name)
        self.notifier.success(ResponseMessages.RENAMED.format(resource="Folder"))
        await self.refresh()
        return self.store.get_folder(folder_id)

    # -- Files --

    def select_local_files(self, paths: Iterable[PathLike]) -> List[MediaFile]:
        """Show locally selected files in the current folder before upload."""
        selected = []
        for path in paths:
            path = Path(path)
            media_type = classify_media(path.name)
            media = MediaFile(
                id=f"local-{uuid.uuid4().hex}",
                name=path.name,
                type=media_type,
                folder_id=self.current_folder_id,
                preview_url=local_preview_url(path) if media_type == "image" else None,
                content_type=guess_content_type(path.name),
                is_local=True,
            )
            self.store.upsert_file(media)
            selected.append(media)
        return selected

    async def upload_files(self, paths: Iterable[PathLike]) -> UploadReport:
        """
        Upload files into the folder being viewed.

        Each file shows a local preview until its upload finishes. A failed
        upload is reported and removed; the rest of the batch continues.
        """
        folder_id = self.current_folder_id
        paths = [Path(p) for p in paths]
        report = UploadReport()

        placeholders = self.select_local_files(paths)
        try:
            for path, local in zip(paths, placeholders):
                try:
                    media = await self.gateway.upload_file(path, self.event_id, folder_id)
                except ResourceError as e:
                    self._report(e)
                    report.failed.append(path.name)
                    continue
                finally:
                    self.store.remove_file(local.id)

                self.store.upsert_file(media)
                report.uploaded.append(media)
        finally:
            # Placeholders of files never attempted when the batch is aborted
            for local in placeholders:
                self.store.remove_file(local.id)

        if report.uploaded:
            self.notifier.success(
                ResponseMessages.UPLOADED.format(resource=f"{len(report.uploaded)} file(s)")
            )
            await self.refresh()
        return report

    def _require_file(self, file_id: str) -> MediaFile:
        media = self.store.get_file(file_id)
        if media is None:
            error = NotFoundError(resource="file", identifier=file_id)
            self._report(error)
            raise error
        return media

    def _require_folder(self, folder_id: str) -> Folder:
        folder = self.store.get_folder(folder_id)
        if folder is None:
            error = NotFoundError(resource="folder", identifier=folder_id)
            self._report(error)
            raise error
        return folder

    async def delete_file(self, file_id: str) -> None:
        media = self._require_file(file_id)
        if not media.is_local:
            try:
                await self.gateway.delete_file(file_id, self.event_id)
            except ResourceError as e:
                self._report(e)
                raise

        self.store.remove_file(file_id)
        if self.file_rename.item_id == file_id:
            self.file_rename.cancel()
        if media.is_local:
            return
        self.notifier.success(ResponseMessages.DELETED.format(resource="File"))
        await self.refresh()

    def begin_file_rename(self, file_id: str) -> None:
        media = self._require_file(file_id)
        self.file_rename.begin(media.id, media.name)

    def cancel_file_rename(self) -> None:
        self.file_rename.cancel()

    async def commit_file_rename(self) -> Optional[MediaFile]:
        file_id = self.file_rename.item_id
        name = self.file_rename.commit()
        if file_id is None or name is None:
            return None

        media = self._require_file(file_id)
        if media.is_local:
            return self.store.update_file(file_id, name=name)

        try:
            updated = await self.gateway.update_file(file_id, self.event_id, name=name)
        except ResourceError as e:
            self._report(e)
            raise

        self.store.upsert_file(updated)
        self.notifier.success(ResponseMessages.RENAMED.format(resource="File"))
        await self.refresh()
        return self.store.get_file(file_id)

    # -- Moving --

    def move_destinations(self, file_id: str) -> List[Folder]:
        """Every known folder except the one the file is already in."""
        media = self._require_file(file_id)
        return [f for f in self.store.all_folders() if f.id != media.folder_id]

    async def move_file(self, file_id: str, destination_id: Optional[str]) -> MediaFile:
        """
        Reassign a file to destination_id (None for the root).

        The server is asked first; the store only changes on success.
        """
        media = self._require_file(file_id)
        if media.folder_id == destination_id:
            return media
        if destination_id is not None:
            self._require_folder(destination_id)

        if media.is_local:
            return self.store.update_file(file_id, folder_id=destination_id)

        try:
            updated = await self.gateway.update_file(
                file_id, self.event_id, folder_id=destination_id
            )
        except ResourceError as e:
            self._report(e)
            raise

        self.store.upsert_file(updated)
        self.notifier.success(ResponseMessages.MOVED.format(resource="File"))
        await self.refresh()
        return self.store.get_file(file_id)

    def start_drag(self, file_id: str) -> None:
        self.drag.start(file_id)

    def end_drag(self) -> None:
        self.drag.end()

    async def drop_on(self, folder_id: Optional[str]) -> Optional[MediaFile]:
        """Drop the dragged file onto a folder card; same rules as move_file."""
        drop = self.drag.drop(folder_id)
        if drop is None:
            return None
        file_id, destination_id = drop
        try:
            return await self.move_file(file_id, destination_id)
        finally:
            self.drag.settle()

    # -- Delete confirmation --

    def request_delete_folder(self, folder_id: str) -> PendingDeletion:
        folder = self._require_folder(folder_id)
        self.pending_deletion = PendingDeletion(kind="folder", item_id=folder.id, name=folder.name)
        return self.pending_deletion

    def request_delete_file(self, file_id: str) -> PendingDeletion:
        media = self._require_file(file_id)
        self.pending_deletion = PendingDeletion(kind="file", item_id=media.id, name=media.name)
        return self.pending_deletion

    def cancel_delete(self) -> None:
        self.pending_deletion = None

    async def confirm_delete(self) -> None:
        """Run the pending delete. On failure it stays pending for a retry."""
        pending = self.pending_deletion
        if pending is None:
            return
        if pending.kind == "folder":
            await self.delete_folder(pending.item_id)
        else:
            await self.delete_file(pending.item_id)
        self.pending_deletion = None
