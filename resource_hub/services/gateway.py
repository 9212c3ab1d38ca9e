"""Gateway to the remote resource API (folders and media files)."""
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, Union

import httpx

from resource_hub.config import Settings, get_settings
from resource_hub.core.errors import (
    AuthenticationError,
    ErrorCode,
    InvalidResponseError,
    TransportError,
    ValidationError,
    error_from_status,
)
from resource_hub.core.middleware import request_event_hooks
from resource_hub.core.responses import (
    ResponseMessages,
    extract_error_message,
    unwrap_list,
    unwrap_object,
)
from resource_hub.schemas.resource_schemas import (
    FileUpdate,
    Folder,
    FolderCreate,
    FolderUpdate,
    MediaFile,
)
from resource_hub.utils.media import guess_content_type

logger = logging.getLogger(__name__)

FOLDERS_PATH = "/api/resources/folders/"
FILES_PATH = "/api/resources/files/"

# Sentinel for "leave this field alone" on partial updates
UNSET: Any = object()

Uploadable = Union[str, Path, bytes, BinaryIO]


class ResourceGateway:
    """HTTP client for folder and file CRUD against the resource API.

    Every call is level-scoped; composing a whole tree is the caller's job.
    Failures are raised as ResourceError subclasses, never returned.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.client = httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
            transport=transport,
            event_hooks=request_event_hooks(),
        )

    async def __aenter__(self) -> "ResourceGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    def _auth_headers(self) -> dict:
        """Credentials for every request; checked before anything is sent."""
        if not self.settings.access_token:
            raise AuthenticationError()
        if not self.settings.organization_uuid:
            raise AuthenticationError(
                message="Organization UUID is required. Please set up your organization first.",
                code=ErrorCode.AUTH_ORGANIZATION_REQUIRED,
            )
        return {
            "Authorization": f"Bearer {self.settings.access_token}",
            "X-Organization": self.settings.organization_uuid,
        }

    async def _request(self, method: str, url: str, resource: str, **kwargs) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        headers = self._auth_headers()

        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"{method} {url} timed out: {e}")
            raise TransportError(
                message="The server took too long to respond. Please try again.",
                code=ErrorCode.TRANSPORT_TIMEOUT,
            ) from e
        except httpx.TransportError as e:
            logger.warning(f"{method} {url} failed to connect: {e}")
            raise TransportError() from e

        if not response.is_success:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = extract_error_message(
                payload, f"Server error: {response.status_code} {response.reason_phrase}"
            )
            raise error_from_status(response.status_code, message, resource=resource)

        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError() from e

    @staticmethod
    def _require(value: Optional[str], param: str) -> None:
        if not value:
            raise ValidationError(
                message=f"{param.replace('_', ' ').capitalize()} is required",
                param=param,
                code=ErrorCode.VALIDATION_MISSING_FIELD,
            )

    @staticmethod
    def _require_name(name: Optional[str], resource: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError(
                message=f"{resource.capitalize()} name is required",
                param="name",
                code=ErrorCode.VALIDATION_EMPTY_NAME,
            )
        return name

    # -- Folders --

    async def create_folder(
        self, name: str, event_id: str, parent_id: Optional[str] = None
    ) -> Folder:
        """Create a folder under parent_id (root when None)."""
        name = self._require_name(name, "folder")
        self._require(event_id, "event_uuid")

        body = FolderCreate(name=name, event_uuid=event_id, parent=parent_id)
        payload = await self._request(
            "POST",
            FOLDERS_PATH,
            resource="folder",
            json=body.model_dump(exclude_none=True),
        )
        folder = Folder.model_validate(unwrap_object(payload))
        logger.info(f"Folder created: {folder.id} ({folder.name}) parent={folder.parent_id}")
        return folder

    async def rename_folder(self, folder_id: str, event_id: str, name: str) -> Folder:
        self._require(folder_id, "folder_id")
        self._require(event_id, "event_uuid")
        body = FolderUpdate(name=self._require_name(name, "folder"), event_uuid=event_id)
        payload = await self._request(
            "PATCH",
            f"{FOLDERS_PATH}{folder_id}/",
            resource="folder",
            json=body.model_dump(),
        )
        return Folder.model_validate(unwrap_object(payload))

    async def delete_folder(self, folder_id: str, event_id: str) -> None:
        """Delete one folder. The server applies its own cascade."""
        self._require(folder_id, "folder_id")
        self._require(event_id, "event_uuid")
        await self._request(
            "DELETE",
            f"{FOLDERS_PATH}{folder_id}/",
            resource="folder",
            params={"event_uuid": event_id},
        )
        logger.info(f"Folder deleted: {folder_id}")

    async def list_folders(self, event_id: str, parent_id: Optional[str] = None) -> List[Folder]:
        """Direct children of parent_id, or root-level folders when None."""
        self._require(event_id, "event_uuid")
        params = {"event_uuid": event_id}
        if parent_id:
            params["parent"] = parent_id
        payload = await self._request("GET", FOLDERS_PATH, resource="folder", params=params)
        return [Folder.model_validate(item) for item in unwrap_list(payload, allow_results=True)]

    # -- Files --

    async def upload_file(
        self,
        file: Uploadable,
        event_id: str,
        parent_id: Optional[str] = None,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> MediaFile:
        """
        Upload a file into parent_id (root when None).

        Args:
            file: Path, raw bytes or an open binary file
            event_id: Owning event
            parent_id: Destination folder
            filename: Name to upload under (defaults to the path's name)
            content_type: Defaults to a guess from the filename

        Returns:
            The persisted MediaFile
        """
        self._require(event_id, "event_uuid")

        try:
            if isinstance(file, (str, Path)):
                path = Path(file)
                filename = filename or path.name
                content = path.read_bytes()
            elif isinstance(file, bytes):
                content = file
            else:
                filename = filename or os.path.basename(getattr(file, "name", "") or "")
                content = file.read()
        except OSError as e:
            logger.warning(f"Cannot read upload {file}: {e}")
            raise ValidationError(
                message=f"Cannot read file {filename or file}",
                param="file",
                code=ErrorCode.VALIDATION_UNREADABLE_FILE,
            ) from e

        if not filename:
            raise ValidationError(
                message="File name is required",
                param="file",
                code=ErrorCode.VALIDATION_MISSING_FIELD,
            )

        data = {"event_uuid": event_id}
        if parent_id:
            data["folder"] = parent_id

        payload = await self._request(
            "POST",
            FILES_PATH,
            resource="file",
            data=data,
            files={"file": (filename, content, content_type or guess_content_type(filename))},
        )
        media = MediaFile.model_validate(unwrap_object(payload))
        logger.info(ResponseMessages.UPLOADED.format(resource=f"File {media.name}"))
        return media

    async def update_file(
        self,
        file_id: str,
        event_id: str,
        *,
        name: Any = UNSET,
        folder_id: Any = UNSET,
    ) -> MediaFile:
        """Rename and/or move a file. folder_id=None moves it to the root."""
        self._require(file_id, "file_id")
        self._require(event_id, "event_uuid")

        fields = {"event_uuid": event_id}
        if name is not UNSET:
            fields["name"] = self._require_name(name, "file")
        if folder_id is not UNSET:
            fields["folder"] = folder_id
        body = FileUpdate(**fields)

        payload = await self._request(
            "PATCH",
            f"{FILES_PATH}{file_id}/",
            resource="file",
            json=body.model_dump(exclude_unset=True),
        )
        return MediaFile.model_validate(unwrap_object(payload))

    async def list_files(self, parent_id: Optional[str] = None) -> List[MediaFile]:
        """Files directly inside parent_id, or at the root when None."""
        params = {"folder": parent_id} if parent_id else {}
        payload = await self._request("GET", FILES_PATH, resource="file", params=params)
        return [MediaFile.model_validate(item) for item in unwrap_list(payload)]

    async def delete_file(self, file_id: str, event_id: str) -> None:
        self._require(file_id, "file_id")
        self._require(event_id, "event_uuid")
        await self._request(
            "DELETE",
            f"{FILES_PATH}{file_id}/",
            resource="file",
            params={"event_uuid": event_id},
        )
        logger.info(f"File deleted: {file_id}")
