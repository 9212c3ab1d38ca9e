"""Rename and drag-and-drop state machines."""
from enum import Enum
from typing import Optional, Tuple

from resource_hub.core.errors import RenameInProgressError


class EditState(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class RenameController:
    """
    In-place rename for one entity kind ("folder" or "file").

    VIEWING -> EDITING on begin(); back to VIEWING on commit() or cancel().
    Only one item of the kind can be edited at a time.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self.state = EditState.VIEWING
        self.item_id: Optional[str] = None
        self.original_name: Optional[str] = None
        self.buffer = ""

    @property
    def is_editing(self) -> bool:
        return self.state == EditState.EDITING

    def begin(self, item_id: str, current_name: str) -> None:
        if self.is_editing and self.item_id != item_id:
            raise RenameInProgressError(self.kind, self.item_id)
        self.state = EditState.EDITING
        self.item_id = item_id
        self.original_name = current_name
        self.buffer = current_name

    def update(self, text: str) -> None:
        if self.is_editing:
            self.buffer = text

    def commit(self) -> Optional[str]:
        """Leave edit mode; return the new name, or None when nothing changes."""
        if not self.is_editing:
            return None
        name = self.buffer.strip()
        original = self.original_name
        self._reset()
        if not name or name == original:
            return None
        return name

    def cancel(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.state = EditState.VIEWING
        self.item_id = None
        self.original_name = None
        self.buffer = ""


class DragSession:
    """Tracks the single file being dragged and the drop awaiting the server."""

    def __init__(self):
        self.dragged_file_id: Optional[str] = None
        # (file_id, folder_id) shown as "moving" until the server answers
        self.pending_drop: Optional[Tuple[str, Optional[str]]] = None

    def start(self, file_id: str) -> None:
        self.dragged_file_id = file_id

    def end(self) -> None:
        self.dragged_file_id = None

    def drop(self, folder_id: Optional[str]) -> Optional[Tuple[str, Optional[str]]]:
        """Consume the drag; None when nothing was being dragged."""
        if self.dragged_file_id is None:
            return None
        self.pending_drop = (self.dragged_file_id, folder_id)
        self.dragged_file_id = None
        return self.pending_drop

    def settle(self) -> None:
        self.pending_drop = None
