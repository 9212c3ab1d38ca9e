"""Tests for rename and drag-and-drop state machines."""
import pytest

from resource_hub.core.errors import ErrorCode, RenameInProgressError
from resource_hub.services.resources.editing import DragSession, EditState, RenameController


def test_begin_captures_name_into_buffer():
    rename = RenameController("folder")
    rename.begin("A", "Slides")
    assert rename.state == EditState.EDITING
    assert rename.item_id == "A"
    assert rename.buffer == "Slides"


def test_cancel_leaves_name_unchanged():
    rename = RenameController("folder")
    rename.begin("A", "Slides")
    rename.update("Something else")
    rename.cancel()
    assert rename.state == EditState.VIEWING
    assert rename.item_id is None
    assert rename.commit() is None


def test_commit_returns_trimmed_buffer():
    rename = RenameController("file")
    rename.begin("f1", "old.pdf")
    rename.update("  new.pdf  ")
    assert rename.commit() == "new.pdf"
    assert rename.state == EditState.VIEWING


@pytest.mark.parametrize("buffer", ["", "   ", "old.pdf", " old.pdf "])
def test_commit_discards_empty_or_unchanged(buffer):
    rename = RenameController("file")
    rename.begin("f1", "old.pdf")
    rename.update(buffer)
    assert rename.commit() is None
    assert not rename.is_editing


def test_second_item_while_editing_is_rejected():
    rename = RenameController("folder")
    rename.begin("A", "Slides")
    with pytest.raises(RenameInProgressError) as exc_info:
        rename.begin("B", "Photos")
    assert exc_info.value.code == ErrorCode.CONFLICT_RENAME_IN_PROGRESS
    # The original edit is untouched
    assert rename.item_id == "A"


def test_restarting_same_item_resets_buffer():
    rename = RenameController("folder")
    rename.begin("A", "Slides")
    rename.update("typo")
    rename.begin("A", "Slides")
    assert rename.buffer == "Slides"


def test_kinds_are_independent():
    folders = RenameController("folder")
    files = RenameController("file")
    folders.begin("A", "Slides")
    files.begin("f1", "a.pdf")
    assert folders.is_editing and files.is_editing


def test_update_outside_edit_mode_is_ignored():
    rename = RenameController("folder")
    rename.update("ignored")
    assert rename.buffer == ""


def test_drag_session_drop_consumes_drag():
    drag = DragSession()
    drag.start("f1")
    assert drag.drop("A") == ("f1", "A")
    assert drag.dragged_file_id is None
    assert drag.pending_drop == ("f1", "A")
    drag.settle()
    assert drag.pending_drop is None


def test_drop_without_drag_does_nothing():
    drag = DragSession()
    assert drag.drop("A") is None
    assert drag.pending_drop is None


def test_drag_end_clears_dragged_file():
    drag = DragSession()
    drag.start("f1")
    drag.end()
    assert drag.drop("A") is None


def test_new_drag_replaces_previous():
    drag = DragSession()
    drag.start("f1")
    drag.start("f2")
    assert drag.drop(None) == ("f2", None)
