"""ResourceManager tests: navigation, CRUD, cascade, moves and reload ordering."""
import asyncio

import pytest

from resource_hub.core.errors import (
    ConflictError,
    ErrorCode,
    ExternalServiceError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from resource_hub.core.notifications import NotificationLevel


def file_ids(files):
    return {f.id for f in files}


def folder_ids(folders):
    return {f.id for f in folders}


# ---------------------------------------------------------------------------
# Opening and navigation (over the fake HTTP API)
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_breadcrumbs_follow_navigation(manager, remote):
    remote.add_folder("R1", uuid="r1")
    remote.add_folder("R2", parent="r1", uuid="r2")

    async with manager:
        await manager.open()
        assert [c.name for c in manager.breadcrumbs] == ["All media"]

        await manager.navigate("r2")
        crumbs = manager.breadcrumbs
        assert [c.id for c in crumbs] == [None, "r1", "r2"]
        assert [c.name for c in crumbs] == ["All media", "R1", "R2"]


@pytest.mark.asyncio
async def test_open_loads_root_level_and_whole_tree(manager, remote):
    remote.add_folder("Top", uuid="top")
    remote.add_folder("Nested", parent="top", uuid="nested")
    remote.add_file("agenda.pdf")
    remote.add_file("inner.pdf", folder="nested")

    async with manager:
        await manager.open()

    assert folder_ids(manager.store.all_folders()) == {"top", "nested"}
    assert folder_ids(manager.level.folders) == {"top"}
    assert [f.name for f in manager.level.files] == ["agenda.pdf"]


@pytest.mark.asyncio
async def test_context_manager_closes_gateway(fake_manager, fake_gateway):
    async with fake_manager:
        pass
    assert fake_gateway.closed


# ---------------------------------------------------------------------------
# Folder CRUD
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_folder_in_current_level(manager, remote, notifier):
    parent = remote.add_folder("Parent", uuid="p")

    async with manager:
        await manager.open()
        await manager.navigate("p")
        created = await manager.create_folder("Child")

    assert created.parent_id == parent["uuid"]
    assert created.id in folder_ids(manager.level.folders)
    assert created.id in folder_ids(manager.store.all_folders())
    assert notifier.history[-1].level == NotificationLevel.SUCCESS


@pytest.mark.asyncio
async def test_duplicate_folder_name_reloads_then_raises(manager, remote, notifier):
    existing = remote.add_folder("Slides")

    async with manager:
        with pytest.raises(ConflictError):
            await manager.create_folder("Slides")

    # The reload made the existing folder visible
    assert existing["uuid"] in folder_ids(manager.level.folders)
    assert notifier.errors[0].code == ErrorCode.CONFLICT_FOLDER_EXISTS.value


@pytest.mark.asyncio
async def test_empty_folder_name_is_reported(manager, remote, notifier):
    async with manager:
        with pytest.raises(ValidationError):
            await manager.create_folder("   ")

    assert remote.calls == []
    assert notifier.errors[0].code == ErrorCode.VALIDATION_EMPTY_NAME.value


@pytest.mark.asyncio
async def test_delete_viewed_subtree_returns_to_root(manager, remote, notifier):
    remote.add_folder("A", uuid="a")
    remote.add_folder("B", parent="a", uuid="b")
    remote.add_file("f1.pdf", folder="b", uuid="f1")
    remote.add_file("keep.pdf", uuid="keep")

    async with manager:
        await manager.open()
        await manager.navigate("a")
        await manager.navigate("b")
        assert file_ids(manager.level.files) == {"f1"}

        plan = await manager.delete_folder("a")

    assert plan.folder_ids == frozenset({"a", "b"})
    assert plan.file_ids == frozenset({"f1"})
    assert manager.current_folder_id is None
    assert [c.id for c in manager.breadcrumbs] == [None]
    assert manager.store.get_folder("a") is None
    assert manager.store.get_folder("b") is None
    assert manager.store.get_file("f1") is None
    assert file_ids(manager.level.files) == {"keep"}
    assert notifier.errors == []


@pytest.mark.asyncio
async def test_delete_sibling_keeps_view(fake_manager):
    await fake_manager.open()
    await fake_manager.navigate("A")

    await fake_manager.delete_folder("E")

    assert fake_manager.current_folder_id == "A"
    assert folder_ids(fake_manager.store.all_folders()) == {"A", "B", "C", "D"}


@pytest.mark.asyncio
async def test_failed_delete_prunes_nothing_and_stays_pending(manager, remote, notifier):
    remote.add_folder("A", uuid="a")
    remote.add_folder("B", parent="a", uuid="b")
    remote.fail("delete_folder", 500, {"message": "Storage backend unavailable"})

    async with manager:
        await manager.open()
        pending = manager.request_delete_folder("a")
        assert pending.name == "A"

        with pytest.raises(ExternalServiceError):
            await manager.confirm_delete()

        assert folder_ids(manager.store.all_folders()) == {"a", "b"}
        assert manager.pending_deletion == pending
        assert notifier.errors[-1].message == "Storage backend unavailable"

        # Retry from the still-open confirmation
        await manager.confirm_delete()

    assert manager.pending_deletion is None
    assert manager.store.all_folders() == []


@pytest.mark.asyncio
async def test_cancel_delete(fake_manager, fake_gateway):
    await fake_manager.open()
    fake_manager.request_delete_folder("A")
    fake_manager.cancel_delete()
    await fake_manager.confirm_delete()

    assert fake_manager.pending_deletion is None
    assert ("delete_folder", "A") not in fake_gateway.calls


@pytest.mark.asyncio
async def test_delete_unknown_folder_request_is_reported(fake_manager, notifier):
    with pytest.raises(NotFoundError):
        fake_manager.request_delete_folder("missing")
    assert notifier.errors[0].code == ErrorCode.NOT_FOUND_FOLDER.value


# ---------------------------------------------------------------------------
# Renames
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_folder_rename_round_trip(manager, remote):
    remote.add_folder("Old", uuid="x")

    async with manager:
        await manager.open()
        manager.begin_folder_rename("x")
        manager.folder_rename.update("  New name  ")
        renamed = await manager.commit_folder_rename()

    assert renamed.name == "New name"
    assert remote.folders["x"]["name"] == "New name"
    assert not manager.folder_rename.is_editing


@pytest.mark.asyncio
async def test_unchanged_rename_sends_nothing(fake_manager, fake_gateway):
    await fake_manager.open()
    fake_manager.begin_folder_rename("A")
    fake_manager.folder_rename.update("A ")

    assert await fake_manager.commit_folder_rename() is None
    assert not any(op == "rename_folder" for op, _ in fake_gateway.calls)


@pytest.mark.asyncio
async def test_failed_rename_keeps_old_name(fake_manager, fake_gateway, notifier):
    await fake_manager.open()
    fake_gateway.errors["rename_folder"] = ConflictError(message="Name taken")
    fake_manager.begin_folder_rename("A")
    fake_manager.folder_rename.update("Taken")

    with pytest.raises(ConflictError):
        await fake_manager.commit_folder_rename()

    assert fake_manager.store.get_folder("A").name == "A"
    assert notifier.errors[-1].message == "Name taken"


@pytest.mark.asyncio
async def test_file_rename(fake_manager, fake_gateway):
    await fake_manager.open()
    fake_manager.begin_file_rename("f-root")
    fake_manager.file_rename.update("program.pdf")

    renamed = await fake_manager.commit_file_rename()

    assert renamed.name == "program.pdf"
    assert fake_gateway.files["f-root"].name == "program.pdf"


# ---------------------------------------------------------------------------
# Moving files
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_move_file_into_folder(fake_manager, fake_gateway, notifier):
    await fake_manager.open()

    moved = await fake_manager.move_file("f-root", "E")

    assert moved.folder_id == "E"
    assert fake_gateway.files["f-root"].folder_id == "E"
    assert "f-root" not in file_ids(fake_manager.level.files)
    assert notifier.history[-1].level == NotificationLevel.SUCCESS


@pytest.mark.asyncio
async def test_move_to_same_folder_is_noop(fake_manager, fake_gateway):
    await fake_manager.open()

    await fake_manager.move_file("f-root", None)

    assert not any(op == "update_file" for op, _ in fake_gateway.calls)


@pytest.mark.asyncio
async def test_move_to_unknown_folder_is_rejected(fake_manager, fake_gateway):
    await fake_manager.open()

    with pytest.raises(NotFoundError):
        await fake_manager.move_file("f-root", "nope")
    assert not any(op == "update_file" for op, _ in fake_gateway.calls)


@pytest.mark.asyncio
async def test_move_destinations_exclude_current_folder(fake_manager):
    await fake_manager.open()
    await fake_manager.navigate("A")

    destinations = folder_ids(fake_manager.move_destinations("f-a"))

    assert destinations == {"B", "C", "D", "E"}


@pytest.mark.asyncio
async def test_drop_on_folder_moves_file(fake_manager):
    await fake_manager.open()
    fake_manager.start_drag("f-root")

    moved = await fake_manager.drop_on("A")

    assert moved.folder_id == "A"
    assert fake_manager.drag.pending_drop is None
    assert fake_manager.drag.dragged_file_id is None


@pytest.mark.asyncio
async def test_failed_drop_rolls_back(fake_manager, fake_gateway, notifier):
    await fake_manager.open()
    fake_gateway.errors["update_file"] = TransportError()
    fake_manager.start_drag("f-root")

    with pytest.raises(TransportError):
        await fake_manager.drop_on("A")

    assert fake_manager.drag.pending_drop is None
    assert fake_manager.store.get_file("f-root").folder_id is None
    assert notifier.errors[-1].code == ErrorCode.TRANSPORT_UNAVAILABLE.value


@pytest.mark.asyncio
async def test_drop_without_drag_does_nothing(fake_manager):
    assert await fake_manager.drop_on("A") is None


# ---------------------------------------------------------------------------
# Local files and uploads
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_select_local_files_survive_reload(fake_manager, fake_gateway, tmp_path):
    await fake_manager.open()
    photo = tmp_path / "stage.jpg"
    photo.write_bytes(b"jpeg")

    (local,) = fake_manager.select_local_files([photo])
    await fake_manager.load_level()

    assert local.is_local
    assert local.type == "image"
    assert local.preview_url.startswith("file://")
    assert local.id in file_ids(fake_manager.level.files)

    await fake_manager.delete_file(local.id)
    assert fake_manager.store.get_file(local.id) is None
    assert not any(op == "delete_file" for op, _ in fake_gateway.calls)


@pytest.mark.asyncio
async def test_upload_batch_continues_after_failure(manager, remote, notifier, tmp_path):
    first = tmp_path / "too-big.png"
    second = tmp_path / "agenda.pdf"
    first.write_bytes(b"png")
    second.write_bytes(b"pdf")
    remote.add_folder("Docs", uuid="docs")
    remote.fail("upload_file", 413, {"detail": "File too large."})

    async with manager:
        await manager.open()
        await manager.navigate("docs")
        report = await manager.upload_files([first, second])

    assert report.failed == ["too-big.png"]
    assert [m.name for m in report.uploaded] == ["agenda.pdf"]
    assert report.uploaded[0].folder_id == "docs"
    assert [f.name for f in manager.level.files] == ["agenda.pdf"]
    assert not any(f.is_local for f in manager.store.all_files())
    assert notifier.errors[-1].message == "File too large."


@pytest.mark.asyncio
async def test_upload_batch_reports_missing_file_and_continues(manager, remote, notifier, tmp_path):
    present = tmp_path / "ok.pdf"
    present.write_bytes(b"pdf")

    async with manager:
        await manager.open()
        report = await manager.upload_files([tmp_path / "gone.png", present])

    assert report.failed == ["gone.png"]
    assert [m.name for m in report.uploaded] == ["ok.pdf"]
    assert not any(f.is_local for f in manager.store.all_files())
    assert [f.name for f in manager.level.files] == ["ok.pdf"]
    assert [n.code for n in notifier.errors] == [ErrorCode.VALIDATION_UNREADABLE_FILE.value]


@pytest.mark.asyncio
async def test_delete_file(fake_manager, fake_gateway):
    await fake_manager.open()
    fake_manager.request_delete_file("f-root")

    await fake_manager.confirm_delete()

    assert "f-root" not in fake_gateway.files
    assert fake_manager.store.get_file("f-root") is None


# ---------------------------------------------------------------------------
# Reload ordering and failures
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_superseded_level_load_is_discarded(fake_manager, fake_gateway):
    await fake_manager.open()
    gate = asyncio.Event()
    fake_gateway.gates["A"] = gate

    slow = asyncio.create_task(fake_manager.navigate("A"))
    await asyncio.sleep(0)
    assert await fake_manager.navigate("B") is True

    gate.set()
    assert await slow is False
    assert fake_manager.current_folder_id == "B"
    assert folder_ids(fake_manager.level.folders) == {"D"}


@pytest.mark.asyncio
async def test_superseded_level_failure_is_discarded_quietly(fake_manager, fake_gateway, notifier):
    await fake_manager.open()
    gate = asyncio.Event()
    fake_gateway.gates["A"] = gate

    slow = asyncio.create_task(fake_manager.navigate("A"))
    await asyncio.sleep(0)
    assert await fake_manager.navigate("B") is True

    fake_gateway.listing_errors["A"] = TransportError()
    gate.set()
    assert await slow is False

    assert notifier.errors == []
    assert fake_manager.current_folder_id == "B"
    assert folder_ids(fake_manager.level.folders) == {"D"}


@pytest.mark.asyncio
async def test_superseded_whole_tree_failure_is_discarded_quietly(fake_manager, fake_gateway, notifier):
    gate = asyncio.Event()
    fake_gateway.gates["A"] = gate

    slow = asyncio.create_task(fake_manager.load_whole_tree())
    for _ in range(10):
        await asyncio.sleep(0)
    del fake_gateway.gates["A"]
    assert await fake_manager.load_whole_tree() is True

    fake_gateway.listing_errors["A"] = TransportError()
    gate.set()
    assert await slow is False

    assert notifier.errors == []
    assert folder_ids(fake_manager.store.all_folders()) == {"A", "B", "C", "D", "E"}


@pytest.mark.asyncio
async def test_failed_whole_tree_keeps_stale_tree(fake_manager, fake_gateway, notifier):
    await fake_manager.open()
    fake_gateway.errors["list_folders"] = TransportError()

    with pytest.raises(TransportError):
        await fake_manager.load_whole_tree()

    assert folder_ids(fake_manager.store.all_folders()) == {"A", "B", "C", "D", "E"}
    assert len(notifier.errors) == 1


@pytest.mark.asyncio
async def test_reload_failure_after_mutation_is_not_raised(fake_manager, fake_gateway, notifier):
    await fake_manager.open()
    fake_gateway.errors["list_files"] = TransportError()

    created = await fake_manager.create_folder("Press")

    assert created.id in folder_ids(fake_manager.store.all_folders())
    assert notifier.errors[-1].code == ErrorCode.TRANSPORT_UNAVAILABLE.value


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_visible_applies_query_and_media_type(fake_manager):
    await fake_manager.open()

    fake_manager.set_media_type("document")
    assert file_ids(fake_manager.visible.files) == {"f-root"}

    fake_manager.set_media_type("image")
    assert fake_manager.visible.files == []

    fake_manager.set_media_type("all")
    fake_manager.set_search("a")
    assert folder_ids(fake_manager.visible.folders) == {"A"}
    assert fake_manager.visible.files == []

    fake_manager.set_search("")
    assert folder_ids(fake_manager.visible.folders) == {"A", "E"}
