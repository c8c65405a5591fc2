"""Tests for the local folder tree builder."""

import logging
from datetime import datetime, timezone

import pytest

from gdoc_backup.exceptions import FolderTreeError
from gdoc_backup.folders import build_folder_map, find_orphaned_folders
from gdoc_backup.models import ItemType, RemoteItem

MODIFIED = datetime(2024, 1, 5, 10, tzinfo=timezone.utc)


def folder(id: str, title: str, *parents: str) -> RemoteItem:
    return RemoteItem(id, title, ItemType.FOLDER, MODIFIED, tuple(parents))


def document(id: str, title: str, *parents: str) -> RemoteItem:
    return RemoteItem(id, title, ItemType.DOCUMENT, MODIFIED, tuple(parents))


class TestBuildFolderMap:
    """Tests for build_folder_map."""

    def test_empty_catalog(self, tmp_path):
        assert build_folder_map([], tmp_path) == {}

    def test_root_level_folders(self, tmp_path):
        items = [folder("a", "Reports"), folder("b", "Photos 2024")]

        folder_map = build_folder_map(items, tmp_path)

        assert folder_map == {"a": tmp_path / "Reports", "b": tmp_path / "Photos_2024"}
        assert (tmp_path / "Reports").is_dir()
        assert (tmp_path / "Photos_2024").is_dir()

    def test_nested_folders_are_children_of_parent(self, tmp_path):
        # Children listed before their parents on purpose
        items = [
            folder("c", "Q1", "b"),
            folder("b", "2024", "a"),
            folder("a", "Reports"),
            document("d", "Summary", "c"),
        ]

        folder_map = build_folder_map(items, tmp_path)

        assert folder_map["a"] == tmp_path / "Reports"
        assert folder_map["b"] == folder_map["a"] / "2024"
        assert folder_map["c"] == folder_map["b"] / "Q1"
        for path in folder_map.values():
            assert path.is_dir()

    def test_documents_are_ignored(self, tmp_path):
        folder_map = build_folder_map([document("d", "Doc")], tmp_path)

        assert folder_map == {}
        assert list(tmp_path.iterdir()) == []

    def test_existing_content_is_kept(self, tmp_path):
        existing = tmp_path / "Reports" / "old.txt"
        existing.parent.mkdir()
        existing.write_text("keep me")

        build_folder_map([folder("a", "Reports")], tmp_path)

        assert existing.read_text() == "keep me"

    def test_orphaned_folder_is_skipped(self, tmp_path, caplog):
        items = [
            folder("a", "Reports"),
            folder("o", "Orphan", "missing"),
            folder("oc", "OrphanChild", "o"),
        ]

        with caplog.at_level(logging.WARNING, logger="gdoc_backup.folders"):
            folder_map = build_folder_map(items, tmp_path)

        assert set(folder_map) == {"a"}
        assert not (tmp_path / "Orphan").exists()
        assert "Orphan (o)" in caplog.text

    def test_empty_title_gets_own_directory(self, tmp_path):
        items = [folder("a", ""), document("d", "Doc", "a")]

        folder_map = build_folder_map(items, tmp_path)

        assert folder_map["a"] == tmp_path / "_"
        assert folder_map["a"].is_dir()

    def test_multi_parent_folder_placed_once(self, tmp_path):
        items = [
            folder("a", "First"),
            folder("b", "Second"),
            folder("s", "Shared", "a", "b"),
        ]

        folder_map = build_folder_map(items, tmp_path)

        assert folder_map["s"] == tmp_path / "First" / "Shared"
        assert not (tmp_path / "Second" / "Shared").exists()

    def test_cycle_below_root_terminates(self, tmp_path):
        items = [
            folder("r", "Root"),
            folder("x", "X", "r", "y"),
            folder("y", "Y", "x"),
        ]

        folder_map = build_folder_map(items, tmp_path)

        assert folder_map["x"] == tmp_path / "Root" / "X"
        assert folder_map["y"] == tmp_path / "Root" / "X" / "Y"

    def test_depth_limit(self, tmp_path):
        items = [folder("f0", "L0")]
        items += [folder(f"f{i}", f"L{i}", f"f{i - 1}") for i in range(1, 6)]

        with pytest.raises(FolderTreeError):
            build_folder_map(items, tmp_path, max_depth=3)

    def test_depth_within_limit(self, tmp_path):
        items = [folder("f0", "L0")]
        items += [folder(f"f{i}", f"L{i}", f"f{i - 1}") for i in range(1, 4)]

        folder_map = build_folder_map(items, tmp_path, max_depth=4)

        assert folder_map["f3"] == tmp_path / "L0" / "L1" / "L2" / "L3"


class TestFindOrphanedFolders:
    """Tests for orphan detection."""

    def test_finds_only_unreachable_parents(self):
        items = [
            folder("a", "Root"),
            folder("b", "Child", "a"),
            folder("o", "Orphan", "gone"),
        ]

        assert [f.id for f in find_orphaned_folders(items)] == ["o"]
