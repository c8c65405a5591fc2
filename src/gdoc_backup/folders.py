"""Rebuild the remote folder hierarchy as local directories."""

import logging
from collections.abc import Sequence
from pathlib import Path

from .exceptions import FolderTreeError
from .models import RemoteItem
from .utils import local_name

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


def build_folder_map(
    items: Sequence[RemoteItem],
    root_path: Path,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> dict[str, Path]:
    """
    Create local directories mirroring the remote folders.

    Starts from root-level folders and descends into every folder whose
    parent list contains the folder just processed. Existing directories
    are reused untouched.

    Args:
        items: Full catalog (non-folder items are ignored)
        root_path: Local directory that stands for the remote root
        max_depth: Nesting limit; deeper trees raise FolderTreeError

    Returns:
        Mapping of folder id to local directory path
    """
    folders = [item for item in items if item.is_folder]
    folder_map: dict[str, Path] = {}

    def expand(parent: RemoteItem | None, current: Path, depth: int) -> None:
        if depth > max_depth:
            raise FolderTreeError(
                f"Folder nesting deeper than {max_depth} levels under {current}"
            )

        for folder in folders:
            if parent is None:
                if not folder.is_root_level:
                    continue
            elif parent.id not in folder.parent_ids:
                continue

            # Multi-parent folders keep the first location reached
            if folder.id in folder_map:
                continue

            local_path = current / local_name(folder.title)
            local_path.mkdir(parents=True, exist_ok=True)
            folder_map[folder.id] = local_path
            logger.debug("Folder %s (%s) -> %s", folder.title, folder.id, local_path)

            expand(folder, local_path, depth + 1)

    expand(None, Path(root_path), 0)

    orphans = find_orphaned_folders(items)
    if orphans:
        logger.warning(
            "Skipping %d folder(s) with unknown parents: %s",
            len(orphans),
            ", ".join(f"{f.title} ({f.id})" for f in orphans),
        )

    return folder_map


def find_orphaned_folders(items: Sequence[RemoteItem]) -> list[RemoteItem]:
    """Folders whose parents are all missing from the catalog's folders."""
    folder_ids = {item.id for item in items if item.is_folder}
    return [
        item
        for item in items
        if item.is_folder
        and item.parent_ids
        and not any(pid in folder_ids for pid in item.parent_ids)
    ]
