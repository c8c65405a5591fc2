"""Download-or-skip decisions for catalog items."""

import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

from .catalog import CatalogSource
from .config import Config
from .downloader import Downloader
from .exceptions import FolderNotFoundError
from .feedback import FeedbackSink
from .formats import formats_for
from .models import FeedbackEvent, ItemType, RemoteItem, SyncAction, SyncOutcome
from .utils import get_local_mtime, local_name, truncate_to_seconds

logger = logging.getLogger(__name__)

EXPORTABLE_TYPES = {
    ItemType.DOCUMENT,
    ItemType.SPREADSHEET,
    ItemType.PRESENTATION,
    ItemType.PDF,
}


def needs_download(
    local_time: datetime | None,
    remote_time: datetime,
    force: bool = False,
) -> bool:
    """
    Decide whether a local copy must be (re)downloaded.

    Both timestamps are compared at whole-second precision in UTC.

    Args:
        local_time: Local file mtime, or None if the file does not exist
        remote_time: Remote modification time
        force: Download regardless of timestamps
    """
    if force or local_time is None:
        return True
    return truncate_to_seconds(local_time) != truncate_to_seconds(remote_time)


def local_file_path(dest_dir: Path, item: RemoteItem, fmt: str) -> Path:
    """Deterministic local path of ``item`` exported as ``fmt``."""
    return dest_dir / f"{local_name(item.title)}.{fmt}"


class SyncEngine:
    """Brings the local copies of single catalog items up to date."""

    def __init__(
        self,
        source: CatalogSource,
        config: Config,
        out_dir: Path,
        folder_map: dict[str, Path],
        feedback: FeedbackSink,
        downloader: Downloader | None = None,
    ):
        self.source = source
        self.config = config
        self.out_dir = Path(out_dir)
        self.folder_map = folder_map
        self.feedback = feedback
        self.downloader = downloader or Downloader()

    def formats_for(self, item: RemoteItem) -> list[str]:
        """Export formats requested for this item's type."""
        return formats_for(
            item.item_type,
            self.config.document_formats,
            self.config.spreadsheet_formats,
            self.config.presentation_formats,
        )

    def destinations(self, item: RemoteItem) -> list[Path]:
        """
        Local directories that receive this item.

        Root-level items go to the output directory. Otherwise only the
        first parent is used, unless ``first_parent_only`` is disabled, in
        which case every known parent folder gets a copy.
        """
        if item.is_root_level:
            return [self.out_dir]

        if self.config.first_parent_only:
            parent_id = item.parent_ids[0]
            if parent_id not in self.folder_map:
                raise FolderNotFoundError(parent_id)
            return [self.folder_map[parent_id]]

        dirs = [self.folder_map[pid] for pid in item.parent_ids if pid in self.folder_map]
        if not dirs:
            raise FolderNotFoundError(item.parent_ids[0])
        return dirs

    def process_item(self, item: RemoteItem) -> list[SyncOutcome]:
        """
        Sync every requested format of one non-folder item.

        Any failure is reported as an ERROR outcome; formats after the
        failing one are not attempted.

        Returns:
            One outcome per (destination, format) handled, ending with the
            ERROR outcome if something failed
        """
        remote_time = truncate_to_seconds(item.modified)

        if item.item_type not in EXPORTABLE_TYPES:
            outcome = SyncOutcome(item, SyncAction.NOT_APPLICABLE, remote_time=remote_time)
            self._emit(outcome)
            return [outcome]

        formats = self.formats_for(item)
        outcomes: list[SyncOutcome] = []
        current_format = ""

        try:
            for dest_dir in self.destinations(item):
                for fmt in formats:
                    current_format = fmt
                    outcome = self._sync_format(item, fmt, dest_dir)
                    self._emit(outcome)
                    outcomes.append(outcome)
        except Exception as e:
            logger.exception(
                "Failed to back up %s (%s) as '%s'",
                item.title,
                item.item_type.value,
                current_format,
            )
            outcome = SyncOutcome(
                item,
                SyncAction.ERROR,
                export_format=current_format,
                remote_time=remote_time,
                error=f"{type(e).__name__}: {e}",
            )
            self._emit(outcome)
            outcomes.append(outcome)

        return outcomes

    def _sync_format(self, item: RemoteItem, fmt: str, dest_dir: Path) -> SyncOutcome:
        path = local_file_path(dest_dir, item, fmt)
        local_time = truncate_to_seconds(get_local_mtime(path))
        remote_time = truncate_to_seconds(item.modified)

        if not needs_download(local_time, item.modified, self.config.force_download):
            logger.debug("Up to date: %s", path)
            return SyncOutcome(item, SyncAction.SKIPPED, fmt, path, local_time, remote_time)

        logger.info("Exporting %s (%s) -> %s", item.title, item.item_type.value, path)
        written = self.downloader.write_stream(self._open_stream(item, fmt), path, item.modified)
        return SyncOutcome(
            item,
            SyncAction.DOWNLOADED,
            fmt,
            path,
            local_time,
            remote_time,
            bytes_written=written,
        )

    def _open_stream(self, item: RemoteItem, fmt: str) -> Iterator[bytes]:
        if item.item_type is ItemType.PDF:
            return self.source.raw_content_stream(item)
        return self.source.export_stream(item, fmt)

    def _emit(self, outcome: SyncOutcome) -> None:
        self.feedback.on_item(FeedbackEvent.from_outcome(outcome))
