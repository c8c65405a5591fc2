"""Data models for GDoc Backup."""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from .exceptions import BackupCancelled


class ItemType(str, Enum):
    """Declared type of a remote catalog item."""

    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    PDF = "pdf"
    FOLDER = "folder"
    OTHER = "other"


class SyncAction(str, Enum):
    """What happened to one (item, format) pair during a run."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    ERROR = "error"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class RemoteItem:
    """Snapshot of one remote document or folder."""

    id: str
    title: str
    item_type: ItemType
    modified: datetime
    parent_ids: tuple[str, ...] = ()
    mime_type: str = ""

    @property
    def is_folder(self) -> bool:
        return self.item_type is ItemType.FOLDER

    @property
    def is_root_level(self) -> bool:
        return not self.parent_ids


@dataclass
class SyncOutcome:
    """Result of the download-or-skip decision for one (item, format)."""

    item: RemoteItem
    action: SyncAction
    export_format: str = ""
    local_path: Path | None = None
    local_time: datetime | None = None
    remote_time: datetime | None = None
    bytes_written: int = 0
    error: str = ""

    @property
    def folder(self) -> str:
        """Destination folder, empty when no path was resolved."""
        return str(self.local_path.parent) if self.local_path else ""


@dataclass
class FeedbackEvent:
    """Structured per-item event delivered to the feedback sink."""

    title: str
    doc_type: str
    export_format: str
    action: str
    folder: str = ""
    local_time: datetime | None = None
    remote_time: datetime | None = None
    error: str = ""

    @classmethod
    def from_outcome(cls, outcome: SyncOutcome) -> "FeedbackEvent":
        """Build the event for a sync outcome."""
        return cls(
            title=outcome.item.title,
            doc_type=outcome.item.item_type.value,
            export_format=outcome.export_format,
            action=outcome.action.value,
            folder=outcome.folder,
            local_time=outcome.local_time,
            remote_time=outcome.remote_time,
            error=outcome.error,
        )

    def __str__(self) -> str:
        text = (
            f"FN={self.title} DT={self.doc_type} FMT={self.export_format} "
            f"Act={self.action} FLD={self.folder} "
            f"LDT={self.local_time} RDT={self.remote_time}"
        )
        if self.error:
            text += f" ERR={self.error}"
        return text


@dataclass
class BackupStats:
    """Counters for one backup run."""

    items_total: int = 0
    items_processed: int = 0
    files_downloaded: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    items_not_applicable: int = 0
    bytes_downloaded: int = 0
    start_time: float = field(default_factory=time.time)

    def record(self, outcome: SyncOutcome) -> None:
        """Update counters from one outcome."""
        if outcome.action is SyncAction.DOWNLOADED:
            self.files_downloaded += 1
            self.bytes_downloaded += outcome.bytes_written
        elif outcome.action is SyncAction.SKIPPED:
            self.files_skipped += 1
        elif outcome.action is SyncAction.ERROR:
            self.files_failed += 1
        else:
            self.items_not_applicable += 1

    @property
    def elapsed_seconds(self) -> float:
        """Get total elapsed time since backup started."""
        return time.time() - self.start_time

    @property
    def speed_bps(self) -> float:
        """Get overall download speed in bytes per second."""
        if self.elapsed_seconds < 0.1:
            return 0.0
        return self.bytes_downloaded / self.elapsed_seconds

    @property
    def percent_complete(self) -> float:
        """Share of catalog items processed, 0-100."""
        if self.items_total <= 0:
            return 0.0
        return self.items_processed / self.items_total * 100


@dataclass
class RunResult:
    """Pass/fail summary of one backup run."""

    error_count: int = 0
    last_error: BaseException | None = None
    stats: BackupStats = field(default_factory=BackupStats)
    outcomes: list[SyncOutcome] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error_count == 0 and self.last_error is None

    @property
    def cancelled(self) -> bool:
        return isinstance(self.last_error, BackupCancelled)
