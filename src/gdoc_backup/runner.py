"""Run controller: one complete backup pass."""

import logging
from collections.abc import Sequence
from threading import Event

from .catalog import CatalogSource
from .config import Config
from .engine import SyncEngine
from .exceptions import BackupCancelled
from .feedback import FeedbackSink, LoggingFeedback
from .folders import build_folder_map
from .models import RemoteItem, RunResult, SyncAction

logger = logging.getLogger(__name__)


class BackupRunner:
    """Fetches the catalog, rebuilds folders and syncs every item in order."""

    def __init__(
        self,
        source: CatalogSource,
        config: Config,
        feedback: FeedbackSink | None = None,
        stop_event: Event | None = None,
    ):
        self.source = source
        self.config = config
        self.feedback = feedback or LoggingFeedback()
        self.stop_event = stop_event or Event()
        self._last_percent = 0.0
        self._last_error: BaseException | None = None

    @property
    def last_error(self) -> BaseException | None:
        """Run-level error of the most recent run, if any."""
        return self._last_error

    def run(self) -> RunResult:
        """
        Execute one backup pass.

        Item failures are counted and the run continues. Anything else
        (catalog, authentication, folder tree, cancellation) stops the run.

        Returns:
            RunResult; ``success`` is True only with zero errors and no
            run-level failure
        """
        result = RunResult()
        self._last_error = None
        self._last_percent = 0.0

        try:
            self._run(result)
        except BackupCancelled as e:
            self._last_error = e
            result.last_error = e
            logger.warning("Backup cancelled: %s", e)
            self._progress(f"STOP (cancelled): {e}", 0)
        except Exception as e:
            self._last_error = e
            result.last_error = e
            logger.exception("Backup aborted")
            self._progress(f"GLOBAL-ERROR: {e}", 0)

        return result

    def _run(self, result: RunResult) -> None:
        stats = result.stats

        self._progress("*" * 60)
        self._progress("****** START BACKUP PROCESS ******")

        if self.config.bypass_tls_verification:
            self._progress("TLS certificate validation bypass ACTIVE")

        self._progress("Fetching document list")
        items = self.source.fetch_all()
        stats.items_total = len(items)
        self._check_cancelled()

        out_dir = self.config.ensure_dest_exists()
        folder_map = build_folder_map(items, out_dir, self.config.max_folder_depth)
        for folder_id, path in folder_map.items():
            self._progress(f"FolderMap: {folder_id} --> {path}")
        self._dump_catalog(items)

        engine = SyncEngine(self.source, self.config, out_dir, folder_map, self.feedback)

        for i, item in enumerate(items):
            self._check_cancelled()
            self._progress(
                f"ITEM: {item.title} ({item.item_type.value}) [{i + 1}/{len(items)}]",
                stats.percent_complete,
            )

            if not item.is_folder:
                outcomes = engine.process_item(item)
                for outcome in outcomes:
                    stats.record(outcome)
                result.outcomes.extend(outcomes)
                if any(o.action is SyncAction.ERROR for o in outcomes):
                    result.error_count += 1

            stats.items_processed += 1

        self._progress("****** END BACKUP PROCESS ******", 100)
        logger.info(
            "Backup finished: %d downloaded, %d skipped, %d failed",
            stats.files_downloaded,
            stats.files_skipped,
            stats.files_failed,
        )

    def _check_cancelled(self) -> None:
        if self.stop_event.is_set():
            raise BackupCancelled("Backup stopped by request")

    def _progress(self, message: str, percent: float | None = None) -> None:
        if percent is not None:
            self._last_percent = percent
        self.feedback.on_progress(message, self._last_percent)

    def _debug(self, message: str) -> None:
        logger.debug(message)
        if self.config.debug:
            self._progress(message)

    def _dump_catalog(self, items: Sequence[RemoteItem]) -> None:
        self._debug("-" * 80)
        self._debug("DUMP_ALL_DOC_INFO")
        for item in items:
            self._debug(
                f"*** {item.title} *** {item.id} ({item.item_type.value}, {item.mime_type})"
            )
            for parent_id in item.parent_ids:
                self._debug(f" ----- PF> {parent_id}")
        self._debug("-" * 80)


def run_backup(
    source: CatalogSource,
    config: Config,
    feedback: FeedbackSink | None = None,
    stop_event: Event | None = None,
) -> RunResult:
    """Run one backup pass with a fresh BackupRunner."""
    return BackupRunner(source, config, feedback, stop_event).run()
