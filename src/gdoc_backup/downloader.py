"""Byte transfer from the catalog source to local files."""

import contextlib
import logging
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from .utils import human_size, set_local_mtime

logger = logging.getLogger(__name__)

PART_SUFFIX = ".part"


class Downloader:
    """Writes exported streams to disk with replace semantics."""

    def write_stream(self, chunks: Iterable[bytes], dest: Path, modified: datetime) -> int:
        """
        Write a byte stream to ``dest`` and stamp it with ``modified``.

        The bytes go to a temporary ``.part`` file first, which then
        replaces ``dest`` in one step. The timestamp is only set once the
        transfer completed, so an interrupted download never looks up to date.

        Args:
            chunks: Byte chunks from the catalog source
            dest: Local destination path
            modified: Remote modification time to store as mtime

        Returns:
            Number of bytes written
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = dest.with_name(dest.name + PART_SUFFIX)

        written = 0
        try:
            with open(tmp_path, "wb") as f:
                for chunk in chunks:
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)

            tmp_path.replace(dest)
        finally:
            # Clean up partial file on failure
            if tmp_path.exists():
                with contextlib.suppress(OSError):
                    tmp_path.unlink()

        set_local_mtime(dest, modified)
        logger.debug("Wrote %s (%s)", dest, human_size(written))
        return written
