"""Utility functions for GDoc Backup."""

import os
import shutil
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NS_PER_SECOND = 1_000_000_000


def sanitize_name(title: str) -> str:
    """
    Map a remote title to a filesystem-safe name.

    Every character that is not an ASCII letter, an ASCII digit, ``-`` or
    ``_`` becomes ``_``. The result always has the same length as the input.

    Examples:
        "Q1 Report" -> "Q1_Report"
        "a/b:c" -> "a_b_c"
    """
    return "".join(
        c if (c.isascii() and c.isalnum()) or c in "-_" else "_"
        for c in title
    )


def local_name(title: str) -> str:
    """Sanitized name for a local file or directory; empty titles become "_"."""
    return sanitize_name(title) or "_"


def to_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def truncate_to_seconds(dt: datetime | None) -> datetime | None:
    """Drop sub-second precision (and normalize to UTC) for comparisons."""
    if dt is None:
        return None
    return to_utc(dt).replace(microsecond=0)


def parse_remote_time(value: str) -> datetime:
    """Parse an RFC 3339 timestamp such as '2024-01-05T10:00:00.000Z'."""
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(value))


def _to_ns(dt: datetime) -> int:
    delta = to_utc(dt) - _EPOCH
    return (
        (delta.days * 86400 + delta.seconds) * _NS_PER_SECOND
        + delta.microseconds * 1000
    )


def get_local_mtime(path: Path) -> datetime | None:
    """Get a file's last-write time as UTC datetime, or None if missing."""
    try:
        ns = path.stat().st_mtime_ns
    except FileNotFoundError:
        return None
    seconds, remainder = divmod(ns, _NS_PER_SECOND)
    return _EPOCH + timedelta(seconds=seconds, microseconds=remainder // 1000)


def set_local_mtime(path: Path, modified: datetime) -> None:
    """Set a file's last-write time to ``modified`` (access time kept)."""
    # Integer nanoseconds, so float rounding never crosses a second boundary
    mtime_ns = _to_ns(modified)
    atime_ns = path.stat().st_atime_ns
    os.utime(path, ns=(atime_ns, mtime_ns))


def human_size(num_bytes: int, precision: int = 2) -> str:
    """Convert bytes to human-readable string (e.g., '1.5 GB')."""
    num = float(num_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB", "PB"]:
        if abs(num) < 1024.0:
            return f"{num:.{precision}f} {unit}"
        num /= 1024.0
    return f"{num:.{precision}f} EB"


def human_time(seconds: float | None) -> str:
    """Convert seconds to human-readable duration (e.g., '2h 15m')."""
    if seconds is None:
        return "calculating..."
    if seconds < 0:
        return "unknown"

    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        m, s = divmod(seconds, 60)
        return f"{m}m {s}s"
    else:
        h, remainder = divmod(seconds, 3600)
        m, s = divmod(remainder, 60)
        return f"{h}h {m}m"


def format_timestamp(dt: datetime | None) -> str:
    """Format a timestamp for display, '-' when unknown."""
    if dt is None:
        return "-"
    return to_utc(dt).strftime("%Y-%m-%d %H:%M:%S")


def truncate_text(text: str, max_len: int = 40) -> str:
    """Truncate text for display, keeping the start."""
    if len(text) <= max_len:
        return text
    return text[:max_len - 3] + "..."


def get_terminal_width() -> int:
    """Get terminal width, defaulting to 80 if unavailable."""
    try:
        return shutil.get_terminal_size().columns
    except Exception:
        return 80


def is_tty() -> bool:
    """Check if stdout is a terminal (supports colors/cursor control)."""
    return sys.stdout.isatty()
