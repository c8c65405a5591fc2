"""
GDoc Backup - Mirror your Google Drive documents into a local folder.

Features:
- Rebuilds the Drive folder tree locally
- Exports documents, spreadsheets and presentations to configurable formats
- Skips files whose local timestamp already matches the remote one
- Keeps going when single documents fail, with a pass/fail summary
"""

__version__ = "1.0.0"

from .catalog import CatalogSource, InMemoryCatalog
from .config import Config, TransportOptions
from .engine import SyncEngine, needs_download
from .folders import build_folder_map
from .models import ItemType, RemoteItem, RunResult, SyncAction, SyncOutcome
from .runner import BackupRunner, run_backup
from .utils import sanitize_name

__all__ = [
    "BackupRunner",
    "CatalogSource",
    "Config",
    "InMemoryCatalog",
    "ItemType",
    "RemoteItem",
    "RunResult",
    "SyncAction",
    "SyncEngine",
    "SyncOutcome",
    "TransportOptions",
    "build_folder_map",
    "needs_download",
    "run_backup",
    "sanitize_name",
    "__version__",
]
