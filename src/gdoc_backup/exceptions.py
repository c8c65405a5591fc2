"""Exceptions raised by GDoc Backup."""


class GDocBackupError(Exception):
    """Base class for all backup errors."""


class AuthenticationError(GDocBackupError):
    """Credentials are missing, expired or rejected by the remote service."""


class CatalogError(GDocBackupError):
    """The remote catalog could not be listed."""


class UnsupportedFormatError(GDocBackupError):
    """An export format is not offered for the item's type."""

    def __init__(self, item_type: str, fmt: str):
        super().__init__(f"Format '{fmt}' is not available for {item_type} items")
        self.item_type = item_type
        self.fmt = fmt


class FolderNotFoundError(GDocBackupError):
    """A document references a parent folder missing from the folder map."""

    def __init__(self, folder_id: str):
        super().__init__(f"Parent folder not found in local tree: {folder_id}")
        self.folder_id = folder_id


class FolderTreeError(GDocBackupError):
    """The remote folder hierarchy could not be rebuilt locally."""


class BackupCancelled(GDocBackupError):
    """The host asked the run to stop."""
