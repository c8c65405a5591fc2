"""Configuration management for GDoc Backup."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from .formats import parse_formats, unsupported_formats
from .models import ItemType

DEFAULT_DOCUMENT_FORMATS = ["odt"]
DEFAULT_SPREADSHEET_FORMATS = ["ods"]
DEFAULT_PRESENTATION_FORMATS = ["pdf"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_env_file(path: Path | None = None) -> None:
    """Load environment variables from a .env file if present.

    Supports simple ``KEY=VALUE`` lines with optional quotes.
    Existing environment variables are not overridden.
    """

    try:
        env_path = path or (Path.cwd() / ".env")
        if not env_path.exists():
            return

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
    except OSError:
        # An unreadable .env file is treated as absent
        return


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_formats(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return list(default)
    return parse_formats(value)


@dataclass
class TransportOptions:
    """Per-run network settings handed to the remote catalog source."""

    proxy_url: str = ""
    bypass_tls_verification: bool = False
    timeout: int = 300


@dataclass
class Config:
    """Application configuration."""

    # Google account
    credentials_file: str = "credentials.json"
    token_file: str = "token.json"

    # Local settings
    dest_root: str = ""

    # Sync behaviour
    force_download: bool = False
    first_parent_only: bool = True
    max_folder_depth: int = 64

    # Export formats per document type (PDF is always "pdf")
    document_formats: list[str] = field(default_factory=lambda: list(DEFAULT_DOCUMENT_FORMATS))
    spreadsheet_formats: list[str] = field(default_factory=lambda: list(DEFAULT_SPREADSHEET_FORMATS))
    presentation_formats: list[str] = field(default_factory=lambda: list(DEFAULT_PRESENTATION_FORMATS))

    # Network
    proxy_url: str = ""
    bypass_tls_verification: bool = False
    timeout: int = 300
    max_retries: int = 3
    page_size: int = 100
    chunk_size: int = 1024 * 1024  # 1MB

    # Diagnostics
    debug: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        # Explicitly-set environment variables take precedence over .env
        _load_env_file()

        return cls(
            credentials_file=os.getenv("GDOC_BACKUP_CREDENTIALS", "credentials.json"),
            token_file=os.getenv("GDOC_BACKUP_TOKEN", "token.json"),
            dest_root=os.getenv("GDOC_BACKUP_DEST", ""),
            force_download=_env_flag("GDOC_BACKUP_FORCE"),
            first_parent_only=_env_flag("GDOC_BACKUP_FIRST_PARENT_ONLY", True),
            document_formats=_env_formats("GDOC_BACKUP_DOC_FORMATS", DEFAULT_DOCUMENT_FORMATS),
            spreadsheet_formats=_env_formats("GDOC_BACKUP_SHEET_FORMATS", DEFAULT_SPREADSHEET_FORMATS),
            presentation_formats=_env_formats("GDOC_BACKUP_PRES_FORMATS", DEFAULT_PRESENTATION_FORMATS),
            proxy_url=os.getenv("GDOC_BACKUP_PROXY", ""),
            bypass_tls_verification=_env_flag("GDOC_BACKUP_INSECURE"),
            timeout=int(os.getenv("GDOC_BACKUP_TIMEOUT", "300")),
            max_retries=int(os.getenv("GDOC_BACKUP_MAX_RETRIES", "3")),
            page_size=int(os.getenv("GDOC_BACKUP_PAGE_SIZE", "100")),
            debug=_env_flag("GDOC_BACKUP_DEBUG"),
        )

    @property
    def transport(self) -> TransportOptions:
        """Network settings for this run."""
        return TransportOptions(
            proxy_url=self.proxy_url,
            bypass_tls_verification=self.bypass_tls_verification,
            timeout=self.timeout,
        )

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not self.dest_root:
            errors.append("Destination directory is required")
        else:
            dest = Path(self.dest_root)
            if dest.exists() and not dest.is_dir():
                errors.append(f"Destination exists but is not a directory: {dest}")

        requested = {
            ItemType.DOCUMENT: self.document_formats,
            ItemType.SPREADSHEET: self.spreadsheet_formats,
            ItemType.PRESENTATION: self.presentation_formats,
        }
        for item_type, formats in requested.items():
            for fmt in unsupported_formats(item_type, formats):
                errors.append(f"Format '{fmt}' cannot be exported for {item_type.value} items")

        if self.proxy_url:
            parsed = urlparse(self.proxy_url)
            if parsed.scheme not in ("http", "https") or not parsed.hostname:
                errors.append(f"Proxy must be an http(s) URL with a host: {self.proxy_url}")

        if self.page_size < 1 or self.page_size > 1000:
            errors.append("page_size must be between 1 and 1000")

        if self.timeout < 1:
            errors.append("timeout must be at least 1 second")

        if self.max_retries < 0:
            errors.append("max_retries cannot be negative")

        return errors

    def ensure_dest_exists(self) -> Path:
        """Ensure destination directory exists. Returns Path."""
        dest = Path(self.dest_root)
        dest.mkdir(parents=True, exist_ok=True)
        return dest
