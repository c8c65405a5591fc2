"""Google Drive catalog source."""

import io
import logging
from collections.abc import Iterator
from typing import Any

from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload

from .auth import build_http, load_credentials
from .config import Config
from .exceptions import AuthenticationError, CatalogError
from .formats import classify_mime_type, export_mime_type
from .models import RemoteItem
from .utils import parse_remote_time

logger = logging.getLogger(__name__)

FILE_FIELDS = "nextPageToken, files(id, name, mimeType, modifiedTime, parents)"
AUTH_STATUSES = {401, 403}


class GoogleDriveSource:
    """Lists and exports documents through the Drive v3 API."""

    def __init__(
        self,
        service: Any,
        page_size: int = 100,
        chunk_size: int = 1024 * 1024,
        num_retries: int = 3,
    ):
        self.service = service
        self.page_size = page_size
        self.chunk_size = chunk_size
        self.num_retries = num_retries

    @classmethod
    def from_config(cls, config: Config) -> "GoogleDriveSource":
        """Authorize with the stored token and build the Drive client."""
        http = build_http(config.transport)
        creds = load_credentials(config.token_file, http)
        authed_http = AuthorizedHttp(creds, http=http)
        service = build("drive", "v3", http=authed_http, cache_discovery=False)
        return cls(
            service,
            page_size=config.page_size,
            chunk_size=config.chunk_size,
            num_retries=config.max_retries,
        )

    def fetch_all(self) -> list[RemoteItem]:
        """
        List every non-trashed file and folder.

        Items directly under "My Drive" are reported with no parents.

        Raises:
            AuthenticationError: If the service rejects the credentials
            CatalogError: On any other API failure
        """
        try:
            root_id = self._root_id()
            items = list(self._iter_items(root_id))
        except HttpError as e:
            if e.resp.status in AUTH_STATUSES:
                raise AuthenticationError(f"Drive rejected the request: {e}") from e
            raise CatalogError(f"Failed to list Drive files: {e}") from e

        logger.info("Fetched %d items from Drive", len(items))
        return items

    def export_stream(self, item: RemoteItem, fmt: str) -> Iterator[bytes]:
        mime_type = export_mime_type(item.item_type, fmt)
        request = self.service.files().export_media(fileId=item.id, mimeType=mime_type)
        yield from self._stream(request)

    def raw_content_stream(self, item: RemoteItem) -> Iterator[bytes]:
        request = self.service.files().get_media(fileId=item.id)
        yield from self._stream(request)

    def _root_id(self) -> str:
        root = self.service.files().get(fileId="root", fields="id").execute(
            num_retries=self.num_retries
        )
        return root["id"]

    def _iter_items(self, root_id: str) -> Iterator[RemoteItem]:
        page_token = None
        while True:
            response = self.service.files().list(
                q="trashed = false",
                spaces="drive",
                pageSize=self.page_size,
                fields=FILE_FIELDS,
                pageToken=page_token,
            ).execute(num_retries=self.num_retries)

            for data in response.get("files", []):
                yield self._to_item(data, root_id)

            page_token = response.get("nextPageToken")
            if not page_token:
                break

    @staticmethod
    def _to_item(data: dict[str, Any], root_id: str) -> RemoteItem:
        mime_type = data.get("mimeType", "")
        parents = tuple(p for p in data.get("parents", []) if p != root_id)
        return RemoteItem(
            id=data["id"],
            title=data.get("name", ""),
            item_type=classify_mime_type(mime_type),
            modified=parse_remote_time(data["modifiedTime"]),
            parent_ids=parents,
            mime_type=mime_type,
        )

    def _stream(self, request: Any) -> Iterator[bytes]:
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request, chunksize=self.chunk_size)
        done = False

        while not done:
            status, done = downloader.next_chunk(num_retries=self.num_retries)
            if status:
                logger.debug("Download progress: %d%%", int(status.progress() * 100))

            data = buffer.getvalue()
            if data:
                yield data
            buffer.seek(0)
            buffer.truncate()
