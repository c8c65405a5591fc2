"""Remote catalog source interface."""

from collections.abc import Iterable, Iterator
from typing import Protocol

from .models import RemoteItem


class CatalogSource(Protocol):
    """What the backup core needs from a remote document service."""

    def fetch_all(self) -> list[RemoteItem]:
        """Return every remote item, following pagination internally."""
        ...

    def export_stream(self, item: RemoteItem, fmt: str) -> Iterator[bytes]:
        """Yield the bytes of ``item`` exported as ``fmt``."""
        ...

    def raw_content_stream(self, item: RemoteItem) -> Iterator[bytes]:
        """Yield the stored bytes of ``item`` (used for PDFs)."""
        ...


class InMemoryCatalog:
    """Catalog source backed by a list of items and a content mapping.

    ``contents`` maps ``(item_id, fmt)`` to bytes; raw content uses the
    format ``None``. Missing content is served as an empty file.
    """

    def __init__(
        self,
        items: Iterable[RemoteItem],
        contents: dict[tuple[str, str | None], bytes] | None = None,
    ):
        self.items = list(items)
        self.contents = contents or {}
        self.requests: list[tuple[str, str | None]] = []

    def fetch_all(self) -> list[RemoteItem]:
        return list(self.items)

    def export_stream(self, item: RemoteItem, fmt: str) -> Iterator[bytes]:
        self.requests.append((item.id, fmt))
        yield self.contents.get((item.id, fmt), b"")

    def raw_content_stream(self, item: RemoteItem) -> Iterator[bytes]:
        self.requests.append((item.id, None))
        yield self.contents.get((item.id, None), b"")
