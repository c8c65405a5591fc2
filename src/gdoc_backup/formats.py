"""Item type classification and export format tables."""

from collections.abc import Sequence

from .exceptions import UnsupportedFormatError
from .models import ItemType

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
PDF_MIME_TYPE = "application/pdf"

# PDFs are downloaded as-is, so they only ever have this format
PDF_FORMAT = "pdf"

MIME_TYPE_TO_ITEM_TYPE: dict[str, ItemType] = {
    "application/vnd.google-apps.document": ItemType.DOCUMENT,
    "application/vnd.google-apps.spreadsheet": ItemType.SPREADSHEET,
    "application/vnd.google-apps.presentation": ItemType.PRESENTATION,
    PDF_MIME_TYPE: ItemType.PDF,
    FOLDER_MIME_TYPE: ItemType.FOLDER,
}

EXPORT_MIME_TYPES: dict[ItemType, dict[str, str]] = {
    ItemType.DOCUMENT: {
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "odt": "application/vnd.oasis.opendocument.text",
        "rtf": "application/rtf",
        "pdf": "application/pdf",
        "txt": "text/plain",
        "html": "text/html",
        "zip": "application/zip",
        "epub": "application/epub+zip",
        "md": "text/markdown",
    },
    ItemType.SPREADSHEET: {
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "ods": "application/x-vnd.oasis.opendocument.spreadsheet",
        "pdf": "application/pdf",
        "csv": "text/csv",
        "tsv": "text/tab-separated-values",
        "zip": "application/zip",
    },
    ItemType.PRESENTATION: {
        "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "odp": "application/vnd.oasis.opendocument.presentation",
        "pdf": "application/pdf",
        "txt": "text/plain",
    },
}


def classify_mime_type(mime_type: str) -> ItemType:
    """Map a remote mime type to an item type; unknown types are OTHER."""
    return MIME_TYPE_TO_ITEM_TYPE.get(mime_type, ItemType.OTHER)


def parse_formats(format_string: str) -> list[str]:
    """
    Parse a comma-separated format list.

    Args:
        format_string: String like "docx,pdf" or ".DOCX, .pdf"

    Returns:
        Normalized formats (lowercase, no dots) in the given order,
        without duplicates
    """
    if not format_string:
        return []

    formats: list[str] = []
    for fmt in format_string.split(","):
        fmt = fmt.strip().lower().lstrip(".")
        if fmt and fmt not in formats:
            formats.append(fmt)

    return formats


def formats_for(
    item_type: ItemType,
    document_formats: Sequence[str],
    spreadsheet_formats: Sequence[str],
    presentation_formats: Sequence[str],
) -> list[str]:
    """
    Resolve the export formats requested for an item type.

    PDF items always get the single fixed PDF format. Folders and
    unsupported types get an empty list.
    """
    if item_type is ItemType.DOCUMENT:
        return list(document_formats)
    if item_type is ItemType.SPREADSHEET:
        return list(spreadsheet_formats)
    if item_type is ItemType.PRESENTATION:
        return list(presentation_formats)
    if item_type is ItemType.PDF:
        return [PDF_FORMAT]
    return []


def export_mime_type(item_type: ItemType, fmt: str) -> str:
    """Get the export mime type for a format, raising if not offered."""
    try:
        return EXPORT_MIME_TYPES[item_type][fmt]
    except KeyError:
        raise UnsupportedFormatError(item_type.value, fmt) from None


def unsupported_formats(item_type: ItemType, formats: Sequence[str]) -> list[str]:
    """Return the formats in ``formats`` the service cannot export for ``item_type``."""
    offered = EXPORT_MIME_TYPES.get(item_type, {})
    return [fmt for fmt in formats if fmt not in offered]
