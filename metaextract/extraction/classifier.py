"""Map filenames to metadata kinds by extension."""

from typing import Dict

from metaextract.extraction.exceptions import UnsupportedTypeError
from metaextract.extraction.models import MetadataKind

ARCHIVE_EXTENSION = "zip"

EXTENSION_KINDS: Dict[str, MetadataKind] = {
    "jpg": MetadataKind.EXIF,
    "jpeg": MetadataKind.EXIF,
    "png": MetadataKind.EXIF,
    "tiff": MetadataKind.EXIF,
    "bmp": MetadataKind.EXIF,
    "yaml": MetadataKind.YAML,
    "yml": MetadataKind.YAML,
    "json": MetadataKind.JSON,
    "xml": MetadataKind.XML,
}


def normalize_extension(filename: str) -> str:
    """Return the lower-cased extension of a filename without its dot.

    Only the final path element is considered, and the extension is the text
    after its last dot. Both ``/`` and ``\\`` are treated as separators so
    archive entry names and local paths behave the same.

    Args:
        filename: Path or archive entry name

    Returns:
        Extension such as "jpg", or "" if the name has none

    Examples:
        >>> normalize_extension("photos/IMG_001.JPG")
        'jpg'
        >>> normalize_extension("README")
        ''
    """
    name = str(filename).replace("\\", "/").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot < 0:
        return ""
    return name[dot + 1:].lower()


def kind_for_extension(extension: str) -> MetadataKind:
    """Resolve an extension token to its metadata kind.

    Args:
        extension: Extension with or without a leading dot, any case

    Returns:
        MetadataKind for the extension

    Raises:
        UnsupportedTypeError: If the extension is not recognized
    """
    ext = extension.lower().lstrip(".")
    try:
        return EXTENSION_KINDS[ext]
    except KeyError:
        raise UnsupportedTypeError(ext) from None


def classify(filename: str) -> MetadataKind:
    """Resolve a filename to its metadata kind.

    Raises:
        UnsupportedTypeError: If the extension is not recognized
    """
    return kind_for_extension(normalize_extension(filename))


def is_archive(filename: str) -> bool:
    """Return True if the filename names a ZIP archive."""
    return normalize_extension(filename) == ARCHIVE_EXTENSION
