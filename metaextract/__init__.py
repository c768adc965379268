"""metaextract - metadata extraction for images, documents and ZIP archives.

Extracts EXIF tags from images and key-value metadata from YAML, JSON and
XML documents, including files packed inside ZIP archives, and combines the
results into a single JSON document.
"""

from metaextract._version import __version__, __version_info__
from metaextract.config import ConfigManager
from metaextract.extraction import MetadataExtractor, MetadataKind, MetadataRecord
from metaextract.archive import ArchiveWalker
from metaextract.processing import MetadataAggregator

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "MetadataExtractor",
    "MetadataKind",
    "MetadataRecord",
    "ArchiveWalker",
    "MetadataAggregator",
]
