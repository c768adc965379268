"""Format classification, decoding and record model for metaextract."""

from metaextract.extraction.classifier import (
    EXTENSION_KINDS,
    classify,
    is_archive,
    kind_for_extension,
    normalize_extension,
)
from metaextract.extraction.decoders import (
    DecoderFactory,
    ExifDecoder,
    JsonDecoder,
    MetadataDecoder,
    XmlDecoder,
    YamlDecoder,
)
from metaextract.extraction.exceptions import (
    ArchiveError,
    DecodeError,
    ExtractionError,
    FileAccessError,
    UnsupportedTypeError,
)
from metaextract.extraction.extractor import MetadataExtractor
from metaextract.extraction.models import (
    FieldMap,
    FieldValue,
    MetadataKind,
    MetadataRecord,
)

__all__ = [
    "EXTENSION_KINDS",
    "classify",
    "is_archive",
    "kind_for_extension",
    "normalize_extension",
    "DecoderFactory",
    "ExifDecoder",
    "JsonDecoder",
    "MetadataDecoder",
    "XmlDecoder",
    "YamlDecoder",
    "ArchiveError",
    "DecodeError",
    "ExtractionError",
    "FileAccessError",
    "UnsupportedTypeError",
    "MetadataExtractor",
    "FieldMap",
    "FieldValue",
    "MetadataKind",
    "MetadataRecord",
]
