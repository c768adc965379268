"""Serialization and display of metadata records."""

from metaextract.output.exceptions import OutputError
from metaextract.output.serializer import (
    format_record,
    print_metadata,
    save_metadata,
    serialize,
)

__all__ = [
    "OutputError",
    "format_record",
    "print_metadata",
    "save_metadata",
    "serialize",
]
