"""Serialize metadata records to the output document."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from metaextract.extraction.models import MetadataRecord
from metaextract.output.exceptions import OutputError

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


def _default_file_mode() -> int:
    """Return the mode a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def serialize(records: Iterable[MetadataRecord], indent: int = DEFAULT_INDENT) -> bytes:
    """Serialize records into a JSON array document.

    Each element is ``{"Filename", "Type", "Data"}``. Records keep their
    input order; map keys keep their decoded order.

    Args:
        records: Records to serialize
        indent: Indentation width

    Returns:
        UTF-8 encoded document ending with a newline

    Raises:
        OutputError: If a record cannot be encoded
    """
    try:
        document = json.dumps(
            [record.to_dict() for record in records],
            indent=indent,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise OutputError(f"failed to encode metadata: {e}") from e

    return (document + "\n").encode("utf-8")


def save_metadata(
    records: Iterable[MetadataRecord],
    output_path: Union[str, Path],
    indent: int = DEFAULT_INDENT
) -> Path:
    """Write records to a JSON file, replacing it atomically.

    The document is written to a temporary file next to the destination and
    moved into place only once fully written, so a failure never leaves a
    partial document behind.

    Args:
        records: Records to save
        output_path: Destination file
        indent: Indentation width

    Returns:
        Path of the written file

    Raises:
        OutputError: If the document cannot be encoded or written
    """
    path = Path(output_path).expanduser()
    logger.info(f"Saving metadata to {path}")
    data = serialize(records, indent=indent)

    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False
        ) as handle:
            temp_name = handle.name
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(temp_name, _default_file_mode())
        os.replace(temp_name, path)
    except OSError as e:
        if temp_name:
            Path(temp_name).unlink(missing_ok=True)
        raise OutputError(f"failed to create output file: {e}", path=str(path)) from e

    return path


def format_record(record: MetadataRecord) -> str:
    """Format a record as human readable text.

    Examples:
        >>> print(format_record(record))
        Metadata for config.yaml (YAML):
        name: demo
    """
    lines = [f"Metadata for {record.filename} ({record.kind.label}):"]
    for key, value in record.fields.items():
        lines.append(f"{key}: {value}")
    return "\n".join(lines)


def print_metadata(record: MetadataRecord, stream: Optional[TextIO] = None) -> None:
    """Print a record to stdout (or ``stream``)."""
    print(format_record(record), file=stream)
