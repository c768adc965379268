"""Metadata extraction from entries inside ZIP archives."""

import logging
import shutil
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from metaextract.extraction.classifier import kind_for_extension, normalize_extension
from metaextract.extraction.exceptions import (
    ArchiveError,
    ExtractionError,
    FileAccessError,
)
from metaextract.extraction.extractor import MetadataExtractor
from metaextract.extraction.models import MetadataRecord

DEFAULT_TEMP_PREFIX = "tmpfile-"

# Errors zipfile may raise while reading a single member
_ENTRY_READ_ERRORS = (
    OSError,
    EOFError,
    RuntimeError,
    NotImplementedError,
    zipfile.BadZipFile,
    zlib.error,
)


@contextmanager
def scoped_temp_copy(
    archive: zipfile.ZipFile,
    entry: zipfile.ZipInfo,
    temp_dir: Optional[str] = None,
    prefix: str = DEFAULT_TEMP_PREFIX
) -> Iterator[Path]:
    """Copy an archive entry into a temporary file for the duration of a block.

    The temporary file is closed before it is yielded, so decoders can reopen
    it by path, and it is removed when the block exits, whether normally or
    through an exception.

    Args:
        archive: Open ZIP archive
        entry: Member to copy
        temp_dir: Directory for the temporary file (system default if None)
        prefix: Temporary filename prefix

    Yields:
        Path of the temporary copy

    Raises:
        FileAccessError: If the temporary file cannot be created or the entry
            cannot be read
    """
    ext = normalize_extension(entry.filename)
    try:
        handle = tempfile.NamedTemporaryFile(
            prefix=prefix,
            suffix=f".{ext}" if ext else "",
            dir=temp_dir,
            delete=False
        )
    except OSError as e:
        raise FileAccessError(
            f"failed to create temp file: {e}", path=entry.filename
        ) from e

    temp_path = Path(handle.name)
    try:
        with handle:
            try:
                with archive.open(entry) as source:
                    shutil.copyfileobj(source, handle)
            except _ENTRY_READ_ERRORS as e:
                raise FileAccessError(
                    f"failed to copy entry to temp file: {e}", path=entry.filename
                ) from e
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)


class ArchiveWalker:
    """Apply metadata extraction to every entry of a ZIP archive.

    Entries are processed one at a time in archive listing order. A failure
    on one entry is logged and that entry is skipped; only failing to open
    the archive itself is raised to the caller.

    Entry selection compares the kind filter against the entry's raw
    extension token, so ``"json"`` selects ``a.json`` while ``"exif"`` selects
    nothing. Direct files are filtered by kind label instead (see
    MetadataAggregator).

    Attributes:
        extractor: Extractor used for each accepted entry
        temp_dir: Directory for temporary entry copies
        temp_prefix: Prefix for temporary entry copies
        logger: Logger receiving per-entry diagnostics
    """

    def __init__(
        self,
        extractor: Optional[MetadataExtractor] = None,
        temp_dir: Optional[str] = None,
        temp_prefix: str = DEFAULT_TEMP_PREFIX,
        logger: Optional[logging.Logger] = None
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = extractor or MetadataExtractor(logger=self.logger)
        self.temp_dir = temp_dir
        self.temp_prefix = temp_prefix

    @classmethod
    def from_config(
        cls,
        config,
        extractor: Optional[MetadataExtractor] = None,
        logger: Optional[logging.Logger] = None
    ) -> "ArchiveWalker":
        """Create a walker from a ConfigManager."""
        temp_dir = config.get("archive.temp_dir")
        return cls(
            extractor=extractor or MetadataExtractor.from_config(config, logger=logger),
            temp_dir=str(Path(temp_dir).expanduser()) if temp_dir else None,
            temp_prefix=config.get("archive.temp_prefix", DEFAULT_TEMP_PREFIX),
            logger=logger
        )

    def walk(
        self,
        archive_path: Union[str, Path],
        kind_filter: str = "all"
    ) -> List[MetadataRecord]:
        """Extract metadata from the entries of a ZIP archive.

        Args:
            archive_path: Path to the ZIP archive
            kind_filter: "all", or an extension token entries must match

        Returns:
            Records for every entry that decoded successfully, in listing
            order

        Raises:
            ArchiveError: If the archive cannot be opened
        """
        self.logger.info(f"Processing ZIP archive {archive_path}")
        try:
            archive = zipfile.ZipFile(archive_path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(
                f"failed to open ZIP archive: {e}", path=str(archive_path)
            ) from e

        records = []
        with archive:
            for entry in archive.infolist():
                record = self._process_entry(archive, entry, kind_filter)
                if record is not None:
                    records.append(record)

        self.logger.info(f"Extracted {len(records)} record(s) from {archive_path}")
        return records

    def _process_entry(
        self,
        archive: zipfile.ZipFile,
        entry: zipfile.ZipInfo,
        kind_filter: str
    ) -> Optional[MetadataRecord]:
        if entry.is_dir():
            return None

        ext = normalize_extension(entry.filename)
        if kind_filter != "all" and kind_filter != ext:
            self.logger.debug(f"Skipping {entry.filename} in ZIP: does not match type {kind_filter}")
            return None

        try:
            kind = kind_for_extension(ext)
        except ExtractionError as e:
            self.logger.info(f"Skipping {entry.filename} in ZIP: {e}")
            return None

        try:
            with scoped_temp_copy(archive, entry, self.temp_dir, self.temp_prefix) as temp_path:
                return self.extractor.extract(temp_path, kind=kind, filename=entry.filename)
        except ExtractionError as e:
            self.logger.error(f"Error extracting metadata from {entry.filename} in ZIP: {e}")
            return None
