"""Aggregate metadata records from files and archives."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from metaextract.archive import ArchiveWalker
from metaextract.extraction.classifier import is_archive
from metaextract.extraction.exceptions import ArchiveError, ExtractionError
from metaextract.extraction.extractor import MetadataExtractor
from metaextract.extraction.models import MetadataRecord

KIND_FILTERS = ("exif", "yaml", "json", "xml", "all")


@dataclass
class AggregationResult:
    """Records and statistics for one aggregation run.

    Attributes:
        records: Records in the order they were collected
        total_paths: Number of input paths
        missing: Number of paths that did not exist
        archives: Number of archives processed
        filtered: Number of direct-file records dropped by the kind filter
        errors: Number of paths that failed to extract
    """
    records: List[MetadataRecord] = field(default_factory=list)
    total_paths: int = 0
    missing: int = 0
    archives: int = 0
    filtered: int = 0
    errors: int = 0


class MetadataAggregator:
    """Collect metadata records from a list of paths.

    Paths are processed sequentially in input order. ZIP archives are
    delegated to an ArchiveWalker and their records appended as returned;
    direct files are extracted and kept only if the kind filter is "all" or
    names the record's kind, case-insensitively. Missing paths and per-path
    failures are logged and skipped.

    Attributes:
        kind_filter: Filter token (exif, yaml, json, xml or all)
        extractor: Extractor for direct files
        walker: Walker for ZIP archives
        logger: Logger receiving per-path diagnostics
    """

    def __init__(
        self,
        kind_filter: str = "all",
        extractor: Optional[MetadataExtractor] = None,
        walker: Optional[ArchiveWalker] = None,
        logger: Optional[logging.Logger] = None,
        on_record: Optional[Callable[[MetadataRecord], None]] = None
    ) -> None:
        """Initialize aggregator.

        Args:
            kind_filter: Filter token applied to the collected records
            extractor: Extractor for direct files (created if not provided)
            walker: Archive walker (created if not provided)
            logger: Logger to report to (defaults to the module logger)
            on_record: Called with each direct-file record that passes the
                filter
        """
        self.kind_filter = kind_filter
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = extractor or MetadataExtractor(logger=self.logger)
        self.walker = walker or ArchiveWalker(extractor=self.extractor, logger=self.logger)
        self.on_record = on_record

        self.logger.debug(f"MetadataAggregator initialized: type={kind_filter}")

    def collect(self, paths: Iterable[Union[str, Path]]) -> AggregationResult:
        """Extract and merge metadata from every path.

        Args:
            paths: Files or ZIP archives to process

        Returns:
            AggregationResult with the collected records
        """
        result = AggregationResult()

        for path in paths:
            result.total_paths += 1
            path_str = str(path)

            if not Path(path).exists():
                self.logger.warning(f"File does not exist: {path_str}")
                result.missing += 1
                continue

            if is_archive(path_str):
                self._collect_archive(path_str, result)
            else:
                self._collect_file(path_str, result)

        self.logger.info(
            f"Collected {len(result.records)} record(s) from {result.total_paths} path(s) "
            f"({result.missing} missing, {result.errors} failed)"
        )
        return result

    def _collect_archive(self, path: str, result: AggregationResult) -> None:
        try:
            records = self.walker.walk(path, self.kind_filter)
        except ArchiveError as e:
            self.logger.error(f"Error processing ZIP file {path}: {e}")
            result.errors += 1
            return

        result.archives += 1
        result.records.extend(records)

    def _collect_file(self, path: str, result: AggregationResult) -> None:
        try:
            record = self.extractor.extract(path)
        except ExtractionError as e:
            self.logger.error(f"Error processing file {path}: {e}")
            result.errors += 1
            return

        if not record.kind.matches(self.kind_filter):
            self.logger.debug(f"Skipping {path}: {record.kind.label} does not match type {self.kind_filter}")
            result.filtered += 1
            return

        result.records.append(record)
        if self.on_record:
            self.on_record(record)
