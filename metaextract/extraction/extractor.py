"""Single-file extraction: classify, decode, and build a record."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from metaextract.extraction.classifier import classify
from metaextract.extraction.decoders import DecoderFactory, MetadataDecoder
from metaextract.extraction.models import MetadataKind, MetadataRecord


class MetadataExtractor:
    """Extract a MetadataRecord from a single file.

    Decoders are created lazily through DecoderFactory and reused for the
    lifetime of the extractor.

    Attributes:
        decoder_options: Per-kind keyword arguments passed to the decoders
        logger: Logger receiving extraction diagnostics
    """

    def __init__(
        self,
        decoder_options: Optional[Dict[MetadataKind, Dict[str, Any]]] = None,
        logger: Optional[logging.Logger] = None
    ) -> None:
        """Initialize metadata extractor.

        Args:
            decoder_options: Per-kind decoder options, e.g.
                ``{MetadataKind.EXIF: {"engine": "exifread"}}``
            logger: Logger to report to (defaults to the module logger)
        """
        self.decoder_options = decoder_options or {}
        self.logger = logger or logging.getLogger(__name__)
        self._decoders: Dict[MetadataKind, MetadataDecoder] = {}

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> "MetadataExtractor":
        """Create an extractor from a ConfigManager."""
        engine = config.get("extraction.exif_engine", "pillow")
        return cls(
            decoder_options={MetadataKind.EXIF: {"engine": engine}},
            logger=logger
        )

    def get_decoder(self, kind: MetadataKind) -> MetadataDecoder:
        """Return the decoder for a kind, creating it on first use."""
        if kind not in self._decoders:
            options = self.decoder_options.get(kind, {})
            self._decoders[kind] = DecoderFactory.create(kind, **options)
        return self._decoders[kind]

    def extract(
        self,
        path: Union[str, Path],
        kind: Optional[MetadataKind] = None,
        filename: Optional[str] = None
    ) -> MetadataRecord:
        """Extract metadata from a file.

        Args:
            path: File to decode
            kind: Metadata kind; classified from ``filename`` (or ``path``)
                when not given
            filename: Name recorded in the result (defaults to ``path``)

        Returns:
            MetadataRecord for the file

        Raises:
            UnsupportedTypeError: If the extension is not recognized
            FileAccessError: If the file cannot be read
            DecodeError: If the content cannot be decoded
        """
        filename = filename if filename is not None else str(path)
        if kind is None:
            kind = classify(filename)

        self.logger.info(f"Extracting metadata from {filename}")
        fields = self.get_decoder(kind).decode(path)
        return MetadataRecord.create(filename, kind, fields)
