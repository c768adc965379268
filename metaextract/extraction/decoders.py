"""Format decoders that turn a file into a field mapping."""

import io
import json
import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Tuple, Type, Union

import exifread
import yaml
from PIL import ExifTags, Image

from metaextract.extraction.exceptions import DecodeError, ExtractionError, FileAccessError
from metaextract.extraction.models import FieldMap, MetadataKind, normalize_fields

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

EXIF_ENGINES = ("pillow", "exifread")

_PILLOW_POINTER_TAGS = {
    int(ExifTags.IFD.Exif),
    int(ExifTags.IFD.GPSInfo),
    int(ExifTags.IFD.Interop),
}


class MetadataDecoder(ABC):
    """Abstract base class for format decoders.

    Every decoder reads the complete file into memory before parsing, since
    none of the underlying libraries are driven incrementally. Subclasses
    implement ``decode_bytes``.

    Attributes:
        kind: Metadata kind produced by the decoder
    """

    kind: MetadataKind

    def decode(self, path: PathLike) -> FieldMap:
        """Decode a file into a field mapping.

        Args:
            path: Path to the file

        Returns:
            Field mapping decoded from the file

        Raises:
            FileAccessError: If the file cannot be read
            DecodeError: If the content is rejected by the format library
                or cannot be converted (e.g. nesting too deep to decode)
        """
        path = Path(path)
        logger.info(f"Extracting {self.kind.label} data from {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"failed to open file: {e}", path=str(path)) from e

        try:
            return self.decode_bytes(data, source=str(path))
        except ExtractionError:
            raise
        except RecursionError as e:
            raise self._error("document is nested too deeply", str(path)) from e
        except Exception as e:
            raise self._error(str(e) or type(e).__name__, str(path)) from e

    @abstractmethod
    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> FieldMap:
        """Decode complete file content into a field mapping.

        Args:
            data: Entire file content
            source: Name used in error messages

        Returns:
            Field mapping

        Raises:
            DecodeError: If the content is rejected by the format library
        """
        pass

    def _error(self, message: str, source: str) -> DecodeError:
        return DecodeError(message, path=source, kind=self.kind.label)


def collect_fields(tags: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Build a field mapping from visited (name, display value) pairs.

    When a name is visited more than once the later value replaces the
    earlier one.
    """
    fields: Dict[str, str] = {}
    for name, value in tags:
        fields[name] = value
    return fields


def _display_value(value: Any) -> str:
    """Render a Pillow EXIF value as a display string."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00").strip()
    if isinstance(value, tuple):
        return ", ".join(_display_value(item) for item in value)
    return str(value)


class ExifDecoder(MetadataDecoder):
    """Decode the EXIF tag table of an image container.

    Two engines are available:

    - ``pillow`` opens the image with Pillow and visits IFD0 followed by the
      Exif, GPS and Interop sub-IFDs, naming tags through PIL.ExifTags.
    - ``exifread`` hands the bytes to exifread and uses its printable tag
      values ("Image Make", "EXIF DateTimeOriginal", ...).

    An image with no EXIF tags at all is reported as a DecodeError.

    Examples:
        >>> decoder = ExifDecoder(engine="pillow")
        >>> decoder.decode("photo.jpg")["Make"]
        'Canon'
    """

    kind = MetadataKind.EXIF

    def __init__(self, engine: str = "pillow") -> None:
        engine = engine.lower().strip()
        if engine not in EXIF_ENGINES:
            raise ExtractionError(
                f"Unsupported EXIF engine: {engine}. "
                f"Available engines: {', '.join(EXIF_ENGINES)}"
            )
        self.engine = engine

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> FieldMap:
        try:
            fields = collect_fields(self.iter_tags(data))
        except DecodeError:
            raise
        except Exception as e:
            raise self._error(str(e) or type(e).__name__, source) from e

        if not fields:
            raise self._error("no EXIF data found", source)

        logger.debug(f"Decoded {len(fields)} EXIF fields from {source} ({self.engine})")
        return fields

    def iter_tags(self, data: bytes) -> Iterator[Tuple[str, str]]:
        """Yield (field name, display value) for every tag present."""
        if self.engine == "exifread":
            return self._iter_exifread_tags(data)
        return self._iter_pillow_tags(data)

    @staticmethod
    def _iter_pillow_tags(data: bytes) -> Iterator[Tuple[str, str]]:
        with Image.open(io.BytesIO(data)) as img:
            exif = img.getexif()
            visited = []

            for tag_id, value in exif.items():
                if tag_id in _PILLOW_POINTER_TAGS:
                    continue
                visited.append((ExifTags.TAGS.get(tag_id, str(tag_id)), _display_value(value)))

            exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
            gps_ifd = exif.get_ifd(ExifTags.IFD.GPSInfo)
            # Interop is reachable only through the Exif sub-IFD
            interop_ifd = (
                exif.get_ifd(ExifTags.IFD.Interop) if ExifTags.IFD.Interop in exif_ifd else {}
            )

            for ifd, names in (
                (exif_ifd, ExifTags.TAGS),
                (gps_ifd, ExifTags.GPSTAGS),
                (interop_ifd, ExifTags.TAGS),
            ):
                for tag_id, value in ifd.items():
                    if tag_id in _PILLOW_POINTER_TAGS:
                        continue
                    visited.append((names.get(tag_id, str(tag_id)), _display_value(value)))

        return iter(visited)

    @staticmethod
    def _iter_exifread_tags(data: bytes) -> Iterator[Tuple[str, str]]:
        tags = exifread.process_file(
            io.BytesIO(data),
            details=False,
            extract_thumbnail=False,
        )
        for name, tag in tags.items():
            yield name, str(tag)


class YamlDecoder(MetadataDecoder):
    """Decode the first document of a YAML stream into a mapping.

    An empty stream or a null document decodes to an empty mapping.
    """

    kind = MetadataKind.YAML

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> FieldMap:
        try:
            document = next(yaml.safe_load_all(data), None)
        except yaml.YAMLError as e:
            raise self._error(str(e), source) from e

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise self._error(
                f"expected a mapping at document root, got {type(document).__name__}",
                source
            )

        return normalize_fields(document)


class JsonDecoder(MetadataDecoder):
    """Decode a JSON object into a mapping. A ``null`` document is empty."""

    kind = MetadataKind.JSON

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> FieldMap:
        try:
            document = json.loads(data)
        except ValueError as e:
            raise self._error(str(e), source) from e

        if document is None:
            return {}
        if not isinstance(document, dict):
            raise self._error(
                f"expected an object at document root, got {type(document).__name__}",
                source
            )

        return normalize_fields(document)


def _element_to_value(element: ET.Element, as_mapping: bool = False) -> Any:
    """Convert an XML element into a FieldValue.

    Attributes become ``@name`` keys and child elements become keys named
    after their tag; repeated tags collect into a list. Text of an element
    that also has attributes or children is stored under ``#text``. A leaf
    element maps to its stripped text, or None when empty.

    Args:
        element: Element to convert
        as_mapping: Always return a mapping, even for leaf elements
    """
    children = list(element)
    text = (element.text or "").strip()

    if not children and not element.attrib and not as_mapping:
        return text or None

    value: Dict[str, Any] = {f"@{name}": attr for name, attr in element.attrib.items()}
    repeated = set()
    for child in children:
        child_value = _element_to_value(child)
        if child.tag not in value:
            value[child.tag] = child_value
        elif child.tag in repeated:
            value[child.tag].append(child_value)
        else:
            value[child.tag] = [value[child.tag], child_value]
            repeated.add(child.tag)

    if text:
        value["#text"] = text

    return value


class XmlDecoder(MetadataDecoder):
    """Decode the children of an XML root element into a mapping.

    The root tag itself is not part of the result, so ``<metadata/>``
    decodes to an empty mapping.
    """

    kind = MetadataKind.XML

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> FieldMap:
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise self._error(str(e), source) from e

        return normalize_fields(_element_to_value(root, as_mapping=True))


class DecoderFactory:
    """Factory for creating decoder instances by metadata kind.

    The registry maps each kind to its decoder class and can be extended
    with ``register_decoder``.
    """

    _decoder_registry: Dict[MetadataKind, Type[MetadataDecoder]] = {
        MetadataKind.EXIF: ExifDecoder,
        MetadataKind.YAML: YamlDecoder,
        MetadataKind.JSON: JsonDecoder,
        MetadataKind.XML: XmlDecoder,
    }

    @classmethod
    def create(cls, kind: MetadataKind, **kwargs) -> MetadataDecoder:
        """Create a decoder for a metadata kind.

        Args:
            kind: Metadata kind to decode
            **kwargs: Decoder-specific options (e.g. ``engine`` for EXIF)

        Returns:
            MetadataDecoder instance

        Raises:
            ExtractionError: If no decoder is registered for the kind
        """
        if kind not in cls._decoder_registry:
            available = ", ".join(k.label for k in cls._decoder_registry)
            raise ExtractionError(
                f"No decoder registered for {kind}. Available kinds: {available}"
            )

        decoder_class = cls._decoder_registry[kind]
        logger.debug(f"Creating {decoder_class.__name__} for {kind.label}")
        return decoder_class(**kwargs)

    @classmethod
    def register_decoder(cls, kind: MetadataKind, decoder_class: Type[MetadataDecoder]) -> None:
        """Register a decoder class for a metadata kind.

        Args:
            kind: Metadata kind handled by the decoder
            decoder_class: MetadataDecoder subclass to register
        """
        if not issubclass(decoder_class, MetadataDecoder):
            raise ExtractionError(
                f"Decoder class must be a subclass of MetadataDecoder: {decoder_class}"
            )

        cls._decoder_registry[kind] = decoder_class
        logger.debug(f"Registered decoder: {kind.label} -> {decoder_class.__name__}")

    @classmethod
    def list_kinds(cls) -> list:
        """List all metadata kinds with a registered decoder."""
        return list(cls._decoder_registry.keys())
