"""Data models for extracted metadata records."""

import base64
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, ClassVar, Dict, List, Type, Union

# Closed recursive value type shared by every decoder
FieldValue = Union[None, bool, int, float, str, List["FieldValue"], Dict[str, "FieldValue"]]
FieldMap = Dict[str, FieldValue]


class MetadataKind(Enum):
    """Supported metadata categories.

    The value is the label written to the ``Type`` field of the output
    document.
    """
    EXIF = "EXIF"
    YAML = "YAML"
    JSON = "JSON"
    XML = "XML"

    @property
    def label(self) -> str:
        return self.value

    def matches(self, kind_filter: str) -> bool:
        """Return True if a kind filter token selects this kind.

        Args:
            kind_filter: Filter token such as "all", "exif" or "JSON"
        """
        token = kind_filter.lower()
        return token == "all" or token == self.value.lower()


def normalize_value(value: Any) -> FieldValue:
    """Coerce a decoded value into the closed FieldValue set.

    Scalars pass through unchanged, timestamps become ISO 8601 strings,
    bytes become text, tuples and sets become lists, and mapping keys are
    stringified. Anything else falls back to its string form.

    Args:
        value: Value produced by a format library

    Returns:
        Equivalent FieldValue
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, dict):
        return normalize_fields(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return [normalize_value(item) for item in value]
    return str(value)


def normalize_fields(mapping: Dict[Any, Any]) -> FieldMap:
    """Normalize every key and value of a decoded mapping."""
    return {str(key): normalize_value(value) for key, value in mapping.items()}


@dataclass(frozen=True)
class MetadataPayload:
    """Decoded payload of a single record.

    Subclasses bind the payload to exactly one MetadataKind, so a record can
    dispatch on the payload class instead of inspecting untyped data.

    Attributes:
        fields: Normalized field mapping
    """
    kind: ClassVar[MetadataKind]
    fields: FieldMap = field(default_factory=dict)

    def to_data(self) -> FieldMap:
        """Return the field mapping as written to the output document."""
        return dict(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class ExifPayload(MetadataPayload):
    """EXIF tags keyed by field name, each value a display string."""
    kind: ClassVar[MetadataKind] = MetadataKind.EXIF


@dataclass(frozen=True)
class YamlPayload(MetadataPayload):
    kind: ClassVar[MetadataKind] = MetadataKind.YAML


@dataclass(frozen=True)
class JsonPayload(MetadataPayload):
    kind: ClassVar[MetadataKind] = MetadataKind.JSON


@dataclass(frozen=True)
class XmlPayload(MetadataPayload):
    kind: ClassVar[MetadataKind] = MetadataKind.XML


PAYLOAD_TYPES: Dict[MetadataKind, Type[MetadataPayload]] = {
    MetadataKind.EXIF: ExifPayload,
    MetadataKind.YAML: YamlPayload,
    MetadataKind.JSON: JsonPayload,
    MetadataKind.XML: XmlPayload,
}


@dataclass(frozen=True)
class MetadataRecord:
    """Metadata extracted from one file or archive entry.

    Records are immutable once created. The payload variant always agrees
    with ``kind``; constructing a record with a mismatched pair raises
    ValueError.

    Attributes:
        filename: Source path, or entry name for archive members
        kind: Metadata category
        payload: Kind-specific decoded payload

    Examples:
        >>> record = MetadataRecord.create("a.json", MetadataKind.JSON, {"k": 1})
        >>> record.to_dict()
        {'Filename': 'a.json', 'Type': 'JSON', 'Data': {'k': 1}}
    """
    filename: str
    kind: MetadataKind
    payload: MetadataPayload

    def __post_init__(self):
        if not isinstance(self.kind, MetadataKind):
            raise ValueError(f"Invalid metadata kind: {self.kind!r}")
        if self.payload.kind is not self.kind:
            raise ValueError(
                f"Payload {type(self.payload).__name__} does not match kind "
                f"{self.kind.label} for {self.filename}"
            )

    @classmethod
    def create(
        cls,
        filename: str,
        kind: MetadataKind,
        fields: Dict[Any, Any]
    ) -> "MetadataRecord":
        """Create a record, choosing the payload variant for ``kind``.

        Args:
            filename: Source filename
            kind: Metadata category
            fields: Decoded field mapping (normalized on the way in)

        Returns:
            MetadataRecord instance
        """
        payload_class = PAYLOAD_TYPES[kind]
        return cls(
            filename=filename,
            kind=kind,
            payload=payload_class(fields=normalize_fields(fields)),
        )

    @property
    def fields(self) -> FieldMap:
        return self.payload.fields

    def to_dict(self) -> Dict[str, Any]:
        """Return the record in output document form."""
        return {
            "Filename": self.filename,
            "Type": self.kind.label,
            "Data": self.payload.to_data(),
        }

    def __str__(self) -> str:
        """Return string representation of record."""
        return f"MetadataRecord({self.filename}, {self.kind.label}, {len(self.payload)} fields)"
