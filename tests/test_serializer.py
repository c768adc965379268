"""Tests for output serialization."""

import io
import json
import os
import stat

import pytest

from metaextract.extraction.models import MetadataKind, MetadataRecord
from metaextract.output import OutputError, format_record, print_metadata, save_metadata, serialize


@pytest.fixture
def records():
    return [
        MetadataRecord.create("photo.jpg", MetadataKind.EXIF, {"Make": "Canon", "Model": "EOS 5D"}),
        MetadataRecord.create("conf.yaml", MetadataKind.YAML, {"nested": {"list": [1, "two", None]}}),
        MetadataRecord.create("data.json", MetadataKind.JSON, {"ratio": 0.5, "ok": False}),
        MetadataRecord.create("meta.xml", MetadataKind.XML, {}),
    ]


class TestSerialize:
    """Tests for serialize."""

    def test_round_trip(self, records):
        parsed = json.loads(serialize(records))

        assert len(parsed) == len(records)
        for item, record in zip(parsed, records):
            assert item["Filename"] == record.filename
            assert item["Type"] == record.kind.label
            assert item["Data"] == record.fields

    def test_two_space_indentation(self, records):
        text = serialize(records[:1]).decode("utf-8")

        assert text.startswith('[\n  {\n    "Filename": "photo.jpg",')
        assert text.endswith("]\n")

    def test_empty_list(self):
        assert serialize([]) == b"[]\n"

    def test_non_ascii_kept(self):
        record = MetadataRecord.create("café.json", MetadataKind.JSON, {"city": "Zürich"})

        text = serialize([record]).decode("utf-8")

        assert "café.json" in text
        assert "Zürich" in text


class TestSaveMetadata:
    """Tests for save_metadata."""

    def test_writes_document(self, records, tmp_path):
        output = tmp_path / "out.json"

        saved = save_metadata(records, output)

        assert saved == output
        assert json.loads(output.read_text(encoding="utf-8"))[0]["Type"] == "EXIF"
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_replaces_existing_file(self, records, tmp_path):
        output = tmp_path / "out.json"
        output.write_text("old content")

        save_metadata(records[:1], output)

        assert len(json.loads(output.read_text(encoding="utf-8"))) == 1

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
    @pytest.mark.parametrize("umask,expected", [(0o022, 0o644), (0o077, 0o600)])
    def test_file_mode_follows_umask(self, records, tmp_path, umask, expected):
        output = tmp_path / "out.json"
        previous = os.umask(umask)
        try:
            save_metadata(records, output)
        finally:
            os.umask(previous)

        assert stat.S_IMODE(output.stat().st_mode) == expected

    def test_missing_directory(self, records, tmp_path):
        output = tmp_path / "missing" / "out.json"

        with pytest.raises(OutputError, match="failed to create output file"):
            save_metadata(records, output)

        assert not output.exists()

    def test_failed_write_leaves_nothing_behind(self, records, tmp_path):
        target = tmp_path / "target"
        target.mkdir()

        with pytest.raises(OutputError):
            save_metadata(records, target)

        assert target.is_dir()
        assert [p.name for p in tmp_path.iterdir()] == ["target"]


class TestFormatRecord:
    """Tests for human readable output."""

    def test_format_record(self, records):
        assert format_record(records[0]) == (
            "Metadata for photo.jpg (EXIF):\n"
            "Make: Canon\n"
            "Model: EOS 5D"
        )

    def test_print_metadata(self, records):
        stream = io.StringIO()

        print_metadata(records[3], stream=stream)

        assert stream.getvalue() == "Metadata for meta.xml (XML):\n"
