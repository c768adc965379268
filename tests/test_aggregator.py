"""Tests for metadata aggregation across files and archives."""

import logging

import pytest

from metaextract.extraction.models import MetadataKind
from metaextract.processing import MetadataAggregator


@pytest.fixture
def documents(tmp_path):
    """One valid document of each text format."""
    json_file = tmp_path / "data.json"
    json_file.write_text('{"id": 7}')
    yaml_file = tmp_path / "settings.yml"
    yaml_file.write_text("mode: fast\n")
    xml_file = tmp_path / "meta.xml"
    xml_file.write_text("<meta><author>ann</author></meta>")
    return json_file, yaml_file, xml_file


class TestMetadataAggregator:
    """Tests for MetadataAggregator.collect."""

    def test_collects_in_input_order(self, documents, jpeg_with_exif, make_zip, scratch_dir):
        json_file, yaml_file, xml_file = documents
        archive = make_zip("bundle.zip", {"inner.json": '{"inner": true}'})

        aggregator = MetadataAggregator()
        aggregator.walker.temp_dir = str(scratch_dir)
        result = aggregator.collect([xml_file, archive, jpeg_with_exif, json_file, yaml_file])

        assert [r.filename for r in result.records] == [
            str(xml_file), "inner.json", str(jpeg_with_exif), str(json_file), str(yaml_file)
        ]
        assert result.total_paths == 5
        assert result.archives == 1
        assert result.errors == 0

    def test_missing_paths_are_skipped(self, documents, tmp_path, caplog):
        json_file = documents[0]
        missing = tmp_path / "nope.json"

        with caplog.at_level(logging.WARNING):
            result = MetadataAggregator().collect([missing, json_file])

        assert [r.filename for r in result.records] == [str(json_file)]
        assert result.missing == 1
        assert f"File does not exist: {missing}" in caplog.text

    def test_direct_files_filtered_by_kind_name(self, documents, jpeg_with_exif):
        json_file, yaml_file, xml_file = documents

        result = MetadataAggregator(kind_filter="yaml").collect(
            [json_file, yaml_file, xml_file, jpeg_with_exif]
        )

        assert [r.filename for r in result.records] == [str(yaml_file)]
        assert result.filtered == 3

    def test_direct_filter_is_case_insensitive(self, documents, jpeg_with_exif):
        result = MetadataAggregator(kind_filter="EXIF").collect([*documents, jpeg_with_exif])

        assert [r.kind for r in result.records] == [MetadataKind.EXIF]

    def test_archive_records_use_walker_filter(self, make_zip, scratch_dir):
        archive = make_zip("bundle.zip", {"a.yml": "k: v\n", "b.yaml": "k: w\n"})

        aggregator = MetadataAggregator(kind_filter="yaml")
        aggregator.walker.temp_dir = str(scratch_dir)
        result = aggregator.collect([archive])

        # Only the entry whose extension token equals the filter is kept
        assert [r.filename for r in result.records] == ["b.yaml"]

    def test_failures_are_isolated(self, documents, tmp_path, caplog):
        json_file = documents[0]
        broken = tmp_path / "broken.json"
        broken.write_text('{"a": ')
        unsupported = tmp_path / "notes.txt"
        unsupported.write_text("hello")
        bad_archive = tmp_path / "bad.zip"
        bad_archive.write_bytes(b"nope")

        with caplog.at_level(logging.ERROR):
            result = MetadataAggregator().collect([broken, unsupported, bad_archive, json_file])

        assert [r.filename for r in result.records] == [str(json_file)]
        assert result.errors == 3
        assert "broken.json" in caplog.text
        assert "unsupported file type: txt" in caplog.text
        assert "Error processing ZIP file" in caplog.text

    def test_deeply_nested_file_is_isolated(self, documents, tmp_path):
        json_file = documents[0]
        deep = tmp_path / "deep.json"
        deep.write_text('{"a": ' + "[" * 100000 + "]" * 100000 + "}")

        result = MetadataAggregator().collect([deep, json_file])

        assert [r.filename for r in result.records] == [str(json_file)]
        assert result.errors == 1

    def test_on_record_called_for_direct_files_only(self, documents, make_zip, scratch_dir):
        json_file = documents[0]
        archive = make_zip("bundle.zip", {"inner.json": "{}"})
        seen = []

        aggregator = MetadataAggregator(on_record=seen.append)
        aggregator.walker.temp_dir = str(scratch_dir)
        result = aggregator.collect([archive, json_file])

        assert len(result.records) == 2
        assert [r.filename for r in seen] == [str(json_file)]

    def test_empty_input(self):
        result = MetadataAggregator().collect([])

        assert result.records == []
        assert result.total_paths == 0
