"""Shared fixtures for metaextract tests."""

import logging
import zipfile
from pathlib import Path

import pytest
from PIL import ExifTags, Image


def write_jpeg_with_exif(path: Path, make: str = "Canon", model: str = "EOS 5D") -> Path:
    """Write a small JPEG carrying Make/Model/Orientation tags."""
    img = Image.new('RGB', (64, 48), color='blue')

    exif = Image.Exif()
    exif[ExifTags.Base.Make] = make
    exif[ExifTags.Base.Model] = model
    exif[ExifTags.Base.Orientation] = 1

    img.save(path, 'JPEG', exif=exif)
    return path


def write_zip(path: Path, entries: dict) -> Path:
    """Write a ZIP archive from a name -> bytes/str mapping.

    Names ending in "/" are written as directory entries.
    """
    with zipfile.ZipFile(path, 'w') as zf:
        for name, content in entries.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, content)
    return path


@pytest.fixture
def jpeg_with_exif(tmp_path):
    """JPEG image with EXIF metadata."""
    return write_jpeg_with_exif(tmp_path / "photo.jpg")


@pytest.fixture
def jpeg_bytes(tmp_path):
    """Raw bytes of a JPEG image with EXIF metadata."""
    return write_jpeg_with_exif(tmp_path / "source.jpg").read_bytes()


@pytest.fixture
def scratch_dir(tmp_path):
    """Empty directory used for temporary archive entry copies."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep config discovery away from the real home and working directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def restore_root_logger():
    """Remove handlers added to the root logger during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def make_zip(tmp_path):
    """Factory writing a ZIP archive into tmp_path."""
    def _make(name: str, entries: dict) -> Path:
        return write_zip(tmp_path / name, entries)
    return _make


@pytest.fixture
def make_jpeg(tmp_path):
    """Factory writing a JPEG with EXIF metadata into tmp_path."""
    def _make(name: str, **tags) -> Path:
        return write_jpeg_with_exif(tmp_path / name, **tags)
    return _make
