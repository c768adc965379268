"""ZIP archive traversal for metaextract."""

from metaextract.archive.walker import ArchiveWalker, scoped_temp_copy

__all__ = ["ArchiveWalker", "scoped_temp_copy"]
