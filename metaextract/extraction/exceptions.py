"""Custom exceptions for metadata extraction."""


class ExtractionError(Exception):
    """Base exception for metadata extraction errors."""
    pass


class UnsupportedTypeError(ExtractionError):
    """Raised when a file extension has no registered decoder.
    
    Attributes:
        extension: Normalized extension that could not be classified
    """
    
    def __init__(self, extension: str):
        """Initialize unsupported type error.
        
        Args:
            extension: Normalized extension (may be empty)
        """
        super().__init__(f"unsupported file type: {extension or '<none>'}")
        self.extension = extension


class FileAccessError(ExtractionError):
    """Raised when a file, temporary file or archive member cannot be read.
    
    Attributes:
        path: Path (or archive entry name) that failed
    """
    
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class DecodeError(ExtractionError):
    """Raised when a format library rejects the content of a file.
    
    Attributes:
        path: Path of the file that failed to decode
        kind: Label of the decoder that rejected it (EXIF, YAML, ...)
    """
    
    def __init__(self, message: str, path: str = None, kind: str = None):
        super().__init__(message)
        self.path = path
        self.kind = kind
    
    def __str__(self) -> str:
        """Return string representation of error."""
        message = super().__str__()
        if self.kind:
            return f"failed to decode {self.kind.lower()} data: {message}"
        return message


class ArchiveError(ExtractionError):
    """Raised when a ZIP archive cannot be opened."""
    
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
