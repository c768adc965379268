"""Custom exceptions for output operations."""


class OutputError(Exception):
    """Raised when the output document cannot be serialized or written.
    
    Attributes:
        path: Destination path (if any)
    """
    
    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
