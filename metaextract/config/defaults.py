"""Default configuration values for metaextract."""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # Extraction Configuration
    "extraction": {
        "type": "all",  # exif, yaml, json, xml or all
        "exif_engine": "pillow",  # pillow or exifread
    },
    
    # Archive Configuration
    "archive": {
        "temp_dir": None,  # None uses the system temp directory
        "temp_prefix": "tmpfile-",
    },
    
    # Output Configuration
    "output": {
        "file": "",
        "indent": 2,
    },
    
    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": "app.log",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Allowed values for enumerated fields
FIELD_CHOICES = {
    "extraction.type": ("exif", "yaml", "json", "xml", "all"),
    "extraction.exif_engine": ("pillow", "exifread"),
    "logging.level": ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
}

# Fields that must hold a string when set
STRING_FIELDS = (
    "archive.temp_dir",
    "archive.temp_prefix",
    "output.file",
    "logging.file",
    "logging.format",
)
