"""Utility modules for radioRecall.

- **errors** -- Exception hierarchy rooted at RadioRecallError; fatal and
  per-segment failures are distinct subclasses so the poll loop can contain
  the latter without broad ``except Exception`` blocks.
- **logging** -- structlog setup: coloured console output in development,
  structured JSON in production.
"""

from radiorecall.utils.errors import (
    ConfigurationError,
    DownloadError,
    DuplicateRecordError,
    FingerprintError,
    ManifestError,
    MetadataParseError,
    RadioRecallError,
    RecordNotFoundError,
    StorageError,
)
from radiorecall.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "DownloadError",
    "DuplicateRecordError",
    "FingerprintError",
    "ManifestError",
    "MetadataParseError",
    "RadioRecallError",
    "RecordNotFoundError",
    "StorageError",
    "configure_logging",
    "get_logger",
]
