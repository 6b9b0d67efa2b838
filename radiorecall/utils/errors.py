"""Custom exception hierarchy for radioRecall.

All application exceptions inherit from :class:`RadioRecallError`, which
carries an optional ``provider_name`` so log lines can identify which
collaborator (e.g. "emysound", "sqlite_audio", "http") caused the failure.

The hierarchy follows the recorder's error taxonomy:

    RadioRecallError  (base)
    +-- ConfigurationError    (fatal: bad stream URL / settings)
    +-- ManifestError         (fatal: playlist fetch did not succeed)
    +-- MetadataParseError    (per-segment: title text does not match)
    +-- DownloadError         (per-segment: segment fetch failed)
    +-- FingerprintError      (per-segment: fingerprint service failed)
    +-- StorageError          (per-segment, fatal only during initialize)
        +-- DuplicateRecordError
        +-- RecordNotFoundError

Fatal errors propagate out of the poll loop and end the process.  All
per-segment errors are caught by the dedup engine or the poll loop, logged,
and never affect other segments.
"""


class RadioRecallError(Exception):
    """Base exception for all radioRecall errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[emysound] Query failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Fatal errors
# ---------------------------------------------------------------------------

class ConfigurationError(RadioRecallError):
    """Raised when the stream URL or the settings are invalid at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ManifestError(RadioRecallError):
    """Raised when the stream playlist cannot be fetched.

    Carries the HTTP status and the response body (if any) as diagnostic
    context.  The poll loop does not catch this error.
    """

    def __init__(
        self,
        message: str = "Failed to get playlist",
        provider_name: str | None = None,
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        self._status_code = status_code
        self._body = body
        super().__init__(message=message, provider_name=provider_name)

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def body(self) -> str:
        return self._body


# ---------------------------------------------------------------------------
# Per-segment errors
# ---------------------------------------------------------------------------

class MetadataParseError(RadioRecallError):
    """Raised when a segment title does not match the metadata grammar."""

    def __init__(
        self,
        message: str = "Failed to parse segment metadata",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DownloadError(RadioRecallError):
    """Raised on a non-success status, transport failure or missing content type."""

    def __init__(
        self,
        message: str = "Segment download failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class FingerprintError(RadioRecallError):
    """Raised when a fingerprint query or insert fails."""

    def __init__(
        self,
        message: str = "Fingerprint service call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StorageError(RadioRecallError):
    """Raised when a store cannot be opened, read or written."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class DuplicateRecordError(StorageError):
    """Raised when inserting a record whose id already exists."""

    def __init__(
        self,
        message: str = "Record already exists",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RecordNotFoundError(StorageError):
    """Raised when a record looked up by id does not exist."""

    def __init__(
        self,
        message: str = "Record not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
