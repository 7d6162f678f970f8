"""Exception hierarchy for artifact resolution, download, and verification.

Only a checksum failure against a cache hit is recovered locally (by a single
re-download).  Every other error surfaces to the caller unchanged.
"""

from __future__ import annotations

__all__ = [
    "QuickTVGetError",
    "ConfigurationError",
    "ChecksumMismatchError",
    "ChecksumManifestError",
    "TransportError",
    "FilesystemError",
]


class QuickTVGetError(RuntimeError):
    """Base exception for all quicktv-get failures."""


class ConfigurationError(QuickTVGetError):
    """Raised when a request field is missing or invalid, or inline checksums are empty."""


class ChecksumMismatchError(QuickTVGetError):
    """Raised when a file's SHA-256 digest does not match its manifest entry.

    ``expected`` is ``None`` when the manifest has no entry for the file.
    """

    def __init__(
        self,
        message: str,
        *,
        file_name: str = "",
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        super().__init__(message)
        self.file_name = file_name
        self.expected = expected
        self.actual = actual


class ChecksumManifestError(ChecksumMismatchError):
    """Raised when a checksum manifest line cannot be parsed."""


class TransportError(QuickTVGetError):
    """Raised when the downloader fails to fetch a URL."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class FilesystemError(QuickTVGetError):
    """Raised when scratch-directory or cache-store I/O fails."""
