"""Checksum validation against a ``SHASUMS256.txt`` manifest.

Manifest lines have the form ``<sha256-hex> *<file-name>`` (binary mode) or
``<sha256-hex>  <file-name>`` (text mode), one per line.

Releases before 1.3.2 ship no manifest and are never validated.  Manifests
published for 1.3.2 through 1.3.4 were generated with a binary text encoding
and must be decoded as latin-1 rather than UTF-8.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from pathlib import Path

import semver

from quicktv_get.core.hasher import sha256_file
from quicktv_get.core.scratch import remove_directory, scratch_directory
from quicktv_get.errors import (
    ChecksumManifestError,
    ChecksumMismatchError,
    ConfigurationError,
    FilesystemError,
)
from quicktv_get.models.artifacts import ArtifactRequest, CacheMode, ResolvedArtifact

logger = logging.getLogger(__name__)

MANIFEST_NAME = "SHASUMS256.txt"
MIN_MANIFEST_VERSION = semver.Version(1, 3, 2)
BINARY_MANIFEST_VERSIONS = (semver.Version(1, 3, 2), semver.Version(1, 3, 4))

_MANIFEST_LINE = re.compile(r"^([0-9a-fA-F]+) ([ *])(.+)$")

ManifestFetcher = Callable[[ArtifactRequest], Path]


# ---------------------------------------------------------------------------
# Version policy
# ---------------------------------------------------------------------------


def parse_version(version: str) -> semver.Version:
    """Parse a ``v``-prefixed or bare semantic version."""
    try:
        return semver.Version.parse(version.removeprefix("v"))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid version {version!r}: {exc}") from exc


def manifest_encoding(version: str) -> str:
    """Text encoding for the manifest published with ``version``."""
    parsed = parse_version(version)
    low, high = BINARY_MANIFEST_VERSIONS
    if not parsed.prerelease and low <= parsed <= high:
        return "latin-1"
    return "utf-8"


def requires_validation(request: ArtifactRequest) -> bool:
    """Whether a downloaded copy of ``request`` must be checked against a manifest."""
    if (request.artifact_name or "").startswith("SHASUMS256"):
        return False
    if request.unsafely_disable_checksums:
        return False
    return parse_version(request.version or "") >= MIN_MANIFEST_VERSION


# ---------------------------------------------------------------------------
# Manifest format
# ---------------------------------------------------------------------------


def format_manifest(checksums: Mapping[str, str]) -> str:
    """Render ``{file_name: digest}`` as manifest text."""
    if not checksums:
        raise ConfigurationError(
            'Provided "checksums" mapping is empty, cannot generate a valid SHASUMS256.txt'
        )
    return "\n".join(f"{digest} *{file_name}" for file_name, digest in checksums.items())


def parse_manifest(text: str) -> dict[str, str]:
    """Parse manifest text into ``{file_name: lowercase digest}``."""
    entries: dict[str, str] = {}
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        match = _MANIFEST_LINE.match(line)
        if match is None:
            raise ChecksumManifestError(f"Malformed checksum manifest line {number}: {line!r}")
        entries[match.group(3)] = match.group(1).lower()
    return entries


def verify_file(path: Path, manifest_path: Path, *, encoding: str = "utf-8") -> None:
    """Check ``path`` against the manifest entry for its base name.

    Raises
    ------
    ChecksumMismatchError
        If the manifest has no entry for the file or the digests differ.
    """
    try:
        text = manifest_path.read_bytes().decode(encoding)
    except UnicodeDecodeError as exc:
        raise ChecksumManifestError(
            f"Cannot decode {manifest_path.name} as {encoding}: {exc}"
        ) from exc
    except OSError as exc:
        raise FilesystemError(f"Cannot read {manifest_path}: {exc}") from exc

    file_name = path.name
    expected = parse_manifest(text).get(file_name)
    if expected is None:
        raise ChecksumMismatchError(
            f"No checksum found in {manifest_path.name} for {file_name}",
            file_name=file_name,
        )

    try:
        actual = sha256_file(path)
    except OSError as exc:
        raise FilesystemError(f"Cannot read {path}: {exc}") from exc
    if actual != expected:
        raise ChecksumMismatchError(
            f"Generated checksum for {file_name} did not match expected checksum: "
            f"expected {expected}, got {actual}",
            file_name=file_name,
            expected=expected,
            actual=actual,
        )


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class ChecksumValidator:
    """Validates downloaded artifacts; never retries.

    Parameters
    ----------
    fetch_manifest:
        Downloads a generic artifact request and returns the local path.
        Used to obtain ``SHASUMS256.txt`` when no inline checksums are given.
    """

    def __init__(self, fetch_manifest: ManifestFetcher) -> None:
        self._fetch_manifest = fetch_manifest

    @staticmethod
    def manifest_request(request: ArtifactRequest) -> ArtifactRequest:
        """Request for the manifest matching ``request``.

        The manifest always bypasses the cache so a stale copy is never used.
        """
        return ArtifactRequest(
            artifact_name=MANIFEST_NAME,
            version=request.version,
            is_generic=True,
            cache_root=request.cache_root,
            cache_mode=CacheMode.BYPASS,
            temp_directory=request.temp_directory,
            mirror_options=request.mirror_options,
            download_options=request.download_options,
            downloader=request.downloader,
        )

    def validate(self, resolved: ResolvedArtifact, artifact_path: Path) -> None:
        """Verify ``artifact_path`` for ``resolved``, or return silently if exempt."""
        request = resolved.request
        if not requires_validation(request):
            logger.debug("Skipping checksum validation for %s", resolved.file_name)
            return

        encoding = manifest_encoding(resolved.version)

        if request.checksums is not None:
            with scratch_directory(request.temp_directory) as scratch:
                manifest_path = scratch / MANIFEST_NAME
                manifest_path.write_text(format_manifest(request.checksums), encoding="utf-8")
                verify_file(artifact_path, manifest_path, encoding=encoding)
            return

        manifest_path = self._fetch_manifest(self.manifest_request(request))
        try:
            verify_file(artifact_path, manifest_path, encoding=encoding)
        finally:
            remove_directory(manifest_path.parent)
        logger.debug("Checksum verified for %s", resolved.file_name)
