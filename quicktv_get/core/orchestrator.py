"""Download orchestrator: the download-verify-cache state machine.

The Orchestrator wires together the resolver, the ArtifactCache, the
ChecksumValidator and a Downloader.  Each ``fetch`` runs these steps in
sequence:

1. Resolve the request into a file name and remote URL.
2. If the cache mode allows reads, try the cache.  A hit that fails checksum
   validation is discarded and the fetch falls through to a download, at most
   once per call.
3. Download into a scratch directory and validate; failure here is fatal.
4. Hand the scratch file to the caller (``bypass``/``read_only``) or commit it
   to the cache and return the cached path.
"""

from __future__ import annotations

import functools
import logging
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from quicktv_get.bridge.downloader import Downloader, HttpxDownloader
from quicktv_get.config import GetConfig
from quicktv_get.core.artifact_cache import ArtifactCache
from quicktv_get.core.artifact_resolver import resolve_artifact
from quicktv_get.core.checksum_validator import ChecksumValidator
from quicktv_get.core.platform_info import is_official_linux_ia32_download
from quicktv_get.core.scratch import CleanupMode, scratch_directory
from quicktv_get.errors import ChecksumMismatchError, FilesystemError
from quicktv_get.models.artifacts import ArtifactRequest, ResolvedArtifact

logger = logging.getLogger(__name__)

LINUX_IA32_NOTICE = (
    "Official Linux/ia32 support is deprecated. "
    "For more info: https://quick-tv.dev/blog/linux-32bit-support"
)


@functools.cache
def warn_linux_ia32_deprecated() -> None:
    """Log the linux/ia32 deprecation notice once per process."""
    logger.warning(LINUX_IA32_NOTICE)


class DownloadOrchestrator:
    """Fetches, verifies and caches release artifacts.

    Parameters
    ----------
    downloader:
        Transport used when a request does not carry its own downloader.
        Defaults to an ``HttpxDownloader`` created on first use and closed by
        ``close()``; use the orchestrator as a context manager to release it.
    config:
        Engine configuration supplying the default cache root and scratch
        location.  Read from the environment when not provided.
    """

    def __init__(
        self,
        downloader: Downloader | None = None,
        *,
        config: GetConfig | None = None,
    ) -> None:
        self._downloader = downloader
        self._owned_downloader: HttpxDownloader | None = None
        self._config = config
        self._validator = ChecksumValidator(self.fetch)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, request: ArtifactRequest) -> Path:
        """Return an absolute path to a verified local copy of ``request``.

        Raises
        ------
        ConfigurationError
            If the request is missing a required field.
        ChecksumMismatchError
            If a freshly downloaded file fails validation.
        TransportError
            If the downloader fails.
        FilesystemError
            If the scratch directory or cache cannot be written.
        """
        resolved = resolve_artifact(request, self._config)
        cache = ArtifactCache(resolved.cache_root)

        if resolved.cache_mode.may_read:
            cached = self._fetch_from_cache(resolved, cache)
            if cached is not None:
                return cached

        self._check_deprecation(resolved)
        return self._download(resolved, cache)

    def close(self) -> None:
        """Close the default ``HttpxDownloader`` if this orchestrator created one.

        Downloaders passed in by the caller are left open.
        """
        if self._owned_downloader is not None:
            self._owned_downloader.close()
            self._owned_downloader = None

    def __enter__(self) -> DownloadOrchestrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Cache path
    # ------------------------------------------------------------------

    def _fetch_from_cache(self, resolved: ResolvedArtifact, cache: ArtifactCache) -> Path | None:
        logger.debug(
            "Checking the cache (%s) for %s (%s)",
            cache.root, resolved.file_name, resolved.remote_url,
        )
        cached = cache.lookup(resolved.remote_url, resolved.file_name)
        if cached is None:
            logger.debug("Cache miss")
            return None

        logger.debug("Cache hit")
        try:
            with self._checkout(cached, resolved) as candidate:
                self._validator.validate(resolved, candidate)
        except ChecksumMismatchError as exc:
            if not resolved.cache_mode.caller_owns_output:
                cache.evict(resolved.remote_url, resolved.file_name)
            logger.warning(
                "Cached %s did not match its checksum, falling back to re-download: %s",
                resolved.file_name, exc,
            )
            return None
        return candidate

    @contextmanager
    def _checkout(self, cached: Path, resolved: ResolvedArtifact) -> Iterator[Path]:
        """Yield the path a cache hit is served from.

        Caller-owned modes get a private copy in an orphaned scratch
        directory, which is removed again if validation raises.
        """
        if not resolved.cache_mode.caller_owns_output:
            yield cached
            return

        with scratch_directory(resolved.request.temp_directory, CleanupMode.ORPHAN) as scratch:
            candidate = scratch / resolved.file_name
            try:
                shutil.copyfile(cached, candidate)
            except OSError as exc:
                raise FilesystemError(f"Cannot copy {cached} out of the cache: {exc}") from exc
            yield candidate

    # ------------------------------------------------------------------
    # Download path
    # ------------------------------------------------------------------

    def _download(self, resolved: ResolvedArtifact, cache: ArtifactCache) -> Path:
        request = resolved.request
        owns_output = resolved.cache_mode.caller_owns_output
        cleanup = CleanupMode.ORPHAN if owns_output else CleanupMode.CLEAN

        with scratch_directory(request.temp_directory, cleanup) as scratch:
            download_path = scratch / resolved.file_name
            logger.debug(
                "Downloading %s to %s with options: %s",
                resolved.remote_url, download_path, request.download_options,
            )
            self._downloader_for(request).download(
                resolved.remote_url, download_path, request.download_options
            )

            logger.debug("Attempting to validate artifact %s", resolved.file_name)
            self._validator.validate(resolved, download_path)
            logger.debug("Artifact validated")

            if not resolved.cache_mode.may_write:
                return download_path
            return cache.commit(resolved.remote_url, download_path, resolved.file_name)

    def _downloader_for(self, request: ArtifactRequest) -> Downloader:
        if request.downloader is not None:
            return request.downloader
        if self._downloader is not None:
            return self._downloader
        if self._owned_downloader is None:
            self._owned_downloader = HttpxDownloader()
        return self._owned_downloader

    @staticmethod
    def _check_deprecation(resolved: ResolvedArtifact) -> None:
        request = resolved.request
        if request.is_generic:
            return
        if is_official_linux_ia32_download(
            request.platform or "",
            request.arch or "",
            resolved.version,
            request.mirror_options,
        ):
            warn_linux_ia32_deprecated()
