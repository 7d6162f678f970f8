"""Artifact request models: what to fetch and how the cache may be used."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from quicktv_get.bridge.downloader import Downloader
from quicktv_get.models.mirror import MirrorOptions


class CacheMode(str, Enum):
    """How a request may interact with the shared artifact cache."""

    READ_WRITE = "read_write"
    READ_ONLY = "read_only"
    WRITE_ONLY = "write_only"
    BYPASS = "bypass"

    @property
    def may_read(self) -> bool:
        """Whether a cached copy may satisfy the request."""
        return self in (CacheMode.READ_ONLY, CacheMode.READ_WRITE)

    @property
    def may_write(self) -> bool:
        return self in (CacheMode.WRITE_ONLY, CacheMode.READ_WRITE)

    @property
    def caller_owns_output(self) -> bool:
        """Whether the returned path is a private copy rather than a cache path.

        A caller-owned file is never placed in, or deleted from, the shared
        cache.
        """
        return self in (CacheMode.BYPASS, CacheMode.READ_ONLY)


class ArtifactRequest(BaseModel):
    """A request for one release artifact.

    Platform artifacts are named ``<name>-<version>-<platform>-<arch>[-<suffix>].zip``;
    generic artifacts (``is_generic=True``) use ``artifact_name`` verbatim and
    ignore platform and arch.

    Required string fields are checked at resolution time so that a missing
    value raises ``ConfigurationError`` rather than a validation error.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    artifact_name: str | None = None
    version: str | None = None
    is_generic: bool = False
    platform: str | None = None
    arch: str | None = None
    artifact_suffix: str | None = None

    cache_root: Path | None = None
    cache_mode: CacheMode = CacheMode.READ_WRITE
    temp_directory: Path | None = None

    unsafely_disable_checksums: bool = False
    checksums: dict[str, str] | None = None

    mirror_options: MirrorOptions | None = None
    download_options: dict[str, Any] | None = None
    downloader: Downloader | None = None


class ResolvedArtifact(BaseModel):
    """An ``ArtifactRequest`` with its derived identity.

    ``file_name`` and ``remote_url`` are recomputed by the resolver for every
    fetch; they are never carried across requests.
    """

    model_config = ConfigDict(frozen=True)

    request: ArtifactRequest
    file_name: str
    remote_url: str

    @property
    def version(self) -> str:
        return self.request.version or ""

    @property
    def cache_mode(self) -> CacheMode:
        return self.request.cache_mode

    @property
    def cache_root(self) -> Path:
        # The resolver always fills cache_root.
        return Path(self.request.cache_root or "")
