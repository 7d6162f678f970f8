"""quicktv-get data models: all Pydantic v2, all frozen (immutable)."""

from quicktv_get.models.artifacts import ArtifactRequest, CacheMode, ResolvedArtifact
from quicktv_get.models.mirror import MirrorOptions, MirrorSettings

__all__ = [
    # artifacts
    "ArtifactRequest",
    "CacheMode",
    "ResolvedArtifact",
    # mirror
    "MirrorOptions",
    "MirrorSettings",
]
