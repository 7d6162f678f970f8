"""quicktv-get: download, verify, and cache Quick TV release artifacts.

  - Platform archives (``<name>-<version>-<platform>-<arch>.zip``) and generic
    files such as ``SHASUMS256.txt``
  - SHA-256 verification against the release manifest or inline checksums
  - URL-keyed local cache with read-write, read-only, write-only and bypass modes
  - Mirror overrides from the environment, pyproject.toml, or per call
  - Pluggable downloader (httpx by default)
"""

__version__ = "0.1.0"
__description__ = "Download, verify, and cache Quick TV release artifacts"

from quicktv_get.api import download, download_artifact
from quicktv_get.core.orchestrator import DownloadOrchestrator
from quicktv_get.core.platform_info import get_host_arch
from quicktv_get.models.artifacts import ArtifactRequest, CacheMode
from quicktv_get.models.mirror import MirrorOptions

__all__ = [
    "ArtifactRequest",
    "CacheMode",
    "DownloadOrchestrator",
    "MirrorOptions",
    "download",
    "download_artifact",
    "get_host_arch",
    "__version__",
]
