"""Public download functions.

``download_artifact`` fetches any release artifact; ``download`` is the
shortcut for the main ``quick-tv`` archive of the host platform.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from quicktv_get.core.orchestrator import DownloadOrchestrator
from quicktv_get.core.platform_info import get_host_arch, get_host_platform
from quicktv_get.errors import ConfigurationError
from quicktv_get.models.artifacts import ArtifactRequest

MAIN_ARTIFACT_NAME = "quick-tv"


def build_request(**fields: Any) -> ArtifactRequest:
    """Build an ``ArtifactRequest``, reporting invalid fields as ``ConfigurationError``."""
    try:
        return ArtifactRequest(**fields)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid artifact request: {exc}") from exc


def download_artifact(request: ArtifactRequest | None = None, **fields: Any) -> Path:
    """Download a release artifact and return an absolute path to it.

    Pass either a prepared ``ArtifactRequest`` or its fields as keyword
    arguments::

        download_artifact(
            artifact_name="chromedriver",
            version="2.0.9",
            platform="darwin",
            arch="x64",
        )
    """
    if request is None:
        request = build_request(**fields)
    elif fields:
        request = request.model_copy(update=fields)
    with DownloadOrchestrator() as orchestrator:
        return orchestrator.fetch(request)


def download(version: str, **options: Any) -> Path:
    """Download the ``quick-tv`` archive for the host platform and arch."""
    return download_artifact(
        **options,
        version=version,
        platform=get_host_platform(),
        arch=get_host_arch(),
        artifact_name=MAIN_ARTIFACT_NAME,
    )
