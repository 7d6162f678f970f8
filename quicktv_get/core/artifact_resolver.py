"""Configuration resolver: turns a raw request into a concrete artifact identity.

Resolution fills in host defaults, normalises the version (applying any
custom-version override), and derives the file name and remote URL from the
mirror overrides in effect at call time.
"""

from __future__ import annotations

import logging

from quicktv_get.config import GetConfig
from quicktv_get.core.platform_info import get_host_arch, get_host_platform, get_node_arch
from quicktv_get.errors import ConfigurationError
from quicktv_get.models.artifacts import ArtifactRequest, ResolvedArtifact
from quicktv_get.models.mirror import MirrorSettings

logger = logging.getLogger(__name__)

BASE_URL = "https://github.com/quick-tv/quick-tv/releases/download/"
NIGHTLY_BASE_URL = "https://github.com/quick-tv/nightlies/releases/download/"
VERSION_PLACEHOLDER = "{{ version }}"


def ensure_is_truthy_string(request: ArtifactRequest, field: str) -> str:
    """Return ``request.<field>``, or raise if it is missing, empty, or not a string."""
    value = getattr(request, field, None)
    if not value or not isinstance(value, str):
        raise ConfigurationError(
            f'Expected property "{field}" to be provided as a string but it was not'
        )
    return value


def normalize_version(version: str) -> str:
    if not version.startswith("v"):
        return f"v{version}"
    return version


def artifact_file_name(request: ArtifactRequest) -> str:
    """``artifact_name`` for generic artifacts, else ``name-version-platform-arch[-suffix].zip``."""
    name = ensure_is_truthy_string(request, "artifact_name")
    if request.is_generic:
        return name

    parts = [
        name,
        ensure_is_truthy_string(request, "version"),
        ensure_is_truthy_string(request, "platform"),
        ensure_is_truthy_string(request, "arch"),
    ]
    if request.artifact_suffix:
        parts.append(request.artifact_suffix)
    return "-".join(parts) + ".zip"


def artifact_version(request: ArtifactRequest, mirror: MirrorSettings | None = None) -> str:
    """The version to download: the custom-version override if set, else ``request.version``."""
    mirror = mirror or MirrorSettings.from_options(request.mirror_options)
    return normalize_version(mirror.custom_version or ensure_is_truthy_string(request, "version"))


def artifact_remote_url(request: ArtifactRequest, mirror: MirrorSettings | None = None) -> str:
    """Download URL for an already-normalised request.

    A ``resolve_asset_url`` callable in the request's mirror options takes
    precedence over every template override.
    """
    options = request.mirror_options
    if options is not None and options.resolve_asset_url is not None:
        return options.resolve_asset_url(request)

    mirror = mirror or MirrorSettings.from_options(options)
    version = ensure_is_truthy_string(request, "version")

    if "nightly" in version:
        base = mirror.nightly_mirror or NIGHTLY_BASE_URL
    else:
        base = mirror.mirror or BASE_URL
    directory = (mirror.custom_dir or version).replace(
        VERSION_PLACEHOLDER, version.removeprefix("v")
    )
    file_name = mirror.custom_filename or artifact_file_name(request)
    return f"{base}{directory}/{file_name}"


def resolve_artifact(
    request: ArtifactRequest,
    config: GetConfig | None = None,
) -> ResolvedArtifact:
    """Resolve ``request`` into a ``ResolvedArtifact``.

    Raises
    ------
    ConfigurationError
        If a required field is missing, empty, or not a string.
    """
    ensure_is_truthy_string(request, "version")

    updates: dict[str, object] = {}
    if not request.is_generic:
        if not request.platform:
            logger.debug("No platform found, defaulting to the host platform")
            updates["platform"] = get_host_platform()
        if request.arch:
            updates["arch"] = get_node_arch(request.arch)
        else:
            logger.debug("No arch found, defaulting to the host arch")
            updates["arch"] = get_host_arch()

    mirror = MirrorSettings.from_options(request.mirror_options)
    updates["version"] = artifact_version(request, mirror)

    if request.cache_root is None or request.temp_directory is None:
        config = config or GetConfig()
        if request.cache_root is None:
            updates["cache_root"] = config.cache_root
        if request.temp_directory is None and config.temp_directory is not None:
            updates["temp_directory"] = config.temp_directory

    normalized = request.model_copy(update=updates)
    return ResolvedArtifact(
        request=normalized,
        file_name=artifact_file_name(normalized),
        remote_url=artifact_remote_url(normalized, mirror),
    )
