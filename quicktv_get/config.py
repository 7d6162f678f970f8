"""Process configuration: env-driven defaults for the download engine.

Reads ``QUICK_TV_GET_*`` environment variables and a ``.env`` file in the
working directory.  Mirror overrides are resolved per request by
``quicktv_get.models.mirror.MirrorSettings``, not here.
"""

from __future__ import annotations

from pathlib import Path

import platformdirs
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_cache_root() -> Path:
    """Per-user cache directory for downloaded artifacts."""
    return Path(platformdirs.user_cache_dir("quick-tv", appauthor=False))


class GetConfig(BaseSettings):
    """Engine configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export QUICK_TV_GET_CACHE_ROOT=/data/quick-tv-cache
        export QUICK_TV_GET_LOG_LEVEL=DEBUG

    ``quick_tv_config_cache`` is also honoured for the cache root, matching
    the variable npm sets from an ``.npmrc`` entry.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QUICK_TV_GET_",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        populate_by_name=True,
    )

    cache_root: Path = Field(
        default_factory=default_cache_root,
        validation_alias=AliasChoices("quick_tv_config_cache", "quick_tv_get_cache_root"),
    )
    temp_directory: Path | None = None
    log_level: str = "WARNING"
