"""Mirror overrides and the layered lookup that resolves them.

Each overridable key is looked up across an ordered list of sources; the
first non-empty value wins:

1. package-manager scoped environment (``npm_config_quick_tv_<key>``)
2. project configuration (``npm_package_config_quick_tv_<key>``, then the
   ``[tool.quick-tv-get]`` table of ``./pyproject.toml``)
3. plain environment (``QUICK_TV_<KEY>``)
4. explicit ``MirrorOptions`` passed with the request
5. the built-in default, applied by the resolver

Environment lookups are case-insensitive, and each key is accepted in both a
compact (``nightlymirror``) and a snake (``nightly_mirror``) spelling.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    PyprojectTomlConfigSettingsSource,
    SettingsConfigDict,
)

NPM_CONFIG_SCOPE = "npm_config_quick_tv_"
NPM_PACKAGE_CONFIG_SCOPE = "npm_package_config_quick_tv_"


class MirrorOptions(BaseModel):
    """Explicit, per-call mirror overrides.

    ``custom_dir`` may contain ``{{ version }}``, which is replaced with the
    version number without its ``v`` prefix.  When ``resolve_asset_url`` is
    set, it receives the normalised request and its return value is used as
    the download URL verbatim.
    """

    model_config = ConfigDict(frozen=True)

    mirror: str | None = None
    nightly_mirror: str | None = None
    custom_dir: str | None = None
    custom_filename: str | None = None
    custom_version: str | None = None
    resolve_asset_url: Callable[[Any], str] | None = None


class ScopedEnvSettingsSource(PydanticBaseSettingsSource):
    """Reads ``<scope><key>`` environment variables, case-insensitively."""

    def __init__(self, settings_cls: type[BaseSettings], scope: str) -> None:
        super().__init__(settings_cls)
        self._scope = scope.lower()
        self._environ = {key.lower(): value for key, value in os.environ.items()}

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        for spelling in (field_name.replace("_", ""), field_name):
            key = f"{self._scope}{spelling}"
            value = self._environ.get(key)
            if value:
                return value, key, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, _, _ = self.get_field_value(field, field_name)
            if value is not None:
                values[field_name] = value
        return values


class MirrorSettings(BaseSettings):
    """The effective mirror overrides for one resolution.

    Built fresh for every request so environment changes are always seen.
    Unset keys stay ``None``; the resolver supplies the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUICK_TV_",
        env_ignore_empty=True,
        extra="ignore",
        pyproject_toml_table_header=("tool", "quick-tv-get"),
    )

    mirror: str | None = None
    nightly_mirror: str | None = None
    custom_dir: str | None = None
    custom_filename: str | None = None
    custom_version: str | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            ScopedEnvSettingsSource(settings_cls, NPM_CONFIG_SCOPE),
            ScopedEnvSettingsSource(settings_cls, NPM_PACKAGE_CONFIG_SCOPE),
            PyprojectTomlConfigSettingsSource(settings_cls),
            env_settings,
            init_settings,
        )

    @classmethod
    def from_options(cls, options: MirrorOptions | None) -> MirrorSettings:
        """Layer the ambient override sources over explicit ``options``."""
        explicit: dict[str, Any] = {}
        if options is not None:
            explicit = {
                key: value
                for key, value in options.model_dump(exclude={"resolve_asset_url"}).items()
                if value
            }
        return cls(**explicit)
