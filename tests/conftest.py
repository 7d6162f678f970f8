"""Shared test fixtures for quicktv-get."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from quicktv_get.config import GetConfig
from quicktv_get.core.artifact_cache import ArtifactCache
from quicktv_get.core.orchestrator import DownloadOrchestrator

MANIFEST_NAME = "SHASUMS256.txt"

_OVERRIDE_PREFIXES = (
    "quick_tv_",
    "npm_config_quick_tv_",
    "npm_package_config_quick_tv_",
)


class FixtureDownloader:
    """In-memory stand-in for the network.

    Every artifact has a deterministic payload.  ``SHASUMS256.txt`` lists the
    digests of the canonical payloads for every artifact requested so far
    (plus ``known_names``), so a tampered payload set in ``overrides`` fails
    verification.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path, Mapping[str, Any] | None]] = []
        self.overrides: dict[str, bytes] = {}
        self.known_names: set[str] = set()
        self.manifest_suffix: bytes = b""

    @staticmethod
    def payload_for(file_name: str) -> bytes:
        return f"fixture payload for {file_name}\n".encode()

    @classmethod
    def digest_for(cls, file_name: str) -> str:
        return hashlib.sha256(cls.payload_for(file_name)).hexdigest()

    def manifest(self) -> bytes:
        names = sorted(self.known_names | {Path(url).name for url in self.artifact_urls})
        lines = [f"{self.digest_for(name)} *{name}" for name in names]
        return "\n".join(lines).encode() + self.manifest_suffix

    @property
    def urls(self) -> list[str]:
        return [url for url, _, _ in self.calls]

    @property
    def artifact_urls(self) -> list[str]:
        return [url for url in self.urls if not url.endswith(MANIFEST_NAME)]

    @property
    def manifest_urls(self) -> list[str]:
        return [url for url in self.urls if url.endswith(MANIFEST_NAME)]

    def download(
        self,
        url: str,
        destination: Path,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self.calls.append((url, Path(destination), options))
        file_name = url.rsplit("/", 1)[-1]
        if file_name == MANIFEST_NAME:
            data = self.manifest()
        else:
            data = self.overrides.get(file_name, self.payload_for(file_name))
        Path(destination).write_bytes(data)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip mirror/config overrides from the environment and run in a temp cwd."""
    for key in list(os.environ):
        if key.lower().startswith(_OVERRIDE_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Provide an empty cache root."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    """Provide a parent directory for scratch directories."""
    root = tmp_path / "scratch"
    root.mkdir()
    return root


@pytest.fixture
def config(cache_root: Path, scratch_root: Path) -> GetConfig:
    return GetConfig(cache_root=cache_root, temp_directory=scratch_root)


@pytest.fixture
def downloader() -> FixtureDownloader:
    return FixtureDownloader()


@pytest.fixture
def orchestrator(downloader: FixtureDownloader, config: GetConfig) -> DownloadOrchestrator:
    """Provide an orchestrator wired to the fixture downloader and temp dirs."""
    return DownloadOrchestrator(downloader, config=config)


@pytest.fixture
def artifact_cache(cache_root: Path) -> ArtifactCache:
    return ArtifactCache(cache_root)
