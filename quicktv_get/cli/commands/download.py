"""``quick-tv-get download`` and ``quick-tv-get artifact``: fetch release artifacts.

Both commands print the absolute path of the verified file on success, so
they can be used from scripts::

    ZIP=$(quick-tv-get download 31.0.0)
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from quicktv_get.api import MAIN_ARTIFACT_NAME, build_request
from quicktv_get.core.orchestrator import DownloadOrchestrator
from quicktv_get.core.platform_info import get_host_arch, get_host_platform
from quicktv_get.errors import QuickTVGetError
from quicktv_get.models.artifacts import CacheMode
from quicktv_get.models.mirror import MirrorOptions

console = Console()
err_console = Console(stderr=True)


def _mirror_options(
    mirror: str | None,
    nightly_mirror: str | None,
    custom_dir: str | None,
    custom_filename: str | None,
) -> MirrorOptions | None:
    if not any((mirror, nightly_mirror, custom_dir, custom_filename)):
        return None
    return MirrorOptions(
        mirror=mirror,
        nightly_mirror=nightly_mirror,
        custom_dir=custom_dir,
        custom_filename=custom_filename,
    )


def _fetch_and_print(**fields: object) -> None:
    try:
        request = build_request(**fields)
        with DownloadOrchestrator() as orchestrator:
            path = orchestrator.fetch(request)
    except QuickTVGetError as exc:
        err_console.print(f"[bold red]Download failed:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(str(path), highlight=False, soft_wrap=True)


def download_cmd(
    version: str = typer.Argument(..., help="Release version, e.g. 31.0.0 or v31.0.0."),
    cache_root: Path = typer.Option(None, "--cache-root", help="Cache directory."),
    cache_mode: CacheMode = typer.Option(CacheMode.READ_WRITE, "--cache-mode", help="Cache mode."),
    temp_dir: Path = typer.Option(None, "--temp-dir", help="Parent for scratch directories."),
    disable_checksums: bool = typer.Option(
        False, "--unsafely-disable-checksums", help="Skip SHA-256 verification."
    ),
    mirror: str = typer.Option(None, "--mirror", help="Base mirror URL."),
    nightly_mirror: str = typer.Option(None, "--nightly-mirror", help="Nightly mirror URL."),
    custom_dir: str = typer.Option(None, "--custom-dir", help="Directory template; supports {{ version }}."),
    custom_filename: str = typer.Option(None, "--custom-filename", help="Remote file name override."),
) -> None:
    """Download the quick-tv archive for this machine's platform and arch."""
    _fetch_and_print(
        artifact_name=MAIN_ARTIFACT_NAME,
        version=version,
        platform=get_host_platform(),
        arch=get_host_arch(),
        cache_root=cache_root,
        cache_mode=cache_mode,
        temp_directory=temp_dir,
        unsafely_disable_checksums=disable_checksums,
        mirror_options=_mirror_options(mirror, nightly_mirror, custom_dir, custom_filename),
    )


def artifact_cmd(
    name: str = typer.Argument(..., help="Artifact name, e.g. chromedriver or SHASUMS256.txt."),
    version: str = typer.Option(..., "--version", "-v", help="Release version."),
    platform: str = typer.Option(None, "--platform", help="Target platform (default: host)."),
    arch: str = typer.Option(None, "--arch", help="Target arch (default: host)."),
    suffix: str = typer.Option(None, "--suffix", help="Artifact suffix, e.g. symbols."),
    generic: bool = typer.Option(False, "--generic", help="Artifact is not platform-specific."),
    cache_root: Path = typer.Option(None, "--cache-root", help="Cache directory."),
    cache_mode: CacheMode = typer.Option(CacheMode.READ_WRITE, "--cache-mode", help="Cache mode."),
    temp_dir: Path = typer.Option(None, "--temp-dir", help="Parent for scratch directories."),
    disable_checksums: bool = typer.Option(
        False, "--unsafely-disable-checksums", help="Skip SHA-256 verification."
    ),
    mirror: str = typer.Option(None, "--mirror", help="Base mirror URL."),
    nightly_mirror: str = typer.Option(None, "--nightly-mirror", help="Nightly mirror URL."),
    custom_dir: str = typer.Option(None, "--custom-dir", help="Directory template; supports {{ version }}."),
    custom_filename: str = typer.Option(None, "--custom-filename", help="Remote file name override."),
) -> None:
    """Download any release artifact."""
    _fetch_and_print(
        artifact_name=name,
        version=version,
        is_generic=generic,
        platform=platform,
        arch=arch,
        artifact_suffix=suffix,
        cache_root=cache_root,
        cache_mode=cache_mode,
        temp_directory=temp_dir,
        unsafely_disable_checksums=disable_checksums,
        mirror_options=_mirror_options(mirror, nightly_mirror, custom_dir, custom_filename),
    )
