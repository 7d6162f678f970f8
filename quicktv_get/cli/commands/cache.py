"""``quick-tv-get cache-entry URL``: show where a URL is cached."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

import typer
from rich.console import Console
from rich.table import Table

from quicktv_get.config import GetConfig
from quicktv_get.core.artifact_cache import ArtifactCache, cache_key

console = Console()


def cache_entry_cmd(
    url: str = typer.Argument(..., help="Download URL of the artifact."),
    cache_root: Path = typer.Option(None, "--cache-root", help="Cache directory."),
) -> None:
    """Print the cache key and entry directory for a download URL."""
    cache = ArtifactCache(cache_root or GetConfig().cache_root)
    file_name = PurePosixPath(urlsplit(url).path).name
    cached = cache.lookup(url, file_name) if file_name else None

    table = Table(title="Cache Entry", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", overflow="fold")
    table.add_row("Key", cache_key(url))
    table.add_row("Directory", str(cache.entry_directory(url)))
    table.add_row("Cached", "[green]Yes[/green]" if cached else "[yellow]No[/yellow]")
    console.print(table)
