"""Main Typer application: imports and registers all CLI commands.

Entry point: ``quick-tv-get`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from quicktv_get.cli.commands.cache import cache_entry_cmd
from quicktv_get.cli.commands.download import artifact_cmd, download_cmd
from quicktv_get.config import GetConfig

app = typer.Typer(
    name="quick-tv-get",
    help="Download, verify, and cache Quick TV release artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="download", help="Download the quick-tv archive for this machine.")(download_cmd)
app.command(name="artifact", help="Download any release artifact.")(artifact_cmd)
app.command(name="cache-entry", help="Show the cache entry for a download URL.")(cache_entry_cmd)


@app.callback()
def configure_logging(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (default: QUICK_TV_GET_LOG_LEVEL or WARNING)."
    ),
) -> None:
    """Route library logging through Rich on stderr."""
    level = (log_level or GetConfig().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
