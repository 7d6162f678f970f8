"""quicktv-get CLI: Typer-based command-line interface.

Provides the ``quick-tv-get`` command with subcommands for downloading the
main archive or any release artifact, and for inspecting cache entries.

All output uses Rich for formatted terminal display.
"""
