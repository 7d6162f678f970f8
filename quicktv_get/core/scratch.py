"""Scratch directories: private, ephemeral working space for one operation.

``scratch_directory`` is a scoped resource.  The directory is always removed
when the body raises.  On normal exit it is removed in ``CLEAN`` mode and left
in place in ``ORPHAN`` mode, where ownership of its contents has passed to
the caller.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path

from quicktv_get.errors import FilesystemError

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "quick-tv-download-"


class CleanupMode(str, Enum):
    """What happens to a scratch directory when its scope exits normally."""

    CLEAN = "clean"
    ORPHAN = "orphan"


def make_scratch_directory(parent: Path | None = None) -> Path:
    """Create a fresh scratch directory under ``parent`` (or the system temp dir)."""
    try:
        if parent is not None:
            Path(parent).mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=parent))
    except OSError as exc:
        raise FilesystemError(f"Cannot create scratch directory under {parent}: {exc}") from exc


def remove_directory(directory: Path) -> None:
    """Remove ``directory`` and everything in it; a missing directory is fine."""
    shutil.rmtree(directory, ignore_errors=True)


@contextmanager
def scratch_directory(
    parent: Path | None = None,
    cleanup: CleanupMode = CleanupMode.CLEAN,
) -> Iterator[Path]:
    """Yield a scratch directory and release it according to ``cleanup``."""
    directory = make_scratch_directory(parent)
    try:
        yield directory
    except BaseException:
        remove_directory(directory)
        raise
    if cleanup is CleanupMode.CLEAN:
        remove_directory(directory)
    else:
        logger.debug("Leaving %s for the caller", directory)
