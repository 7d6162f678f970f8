"""URL-keyed artifact cache.

Storage layout: {cache_root}/{sha256(url)}/{file_name}

Each entry directory holds exactly one artifact.  The key is the full URL,
so URLs that differ only in their query string get separate entries, and two
requests resolving to the same URL share an entry regardless of their other
fields.  The store never removes entries on its own; invalidation is driven
by the orchestrator through ``evict``.
"""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path

from quicktv_get.core.hasher import sha256_hex
from quicktv_get.errors import FilesystemError

logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    """Stable entry key for a download URL, query string included."""
    return sha256_hex(url.encode("utf-8"))


class ArtifactCache:
    """Directory-backed artifact cache keyed by download URL.

    Parameters
    ----------
    cache_root:
        Root directory for cache entries.  Created lazily on first commit.
    """

    def __init__(self, cache_root: Path) -> None:
        self._root = Path(cache_root).absolute()

    @property
    def root(self) -> Path:
        return self._root

    def entry_directory(self, url: str) -> Path:
        """Directory holding the entry for ``url``."""
        return self._root / cache_key(url)

    def _entry_path(self, url: str, file_name: str) -> Path:
        return self.entry_directory(url) / file_name

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def lookup(self, url: str, file_name: str) -> Path | None:
        """Return the cached file for ``(url, file_name)``, or ``None`` on a miss.

        An entry directory without the expected file is a miss.
        """
        path = self._entry_path(url, file_name)
        if path.is_file():
            return path
        return None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def commit(self, url: str, source_path: Path, file_name: str) -> Path:
        """Move ``source_path`` into the entry for ``(url, file_name)``.

        The file is first moved to a hidden partial name inside the entry
        directory and then atomically renamed, so concurrent readers see
        either the old file or the new one.  For the same key the last writer
        wins.
        """
        target = self._entry_path(url, file_name)
        partial = target.with_name(f".{file_name}.{uuid.uuid4().hex}.partial")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source_path), str(partial))
            os.replace(partial, target)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise FilesystemError(f"Cannot cache {file_name} from {url}: {exc}") from exc

        logger.debug("Cached %s at %s", url, target)
        return target

    # ------------------------------------------------------------------
    # Invalidate
    # ------------------------------------------------------------------

    def evict(self, url: str, file_name: str) -> bool:
        """Delete the entry directory for ``(url, file_name)``.

        Returns ``True`` if an entry was removed.
        """
        directory = self._entry_path(url, file_name).parent
        if not directory.exists():
            return False
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise FilesystemError(f"Cannot evict cache entry {directory}: {exc}") from exc
        logger.debug("Evicted cache entry %s", directory)
        return True
