"""Downloader bridge: the network transport boundary.

The orchestrator never talks to the network itself.  It calls an injected
``Downloader``; when none is supplied it falls back to ``HttpxDownloader``.

Download options are opaque to the orchestrator and passed through verbatim.
``HttpxDownloader`` forwards them as keyword arguments to
``httpx.Client.stream`` (``headers``, ``timeout``, ``params``, ...).  Retry
and timeout policy belongs to the downloader, not to its callers.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from quicktv_get.errors import FilesystemError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)
_CHUNK_SIZE = 1 << 16


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Downloader(Protocol):
    """Protocol for download backends.

    Any object with a ``download(url, destination, options)`` method
    satisfies this protocol.
    """

    def download(
        self,
        url: str,
        destination: Path,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        """Fetch ``url`` into the file at ``destination``.

        Raises
        ------
        TransportError
            If the file could not be fetched.
        """
        ...


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class HttpxDownloader:
    """Streams a GET request to disk with ``httpx``.

    The body is written to ``<destination>.partial`` and renamed once
    complete, so ``destination`` never holds a truncated file.

    Parameters
    ----------
    client:
        A preconfigured ``httpx.Client``.  When omitted, a client that follows
        redirects is created.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(follow_redirects=True, timeout=DEFAULT_TIMEOUT)

    def download(
        self,
        url: str,
        destination: Path,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        destination = Path(destination)
        partial = destination.with_name(f"{destination.name}.partial")
        logger.debug("GET %s -> %s", url, destination)

        try:
            with self._client.stream("GET", url, **dict(options or {})) as response:
                response.raise_for_status()
                with partial.open("wb") as handle:
                    for chunk in response.iter_bytes(_CHUNK_SIZE):
                        handle.write(chunk)
            partial.replace(destination)
        except httpx.HTTPStatusError as exc:
            partial.unlink(missing_ok=True)
            raise TransportError(
                f"Failed to download {url}: HTTP {exc.response.status_code}", url=url
            ) from exc
        except httpx.HTTPError as exc:
            partial.unlink(missing_ok=True)
            raise TransportError(f"Failed to download {url}: {exc}", url=url) from exc
        except OSError as exc:
            partial.unlink(missing_ok=True)
            raise FilesystemError(f"Failed to write {destination}: {exc}") from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxDownloader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
