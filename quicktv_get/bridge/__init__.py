"""Bridges to external collaborators.

The network transport is the only external capability the download engine
depends on; see ``quicktv_get.bridge.downloader``.
"""

from quicktv_get.bridge.downloader import Downloader, HttpxDownloader

__all__ = ["Downloader", "HttpxDownloader"]
