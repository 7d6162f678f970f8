"""Tests for ArtifactCache: URL keying, lookup, commit, and eviction."""

from __future__ import annotations

from pathlib import Path

from quicktv_get.core.artifact_cache import ArtifactCache, cache_key
from quicktv_get.core.hasher import sha256_hex

URL = "https://github.com/quick-tv/quick-tv/releases/download/v2.0.9/quick-tv-v2.0.9-linux-x64.zip"
FILE_NAME = "quick-tv-v2.0.9-linux-x64.zip"


def _source(tmp_path: Path, data: bytes = b"artifact bytes") -> Path:
    source = tmp_path / "incoming" / FILE_NAME
    source.parent.mkdir(parents=True, exist_ok=True)
    source.write_bytes(data)
    return source


class TestCacheKey:
    def test_key_is_sha256_of_url(self):
        assert cache_key(URL) == sha256_hex(URL.encode())

    def test_query_string_is_part_of_key(self):
        assert cache_key(URL + "?token=abc") != cache_key(URL)
        assert cache_key("https://dl.example/get?file=a") != cache_key("https://dl.example/get?file=b")

    def test_different_urls_differ(self):
        assert cache_key(URL) != cache_key(URL.replace("v2.0.9", "v2.0.10"))


class TestArtifactCache:
    def test_lookup_miss_on_empty_cache(self, artifact_cache: ArtifactCache):
        assert artifact_cache.lookup(URL, FILE_NAME) is None

    def test_commit_then_lookup_round_trip(self, artifact_cache: ArtifactCache, tmp_path: Path):
        committed = artifact_cache.commit(URL, _source(tmp_path), FILE_NAME)

        assert committed == artifact_cache.lookup(URL, FILE_NAME)
        assert committed.read_bytes() == b"artifact bytes"
        assert committed.parent == artifact_cache.entry_directory(URL)
        assert committed.is_absolute()

    def test_commit_moves_source(self, artifact_cache: ArtifactCache, tmp_path: Path):
        source = _source(tmp_path)
        artifact_cache.commit(URL, source, FILE_NAME)
        assert not source.exists()

    def test_entry_directory_holds_one_file(self, artifact_cache: ArtifactCache, tmp_path: Path):
        artifact_cache.commit(URL, _source(tmp_path), FILE_NAME)
        assert [p.name for p in artifact_cache.entry_directory(URL).iterdir()] == [FILE_NAME]

    def test_last_writer_wins(self, artifact_cache: ArtifactCache, tmp_path: Path):
        artifact_cache.commit(URL, _source(tmp_path, b"first"), FILE_NAME)
        artifact_cache.commit(URL, _source(tmp_path, b"second"), FILE_NAME)
        assert artifact_cache.lookup(URL, FILE_NAME).read_bytes() == b"second"

    def test_entry_directory_without_file_is_miss(self, artifact_cache: ArtifactCache):
        artifact_cache.entry_directory(URL).mkdir(parents=True)
        assert artifact_cache.lookup(URL, FILE_NAME) is None

    def test_evict_removes_entry(self, artifact_cache: ArtifactCache, tmp_path: Path):
        artifact_cache.commit(URL, _source(tmp_path), FILE_NAME)
        assert artifact_cache.evict(URL, FILE_NAME) is True
        assert artifact_cache.lookup(URL, FILE_NAME) is None
        assert not artifact_cache.entry_directory(URL).exists()

    def test_evict_missing_entry(self, artifact_cache: ArtifactCache):
        assert artifact_cache.evict(URL, FILE_NAME) is False

    def test_other_keys_untouched(self, artifact_cache: ArtifactCache, tmp_path: Path):
        other_url = URL.replace("linux", "darwin")
        other_name = FILE_NAME.replace("linux", "darwin")
        artifact_cache.commit(URL, _source(tmp_path), FILE_NAME)
        source = tmp_path / other_name
        source.write_bytes(b"other")
        artifact_cache.commit(other_url, source, other_name)

        artifact_cache.evict(URL, FILE_NAME)

        assert artifact_cache.lookup(other_url, other_name).read_bytes() == b"other"

    def test_query_variants_are_separate_entries(self, artifact_cache: ArtifactCache, tmp_path: Path):
        url_a = "https://dl.example/get?file=a"
        url_b = "https://dl.example/get?file=b"
        source_a = tmp_path / "a" / "a.zip"
        source_b = tmp_path / "b" / "b.zip"
        for source in (source_a, source_b):
            source.parent.mkdir()
            source.write_bytes(source.name.encode())
        artifact_cache.commit(url_a, source_a, "a.zip")
        artifact_cache.commit(url_b, source_b, "b.zip")

        assert artifact_cache.lookup(url_a, "b.zip") is None
        artifact_cache.evict(url_a, "a.zip")

        assert artifact_cache.lookup(url_a, "a.zip") is None
        assert artifact_cache.lookup(url_b, "b.zip").read_bytes() == b"b.zip"
