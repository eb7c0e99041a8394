"""
Tests for the bundle cache.
"""

import pytest

from duckup.core.cache import ArtifactCache, CacheEntry, CacheKeyError, CacheKind


def _producer(calls, content="go1.25.0"):
    def produce(scratch):
        calls.append(scratch)
        tree = scratch / "out" / "go"
        tree.mkdir(parents=True)
        (tree / "VERSION").write_text(content)
        return tree

    return produce


class TestArtifactCache:
    """Tests for ArtifactCache."""

    def test_path_layout(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache")

        assert cache.path_for("v1", CacheKind.SOURCE) == tmp_path / "cache" / "source" / "v1"
        assert cache.path_for("1.25.0", CacheKind.RUNTIME) == tmp_path / "cache" / "go" / "1.25.0"

    @pytest.mark.parametrize(
        "key", ["", "..", "../../../outside", "a/b", "../go/1.25.0", "."]
    )
    def test_keys_must_stay_inside_kind_directory(self, tmp_path, key):
        cache = ArtifactCache(tmp_path / "data" / "cache", scratch_dir=tmp_path / "scratch")
        calls = []

        with pytest.raises(CacheKeyError):
            cache.path_for(key, CacheKind.RUNTIME)
        with pytest.raises(CacheKeyError):
            cache.ensure(key, CacheKind.RUNTIME, _producer(calls))

        assert calls == []
        assert not (tmp_path / "outside").exists()

    def test_miss_populates(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")
        calls = []

        path = cache.ensure("1.25.0", CacheKind.RUNTIME, _producer(calls))

        assert len(calls) == 1
        assert path == tmp_path / "cache" / "go" / "1.25.0"
        assert (path / "VERSION").read_text() == "go1.25.0"
        assert cache.lookup("1.25.0", CacheKind.RUNTIME) == CacheEntry(
            "1.25.0", CacheKind.RUNTIME, path
        )

    def test_hit_skips_producer(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")
        calls = []
        cache.ensure("1.25.0", CacheKind.RUNTIME, _producer(calls))

        path = cache.ensure("1.25.0", CacheKind.RUNTIME, _producer(calls, "other"))

        assert len(calls) == 1
        assert (path / "VERSION").read_text() == "go1.25.0"

    def test_kinds_are_separate(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")
        calls = []
        cache.ensure("v1", CacheKind.SOURCE, _producer(calls))

        assert cache.lookup("v1", CacheKind.RUNTIME) is None

    def test_existing_directory_is_a_hit(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache")
        (tmp_path / "cache" / "source" / "v1").mkdir(parents=True)
        calls = []

        cache.ensure("v1", CacheKind.SOURCE, _producer(calls))

        assert calls == []

    def test_scratch_is_cleaned_up(self, tmp_path):
        scratch = tmp_path / "scratch"
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=scratch)

        cache.ensure("1.25.0", CacheKind.RUNTIME, _producer([]))

        assert list(scratch.iterdir()) == []

    def test_failed_producer_leaves_no_entry(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")

        def broken(scratch):
            (scratch / "partial").mkdir()
            raise RuntimeError("download interrupted")

        with pytest.raises(RuntimeError):
            cache.ensure("1.25.0", CacheKind.RUNTIME, broken)

        assert cache.lookup("1.25.0", CacheKind.RUNTIME) is None
        assert not cache.path_for("1.25.0", CacheKind.RUNTIME).exists()
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_concurrent_population_is_not_coordinated(self, tmp_path):
        """Without locking, a writer that loses the race fails instead of merging."""
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")
        calls = []
        produce = _producer(calls)

        def racing(scratch):
            # Another process populates the entry while we download
            cache.path_for("1.25.0", CacheKind.RUNTIME).mkdir(parents=True)
            return produce(scratch)

        with pytest.raises(FileExistsError):
            cache.ensure("1.25.0", CacheKind.RUNTIME, racing)

        assert list(cache.path_for("1.25.0", CacheKind.RUNTIME).iterdir()) == []
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_retry_after_failure(self, tmp_path):
        cache = ArtifactCache(tmp_path / "cache", scratch_dir=tmp_path / "scratch")

        def broken(scratch):
            raise RuntimeError("download interrupted")

        with pytest.raises(RuntimeError):
            cache.ensure("v1", CacheKind.SOURCE, broken)

        calls = []
        path = cache.ensure("v1", CacheKind.SOURCE, _producer(calls))

        assert len(calls) == 1
        assert path.is_dir()
