"""Tests for the memo cache and the live (polling) archive."""

from ingest.results.cache import ArchiveCache
from ingest.results.client import FeedUnavailableError
from ingest.results.console_archive import resolve_console_season_archive
from ingest.results.live import LiveResultsArchive
from ingest.results.models import SeasonArchive


class _ScriptedSource:
    """Returns queued snapshots; queued exceptions are raised."""

    def __init__(self, *items):
        self.items = list(items)

    def fetch_snapshot(self):
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class TestArchiveCache:
    """Test identity-keyed memoization."""

    def test_same_object_hits(self, console_snapshot):
        """Re-resolving the very same snapshot reuses the result."""
        cache = ArchiveCache()

        first = cache.resolve(resolve_console_season_archive, console_snapshot)
        second = cache.resolve(resolve_console_season_archive, console_snapshot)

        assert first is second
        assert (cache.hits, cache.misses) == (1, 1)

    def test_equal_but_new_object_misses(self, console_snapshot):
        """A new snapshot object replaces the entry even if equal."""
        cache = ArchiveCache()
        copy = {**console_snapshot}

        first = cache.resolve(resolve_console_season_archive, console_snapshot)
        second = cache.resolve(resolve_console_season_archive, copy)

        assert first == second
        assert first is not second
        assert cache.misses == 2
        assert len(cache) == 1

    def test_one_entry_per_resolver(self, console_snapshot):
        """Different resolvers are cached independently."""
        cache = ArchiveCache()

        cache.resolve(resolve_console_season_archive, console_snapshot)
        cache.resolve(len, console_snapshot)

        assert len(cache) == 2
        cache.clear()
        assert len(cache) == 0


class TestLiveResultsArchive:
    """Test last-good-archive behavior while polling."""

    def test_starts_empty(self):
        """Before any poll the archives are empty."""
        live = LiveResultsArchive(_ScriptedSource())

        state = live.state()
        assert state.console == SeasonArchive()
        assert len(state.arcade.regions) == 4
        assert state.unavailable is False

    def test_failure_keeps_previous_archive(self, full_snapshot):
        """A failed poll keeps what was resolved and flags unavailability."""
        live = LiveResultsArchive(
            _ScriptedSource(full_snapshot, FeedUnavailableError("timeout"), full_snapshot)
        )

        ok = live.refresh()
        failed = live.refresh()
        recovered = live.refresh()

        assert ok.refreshed and not ok.unavailable
        assert failed.unavailable and not failed.refreshed
        assert failed.last_error == "timeout"
        assert failed.console is ok.console
        assert failed.arcade is ok.arcade
        assert recovered.unavailable is False
        assert recovered.last_error is None
        assert (live.successful_polls, live.failed_polls) == (2, 1)

    def test_unchanged_snapshot_is_not_re_resolved(self, full_snapshot):
        """Polling the same snapshot object hits the cache."""
        live = LiveResultsArchive(_ScriptedSource(full_snapshot, full_snapshot))

        first = live.refresh()
        second = live.refresh()

        assert second.console is first.console
        assert live.cache.hits == 2
