"""Shared fixtures for flow tests.

This module provides common test fixtures for:
- A fake results feed client
- Resolved archives with and without stage conflicts
"""

import pytest

from ingest.results.console_archive import resolve_console_season_archive


class FakeFeedClient:
    """Stands in for ResultsFeedClient; serves one snapshot or raises."""

    def __init__(self, snapshot=None, error: Exception | None = None):
        self.snapshot = snapshot
        self.error = error
        self.calls = 0

    def fetch_snapshot(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


@pytest.fixture
def fake_client_factory(monkeypatch):
    """Patch the pipeline's client class; returns a setter for the fake."""
    from flows import results_pipeline

    created = {}

    def install(snapshot=None, error=None):
        fake = FakeFeedClient(snapshot, error)

        def build(feed_url, **kwargs):
            created["feed_url"] = feed_url
            created["kwargs"] = kwargs
            return fake

        monkeypatch.setattr(results_pipeline, "ResultsFeedClient", build)
        return fake, created

    return install


@pytest.fixture
def conflicting_console():
    """Console archive where two stages both claim the grand final."""
    return resolve_console_season_archive(
        {
            "console": [
                {"stageKey": "final", "order": 1, "rows": [{"rank": 1, "nickname": "Don"}]},
                {"stageKey": "grand-final", "order": 2, "rows": []},
                {"stageKey": "qualifier", "order": 0, "rows": []},
            ]
        }
    )
