"""Tests for the results feed client (no network: requests.get is faked)."""

import pytest
import requests

from ingest.results import client as client_module
from ingest.results.client import FeedUnavailableError, ResultsFeedClient, unwrap_envelope


class _FakeResponse:
    def __init__(self, payload=None, status_code=200, text="", json_error=False):
        self._payload = payload
        self.status_code = status_code
        self.text = text
        self._json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._json_error:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip jitter and backoff pauses."""
    monkeypatch.setattr(client_module.time, "sleep", lambda _seconds: None)


class TestUnwrapEnvelope:
    """Test envelope handling."""

    def test_bare_snapshot(self):
        """Bodies without an envelope pass through."""
        body = {"console": [], "data": "kept"}
        assert unwrap_envelope(body) is body
        assert unwrap_envelope([1]) == [1]

    def test_data_envelopes(self):
        """Both envelope shapes are unwrapped."""
        assert unwrap_envelope({"data": {"console": []}}) == {"console": []}
        assert unwrap_envelope({"ok": True, "data": {"a": 1}}) == {"a": 1}

    def test_failed_envelope(self):
        """ok: false raises with the reported error."""
        with pytest.raises(FeedUnavailableError, match="sheet locked: retry later"):
            unwrap_envelope({"ok": False, "error": "sheet locked", "details": "retry later"})


class TestResultsFeedClient:
    """Test fetching and retries."""

    def test_fetch_snapshot(self, monkeypatch, no_sleep):
        """Headers carry the API key and the envelope is stripped."""
        calls = []

        def fake_get(url, headers=None, timeout=None):
            calls.append((url, headers, timeout))
            return _FakeResponse({"ok": True, "data": {"console": []}})

        monkeypatch.setattr(client_module.requests, "get", fake_get)

        client = ResultsFeedClient("https://feed.test/results", api_key="k", timeout_seconds=5)

        assert client.fetch_snapshot() == {"console": []}
        assert calls == [
            (
                "https://feed.test/results",
                {"Accept": "application/json", "X-Api-Key": "k"},
                5,
            )
        ]

    def test_retries_then_succeeds(self, monkeypatch, no_sleep):
        """Transient failures are retried."""
        responses = iter(
            [
                requests.exceptions.ConnectionError("reset"),
                _FakeResponse(status_code=503),
                _FakeResponse({"console": []}),
            ]
        )

        def fake_get(url, headers=None, timeout=None):
            item = next(responses)
            if isinstance(item, Exception):
                raise item
            return item

        monkeypatch.setattr(client_module.requests, "get", fake_get)

        assert ResultsFeedClient("https://feed.test", max_retries=3).fetch_snapshot() == {
            "console": []
        }

    def test_retries_exhausted(self, monkeypatch, no_sleep):
        """After max_retries the feed is reported unavailable."""

        def fake_get(url, headers=None, timeout=None):
            raise requests.exceptions.Timeout("slow")

        monkeypatch.setattr(client_module.requests, "get", fake_get)

        with pytest.raises(FeedUnavailableError, match="after 2 retries"):
            ResultsFeedClient("https://feed.test", max_retries=2).fetch_snapshot()

    def test_non_json_body(self, monkeypatch, no_sleep):
        """An HTML error page is not a snapshot."""
        monkeypatch.setattr(
            client_module.requests,
            "get",
            lambda url, headers=None, timeout=None: _FakeResponse(
                text="<html>quota</html>", json_error=True
            ),
        )

        with pytest.raises(FeedUnavailableError, match="Non-JSON"):
            ResultsFeedClient("https://feed.test").fetch_snapshot()
