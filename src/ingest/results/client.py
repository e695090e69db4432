"""Results feed client following ingest patterns."""

import random
import time
from typing import Any

import requests

DEFAULT_TIMEOUT_SECONDS = 30


class FeedUnavailableError(RuntimeError):
    """The results feed could not be fetched or returned an unusable body."""


class ResultsFeedClient:
    """Client for the tournament results feed (JSON snapshot over HTTP)."""

    def __init__(
        self,
        feed_url: str,
        api_key: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = 3,
        jitter_seconds: tuple[float, float] = (0.0, 0.5),
    ):
        """Initialize results feed client.

        Args:
            feed_url: Results endpoint, e.g. https://example.org/api/results
            api_key: Optional shared secret sent as the `X-Api-Key` header
            timeout_seconds: Per-request timeout
            max_retries: Attempts before giving up
            jitter_seconds: Random pause range before each attempt

        """
        self.feed_url = feed_url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.jitter_seconds = jitter_seconds

    def fetch_snapshot(self) -> Any:
        """Fetch the current raw snapshot.

        The endpoint may answer with the bare snapshot, a `{"data": ...}`
        envelope, or an Apps Script style `{"ok": true, "data": ...}`
        envelope; the snapshot is unwrapped in every case.

        Returns:
            Decoded JSON snapshot (untrusted, pass it to a resolver)

        Raises:
            FeedUnavailableError: On transport errors, a non-JSON body or
                an `ok: false` envelope

        """
        response = self._get_with_retry(self.feed_url)
        try:
            body = response.json()
        except ValueError as e:
            raise FeedUnavailableError(
                f"Non-JSON response from {self.feed_url} (status {response.status_code}): "
                f"{response.text[:200]}"
            ) from e
        return unwrap_envelope(body)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    def _get_with_retry(self, url: str) -> requests.Response:
        """HTTP GET with exponential backoff retry.

        Args:
            url: URL to fetch

        Returns:
            Response object

        Raises:
            FeedUnavailableError: If all retries exhausted

        """
        for attempt in range(self.max_retries):
            try:
                time.sleep(random.uniform(*self.jitter_seconds))

                response = requests.get(url, headers=self._headers(), timeout=self.timeout_seconds)
                response.raise_for_status()
                return response

            except requests.exceptions.RequestException as e:
                if attempt == self.max_retries - 1:
                    raise FeedUnavailableError(
                        f"Failed to fetch {url} after {self.max_retries} retries: {e}"
                    ) from e

                # Exponential backoff
                wait = 2**attempt + random.uniform(0, 1)
                time.sleep(wait)

        raise FeedUnavailableError(f"Failed to fetch {url} after {self.max_retries} retries")


def unwrap_envelope(body: Any) -> Any:
    """Strip the API envelope around a snapshot.

    Raises:
        FeedUnavailableError: If the envelope reports `ok: false`

    """
    if not isinstance(body, dict):
        return body
    if body.get("ok") is False:
        message = str(body.get("error") or "feed returned ok=false")
        details = body.get("details")
        raise FeedUnavailableError(f"{message}: {str(details)[:500]}" if details else message)
    if "data" in body and ("ok" in body or len(body) == 1):
        return body["data"]
    return body
