"""Keep the last good archives while polling the results feed.

Used by the broadcast/ops screens: each successful poll re-resolves both
divisions (through the memo cache); a failed poll keeps what was resolved
before and raises the `unavailable` flag so the screen can show a
"data temporarily unavailable" banner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from ingest.results.arcade_archive import build_empty_archive, resolve_arcade_season_archive
from ingest.results.cache import ArchiveCache
from ingest.results.client import FeedUnavailableError
from ingest.results.console_archive import resolve_console_season_archive
from ingest.results.models import ArcadeSeasonArchive, SeasonArchive

logger = logging.getLogger(__name__)


class SnapshotSource(Protocol):
    def fetch_snapshot(self) -> Any: ...


@dataclass(frozen=True)
class ArchiveState:
    """What the presentation layer renders after a poll."""

    console: SeasonArchive
    arcade: ArcadeSeasonArchive
    unavailable: bool
    last_error: str | None
    refreshed: bool


class LiveResultsArchive:
    """Poll-driven holder of the most recently resolved archives."""

    def __init__(self, source: SnapshotSource, cache: ArchiveCache | None = None):
        self.source = source
        self.cache = cache if cache is not None else ArchiveCache()
        self.console = SeasonArchive()
        self.arcade = build_empty_archive()
        self.unavailable = False
        self.last_error: str | None = None
        self.successful_polls = 0
        self.failed_polls = 0

    def apply_snapshot(self, snapshot: Any) -> None:
        """Resolve both divisions from an already-fetched snapshot."""
        self.console = self.cache.resolve(resolve_console_season_archive, snapshot)
        self.arcade = self.cache.resolve(resolve_arcade_season_archive, snapshot)

    def refresh(self) -> ArchiveState:
        """Fetch once and re-resolve; on failure keep the previous archives."""
        try:
            snapshot = self.source.fetch_snapshot()
        except FeedUnavailableError as e:
            self.failed_polls += 1
            self.unavailable = True
            self.last_error = str(e)
            logger.warning("Results feed unavailable, keeping last archive: %s", e)
            return self.state(refreshed=False)

        self.apply_snapshot(snapshot)
        self.successful_polls += 1
        self.unavailable = False
        self.last_error = None
        return self.state(refreshed=True)

    def state(self, refreshed: bool = False) -> ArchiveState:
        return ArchiveState(
            console=self.console,
            arcade=self.arcade,
            unavailable=self.unavailable,
            last_error=self.last_error,
            refreshed=refreshed,
        )
