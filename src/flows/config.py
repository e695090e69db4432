"""Configuration for the results archive flows.

Centralizes feed settings and governance thresholds so the flow and the
CLI can be tuned without code changes.

Threshold Rationale:
- Poll interval: fast enough for the broadcast screen during live play
- Qualifier cutoff: top 4 of the online qualifier advance
- Row minimums: an in-season snapshot with empty views is suspicious
"""

import os
from typing import TypedDict


class FeedSettingsConfig(TypedDict):
    """Results feed fetch/poll settings."""

    poll_interval_seconds: float
    timeout_seconds: int
    max_retries: int


class ViewRowMinimumsConfig(TypedDict):
    """Minimum row counts per exported view (warn below)."""

    console_stages: int
    console_standings: int
    console_qualifier: int
    arcade_seeds: int
    arcade_cross_matches: int
    arcade_region_ranking: int


# Feed access
FEED_SETTINGS: FeedSettingsConfig = {
    "poll_interval_seconds": 5.0,  # Live views refresh every 5s
    "timeout_seconds": 30,
    "max_retries": 3,
}

# Qualifier rules
QUALIFIER_CUTOFF: int = 4  # Top 4 advance from the console qualifier
DEFAULT_SEASON: str = "2026"

# Row Count Minimums (sanity checks once the season is under way)
VIEW_ROW_MINIMUMS: ViewRowMinimumsConfig = {
    "console_stages": 1,
    "console_standings": 0,  # Empty until the final is played
    "console_qualifier": 1,
    "arcade_seeds": 0,  # Empty until regional qualifiers finish
    "arcade_cross_matches": 0,
    "arcade_region_ranking": 1,
}

# Export location (overridden by RESULTS_EXPORT_ROOT)
EXPORT_ROOT: str = "data/raw/results"


def get_feed_url() -> str | None:
    """Results endpoint from RESULTS_FEED_URL, if configured."""
    return os.getenv("RESULTS_FEED_URL") or None


def get_feed_api_key() -> str | None:
    return os.getenv("RESULTS_FEED_API_KEY") or None


def get_export_root() -> str:
    """Export root from RESULTS_EXPORT_ROOT, falling back to EXPORT_ROOT."""
    return os.getenv("RESULTS_EXPORT_ROOT") or EXPORT_ROOT


def get_view_row_minimum(view: str) -> int:
    """Get minimum expected row count for an exported view.

    Args:
        view: View name (e.g., 'console_stages')

    Returns:
        Minimum row count before a warning is logged

    Raises:
        KeyError: If view not configured

    """
    return VIEW_ROW_MINIMUMS[view]
