"""Prefect flows for the tournament results archive with governance.

This flow turns one results feed snapshot into exported views:
- Stage conflict checks (two stages claiming the same bracket role)
- Row count checks per view (thresholds in src/flows/config.py)
- Partitioned Parquet + `_meta.json` export per view

Architecture:
    1. Fetch the raw snapshot from the results feed
    2. Resolve console + arcade season archives
    3. Validate stage conflicts and season (governance)
    4. Build Polars views and validate row counts (governance)
    5. Write Parquet files + sidecars

`poll_results_flow` drives the live archive used by the broadcast
screens: it re-resolves on every successful poll and keeps the last good
archive when the feed is down.

Dependencies:
    - src/ingest/results (resolvers, feed client, views, export)
    - src/flows/utils/notifications.py (logging)
    - src/flows/config.py (feed settings + thresholds)

Production Hardening:
    - fetch_results_snapshot: 3 retries with 10s delay, 2min timeout (handles feed transients)
"""

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

# Ensure src packages are importable when run as a script
src_root = Path(__file__).parent.parent
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

import polars as pl  # noqa: E402
from prefect import flow, task  # noqa: E402

from flows.config import (  # noqa: E402
    DEFAULT_SEASON,
    FEED_SETTINGS,
    QUALIFIER_CUTOFF,
    get_export_root,
    get_feed_api_key,
    get_feed_url,
    get_view_row_minimum,
)
from flows.utils.notifications import log_error, log_info, log_warning  # noqa: E402
from ingest.results.arcade_archive import (  # noqa: E402
    finalized_region_count,
    resolve_arcade_season_archive,
)
from ingest.results.client import FeedUnavailableError, ResultsFeedClient  # noqa: E402
from ingest.results.console_archive import resolve_console_season_archive  # noqa: E402
from ingest.results.export import write_views  # noqa: E402
from ingest.results.frames import build_views  # noqa: E402
from ingest.results.live import ArchiveState, LiveResultsArchive  # noqa: E402
from ingest.results.models import ArcadeSeasonArchive, SeasonArchive  # noqa: E402
from ingest.results.stages import find_stage_conflicts  # noqa: E402
from ingest.results.standings import build_standings  # noqa: E402


@task(
    name="fetch_results_snapshot",
    retries=3,
    retry_delay_seconds=10,
    timeout_seconds=120,
    tags=["external_api"],
)
def fetch_results_snapshot(feed_url: str, api_key: str | None = None) -> Any:
    """Fetch the raw results snapshot.

    Args:
        feed_url: Results endpoint
        api_key: Optional feed API key

    Returns:
        Decoded (untrusted) snapshot

    """
    log_info("Fetching results snapshot", context={"feed_url": feed_url})

    client = ResultsFeedClient(
        feed_url,
        api_key=api_key,
        timeout_seconds=FEED_SETTINGS["timeout_seconds"],
        max_retries=FEED_SETTINGS["max_retries"],
    )
    try:
        return client.fetch_snapshot()
    except FeedUnavailableError as e:
        log_error(
            "Failed to fetch results snapshot",
            context={"feed_url": feed_url, "error": str(e)},
        )


@task(name="resolve_archives")
def resolve_archives(snapshot: Any) -> dict:
    """Resolve both divisions from one snapshot.

    Returns:
        Dict with `console` (SeasonArchive) and `arcade` (ArcadeSeasonArchive)

    """
    console = resolve_console_season_archive(snapshot)
    arcade = resolve_arcade_season_archive(snapshot)

    log_info(
        "Archives resolved",
        context={
            "season": console.season,
            "console_stages": len(console.stages),
            "arcade_regions_with_data": sum(1 for r in arcade.regions if r.has_data()),
            "arcade_finalized_regions": finalized_region_count(arcade),
        },
    )
    return {"console": console, "arcade": arcade}


@task(name="validate_stage_conflicts")
def validate_stage_conflicts(console: SeasonArchive) -> dict:
    """Flag bracket roles claimed by more than one stage.

    The first stage in stage order is the one used; the others are
    reported so the feed can be corrected.

    Args:
        console: Resolved console archive

    Returns:
        Validation result dictionary

    """
    conflicts = {role.value: keys for role, keys in find_stage_conflicts(console).items()}

    for role, keys in conflicts.items():
        log_warning(
            f"Multiple stages resolve to '{role}', using '{keys[0]}'",
            context={"stage_keys": keys},
        )

    return {"is_valid": not conflicts, "conflicts": conflicts}


@task(name="validate_season")
def validate_season(console: SeasonArchive, expected_season: str = DEFAULT_SEASON) -> dict:
    """Warn when the snapshot is for a different season than configured."""
    is_valid = console.season == expected_season
    if not is_valid:
        log_warning(
            "Snapshot season differs from configured season",
            context={"season": console.season, "expected": expected_season},
        )
    return {"is_valid": is_valid, "season": console.season, "expected": expected_season}


@task(name="validate_view_row_counts")
def validate_view_row_counts(
    views: dict[str, pl.DataFrame], minimums: dict[str, int] | None = None
) -> dict:
    """Validate that each view has at least its configured row count.

    Args:
        views: View name -> frame
        minimums: Optional override of the configured minimums

    Returns:
        Validation result dictionary

    """
    row_counts = {view: len(frame) for view, frame in views.items()}
    anomalies = []

    for view, rows in row_counts.items():
        minimum = (minimums or {}).get(view)
        if minimum is None:
            minimum = get_view_row_minimum(view)
        if rows < minimum:
            anomalies.append(f"{view}: {rows} rows < minimum {minimum}")

    if anomalies:
        log_warning("View row counts below minimum", context={"anomalies": anomalies})
    else:
        log_info("View row counts valid", context=row_counts)

    return {"is_valid": not anomalies, "anomalies": anomalies, "row_counts": row_counts}


@task(name="write_results_views")
def write_results_views(
    views: dict[str, pl.DataFrame], output_dir: str, snapshot_date: str, metadata: dict
) -> dict:
    """Write all views under `output_dir`, partitioned by snapshot date."""
    manifest = write_views(views, output_dir, snapshot_date, metadata)

    log_info(
        "Results views written",
        context={
            "output_dir": output_dir,
            "snapshot_date": snapshot_date,
            "views": len(manifest["datasets"]),
        },
    )
    return manifest


@flow(name="results_archive_pipeline")
def results_archive_flow(
    feed_url: str | None = None,
    output_dir: str | None = None,
    snapshot_date: str | None = None,
    cutoff: int | None = None,
) -> dict:
    """Prefect flow for results archive resolution and export.

    Args:
        feed_url: Results endpoint (defaults to RESULTS_FEED_URL env var)
        output_dir: Export root (defaults to RESULTS_EXPORT_ROOT or data/raw/results)
        snapshot_date: Partition date (defaults to today)
        cutoff: Qualifier cutoff rank (default: 4)

    Returns:
        Flow result with governance validation status

    """
    if feed_url is None:
        feed_url = get_feed_url()
        if not feed_url:
            log_error(
                "No feed_url provided and RESULTS_FEED_URL env var not set",
                context={"action": "Set RESULTS_FEED_URL or pass feed_url parameter"},
            )

    if output_dir is None:
        output_dir = get_export_root()
    if snapshot_date is None:
        snapshot_date = datetime.now().strftime("%Y-%m-%d")
    if cutoff is None:
        cutoff = QUALIFIER_CUTOFF

    log_info(
        "Starting results archive pipeline",
        context={"feed_url": feed_url, "snapshot_date": snapshot_date, "cutoff": cutoff},
    )

    snapshot = fetch_results_snapshot(feed_url, api_key=get_feed_api_key())
    archives = resolve_archives(snapshot)
    console: SeasonArchive = archives["console"]
    arcade: ArcadeSeasonArchive = archives["arcade"]

    # Governance
    stage_validation = validate_stage_conflicts(console)
    season_validation = validate_season(console)

    views = build_views(console, arcade, cutoff)
    row_count_validation = validate_view_row_counts(views)

    manifest = write_results_views(
        views,
        output_dir,
        snapshot_date,
        {"season": console.season, "qualifier_cutoff": cutoff},
    )

    log_info(
        "Results archive pipeline complete",
        context={
            "views_written": len(manifest["datasets"]),
            "stage_conflicts": not stage_validation["is_valid"],
        },
    )

    return {
        "snapshot_date": snapshot_date,
        "season": console.season,
        "manifest": manifest,
        "stage_validation": stage_validation,
        "season_validation": season_validation,
        "row_count_validation": row_count_validation,
    }


def run_polls(
    live: LiveResultsArchive,
    iterations: int,
    interval_seconds: float,
    sleep=time.sleep,
) -> list[ArchiveState]:
    """Refresh `live` `iterations` times, pausing between polls."""
    states = []
    for i in range(iterations):
        state = live.refresh()
        states.append(state)
        if state.unavailable:
            log_warning(
                "Results feed unavailable, serving last archive",
                context={"poll": i + 1, "error": state.last_error},
            )
        if i < iterations - 1:
            sleep(interval_seconds)
    return states


@flow(name="poll_results")
def poll_results_flow(
    iterations: int = 12,
    interval: float | None = None,
    feed_url: str | None = None,
) -> dict:
    """Poll the results feed and keep the live archive current.

    Args:
        iterations: Number of polls to run
        interval: Seconds between polls (default: FEED_SETTINGS poll interval)
        feed_url: Results endpoint (defaults to RESULTS_FEED_URL env var)

    Returns:
        Poll summary (success/failure counts and the latest podium)

    """
    feed_url = feed_url or get_feed_url()
    if not feed_url:
        log_error(
            "No feed_url provided and RESULTS_FEED_URL env var not set",
            context={"action": "Set RESULTS_FEED_URL or pass feed_url parameter"},
        )
    if interval is None:
        interval = FEED_SETTINGS["poll_interval_seconds"]

    live = LiveResultsArchive(
        ResultsFeedClient(
            feed_url,
            api_key=get_feed_api_key(),
            timeout_seconds=FEED_SETTINGS["timeout_seconds"],
            max_retries=FEED_SETTINGS["max_retries"],
        )
    )
    states = run_polls(live, iterations, interval)
    last = states[-1] if states else live.state()

    summary = {
        "successful_polls": live.successful_polls,
        "failed_polls": live.failed_polls,
        "cache_hits": live.cache.hits,
        "unavailable": last.unavailable,
        "standings": [(s.rank, s.nickname) for s in build_standings(last.console)],
        "finalized_regions": finalized_region_count(last.arcade),
    }
    log_info("Polling finished", context=summary)
    return summary


if __name__ == "__main__":
    result = results_archive_flow()

    print("\n" + "=" * 70)
    print("Results Archive Pipeline Result")
    print("=" * 70)
    print(f"Season: {result['season']}")
    print(f"Snapshot date: {result['snapshot_date']}")
    for view, info in result["manifest"]["datasets"].items():
        print(f"  - {view}: {info['rows']} rows → {info['path']}")
    conflicts = result["stage_validation"]["conflicts"]
    print(f"Stage conflicts: {conflicts or 'none'}")
    print("=" * 70)
