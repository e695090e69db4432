"""Results archive production loader.

Usage:
    python scripts/ingest/load_results.py --feed-url https://example.org/api/results --out data/raw/results
    python scripts/ingest/load_results.py --out gs://tkc-archive/raw/results --cutoff 4

    # Resolve a saved snapshot instead of calling the feed
    python scripts/ingest/load_results.py --snapshot-file snapshot.json --out data/raw/results

Environment (.env is loaded):
    RESULTS_FEED_URL, RESULTS_FEED_API_KEY, RESULTS_EXPORT_ROOT

Outputs:
    - data/raw/results/{view}/dt=YYYY-MM-DD/{view}.parquet
    - data/raw/results/{view}/dt=YYYY-MM-DD/_meta.json
"""

import argparse
import json
import os
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from ingest.results.arcade_archive import resolve_arcade_season_archive  # noqa: E402
from ingest.results.client import ResultsFeedClient  # noqa: E402
from ingest.results.console_archive import resolve_console_season_archive  # noqa: E402
from ingest.results.export import write_views  # noqa: E402
from ingest.results.frames import build_views  # noqa: E402
from ingest.results.qualifiers import DEFAULT_QUALIFIER_CUTOFF  # noqa: E402
from ingest.results.stages import find_stage_conflicts  # noqa: E402


def load_results(
    snapshot, out_dir: str, cutoff: int = DEFAULT_QUALIFIER_CUTOFF, dt: str | None = None
) -> dict:
    """Resolve a snapshot and write every results view.

    Args:
        snapshot: Decoded feed snapshot
        out_dir: Output directory (local or GCS)
        cutoff: Qualifier cutoff rank
        dt: Partition date (defaults to today)

    Returns:
        Manifest dict with row counts and paths

    """
    dt = dt or datetime.now().strftime("%Y-%m-%d")
    console = resolve_console_season_archive(snapshot)
    arcade = resolve_arcade_season_archive(snapshot)

    for role, keys in find_stage_conflicts(console).items():
        print(f"⚠️  Multiple stages resolve to '{role.value}': {keys} (using '{keys[0]}')")

    views = build_views(console, arcade, cutoff)
    return write_views(views, out_dir, dt, {"season": console.season, "qualifier_cutoff": cutoff})


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Resolve the tournament results feed and export views"
    )
    parser.add_argument(
        "--feed-url", default=os.getenv("RESULTS_FEED_URL"), help="Results endpoint"
    )
    parser.add_argument(
        "--snapshot-file", help="Read the snapshot from a JSON file instead of the feed"
    )
    parser.add_argument(
        "--out",
        default=os.getenv("RESULTS_EXPORT_ROOT", "data/raw/results"),
        help="Output directory (default: data/raw/results)",
    )
    parser.add_argument(
        "--cutoff", type=int, default=DEFAULT_QUALIFIER_CUTOFF, help="Qualifier cutoff rank"
    )
    parser.add_argument("--date", help="Partition date YYYY-MM-DD (default: today)")
    args = parser.parse_args()

    if args.snapshot_file:
        snapshot = json.loads(Path(args.snapshot_file).read_text(encoding="utf-8"))
    elif args.feed_url:
        client = ResultsFeedClient(args.feed_url, api_key=os.getenv("RESULTS_FEED_API_KEY"))
        snapshot = client.fetch_snapshot()
    else:
        parser.error("--feed-url (or RESULTS_FEED_URL) or --snapshot-file is required")

    print("Starting results load...")
    print(f"Output dir: {args.out}")
    print()

    manifest = load_results(snapshot, args.out, cutoff=args.cutoff, dt=args.date)

    print()
    print("=" * 60)
    print("Results load complete!")
    print("=" * 60)
    print(f"Views written: {len(manifest['datasets'])}")
    for view, info in manifest["datasets"].items():
        print(f"  - {view}: {info['rows']} rows → {info['path']}")


if __name__ == "__main__":
    main()
