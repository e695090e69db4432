"""Tests for Polars views and their Parquet export."""

import json

import polars as pl

from ingest.common.storage import is_gcs_uri, partition_uri, read_parquet_any
from ingest.results.arcade_archive import resolve_arcade_season_archive
from ingest.results.console_archive import resolve_console_season_archive
from ingest.results.export import write_views
from ingest.results.frames import (
    QUALIFIER_SCHEMA,
    STAGE_ROWS_SCHEMA,
    build_views,
    cross_match_frame,
    qualifier_frame,
    stages_frame,
)
from ingest.results.models import SeasonArchive
from ingest.results.registry import VIEWS


class TestFrames:
    """Test flat views of the resolved archives."""

    def test_views_cover_registry(self, full_snapshot):
        """Every registered view is built."""
        views = build_views(
            resolve_console_season_archive(full_snapshot),
            resolve_arcade_season_archive(full_snapshot),
        )

        assert set(views) == set(VIEWS)
        assert len(views["console_stages"]) == 8 + 2 + 2 + 2 + 2
        assert views["console_standings"]["nickname"].to_list() == [
            "Don",
            "Katsu",
            "Player 2",
            "Player 4",
        ]
        assert views["arcade_seeds"].filter(pl.col("group") == "B")["entry_id"].to_list() == [
            "E-12",
            "E-32",
            "E-42",
            "E-22",
        ]
        assert len(views["arcade_region_ranking"]) == 4 * 3

    def test_qualifier_frame(self, console_snapshot):
        """Pass/fail survives into the frame."""
        views = build_views(
            resolve_console_season_archive(console_snapshot),
            resolve_arcade_season_archive(console_snapshot),
            cutoff=2,
        )
        frame = views["console_qualifier"]

        assert frame.filter(pl.col("passed"))["seed"].to_list() == ["#1", "#2"]
        assert frame.filter(~pl.col("passed"))["seed"].null_count() == 6

    def test_cross_matches_marked_derived(self, arcade_snapshot):
        """Fallback pairings are flagged as derived."""
        frame = cross_match_frame(resolve_arcade_season_archive(arcade_snapshot))

        assert frame["derived"].to_list() == [True] * 4
        assert frame["left_entry_id"].to_list() == ["E-11", "E-21", "E-31", "E-41"]

    def test_empty_frames_keep_schema(self):
        """Views of an empty archive still carry their columns."""
        stages = stages_frame(SeasonArchive())
        qualifiers = qualifier_frame([])

        assert stages.is_empty()
        assert stages.schema == pl.Schema(STAGE_ROWS_SCHEMA)
        assert qualifiers.schema == pl.Schema(QUALIFIER_SCHEMA)


class TestExport:
    """Test partitioned Parquet export."""

    def test_partition_uri(self):
        """Local and GCS roots share one layout."""
        assert partition_uri("gs://bucket/raw/", "v", "2026-03-01", "v.parquet") == (
            "gs://bucket/raw/v/dt=2026-03-01/v.parquet"
        )
        assert is_gcs_uri("GS://bucket")
        assert not is_gcs_uri("data/raw")

    def test_write_views(self, tmp_path, full_snapshot):
        """Each view lands in its own dt partition with a sidecar."""
        views = build_views(
            resolve_console_season_archive(full_snapshot),
            resolve_arcade_season_archive(full_snapshot),
        )

        manifest = write_views(views, str(tmp_path), "2026-03-01", {"season": "2026"})

        assert set(manifest["datasets"]) == set(VIEWS)
        partition = tmp_path / "console_standings" / "dt=2026-03-01"
        meta = json.loads((partition / "_meta.json").read_text(encoding="utf-8"))
        assert meta["row_count"] == 4
        assert meta["division"] == "console"
        assert meta["season"] == "2026"

        written = read_parquet_any(str(partition / "console_standings.parquet"))
        assert written.equals(views["console_standings"])

    def test_rewrite_same_date_overwrites(self, tmp_path):
        """Re-exporting a date replaces the partition contents."""
        empty = build_views(
            resolve_console_season_archive(None), resolve_arcade_season_archive(None)
        )

        write_views(empty, str(tmp_path), "2026-03-01", {})
        write_views(empty, str(tmp_path), "2026-03-01", {})

        partition = tmp_path / "arcade_seeds" / "dt=2026-03-01"
        assert sorted(p.name for p in partition.iterdir()) == ["_meta.json", "arcade_seeds.parquet"]
        assert read_parquet_any(str(partition / "arcade_seeds.parquet")).is_empty()
