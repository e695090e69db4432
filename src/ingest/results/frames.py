"""Flat Polars views of the resolved archives (for export and QA).

Every builder returns a frame with a fixed schema, including when there
is nothing to show yet, so downstream Parquet files keep stable columns.
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from ingest.results.cross_matches import resolve_cross_matches
from ingest.results.models import (
    ArcadeSeasonArchive,
    QualifierRow,
    SeasonArchive,
    SeedRow,
    Standing,
)
from ingest.results.qualifiers import DEFAULT_QUALIFIER_CUTOFF, build_qualifier_rows
from ingest.results.ranking import build_region_final_ranking
from ingest.results.standings import build_standings
from results_utils.coerce import Number

STAGE_ROWS_SCHEMA = {
    "season": pl.Utf8,
    "stage_key": pl.Utf8,
    "stage_label": pl.Utf8,
    "stage_order": pl.Float64,
    "status": pl.Utf8,
    "rank": pl.Int64,
    "nickname": pl.Utf8,
    "score": pl.Float64,
    "entry_id": pl.Utf8,
    "controller": pl.Utf8,
    "s1": pl.Float64,
    "s2": pl.Float64,
    "detail": pl.Utf8,
}

STANDINGS_SCHEMA = {"rank": pl.Int64, "nickname": pl.Utf8}

QUALIFIER_SCHEMA = {
    "rank": pl.Int64,
    "nickname": pl.Utf8,
    "score": pl.Float64,
    "entry_id": pl.Utf8,
    "controller": pl.Utf8,
    "passed": pl.Boolean,
    "seed": pl.Utf8,
}

SEEDS_SCHEMA = {
    "group": pl.Utf8,
    "seed": pl.Int64,
    "region_key": pl.Utf8,
    "region_label": pl.Utf8,
    "entry_id": pl.Utf8,
    "nickname": pl.Utf8,
    "score": pl.Float64,
}

CROSS_MATCH_SCHEMA = {
    "match_no": pl.Float64,
    "left_seed": pl.Int64,
    "left_entry_id": pl.Utf8,
    "left_nickname": pl.Utf8,
    "left_region_key": pl.Utf8,
    "right_seed": pl.Int64,
    "right_entry_id": pl.Utf8,
    "right_nickname": pl.Utf8,
    "right_region_key": pl.Utf8,
    "winner_entry_id": pl.Utf8,
    "note": pl.Utf8,
    "derived": pl.Boolean,
}

REGION_RANKING_SCHEMA = {
    "region_key": pl.Utf8,
    "rank": pl.Float64,
    "entry_id": pl.Utf8,
    "nickname": pl.Utf8,
    "status": pl.Utf8,
    "seed": pl.Float64,
    "wins": pl.Float64,
    "losses": pl.Float64,
}


def _as_float(value: Number | None) -> float | None:
    return None if value is None else float(value)


def stages_frame(archive: SeasonArchive) -> pl.DataFrame:
    """One row per (stage, participant), in stage then rank order."""
    records = [
        {
            "season": archive.season,
            "stage_key": stage.stage_key,
            "stage_label": stage.stage_label,
            "stage_order": _as_float(stage.order),
            "status": stage.status,
            "rank": row.rank,
            "nickname": row.nickname,
            "score": _as_float(row.score),
            "entry_id": row.entry_id,
            "controller": row.controller,
            "s1": _as_float(row.s1),
            "s2": _as_float(row.s2),
            "detail": row.detail,
        }
        for stage in archive.stages
        for row in stage.rows
    ]
    return pl.DataFrame(records, schema=STAGE_ROWS_SCHEMA)


def standings_frame(standings: Sequence[Standing]) -> pl.DataFrame:
    records = [{"rank": s.rank, "nickname": s.nickname} for s in standings]
    return pl.DataFrame(records, schema=STANDINGS_SCHEMA)


def qualifier_frame(rows: Sequence[QualifierRow]) -> pl.DataFrame:
    records = [
        {
            "rank": row.rank,
            "nickname": row.nickname,
            "score": _as_float(row.score),
            "entry_id": row.entry_id,
            "controller": row.controller,
            "passed": row.passed,
            "seed": row.seed,
        }
        for row in rows
    ]
    return pl.DataFrame(records, schema=QUALIFIER_SCHEMA)


def _seed_records(group: str, seeds: Sequence[SeedRow]) -> list[dict]:
    return [
        {
            "group": group,
            "seed": row.seed,
            "region_key": row.region_key,
            "region_label": row.region_label,
            "entry_id": row.entry_id,
            "nickname": row.nickname,
            "score": _as_float(row.score),
        }
        for row in seeds
    ]


def seeds_frame(archive: ArcadeSeasonArchive) -> pl.DataFrame:
    """Finals seeds for both groups (group "A" then "B")."""
    records = _seed_records("A", archive.finals.group_a_seeds) + _seed_records(
        "B", archive.finals.group_b_seeds
    )
    return pl.DataFrame(records, schema=SEEDS_SCHEMA)


def cross_match_frame(archive: ArcadeSeasonArchive) -> pl.DataFrame:
    """Quarterfinal pairings; `derived` marks pairings not yet entered in the feed."""
    derived = not archive.finals.cross_matches
    records = [
        {
            "match_no": _as_float(match.match_no),
            "left_seed": match.left.seed,
            "left_entry_id": match.left.entry_id,
            "left_nickname": match.left.nickname,
            "left_region_key": match.left.region_key,
            "right_seed": match.right.seed,
            "right_entry_id": match.right.entry_id,
            "right_nickname": match.right.nickname,
            "right_region_key": match.right.region_key,
            "winner_entry_id": match.winner_entry_id,
            "note": match.note,
            "derived": derived,
        }
        for match in resolve_cross_matches(archive.finals)
    ]
    return pl.DataFrame(records, schema=CROSS_MATCH_SCHEMA)


def region_ranking_frame(archive: ArcadeSeasonArchive) -> pl.DataFrame:
    """Final ranking of every region that has data, in region order."""
    records = [
        {
            "region_key": region.key,
            "rank": _as_float(row.rank),
            "entry_id": row.entry_id,
            "nickname": row.nickname,
            "status": row.status,
            "seed": _as_float(row.seed),
            "wins": _as_float(row.wins),
            "losses": _as_float(row.losses),
        }
        for region in archive.regions
        for row in build_region_final_ranking(region)
    ]
    return pl.DataFrame(records, schema=REGION_RANKING_SCHEMA)


def build_views(
    console: SeasonArchive, arcade: ArcadeSeasonArchive, cutoff: int = DEFAULT_QUALIFIER_CUTOFF
) -> dict[str, pl.DataFrame]:
    """Every exported view, keyed by its name in `registry.VIEWS`."""
    return {
        "console_stages": stages_frame(console),
        "console_standings": standings_frame(build_standings(console)),
        "console_qualifier": qualifier_frame(build_qualifier_rows(console, cutoff)),
        "arcade_seeds": seeds_frame(arcade),
        "arcade_cross_matches": cross_match_frame(arcade),
        "arcade_region_ranking": region_ranking_frame(arcade),
    }
