"""Qualifier cutoff: annotate every qualifier row with pass/fail and seed."""

from __future__ import annotations

from dataclasses import asdict

from ingest.results.models import QualifierRow, ResultRow, SeasonArchive
from ingest.results.stages import get_qualifier_stage

DEFAULT_QUALIFIER_CUTOFF = 4


def passes_cutoff(rank: int, cutoff: int) -> bool:
    """True for placed rows inside the cutoff.

    Rank 0 marks a row whose placement the feed never resolved; such a row
    never passes, whatever the cutoff.
    """
    return 1 <= rank <= cutoff


def _qualifier_row(row: ResultRow, cutoff: int) -> QualifierRow:
    passed = passes_cutoff(row.rank, cutoff)
    return QualifierRow(**asdict(row), passed=passed, seed=f"#{row.rank}" if passed else None)


def build_qualifier_rows(
    archive: SeasonArchive, cutoff: int = DEFAULT_QUALIFIER_CUTOFF
) -> list[QualifierRow]:
    """Return the full qualifier field, annotated against `cutoff`.

    Rows outside the cutoff are kept (passed=False, no seed). Returns an
    empty list while no qualifier stage has been published.
    """
    stage = get_qualifier_stage(archive)
    if stage is None or not stage.rows:
        return []
    return [_qualifier_row(row, cutoff) for row in stage.rows]
