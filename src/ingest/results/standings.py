"""Final standings: from a dedicated podium stage, or derived from the bracket."""

from __future__ import annotations

from ingest.results.models import SeasonArchive, Stage, Standing
from ingest.results.stages import get_final, get_standings_stage, get_third_place


def _bracket_pair(stage: Stage | None, top_rank: int) -> list[Standing]:
    """Winner/loser of a two-player stage as ranks `top_rank` and `top_rank + 1`.

    Empty when the stage is missing, has fewer than two rows, or its top two
    rows share a stored rank or lack one (no winner can be inferred).
    """
    if stage is None or len(stage.rows) < 2:
        return []
    winner, loser = sorted(stage.rows, key=lambda row: row.rank)[:2]
    if winner.rank < 1 or winner.rank == loser.rank:
        return []
    return [
        Standing(rank=top_rank, nickname=winner.nickname),
        Standing(rank=top_rank + 1, nickname=loser.nickname),
    ]


def build_standings(archive: SeasonArchive) -> list[Standing]:
    """Return the final standings, ordered by rank.

    A standings/ranking/result/podium stage with rows is authoritative.
    Otherwise ranks 1-2 come from the grand final and 3-4 from the
    third-place match; whichever half is not decided yet is left out, so
    the result has 0, 2 or 4 entries mid-tournament.
    """
    podium = get_standings_stage(archive)
    if podium is not None and podium.rows:
        return [Standing(rank=row.rank, nickname=row.nickname) for row in podium.rows]

    standings = _bracket_pair(get_final(archive), 1) + _bracket_pair(get_third_place(archive), 3)
    return sorted(standings, key=lambda standing: standing.rank)


def podium_nickname(standings: list[Standing], rank: int) -> str | None:
    """Nickname holding `rank`, or None when that place is not decided."""
    for standing in standings:
        if standing.rank == rank:
            return standing.nickname
    return None
