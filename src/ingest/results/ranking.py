"""Final ranking table for one arcade region."""

from __future__ import annotations

from ingest.results.models import RegionArchive, RegionFinalRank

STATUS_REGION_FIRST = "region_first"
STATUS_REGION_SECOND = "region_second"
STATUS_ONLINE = "online"


def build_region_final_ranking(region: RegionArchive) -> list[RegionFinalRank]:
    """Rank everyone who played in `region`.

    The two finals qualifiers are pinned to ranks 1 and 2 (falling back to
    the seeding round's top two). Everyone else follows in swiss order:
    wins desc, losses asc, seed asc. Before the offline round starts the
    online qualifier ranking is shown instead. Each entry appears once.
    """
    rows: list[RegionFinalRank] = []
    used: set[str] = set()
    standings = {row.entry_id: row for row in region.swiss_standings}
    online = {row.entry_id: row for row in region.online_rows}

    def push(
        entry_id: str | None,
        status: str,
        forced_rank: int | None = None,
        nickname: str | None = None,
    ) -> None:
        if not entry_id or entry_id in used:
            return
        standing = standings.get(entry_id)
        online_row = online.get(entry_id)
        rows.append(
            RegionFinalRank(
                rank=forced_rank
                if forced_rank is not None
                else max((row.rank for row in rows), default=0) + 1,
                entry_id=entry_id,
                nickname=nickname
                or (standing.nickname if standing else None)
                or (online_row.nickname if online_row else None)
                or entry_id,
                status=status,
                seed=standing.seed if standing else None,
                wins=standing.wins if standing else None,
                losses=standing.losses if standing else None,
            )
        )
        used.add(entry_id)

    first = region.qualifiers.group_a or next(
        (row for row in region.seeding_rows if row.rank == 1), None
    )
    second = region.qualifiers.group_b or next(
        (row for row in region.seeding_rows if row.rank == 2), None
    )
    if first is not None:
        push(first.entry_id, STATUS_REGION_FIRST, 1, first.nickname)
    if second is not None:
        push(second.entry_id, STATUS_REGION_SECOND, 2, second.nickname)

    ordered = sorted(
        region.swiss_standings, key=lambda row: (-row.wins, row.losses, row.seed)
    )
    for standing in ordered:
        push(standing.entry_id, standing.status, None, standing.nickname)

    if not rows:
        for online_row in sorted(region.online_rows, key=lambda row: row.rank):
            push(online_row.entry_id, STATUS_ONLINE, online_row.rank, online_row.nickname)

    return sorted(rows, key=lambda row: row.rank)
