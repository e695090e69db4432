"""Arcade division results feed → ArcadeSeasonArchive (pure parsing, no I/O).

The arcade division runs one offline round per region (online qualifier →
swiss → 3-1 decider → seeding score attack), sending two qualifiers per
region (group A / group B) to a cross-seeded top-8 final. The feed nests
each block in a couple of historical shapes, e.g. `onlineRows` vs
`online.rows`; both are accepted.

Parsing Functions:
  - resolve_arcade_season_archive(snapshot) → ArcadeSeasonArchive
  - get_region_by_key(archive, key) → RegionArchive | None

Cross-bracket fill-in lives in `cross_matches`, region ranking in `ranking`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ingest.results.models import (
    DEFAULT_SEASON,
    SWISS_STATUSES,
    ArcadeSeasonArchive,
    CrossMatch,
    FinalsArchive,
    OnlineRow,
    Participant,
    RegionArchive,
    RegionQualifiers,
    ScoreAttackRow,
    SeedRow,
    SongSet,
    SwissGame,
    SwissMatch,
    SwissStanding,
)
from results_utils.coerce import (
    first_array,
    first_text,
    nested,
    to_array,
    to_number,
    to_rank,
    to_record,
    to_text,
)
from results_utils.regions import (
    REGION_DEFINITIONS,
    get_region_definition,
    normalize_region_key,
)

T = TypeVar("T")

ARCHIVE_PAYLOAD_KEYS = (
    "arcadeArchive2026",
    "arcadeArchive",
    "arcade_archive_2026",
    "arcade_archive",
    "archive",
)
FINALS_PAYLOAD_KEYS = ("finals", "top8", "finalsTop8")

_TRUE_FLAGS = {"true", "yes", "y", "1"}


def _to_flag(value: Any) -> bool:
    """Spreadsheet checkbox → bool ("TRUE", 1, true)."""
    if isinstance(value, bool):
        return value
    number = to_number(value)
    if number is not None:
        return number != 0
    text = to_text(value)
    return text is not None and text.lower() in _TRUE_FLAGS


def _coalesce(record: Mapping[str, Any], *keys: str) -> Any:
    """First key whose value is not null (JSON ``??`` semantics)."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def build_empty_region(key: str) -> RegionArchive:
    region = get_region_definition(key)
    return RegionArchive(
        key=region.key,
        label=region.label,
        short_label=region.short_label,
        arcade=region.arcade,
    )


def build_empty_archive() -> ArcadeSeasonArchive:
    return ArcadeSeasonArchive(
        season=DEFAULT_SEASON,
        regions=tuple(build_empty_region(region.key) for region in REGION_DEFINITIONS),
    )


# -----------------------------
# Row normalizers
# -----------------------------


def _normalize_participant(value: Any, fallback_index: int = 0) -> Participant | None:
    record = to_record(value)
    if record is None:
        return None
    entry_id = first_text(record, "entryId", "id", "code")
    nickname = first_text(record, "nickname", "name", "player")
    if entry_id is None and nickname is None:
        return None
    return Participant(
        entry_id=entry_id or f"E-UNK-{fallback_index + 1}",
        nickname=nickname or entry_id or f"Player {fallback_index + 1}",
        seed=to_number(record.get("seed")),
    )


def _normalize_online_row(value: Any, fallback_rank: int) -> OnlineRow | None:
    record = to_record(value)
    if record is None:
        return None
    rank = to_rank(record.get("rank")) or fallback_rank
    entry_id = first_text(record, "entryId", "id", "code") or f"E-UNK-{rank}"
    score1 = to_number(record.get("score1")) or 0
    score2 = to_number(record.get("score2")) or 0
    total = to_number(record.get("total"))
    return OnlineRow(
        rank=rank,
        entry_id=entry_id,
        nickname=first_text(record, "nickname", "name", "player") or entry_id,
        score1=score1,
        score2=score2,
        total=total if total is not None else score1 + score2,
        submitted_at=first_text(record, "submittedAt", "entryAt"),
        advanced=_to_flag(record.get("advanced")),
    )


def _normalize_swiss_game(value: Any) -> SwissGame | None:
    record = to_record(value)
    if record is None:
        return None
    song = to_text(record.get("song"))
    if song is None:
        return None
    return SwissGame(
        song=song,
        level=to_text(record.get("level")),
        p1_score=to_number(record.get("p1Score")) or 0,
        p2_score=to_number(record.get("p2Score")) or 0,
    )


def _normalize_swiss_match(value: Any, fallback_index: int) -> SwissMatch | None:
    record = to_record(value)
    if record is None:
        return None
    player1 = _normalize_participant(_coalesce(record, "player1", "left"), fallback_index)
    if player1 is None:
        return None
    games = [_normalize_swiss_game(game) for game in to_array(record.get("games"))]
    round_no = to_number(record.get("round"))
    return SwissMatch(
        round=round_no if round_no is not None else 1,
        player1=player1,
        player2=_normalize_participant(_coalesce(record, "player2", "right"), fallback_index + 1),
        table=to_number(record.get("table")),
        high_seed_entry_id=first_text(record, "highSeedEntryId", "sideSelector"),
        games=tuple(game for game in games if game is not None),
        winner_entry_id=to_text(record.get("winnerEntryId")),
        tie_breaker_song=to_text(record.get("tieBreakerSong")),
        bye=_to_flag(record.get("bye")),
        note=to_text(record.get("note")),
    )


def _normalize_standing_row(value: Any, fallback_index: int) -> SwissStanding | None:
    record = to_record(value)
    if record is None:
        return None
    entry_id = first_text(record, "entryId", "id") or f"E-UNK-{fallback_index + 1}"
    status = (to_text(record.get("status")) or "").lower()
    seed = to_number(record.get("seed"))
    return SwissStanding(
        entry_id=entry_id,
        nickname=first_text(record, "nickname", "name") or entry_id,
        seed=seed if seed is not None else fallback_index + 1,
        wins=to_number(record.get("wins")) or 0,
        losses=to_number(record.get("losses")) or 0,
        status=status if status in SWISS_STATUSES else "alive",
    )


def _normalize_score_attack_row(value: Any, fallback_rank: int) -> ScoreAttackRow | None:
    record = to_record(value)
    if record is None:
        return None
    rank = to_rank(record.get("rank")) or fallback_rank
    entry_id = first_text(record, "entryId", "id") or f"E-UNK-{rank}"
    return ScoreAttackRow(
        rank=rank,
        entry_id=entry_id,
        nickname=first_text(record, "nickname", "name") or entry_id,
        score=to_number(record.get("score")) or 0,
        note=to_text(record.get("note")),
    )


def _split_song_list(value: Any) -> list[str]:
    """Offline song picks arrive as a list or as "a || b" / "a, b" text."""
    if isinstance(value, list):
        songs = [song.strip() for song in value if isinstance(song, str)]
    elif isinstance(value, str):
        separator = " || " if " || " in value else ","
        songs = [song.strip() for song in value.split(separator)]
    else:
        return []
    return [song for song in songs if song]


def _normalize_registrations(value: Any) -> tuple[tuple[str, tuple[str, ...]], ...]:
    record = to_record(value)
    if record is None:
        return ()
    registrations = []
    for entry_id, raw in record.items():
        entry = to_record(raw)
        if entry is None:
            continue
        songs = _split_song_list(entry.get("offlineSongs"))
        if songs:
            registrations.append((str(entry_id), tuple(songs)))
    return tuple(registrations)


def _normalize_rows(
    source: list[Any], normalizer: Callable[[Any, int], T | None], start: int
) -> tuple[T, ...]:
    rows = [normalizer(row, index + start) for index, row in enumerate(source)]
    return tuple(row for row in rows if row is not None)


def _normalize_region_archive(key: str, value: Any) -> RegionArchive:
    base = build_empty_region(key)
    record = to_record(value)
    if record is None:
        return base

    qualifiers = (
        to_record(record.get("qualifiers"))
        or to_record(nested(record, "seeding", "qualifiers"))
        or {}
    )

    return RegionArchive(
        key=base.key,
        label=to_text(record.get("label")) or base.label,
        short_label=to_text(record.get("shortLabel")) or base.short_label,
        arcade=base.arcade,
        updated_at=to_text(record.get("updatedAt")),
        online_rows=_normalize_rows(
            first_array(record.get("onlineRows"), nested(record, "online", "rows")),
            _normalize_online_row,
            1,
        ),
        swiss_matches=_normalize_rows(
            first_array(record.get("swissMatches"), nested(record, "swiss", "matches")),
            _normalize_swiss_match,
            1,
        ),
        swiss_standings=_normalize_rows(
            first_array(record.get("swissStandings"), nested(record, "swiss", "standings")),
            _normalize_standing_row,
            0,
        ),
        decider_rows=_normalize_rows(
            first_array(record.get("deciderRows"), nested(record, "decider31", "rows")),
            _normalize_score_attack_row,
            1,
        ),
        decider_winner_entry_id=to_text(record.get("deciderWinnerEntryId"))
        or to_text(nested(record, "decider31", "winnerEntryId")),
        seeding_rows=_normalize_rows(
            first_array(record.get("seedingRows"), nested(record, "seeding", "rows")),
            _normalize_score_attack_row,
            1,
        ),
        qualifiers=RegionQualifiers(
            group_a=_normalize_participant(qualifiers.get("groupA"), 0),
            group_b=_normalize_participant(qualifiers.get("groupB"), 1),
        ),
        registrations=_normalize_registrations(record.get("registrations")),
    )


# -----------------------------
# Finals
# -----------------------------


def _normalize_seed_row(value: Any, fallback_seed: int, fallback_region: str) -> SeedRow | None:
    record = to_record(value)
    if record is None:
        return None
    region_key = normalize_region_key(_coalesce(record, "regionKey", "region")) or fallback_region
    seed = to_rank(record.get("seed")) or fallback_seed
    return SeedRow(
        seed=seed,
        region_key=region_key,
        region_label=to_text(record.get("regionLabel"))
        or get_region_definition(region_key).short_label,
        entry_id=first_text(record, "entryId", "id") or f"E-UNK-{seed}",
        nickname=first_text(record, "nickname", "name", "entryId") or f"Player {seed}",
        score=to_number(record.get("score")),
    )


def _normalize_cross_match(value: Any, fallback_match_no: int) -> CrossMatch | None:
    record = to_record(value)
    if record is None:
        return None
    left = _normalize_seed_row(record.get("left"), 1, "seoul")
    right = _normalize_seed_row(record.get("right"), 1, "busan")
    if left is None or right is None:
        return None
    match_no = to_number(record.get("matchNo"))
    return CrossMatch(
        match_no=match_no if match_no is not None else fallback_match_no,
        left=left,
        right=right,
        winner_entry_id=to_text(record.get("winnerEntryId")),
        note=to_text(record.get("note")),
    )


def _parse_group_seeds(source: list[Any]) -> list[SeedRow]:
    rows = []
    for index, raw in enumerate(source):
        fallback_region = (
            REGION_DEFINITIONS[index].key if index < len(REGION_DEFINITIONS) else "seoul"
        )
        row = _normalize_seed_row(raw, index + 1, fallback_region)
        if row is not None:
            rows.append(row)
    return rows


def ensure_unique_seeds(rows: list[SeedRow]) -> tuple[SeedRow, ...]:
    """Sort a group by seed; renumber 1..n when seeds collide.

    Explicit seeds are kept as published unless two rows share one (the
    original feed order breaks the tie before renumbering).
    """
    ordered = sorted(rows, key=lambda row: row.seed)
    seeds = [row.seed for row in ordered]
    if len(set(seeds)) == len(seeds):
        return tuple(ordered)
    return tuple(
        SeedRow(
            seed=position,
            region_key=row.region_key,
            region_label=row.region_label,
            entry_id=row.entry_id,
            nickname=row.nickname,
            score=row.score,
        )
        for position, row in enumerate(ordered, start=1)
    )


def derive_seeds_from_regions(
    regions: tuple[RegionArchive, ...], group: str
) -> tuple[SeedRow, ...]:
    """Build a finals group from each region's qualifier when the feed has none.

    Qualifiers are ordered by their seeding-round score (highest first),
    then seeding rank, then region order, and seeded 1..n.

    Args:
        regions: Regions in definition order
        group: "group_a" or "group_b"

    """
    candidates = []
    for region_index, region in enumerate(regions):
        qualifier: Participant | None = getattr(region.qualifiers, group)
        if qualifier is None:
            continue
        seeding = next(
            (row for row in region.seeding_rows if row.entry_id == qualifier.entry_id), None
        )
        score = seeding.score if seeding is not None else None
        seeding_rank = seeding.rank if seeding is not None else None
        sort_key = (
            score is None,
            -(score or 0),
            seeding_rank is None,
            seeding_rank or 0,
            region_index,
        )
        candidates.append((sort_key, region, qualifier, score))

    candidates.sort(key=lambda candidate: candidate[0])
    return tuple(
        SeedRow(
            seed=position,
            region_key=region.key,
            region_label=region.short_label,
            entry_id=qualifier.entry_id,
            nickname=qualifier.nickname,
            score=score,
        )
        for position, (_key, region, qualifier, score) in enumerate(candidates, start=1)
    )


def _pick_archive_payload(root: Mapping[str, Any]) -> Mapping[str, Any] | None:
    for container in (root, to_record(root.get("results"))):
        if container is None:
            continue
        for key in ARCHIVE_PAYLOAD_KEYS:
            payload = to_record(container.get(key))
            if payload is not None:
                return payload
    return None


def _resolve_regions(payload: Mapping[str, Any]) -> tuple[RegionArchive, ...]:
    resolved: dict[str, RegionArchive] = {}
    for raw_region in to_array(payload.get("regions")):
        record = to_record(raw_region)
        if record is None:
            continue
        key = normalize_region_key(_coalesce(record, "key", "region"))
        # first record for a region wins, like duplicate stages
        if key is None or key in resolved:
            continue
        resolved[key] = _normalize_region_archive(key, record)
    return tuple(
        resolved[region.key] if region.key in resolved else build_empty_region(region.key)
        for region in REGION_DEFINITIONS
    )


def _resolve_songs(payload: Mapping[str, Any]) -> SongSet:
    songs = to_record(payload.get("songs")) or {}
    defaults = SongSet()
    return SongSet(
        online1=to_text(songs.get("online1")) or defaults.online1,
        online2=to_text(songs.get("online2")) or defaults.online2,
        decider31=to_text(songs.get("decider31")) or defaults.decider31,
        seeding=to_text(songs.get("seeding")) or defaults.seeding,
    )


def _resolve_finals(
    payload: Mapping[str, Any], regions: tuple[RegionArchive, ...]
) -> FinalsArchive:
    finals: Mapping[str, Any] = {}
    for key in FINALS_PAYLOAD_KEYS:
        record = to_record(payload.get(key))
        if record is not None:
            finals = record
            break

    group_a = _parse_group_seeds(
        first_array(finals.get("groupASeeds"), nested(finals, "groupA", "seeds"))
    )
    group_b = _parse_group_seeds(
        first_array(finals.get("groupBSeeds"), nested(finals, "groupB", "seeds"))
    )
    cross_source = first_array(finals.get("crossMatches"), finals.get("matches"))

    return FinalsArchive(
        updated_at=to_text(finals.get("updatedAt")),
        group_a_seeds=ensure_unique_seeds(group_a)
        if group_a
        else derive_seeds_from_regions(regions, "group_a"),
        group_b_seeds=ensure_unique_seeds(group_b)
        if group_b
        else derive_seeds_from_regions(regions, "group_b"),
        cross_matches=_normalize_rows(cross_source, _normalize_cross_match, 1),
    )


def resolve_arcade_season_archive(snapshot: Any) -> ArcadeSeasonArchive:
    """Resolve the arcade division of a raw feed snapshot.

    Args:
        snapshot: Decoded JSON body of the results feed (untrusted)

    Returns:
        ArcadeSeasonArchive that always lists the four regions in definition
        order (empty regions for rounds not yet played).

    """
    root = to_record(snapshot)
    payload = _pick_archive_payload(root) if root is not None else None
    if payload is None:
        return build_empty_archive()

    regions = _resolve_regions(payload)
    defaults = ArcadeSeasonArchive()
    return ArcadeSeasonArchive(
        season=to_text(payload.get("season")) or DEFAULT_SEASON,
        title=to_text(payload.get("title")) or defaults.title,
        updated_at=to_text(payload.get("updatedAt")),
        songs=_resolve_songs(payload),
        regions=regions,
        finals=_resolve_finals(payload, regions),
    )


def get_region_by_key(archive: ArcadeSeasonArchive, key: str) -> RegionArchive | None:
    for region in archive.regions:
        if region.key == key:
            return region
    return None


def finalized_region_count(archive: ArcadeSeasonArchive) -> int:
    """Regions that have sent both of their finals qualifiers."""
    return sum(
        1
        for region in archive.regions
        if region.qualifiers.group_a is not None and region.qualifiers.group_b is not None
    )

