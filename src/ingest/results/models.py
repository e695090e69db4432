"""Typed, immutable views produced by the results resolvers.

Sequences are tuples so two resolves of the same snapshot compare equal and
never share mutable state with the caller's snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from results_utils.coerce import Number

DEFAULT_SEASON = "2026"


# -----------------------------
# Console division
# -----------------------------


@dataclass(frozen=True)
class ResultRow:
    """One participant's result within a stage.

    - rank: positive placement, 0 when the feed had none
    - nickname: display name (rows without one never get here)
    - score: nullable total score
    - detail: free-text operator note
    - entry_id / controller / s1 / s2: mined from nickname/detail
    """

    rank: int
    nickname: str
    score: Number | None = None
    detail: str = ""
    entry_id: str | None = None
    controller: str = ""
    s1: Number | None = None
    s2: Number | None = None


@dataclass(frozen=True)
class Stage:
    """A named phase of a division (qualifier, semifinal, final, ...)."""

    stage_key: str
    stage_label: str
    order: Number = 0
    status: str = ""
    note: str = ""
    updated_at: str | None = None
    rows: tuple[ResultRow, ...] = ()


@dataclass(frozen=True)
class SeasonArchive:
    season: str = DEFAULT_SEASON
    stages: tuple[Stage, ...] = ()


@dataclass(frozen=True)
class Standing:
    rank: int
    nickname: str


@dataclass(frozen=True)
class QualifierRow(ResultRow):
    """Qualifier result annotated with the cutoff decision."""

    passed: bool = False
    seed: str | None = None


# -----------------------------
# Arcade division
# -----------------------------


@dataclass(frozen=True)
class Participant:
    entry_id: str
    nickname: str
    seed: Number | None = None


@dataclass(frozen=True)
class OnlineRow:
    """Online qualifier submission (two songs, summed)."""

    rank: int
    entry_id: str
    nickname: str
    score1: Number = 0
    score2: Number = 0
    total: Number = 0
    submitted_at: str | None = None
    advanced: bool = False


@dataclass(frozen=True)
class SwissGame:
    song: str
    level: str | None = None
    p1_score: Number = 0
    p2_score: Number = 0


@dataclass(frozen=True)
class SwissMatch:
    round: Number
    player1: Participant
    player2: Participant | None = None
    table: Number | None = None
    high_seed_entry_id: str | None = None
    games: tuple[SwissGame, ...] = ()
    winner_entry_id: str | None = None
    tie_breaker_song: str | None = None
    bye: bool = False
    note: str | None = None


SWISS_STATUSES = ("alive", "qualified", "decider", "eliminated")


@dataclass(frozen=True)
class SwissStanding:
    entry_id: str
    nickname: str
    seed: Number
    wins: Number = 0
    losses: Number = 0
    status: str = "alive"


@dataclass(frozen=True)
class ScoreAttackRow:
    """Single-song score attack row (3-1 decider, seeding round)."""

    rank: Number
    entry_id: str
    nickname: str
    score: Number = 0
    note: str | None = None


@dataclass(frozen=True)
class RegionQualifiers:
    group_a: Participant | None = None
    group_b: Participant | None = None


@dataclass(frozen=True)
class RegionArchive:
    """Everything recorded for one regional round."""

    key: str
    label: str
    short_label: str
    arcade: str
    updated_at: str | None = None
    online_rows: tuple[OnlineRow, ...] = ()
    swiss_matches: tuple[SwissMatch, ...] = ()
    swiss_standings: tuple[SwissStanding, ...] = ()
    decider_rows: tuple[ScoreAttackRow, ...] = ()
    decider_winner_entry_id: str | None = None
    seeding_rows: tuple[ScoreAttackRow, ...] = ()
    qualifiers: RegionQualifiers = field(default_factory=RegionQualifiers)
    # entry id → offline song picks
    registrations: tuple[tuple[str, tuple[str, ...]], ...] = ()

    def has_data(self) -> bool:
        return bool(
            self.online_rows or self.swiss_matches or self.decider_rows or self.seeding_rows
        )


@dataclass(frozen=True)
class SeedRow:
    """Top-8 finals seed for one qualifying group."""

    seed: int
    region_key: str
    region_label: str
    entry_id: str
    nickname: str
    score: Number | None = None


@dataclass(frozen=True)
class CrossMatch:
    match_no: Number
    left: SeedRow
    right: SeedRow
    winner_entry_id: str | None = None
    note: str | None = None


@dataclass(frozen=True)
class FinalsArchive:
    updated_at: str | None = None
    group_a_seeds: tuple[SeedRow, ...] = ()
    group_b_seeds: tuple[SeedRow, ...] = ()
    cross_matches: tuple[CrossMatch, ...] = ()


@dataclass(frozen=True)
class SongSet:
    """Set songs of each arcade phase, as display labels."""

    online1: str = "うそうそ時 (★8)"
    online2: str = "輝きを求めて (★8)"
    decider31: str = "大空と太鼓の踊り (★9)"
    seeding: str = "タイコロール (★10)"


@dataclass(frozen=True)
class ArcadeSeasonArchive:
    season: str = DEFAULT_SEASON
    title: str = "아케이드 예선 아카이브"
    updated_at: str | None = None
    songs: SongSet = field(default_factory=SongSet)
    regions: tuple[RegionArchive, ...] = ()
    finals: FinalsArchive = field(default_factory=FinalsArchive)


@dataclass(frozen=True)
class RegionFinalRank:
    """One line of a region's final ranking table.

    `status` is a machine key; display text is the presentation layer's job.
    """

    rank: Number
    entry_id: str
    nickname: str
    status: str
    seed: Number | None = None
    wins: Number | None = None
    losses: Number | None = None
