"""Tests for top-8 cross-bracket pairing and region final ranking."""

import random

from ingest.results.arcade_archive import get_region_by_key, resolve_arcade_season_archive
from ingest.results.cross_matches import derive_cross_matches, resolve_cross_matches
from ingest.results.models import (
    CrossMatch,
    FinalsArchive,
    OnlineRow,
    Participant,
    RegionArchive,
    RegionQualifiers,
    SeedRow,
    SwissStanding,
)
from ingest.results.ranking import (
    STATUS_ONLINE,
    STATUS_REGION_FIRST,
    STATUS_REGION_SECOND,
    build_region_final_ranking,
)


def _group(prefix: str, count: int = 4) -> list[SeedRow]:
    return [
        SeedRow(
            seed=seed,
            region_key="seoul",
            region_label="서울",
            entry_id=f"{prefix}{seed}",
            nickname=f"{prefix}{seed}",
        )
        for seed in range(1, count + 1)
    ]


def _pairs(matches: list[CrossMatch]) -> list[tuple]:
    return [(m.match_no, m.left.entry_id, m.right.entry_id) for m in matches]


class TestDeriveCrossMatches:
    """Test A1-B4 / A2-B3 / A3-B2 / A4-B1 pairing."""

    def test_cross_seeding(self):
        """Group mates are kept apart until the final."""
        matches = derive_cross_matches(_group("A"), _group("B"))

        assert _pairs(matches) == [
            (1, "A1", "B4"),
            (2, "A2", "B3"),
            (3, "A3", "B2"),
            (4, "A4", "B1"),
        ]

    def test_input_order_does_not_matter(self):
        """Any permutation of the seeds yields identical matches."""
        expected = derive_cross_matches(_group("A"), _group("B"))
        rng = random.Random(7)

        for _ in range(10):
            group_a, group_b = _group("A"), _group("B")
            rng.shuffle(group_a)
            rng.shuffle(group_b)
            assert derive_cross_matches(group_a, group_b) == expected

    def test_incomplete_groups(self):
        """Nothing is derived until both groups have four seeds."""
        assert derive_cross_matches(_group("A", 3), _group("B")) == []
        assert derive_cross_matches([], []) == []

    def test_top_four_of_larger_group(self):
        """Extra seeds beyond four sit out."""
        matches = derive_cross_matches(_group("A", 6), _group("B", 5))

        assert _pairs(matches)[0] == (1, "A1", "B4")
        assert {m.left.entry_id for m in matches} == {"A1", "A2", "A3", "A4"}


class TestResolveCrossMatches:
    """Test explicit-vs-derived precedence."""

    def test_explicit_matches_win(self):
        """Recorded matches are returned in match order."""
        a, b = _group("A"), _group("B")
        recorded = (
            CrossMatch(match_no=2, left=a[1], right=b[0]),
            CrossMatch(match_no=1, left=a[0], right=b[1], winner_entry_id="A1"),
        )
        finals = FinalsArchive(
            group_a_seeds=tuple(a), group_b_seeds=tuple(b), cross_matches=recorded
        )

        assert _pairs(resolve_cross_matches(finals)) == [(1, "A1", "B2"), (2, "A2", "B1")]

    def test_derived_from_snapshot(self, arcade_snapshot):
        """Region qualifiers become a full quarterfinal bracket."""
        finals = resolve_arcade_season_archive(arcade_snapshot).finals

        assert _pairs(resolve_cross_matches(finals)) == [
            (1, "E-11", "E-22"),
            (2, "E-21", "E-42"),
            (3, "E-31", "E-32"),
            (4, "E-41", "E-12"),
        ]

    def test_empty_finals(self):
        """No seeds, no matches."""
        assert resolve_cross_matches(FinalsArchive()) == []


class TestRegionFinalRanking:
    """Test per-region ranking tables."""

    def test_qualifiers_pinned_then_swiss_order(self, arcade_snapshot):
        """Group A/B qualifiers take 1st/2nd, the rest follow swiss results."""
        seoul = get_region_by_key(resolve_arcade_season_archive(arcade_snapshot), "seoul")

        ranking = build_region_final_ranking(seoul)

        assert [(r.rank, r.entry_id, r.status) for r in ranking] == [
            (1, "E-11", STATUS_REGION_FIRST),
            (2, "E-12", STATUS_REGION_SECOND),
            (3, "E-13", "eliminated"),
        ]
        assert ranking[0].wins == 3
        assert ranking[2].losses == 2

    def test_online_fallback(self):
        """Before the offline round only the online ranking exists."""
        region = RegionArchive(
            key="busan",
            label="4차 부산",
            short_label="부산",
            arcade="게임D",
            online_rows=(
                OnlineRow(rank=2, entry_id="E-2", nickname="two"),
                OnlineRow(rank=1, entry_id="E-1", nickname="one"),
                OnlineRow(rank=3, entry_id="E-1", nickname="dup"),
            ),
        )

        ranking = build_region_final_ranking(region)

        assert [(r.rank, r.entry_id, r.status) for r in ranking] == [
            (1, "E-1", STATUS_ONLINE),
            (2, "E-2", STATUS_ONLINE),
        ]

    def test_qualifier_only(self):
        """Qualifiers without swiss data still rank, names kept."""
        region = RegionArchive(
            key="seoul",
            label="1차 서울",
            short_label="서울",
            arcade="TAIKO LABS",
            qualifiers=RegionQualifiers(group_b=Participant(entry_id="E-9", nickname="Katsu")),
        )

        ranking = build_region_final_ranking(region)

        assert [(r.rank, r.nickname, r.status) for r in ranking] == [
            (2, "Katsu", STATUS_REGION_SECOND)
        ]

    def test_group_b_only_keeps_ranks_unique(self):
        """With only rank 2 pinned, swiss players continue from rank 3."""
        region = RegionArchive(
            key="seoul",
            label="1차 서울",
            short_label="서울",
            arcade="TAIKO LABS",
            qualifiers=RegionQualifiers(group_b=Participant(entry_id="E-9", nickname="Katsu")),
            swiss_standings=(
                SwissStanding(entry_id="E-1", nickname="Don", seed=1, wins=3, losses=0),
                SwissStanding(entry_id="E-2", nickname="Kat", seed=2, wins=1, losses=2),
            ),
        )

        ranking = build_region_final_ranking(region)

        assert [(r.rank, r.entry_id) for r in ranking] == [(2, "E-9"), (3, "E-1"), (4, "E-2")]

    def test_empty_region(self):
        """A region with nothing recorded has an empty table."""
        region = RegionArchive(key="gwangju", label="3차 광주", short_label="광주", arcade="")

        assert build_region_final_ranking(region) == []
