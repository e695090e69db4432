"""Top-8 quarterfinal pairing between the two finals groups."""

from __future__ import annotations

from collections.abc import Sequence

from ingest.results.models import CrossMatch, FinalsArchive, SeedRow

BRACKET_SIZE = 4

# (group A seed index, group B seed index) per match, numbered 1..4
CROSS_SEEDING: tuple[tuple[int, int], ...] = ((0, 3), (1, 2), (2, 1), (3, 0))


def derive_cross_matches(
    group_a: Sequence[SeedRow], group_b: Sequence[SeedRow]
) -> list[CrossMatch]:
    """Pair A1-B4, A2-B3, A3-B2, A4-B1 so group mates only meet in the final.

    Returns an empty list until both groups hold four seeds. Only the top
    four seeds of a larger group take part.
    """
    a_sorted = sorted(group_a, key=lambda row: row.seed)
    b_sorted = sorted(group_b, key=lambda row: row.seed)
    if len(a_sorted) < BRACKET_SIZE or len(b_sorted) < BRACKET_SIZE:
        return []
    return [
        CrossMatch(match_no=match_no, left=a_sorted[a_index], right=b_sorted[b_index])
        for match_no, (a_index, b_index) in enumerate(CROSS_SEEDING, start=1)
    ]


def resolve_cross_matches(finals: FinalsArchive) -> list[CrossMatch]:
    """Matches recorded in the feed win; derive the pairing only when none exist."""
    if finals.cross_matches:
        return sorted(finals.cross_matches, key=lambda match: match.match_no)
    return derive_cross_matches(finals.group_a_seeds, finals.group_b_seeds)
