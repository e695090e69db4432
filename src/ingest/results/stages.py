"""Stage lookup: map hand-typed stage keys onto logical bracket roles.

Operators name stages freely ("sf-1", "semi_final_1", "Grand Final"), so
lookups are forgiving, but every accepted spelling is listed below per role
and a key is classified into at most one role. That keeps e.g.
"semifinal1" from ever answering a grand-final lookup.
"""

from __future__ import annotations

import re
from enum import Enum

from ingest.results.models import SeasonArchive, Stage


class StageRole(Enum):
    QUALIFIER = "qualifier"
    STANDINGS = "standings"
    QUARTERFINAL = "quarterfinal"
    SEMIFINAL = "semifinal"
    SEMIFINAL_1 = "semifinal_1"
    SEMIFINAL_2 = "semifinal_2"
    THIRD_PLACE = "third_place"
    FINAL = "final"


# Aliases are compacted keys (lower-case, no "-", "_" or spaces), tried in order.
STAGE_ROLE_ALIASES: dict[StageRole, tuple[str, ...]] = {
    StageRole.QUALIFIER: ("qualifier", "online", "qual"),
    StageRole.STANDINGS: ("standings", "ranking", "result", "podium"),
    StageRole.QUARTERFINAL: ("quarterfinal", "quarter", "qf"),
    StageRole.SEMIFINAL: ("semifinal", "semi", "sf"),
    StageRole.SEMIFINAL_1: ("sf1", "semifinal1", "semi1"),
    StageRole.SEMIFINAL_2: ("sf2", "semifinal2", "semi2"),
    StageRole.THIRD_PLACE: ("3rd", "third", "3rdplace", "thirdplace", "bronze"),
    StageRole.FINAL: ("final", "grandfinal", "championship"),
}

# Substring matches are resolved in this order; the more specific roles come
# first because their keys usually contain a more generic alias ("semifinal1"
# contains "semifinal", "quarterfinal" and "final_standings" contain "final").
STAGE_ROLE_PRECEDENCE: tuple[StageRole, ...] = (
    StageRole.SEMIFINAL_1,
    StageRole.SEMIFINAL_2,
    StageRole.QUARTERFINAL,
    StageRole.SEMIFINAL,
    StageRole.THIRD_PLACE,
    StageRole.QUALIFIER,
    StageRole.STANDINGS,
    StageRole.FINAL,
)

_SEPARATORS = re.compile(r"[-_\s]+")


def compact_stage_key(stage_key: str) -> str:
    """Lower-case `stage_key` and drop separators ("SF-1" → "sf1")."""
    return _SEPARATORS.sub("", stage_key.lower())


def classify_stage_key(stage_key: str) -> StageRole | None:
    """Return the logical role of a raw stage key, or None if unrecognized."""
    compact = compact_stage_key(stage_key)
    if not compact:
        return None
    for role in STAGE_ROLE_PRECEDENCE:
        if compact in STAGE_ROLE_ALIASES[role]:
            return role
    for role in STAGE_ROLE_PRECEDENCE:
        if any(alias in compact for alias in STAGE_ROLE_ALIASES[role]):
            return role
    return None


def find_stage(archive: SeasonArchive, *candidate_keys: str) -> Stage | None:
    """Return the first stage matching the highest-priority candidate key.

    A stage matches a candidate when its lower-cased key equals it or
    contains it. Candidates are tried in the given order and the first one
    with any match wins; among its matches the earliest stage (by `order`)
    is returned. None means "not available yet", not an error.
    """
    for candidate in candidate_keys:
        pattern = candidate.lower()
        for stage in archive.stages:
            key = stage.stage_key.lower()
            if key == pattern or pattern in key:
                return stage
    return None


def _matches_role(stage: Stage, alias: str, role: StageRole) -> bool:
    compact = compact_stage_key(stage.stage_key)
    if compact == alias:
        return True
    return alias in compact and classify_stage_key(stage.stage_key) is role


def find_role_stage(archive: SeasonArchive, role: StageRole) -> Stage | None:
    """Return the stage playing `role`, honoring alias priority then stage order."""
    for alias in STAGE_ROLE_ALIASES[role]:
        for stage in archive.stages:
            if _matches_role(stage, alias, role):
                return stage
    return None


def get_qualifier_stage(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.QUALIFIER)


def get_standings_stage(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.STANDINGS)


def get_semifinal_1(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.SEMIFINAL_1)


def get_semifinal_2(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.SEMIFINAL_2)


def get_third_place(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.THIRD_PLACE)


def get_final(archive: SeasonArchive) -> Stage | None:
    return find_role_stage(archive, StageRole.FINAL)


def find_stage_conflicts(archive: SeasonArchive) -> dict[StageRole, list[str]]:
    """Report roles claimed by more than one stage.

    Lookups stay deterministic (the earliest stage wins); this is only a
    data-quality signal for the ops team.

    Returns:
        Mapping of role → stage keys (in stage order) for every duplicated role

    """
    claimed: dict[StageRole, list[str]] = {}
    for stage in archive.stages:
        role = classify_stage_key(stage.stage_key)
        if role is not None:
            claimed.setdefault(role, []).append(stage.stage_key)
    return {role: keys for role, keys in claimed.items() if len(keys) > 1}
