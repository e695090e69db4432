"""Console division results feed → SeasonArchive (pure parsing, no I/O).

The console division is a single bracket: an online qualifier, two
semifinals, a third-place match and a grand final. The feed stores each
phase as a stage object with free-form rows:

    {"console": [
        {"stageKey": "qualifier", "order": 1, "rows": [
            {"rank": 1, "nickname": "Don", "score": "1,001,230",
             "detail": "s1:500,100 s2:501,130 E-12 joy-con"}, ...]},
        {"stageKey": "final", "order": 5, "rows": [...]}]}

Parsing Functions:
  - resolve_console_season_archive(snapshot) → SeasonArchive

Derived views live in `stages`, `standings` and `qualifiers`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ingest.results.models import DEFAULT_SEASON, ResultRow, SeasonArchive, Stage
from results_utils.coerce import (
    first_text,
    nested,
    to_array,
    to_number,
    to_rank,
    to_record,
    to_text,
)
from results_utils.entry_identity import extract_identity

# Where the console stages may live in the snapshot, in lookup order.
CONSOLE_PAYLOAD_PATHS: tuple[tuple[str, ...], ...] = (
    ("console",),
    ("results", "console"),
    ("consoleArchive",),
)


def _normalize_row(value: Any) -> ResultRow | None:
    record = to_record(value)
    if record is None:
        return None

    nickname = first_text(record, "nickname", "name")
    if nickname is None:
        return None

    detail = to_text(record.get("detail")) or ""
    identity = extract_identity(nickname, detail)

    return ResultRow(
        rank=to_rank(record.get("rank")),
        nickname=nickname,
        score=to_number(record.get("score")),
        detail=detail,
        entry_id=identity.entry_id,
        controller=identity.controller,
        s1=identity.s1,
        s2=identity.s2,
    )


def _normalize_stage(value: Any) -> Stage | None:
    record = to_record(value)
    if record is None:
        return None

    stage_key = to_text(record.get("stageKey"))
    if stage_key is None:
        return None

    rows = [row for row in map(_normalize_row, to_array(record.get("rows"))) if row is not None]
    # sorted() is stable, so equal ranks keep feed order
    rows = sorted(rows, key=lambda row: row.rank)

    order = to_number(record.get("order"))
    return Stage(
        stage_key=stage_key,
        stage_label=to_text(record.get("stageLabel")) or stage_key,
        order=order if order is not None else 0,
        status=to_text(record.get("status")) or "",
        note=to_text(record.get("note")) or "",
        updated_at=to_text(record.get("updatedAt")),
        rows=tuple(rows),
    )


def _pick_console_payload(root: Mapping[str, Any]) -> Any:
    for path in CONSOLE_PAYLOAD_PATHS:
        candidate = nested(root, *path)
        if candidate is not None:
            return candidate
    return None


def resolve_console_season_archive(snapshot: Any) -> SeasonArchive:
    """Resolve the console division of a raw feed snapshot.

    Args:
        snapshot: Decoded JSON body of the results feed (untrusted)

    Returns:
        SeasonArchive with stages ordered by `order`; an empty archive for
        the default season when the snapshot holds no console data.

    """
    root = to_record(snapshot)
    if root is None:
        return SeasonArchive(season=DEFAULT_SEASON, stages=())

    payload = _pick_console_payload(root)
    # Some exports wrap the stage list: {"season": "2026", "stages": [...]}
    container = to_record(payload)
    stage_source = container.get("stages") if container is not None else payload
    season = (
        (first_text(container, "season") if container is not None else None)
        or first_text(root, "consoleSeason")
        or DEFAULT_SEASON
    )

    stages = [
        stage for stage in map(_normalize_stage, to_array(stage_source)) if stage is not None
    ]
    stages = sorted(stages, key=lambda stage: stage.order)

    return SeasonArchive(season=season, stages=tuple(stages))
