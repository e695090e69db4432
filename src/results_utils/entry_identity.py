"""Entry identity mining from free-text operator notes.

Operators often type the entry id, controller and per-song scores into the
`detail` cell instead of dedicated columns, e.g. ``"s1:1,234 s2:987 E-42
joy-con"``. These helpers pull those values back out on a best-effort basis.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from results_utils.coerce import Number, to_number

ENTRY_ID_PATTERN = re.compile(r"E-\d+", re.IGNORECASE)

CONTROLLER_JOYCON = "joycon"
CONTROLLER_PRO = "pro"
CONTROLLER_DRUM = "drum"

# Checked in order; the first category with a matching token wins.
CONTROLLER_TOKENS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (CONTROLLER_JOYCON, ("joy-con", "joycon", "joy con", "joy", "조이콘", "조이 콘")),
    (CONTROLLER_PRO, ("pro controller", "procon", "pro con", "프로콘")),
    (CONTROLLER_DRUM, ("tatacon", "taiko drum", "drum", "타타콘", "북")),
)

_SUB_SCORE_PATTERNS = {
    "s1": re.compile(r"(?<![a-z0-9])s1\s*[:=]\s*(\d[\d,]*(?:\.\d+)?)", re.IGNORECASE),
    "s2": re.compile(r"(?<![a-z0-9])s2\s*[:=]\s*(\d[\d,]*(?:\.\d+)?)", re.IGNORECASE),
}


@dataclass(frozen=True)
class EntryIdentity:
    """Identity fields derived from a nickname/detail pair."""

    entry_id: str | None
    controller: str
    s1: Number | None
    s2: Number | None


def extract_entry_id(nickname: str | None = None, detail: str | None = None) -> str | None:
    """Return the first ``E-<digits>`` id found in `detail`, then `nickname`."""
    for text in (detail, nickname):
        if not text:
            continue
        match = ENTRY_ID_PATTERN.search(text)
        if match:
            return match.group(0).upper()
    return None


def extract_controller(detail: str | None) -> str:
    """Classify the controller mentioned in `detail`; empty string if none."""
    if not detail:
        return ""
    text = detail.lower()
    for category, tokens in CONTROLLER_TOKENS:
        if any(token in text for token in tokens):
            return category
    return ""


def extract_sub_score(detail: str | None, key: str) -> Number | None:
    """Return the ``s1``/``s2`` score annotated in `detail`, if present.

    Args:
        detail: Free-text detail cell
        key: Either "s1" or "s2"

    Returns:
        The number with thousands separators stripped, or None

    Raises:
        KeyError: If `key` is not a known sub-score name

    """
    pattern = _SUB_SCORE_PATTERNS[key]
    if not detail:
        return None
    match = pattern.search(detail)
    if not match:
        return None
    return to_number(match.group(1))


def extract_identity(nickname: str | None, detail: str | None) -> EntryIdentity:
    """Derive every identity field at once."""
    return EntryIdentity(
        entry_id=extract_entry_id(nickname, detail),
        controller=extract_controller(detail),
        s1=extract_sub_score(detail, "s1"),
        s2=extract_sub_score(detail, "s2"),
    )


def format_nickname_with_entry_id(nickname: str | None, entry_id: str | None) -> str:
    """Display label ``"name (E-1)"`` used by result tables."""
    name = (nickname or "").strip()
    if not name:
        return entry_id or "-"
    if not entry_id or entry_id in name:
        return name
    return f"{name} ({entry_id})"
