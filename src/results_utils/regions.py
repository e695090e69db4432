"""Arcade qualifier regions (one offline round per city)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from results_utils.coerce import to_text


@dataclass(frozen=True)
class RegionDefinition:
    """Static metadata for one regional round."""

    key: str
    label: str
    short_label: str
    arcade: str
    aliases: tuple[str, ...]


REGION_DEFINITIONS: tuple[RegionDefinition, ...] = (
    RegionDefinition("seoul", "1차 서울", "서울", "TAIKO LABS", ("seoul", "서울")),
    RegionDefinition(
        "daejeon", "2차 대전", "대전", "대전 싸이뮤직 게임월드", ("daejeon", "대전")
    ),
    RegionDefinition("gwangju", "3차 광주", "광주", "광주 게임플라자", ("gwangju", "광주")),
    RegionDefinition("busan", "4차 부산", "부산", "게임D", ("busan", "부산")),
)

REGION_KEYS: tuple[str, ...] = tuple(region.key for region in REGION_DEFINITIONS)


def normalize_region_key(value: Any) -> str | None:
    """Map free-text region names ("Seoul R1", "4차 부산") onto a region key."""
    text = to_text(value)
    if text is None:
        return None
    lowered = text.lower()
    for region in REGION_DEFINITIONS:
        if any(alias in lowered for alias in region.aliases):
            return region.key
    return None


def get_region_definition(key: str) -> RegionDefinition:
    """Return the definition for `key`.

    Raises:
        KeyError: If `key` is not one of REGION_KEYS

    """
    for region in REGION_DEFINITIONS:
        if region.key == key:
            return region
    raise KeyError(f"Unknown region key: {key!r}")


def is_region_key(value: str) -> bool:
    return value in REGION_KEYS
