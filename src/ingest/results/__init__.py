"""Tournament results archive resolution.

Turns a raw results feed snapshot into typed console and arcade season
archives (stages, standings, qualifiers, finals seeds, cross matches).
"""

from .arcade_archive import get_region_by_key, resolve_arcade_season_archive
from .cache import ArchiveCache
from .client import FeedUnavailableError, ResultsFeedClient
from .console_archive import resolve_console_season_archive
from .cross_matches import derive_cross_matches, resolve_cross_matches
from .qualifiers import build_qualifier_rows
from .ranking import build_region_final_ranking
from .stages import StageRole, find_stage, find_stage_conflicts
from .standings import build_standings

__all__ = [
    "ArchiveCache",
    "FeedUnavailableError",
    "ResultsFeedClient",
    "StageRole",
    "build_qualifier_rows",
    "build_region_final_ranking",
    "build_standings",
    "derive_cross_matches",
    "find_stage",
    "find_stage_conflicts",
    "get_region_by_key",
    "resolve_arcade_season_archive",
    "resolve_console_season_archive",
    "resolve_cross_matches",
]
