from .coerce import (
    first_array,
    first_number,
    first_text,
    nested,
    to_array,
    to_number,
    to_rank,
    to_record,
    to_text,
)
from .entry_identity import (
    EntryIdentity,
    extract_controller,
    extract_entry_id,
    extract_identity,
    extract_sub_score,
    format_nickname_with_entry_id,
)
from .regions import (
    REGION_DEFINITIONS,
    REGION_KEYS,
    RegionDefinition,
    get_region_definition,
    is_region_key,
    normalize_region_key,
)

__all__: list[str] = [
    "to_record",
    "to_array",
    "to_text",
    "to_number",
    "to_rank",
    "first_text",
    "first_number",
    "first_array",
    "nested",
    "EntryIdentity",
    "extract_entry_id",
    "extract_controller",
    "extract_sub_score",
    "extract_identity",
    "format_nickname_with_entry_id",
    "REGION_DEFINITIONS",
    "REGION_KEYS",
    "RegionDefinition",
    "get_region_definition",
    "is_region_key",
    "normalize_region_key",
]
