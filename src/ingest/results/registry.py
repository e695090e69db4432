"""Results view registry.

Maps exported view names to the division they are computed from and the
description written into each view's `_meta.json` sidecar.
"""

VIEWS = {
    "console_stages": {
        "division": "console",
        "description": "Every console stage row, normalized and identity-enriched",
    },
    "console_standings": {
        "division": "console",
        "description": "Final podium (dedicated stage or derived from the bracket)",
    },
    "console_qualifier": {
        "division": "console",
        "description": "Qualifier field with pass/fail and seeds against the cutoff",
    },
    "arcade_seeds": {
        "division": "arcade",
        "description": "Top-8 finals seeds for groups A and B",
    },
    "arcade_cross_matches": {
        "division": "arcade",
        "description": "Quarterfinal pairings (recorded, or cross-seeded fallback)",
    },
    "arcade_region_ranking": {
        "division": "arcade",
        "description": "Per-region final ranking",
    },
}
