"""Shared fixtures: decoded results feed snapshots.

Snapshots mimic the JSON body of the results feed, including the messy
parts: string scores, missing names, out-of-order rows.
"""

import pytest


def _qualifier_rows(count: int) -> list[dict]:
    return [
        {
            "rank": rank,
            "nickname": f"Player {rank}",
            "score": f"{1_000_000 - rank * 1000:,}",
            "detail": f"s1:{500_000 - rank:,} s2:{500_000 - rank * 999:,} E-{rank} joy-con",
        }
        for rank in range(1, count + 1)
    ]


@pytest.fixture
def console_snapshot():
    """Console division with qualifier, semifinals, third place and final."""
    return {
        "console": [
            {
                "stageKey": "final",
                "stageLabel": "Grand Final",
                "order": 5,
                "rows": [
                    {"rank": 2, "nickname": "Katsu", "detail": "E-3 pro controller"},
                    {"rank": 1, "nickname": "Don", "detail": "E-1 tatacon"},
                ],
            },
            {"stageKey": "qualifier", "order": 1, "rows": list(reversed(_qualifier_rows(8)))},
            {
                "stageKey": "semifinal1",
                "order": 2,
                "rows": [
                    {"rank": 1, "nickname": "Don"},
                    {"rank": 2, "nickname": "Player 4"},
                ],
            },
            {
                "stageKey": "sf2",
                "order": 3,
                "rows": [
                    {"rank": 1, "nickname": "Katsu"},
                    {"rank": 2, "nickname": "Player 2"},
                ],
            },
            {
                "stageKey": "3rd",
                "order": 4,
                "rows": [
                    {"rank": 1, "nickname": "Player 2"},
                    {"rank": 2, "nickname": "Player 4"},
                ],
            },
        ]
    }


def _region(key: str, prefix: int, score_a: int, score_b: int) -> dict:
    a, b = f"E-{prefix}1", f"E-{prefix}2"
    return {
        "key": key,
        "onlineRows": [
            {"rank": 1, "entryId": a, "nickname": f"{key}-A", "score1": 990, "score2": 980},
            {"rank": 2, "entryId": b, "nickname": f"{key}-B", "score1": 985, "score2": 975},
            {"rank": 3, "entryId": f"E-{prefix}3", "nickname": f"{key}-C", "total": "1,900"},
        ],
        "swiss": {
            "standings": [
                {"entryId": f"E-{prefix}3", "nickname": f"{key}-C", "seed": 3, "wins": 1,
                 "losses": 2, "status": "eliminated"},
                {"entryId": a, "nickname": f"{key}-A", "seed": 1, "wins": 3, "losses": 0,
                 "status": "qualified"},
                {"entryId": b, "nickname": f"{key}-B", "seed": 2, "wins": 2, "losses": 1,
                 "status": "decider"},
            ]
        },
        "seedingRows": [
            {"rank": 1, "entryId": a, "nickname": f"{key}-A", "score": score_a},
            {"rank": 2, "entryId": b, "nickname": f"{key}-B", "score": score_b},
        ],
        "qualifiers": {
            "groupA": {"entryId": a, "nickname": f"{key}-A"},
            "groupB": {"entryId": b, "nickname": f"{key}-B"},
        },
    }


@pytest.fixture
def arcade_snapshot():
    """Arcade division with all four regions finished and no explicit finals."""
    return {
        "arcadeArchive2026": {
            "season": "2026",
            "regions": [
                _region("busan", 4, 960_000, 930_000),
                _region("seoul", 1, 990_000, 950_000),
                _region("daejeon", 2, 980_000, 910_000),
                _region("gwangju", 3, 970_000, 940_000),
            ],
        }
    }


@pytest.fixture
def full_snapshot(console_snapshot, arcade_snapshot):
    """Both divisions in one feed body."""
    return {**console_snapshot, **arcade_snapshot}
