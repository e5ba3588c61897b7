"""Tests for telemetry -> stat row transformers."""

from __future__ import annotations

import pytest

from db.models.tournament import COUNTER_FIELDS
from pipelines.transformers import accumulate_team_totals, player_stat_values
from schemas.telemetry import TelemetryPlayer


def test_player_stat_values_copies_every_counter() -> None:
    player = TelemetryPlayer.model_validate({"uId": "1", "killNum": 4, "damage": 321.5, "rank": 2})
    values = player_stat_values(player)

    assert set(values) == set(COUNTER_FIELDS)
    assert values["kill_num"] == 4
    assert values["damage"] == pytest.approx(321.5)
    assert values["rank"] == 2
    assert values["use_emergency_call_time"] == 0


def test_team_totals_sum_counters_and_keep_best_rank_and_longest_kill() -> None:
    rows = [
        {"kill_num": 3, "damage": 100.0, "rank": 4, "max_kill_distance": 120.0, "heal": 50.0},
        {"kill_num": 1, "damage": 80.5, "rank": 2, "max_kill_distance": 300.0, "heal": 0.0},
        {"kill_num": 0, "damage": 0.0, "rank": 3, "max_kill_distance": 10.0, "heal": 25.0},
    ]
    totals = accumulate_team_totals(rows)

    assert totals["kill_num"] == 4
    assert totals["damage"] == pytest.approx(180.5)
    assert totals["heal"] == pytest.approx(75.0)
    assert totals["rank"] == 2
    assert totals["max_kill_distance"] == pytest.approx(300.0)
    assert totals["knockouts"] == 0


def test_team_totals_for_single_player_equal_that_player() -> None:
    row = {name: 1 for name in COUNTER_FIELDS}
    assert accumulate_team_totals([row]) == row


def test_team_totals_without_players_is_none() -> None:
    assert accumulate_team_totals([]) is None
