"""Tests for folding stat rows into ranked leaderboards."""

from __future__ import annotations

import pytest

from db.models.tournament import Player, PlayerStats, PointSystem, Team, TeamStats
from services.aggregation import aggregate_player_stats, aggregate_team_stats

POINTS = PointSystem.build("test", {1: 10, 2: 6, 3: 5, 4: 4})


def _team(team_id: int, name: str, dq: bool = False) -> Team:
    return Team(id=team_id, name=name, dq=dq)


def _team_row(team: Team, match_id: int, **counters) -> TeamStats:
    return TeamStats(team=team, match=match_id, **counters)


def _player_row(player: Player, match_id: int, **counters) -> PlayerStats:
    return PlayerStats(player=player, match=match_id, **counters)


def test_worked_example_ranks_placement_plus_kills() -> None:
    alpha, bravo = _team(1, "A"), _team(2, "B")
    rows = [
        _team_row(alpha, 1, rank=1, kill_num=5),
        _team_row(bravo, 1, rank=2, kill_num=8),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert [(r.team, r.total_point, r.c_rank) for r in results] == [("A", 15, 1), ("B", 14, 2)]
    assert results[0].place_point == 10
    assert results[0].wwcd == 1
    assert results[1].wwcd == 0


def test_rank_missing_from_point_table_scores_zero_placement() -> None:
    results = aggregate_team_stats([_team_row(_team(1, "A"), 1, rank=16, kill_num=2)], POINTS)

    assert results[0].place_point == 0
    assert results[0].total_point == 2


def test_wwcd_breaks_total_point_ties() -> None:
    winner, grinder = _team(1, "Winner"), _team(2, "Grinder")
    rows = [
        _team_row(grinder, 1, rank=2, kill_num=4),
        _team_row(winner, 1, rank=1, kill_num=0),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert results[0].total_point == results[1].total_point == 10
    assert [r.team for r in results] == ["Winner", "Grinder"]


def test_better_last_match_rank_breaks_remaining_ties() -> None:
    early, late = _team(1, "Early"), _team(2, "Late")
    rows = [
        _team_row(early, 1, rank=3),
        _team_row(late, 1, rank=4),
        _team_row(early, 2, rank=4),
        _team_row(late, 2, rank=3),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert [r.place_point for r in results] == [9, 9]
    assert [(r.team, r.last_match_rank) for r in results] == [("Late", 3), ("Early", 4)]


def test_fewer_matches_played_ranks_higher_on_equal_points() -> None:
    veteran, newcomer = _team(1, "Two Games"), _team(2, "One Game")
    rows = [
        _team_row(veteran, 1, rank=0, kill_num=2),
        _team_row(veteran, 2, rank=0, kill_num=2),
        _team_row(newcomer, 2, rank=0, kill_num=4),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert [r.team for r in results] == ["One Game", "Two Games"]


def test_team_name_is_the_final_tie_break() -> None:
    rows = [
        _team_row(_team(2, "Bravo"), 1, rank=0, kill_num=3),
        _team_row(_team(1, "Alpha"), 1, rank=0, kill_num=3),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert [(r.team, r.c_rank) for r in results] == [("Alpha", 1), ("Bravo", 2)]


def test_disqualified_teams_are_excluded_and_ranks_stay_contiguous() -> None:
    rows = [
        _team_row(_team(1, "Cheaters", dq=True), 1, rank=1, kill_num=20),
        _team_row(_team(2, "Honest"), 1, rank=2, kill_num=3),
        _team_row(_team(3, "Steady"), 1, rank=3, kill_num=1),
    ]

    results = aggregate_team_stats(rows, POINTS)

    assert [r.team for r in results] == ["Honest", "Steady"]
    assert [r.c_rank for r in results] == [1, 2]


def test_team_fold_accumulates_secondary_stats_across_matches() -> None:
    team = _team(1, "A")
    rows = [
        _team_row(team, 1, rank=2, kill_num=3, damage=400.0, max_kill_distance=150.0,
                  drive_distance=1000.0, kill_num_by_grenade=1, survival_time=1500.0),
        _team_row(team, 2, rank=1, kill_num=4, damage=250.5, max_kill_distance=90.0,
                  drive_distance=500.0, kill_num_by_grenade=2, survival_time=1800.0),
    ]

    result = aggregate_team_stats(rows, POINTS)[0]

    assert result.matches_played == 2
    assert result.kill == 7
    assert result.damage == pytest.approx(650.5)
    assert result.place_point == 16
    assert result.total_point == 23
    assert result.wwcd == 1
    assert result.last_match_rank == 1
    assert result.kill_distance == pytest.approx(150.0)
    assert result.vehicle_travel_distance == pytest.approx(1500.0)
    assert result.grenade_kills == 3
    assert result.survival_time == pytest.approx(3300.0)


def test_team_names_are_repaired() -> None:
    results = aggregate_team_stats([_team_row(_team(1, "Ã©quipe"), 1, rank=1)], POINTS)
    assert results[0].team == "équipe"


def test_mvp_weights_survival_damage_and_kills() -> None:
    team = _team(1, "A")
    star = Player(id=1, name="Star", uid="1", team=team)
    support = Player(id=2, name="Support", uid="2", team=team)
    rows = [
        _player_row(star, 1, survival_time=100.0, damage=300.0, kill_num=3),
        _player_row(support, 1, survival_time=100.0, damage=100.0, kill_num=1),
    ]

    results = aggregate_player_stats(rows)

    assert [(r.in_game_name, r.mvp, r.c_rank) for r in results] == [
        ("Star", pytest.approx(70.0), 1),
        ("Support", pytest.approx(30.0), 2),
    ]


def test_mvp_scores_stay_within_bounds_and_sum_to_one_hundred() -> None:
    team = _team(1, "A")
    rows = [
        _player_row(Player(id=i, name=f"P{i}", uid=str(i), team=team), 1,
                    survival_time=100.0 * i, damage=50.0 * (5 - i), kill_num=i % 3)
        for i in range(1, 5)
    ]

    results = aggregate_player_stats(rows)

    assert all(0 <= r.mvp <= 100 for r in results)
    assert sum(r.mvp for r in results) == pytest.approx(100.0, abs=0.05)


def test_zero_window_totals_contribute_nothing() -> None:
    team = _team(1, "A")
    rows = [
        _player_row(Player(id=1, name="Idle", uid="1", team=team), 1),
        _player_row(Player(id=2, name="Runner", uid="2", team=team), 1, survival_time=60.0),
    ]

    results = aggregate_player_stats(rows)

    assert [(r.in_game_name, r.mvp) for r in results] == [("Runner", 20.0), ("Idle", 0.0)]


def test_player_fold_tracks_average_survival_and_longest_kill() -> None:
    player = Player(id=1, name="Ace", uid="1001", team=_team(1, "A"))
    rows = [
        _player_row(player, 1, survival_time=1200.0, max_kill_distance=80.0, rescue_times=1),
        _player_row(player, 2, survival_time=1800.0, max_kill_distance=210.0, rescue_times=2),
    ]

    result = aggregate_player_stats(rows)[0]

    assert result.matches_played == 2
    assert result.avg_survival_time == pytest.approx(1500.0)
    assert result.kill_distance == pytest.approx(210.0)
    assert result.rescue_times == 3
    assert result.uid == "1001"
    assert result.team_name == "A"


def test_identical_player_lines_keep_row_order() -> None:
    team = _team(1, "A")
    rows = [
        _player_row(Player(id=1, name="Low", uid="1", team=team), 1),
        _player_row(Player(id=2, name="High", uid="2", team=team), 1),
    ]
    results = aggregate_player_stats(rows)

    assert [r.in_game_name for r in results] == ["Low", "High"]
    assert [r.c_rank for r in results] == [1, 2]


def test_disqualified_teams_players_are_kept() -> None:
    dq_team = _team(1, "Cheaters", dq=True)
    rows = [_player_row(Player(id=1, name="Sus", uid="1", team=dq_team), 1, kill_num=10)]

    results = aggregate_player_stats(rows)

    assert results[0].in_game_name == "Sus"
    assert results[0].mvp == pytest.approx(50.0)


def test_equal_mvp_is_broken_by_kills() -> None:
    team = _team(1, "A")
    rows = [
        _player_row(Player(id=1, name="Anchor", uid="1", team=team), 1, survival_time=100.0, damage=100.0),
        _player_row(Player(id=2, name="Fragger", uid="2", team=team), 1, kill_num=1),
    ]

    results = aggregate_player_stats(rows)

    assert [r.mvp for r in results] == [50.0, 50.0]
    assert [r.in_game_name for r in results] == ["Fragger", "Anchor"]
