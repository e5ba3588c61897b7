"""Tests for leaderboard retrieval over matches, groups, stages and schedules."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from db.models.tournament import Event, Group, PointSystem, Schedule, ScheduleGroup, Team
from pipelines import ingest_match_sync
from services.results import (
    get_group_result,
    get_group_schedule_result,
    get_schedule_results,
    get_single_match_result,
    get_stage_result,
    get_star_of_match,
)


@pytest.fixture
def played(tournament, make_telemetry, full_lobby, entry) -> SimpleNamespace:
    """Two played matches: Alpha wins the first, Bravo the second."""
    second_lobby = [
        entry("1001", "Ace", "Alpha", killNum=1, damage=120.0, rank=2, survivalTime=1400),
        entry("1002", "Blaze", "Alpha", killNum=0, damage=60.0, rank=2, survivalTime=1300),
        entry("2001", "Cobra", "Bravo", killNum=2, damage=300.0, rank=1, survivalTime=1800),
        entry("2002", "Dusk", "Bravo", killNum=1, damage=210.0, rank=1, survivalTime=1800),
    ]
    first = ingest_match_sync(make_telemetry("G-1", full_lobby), tournament.s1.id)
    second = ingest_match_sync(make_telemetry("G-2", second_lobby), tournament.s2.id)
    assert first.ok and second.ok
    return SimpleNamespace(m1=first.data.match_id, m2=second.data.match_id)


def test_single_match_result_matches_worked_example(tournament, played) -> None:
    response = get_single_match_result(played.m1)

    assert response.ok
    teams = response.data.team_results
    assert [(t.team, t.place_point, t.kill, t.total_point, t.c_rank) for t in teams] == [
        ("Alpha", 10, 5, 15, 1),
        ("Bravo", 6, 8, 14, 2),
    ]
    players = response.data.player_results
    assert [p.in_game_name for p in players] == ["Cobra", "Ace", "Blaze", "Dusk"]
    assert sum(p.mvp for p in players) == pytest.approx(100.0, abs=0.05)


def test_group_result_combines_matches(tournament, played) -> None:
    response = get_group_result([played.m1, played.m2])

    assert response.ok
    teams = response.data.team_results
    assert [(t.team, t.total_point, t.wwcd, t.matches_played) for t in teams] == [
        ("Bravo", 27, 1, 2),
        ("Alpha", 22, 1, 2),
    ]
    assert teams[0].last_match_rank == 1
    assert teams[1].last_match_rank == 2
    assert all(p.matches_played == 2 for p in response.data.player_results)


def test_group_result_rejects_unknown_match_ids(tournament, played) -> None:
    response = get_group_result([played.m1, 9999])

    assert response.status == "not_found"
    assert response.message == "Invalid match IDs provided"


def test_group_result_requires_matches() -> None:
    response = get_group_result([])

    assert response.status == "not_found"
    assert response.message == "No matches provided"


def test_repeated_match_ids_count_once(tournament, played) -> None:
    response = get_group_result([played.m1, played.m1])

    assert response.ok
    assert response.data.team_results[0].matches_played == 1


def test_single_match_for_unknown_match_is_not_found(tournament) -> None:
    response = get_single_match_result(777)

    assert response.status == "not_found"
    assert response.message == "Schedule not found for the match"


def test_results_use_the_events_current_point_system(tournament, played) -> None:
    flat = PointSystem.create_from_table("Flat", {1: 1, 2: 1})
    Event.update(point_system=flat).where(Event.id == tournament.event.id).execute()

    teams = get_single_match_result(played.m1).data.team_results

    assert [(t.team, t.total_point) for t in teams] == [("Bravo", 9), ("Alpha", 6)]


def test_missing_point_system_is_not_found(tournament, played) -> None:
    Event.update(point_system=None).where(Event.id == tournament.event.id).execute()

    response = get_group_result([played.m1, played.m2])

    assert response.status == "not_found"
    assert response.message == "Point system not found"


def test_disqualified_team_drops_from_team_board_only(tournament, played) -> None:
    Team.update(dq=True).where(Team.id == tournament.alpha.id).execute()

    data = get_single_match_result(played.m1).data

    assert [t.team for t in data.team_results] == ["Bravo"]
    assert data.team_results[0].c_rank == 1
    assert {p.team_name for p in data.player_results} == {"Alpha", "Bravo"}


def test_group_schedule_result_equals_explicit_match_list(tournament, played) -> None:
    by_group = get_group_schedule_result(tournament.group.id)
    by_ids = get_group_result([played.m1, played.m2])

    assert by_group.ok
    assert by_group.data == by_ids.data


def test_group_schedule_result_skips_unplayed_slots(tournament, make_telemetry, full_lobby) -> None:
    ingest_match_sync(make_telemetry("G-1", full_lobby), tournament.s1.id)

    response = get_group_schedule_result(tournament.group.id)

    assert response.ok
    assert response.data.team_results[0].matches_played == 1


def test_group_without_played_matches_is_not_found(tournament) -> None:
    response = get_group_schedule_result(tournament.group.id)

    assert response.status == "not_found"
    assert response.message == "No matches found for the group"


def test_group_without_schedules_is_not_found(tournament) -> None:
    empty = Group.create(name="Group B", event=tournament.event, stage=tournament.stage)

    response = get_group_schedule_result(empty.id)

    assert response.status == "not_found"
    assert response.message == "No schedules found for the group"


def test_stage_result_covers_every_played_match(tournament, played) -> None:
    response = get_stage_result(tournament.stage.id)

    assert response.ok
    assert response.message == "Results data fetched successfully"
    assert [t.total_point for t in response.data.team_results] == [27, 22]


def test_stage_without_schedules_is_not_found() -> None:
    response = get_stage_result(5555)

    assert response.status == "not_found"
    assert response.message == "No schedules found for the stage"


def test_single_schedule_gives_that_match(tournament, played) -> None:
    response = get_schedule_results([tournament.s2.id])

    assert response.ok
    assert response.match_exists is True
    assert response.data.team_results[0].team == "Bravo"
    assert response.data.team_results[0].matches_played == 1


def test_several_schedules_give_the_combined_board(tournament, played) -> None:
    response = get_schedule_results([tournament.s1.id, tournament.s2.id, tournament.unlinked.id])

    assert response.match_exists is True
    assert [t.total_point for t in response.data.team_results] == [27, 22]


def test_unplayed_schedule_reports_no_match(tournament) -> None:
    response = get_schedule_results([tournament.s1.id])

    assert response.match_exists is False
    assert response.status == "not_found"
    assert response.message == "Match data not found"


def test_unknown_schedules_are_not_found() -> None:
    response = get_schedule_results([31337])

    assert response.match_exists is False
    assert response.message == "Schedule not found"


def test_star_of_match_from_single_match(tournament, played) -> None:
    response = get_star_of_match(played.m1)

    assert response.ok
    stars = response.data
    assert [s.in_game_name for s in stars.going_all_out] == ["Cobra"]
    assert sorted(s.in_game_name for s in stars.best_companion) == ["Blaze", "Dusk"]
    assert [s.in_game_name for s in stars.finishers] == ["Cobra"]


def test_star_of_match_for_unknown_match_is_not_found() -> None:
    response = get_star_of_match(404)

    assert response.status == "not_found"


def test_star_of_match_without_stat_rows_is_empty(tournament, make_telemetry, entry) -> None:
    match_id = ingest_match_sync(make_telemetry("G-9", [entry("9999", "Stranger")]), tournament.s1.id).data.match_id

    stars = get_star_of_match(match_id).data

    assert stars.going_all_out == stars.best_companion == stars.finishers == []


def test_schedule_group_links_are_used_for_group_results(tournament, played) -> None:
    other = Group.create(name="Group C", event=tournament.event, stage=tournament.stage)
    ScheduleGroup.create(schedule=Schedule.get_by_id(tournament.s2.id), group=other)

    response = get_group_schedule_result(other.id)

    assert [t.matches_played for t in response.data.team_results] == [1, 1]
