"""
Results Service

Read side of the core: loads stat rows for a match, a set of matches, a
group's schedule or a whole stage and returns aggregated leaderboards.
"""

from core.errors import NotFoundError
from core.logging import get_logger
from db.models.tournament import (
    Match,
    PlayerStats,
    PointSystem,
    Schedule,
    TeamStats,
)
from schemas.common import ApiStatus
from schemas.results import (
    LeaderboardData,
    LeaderboardResponse,
    ScheduleResultResponse,
    StarOfMatchResponse,
)
from services.aggregation import aggregate_player_stats, aggregate_team_stats
from services.base import service_call
from services.star_of_match import select_stars

log = get_logger("results")


# ------------------------------- Lookups ------------------------------- #

def _schedule_for_match(match_id: int) -> Schedule:
    schedule = Schedule.find_by_match(match_id)
    if schedule is None:
        raise NotFoundError("Schedule not found for the match")
    return schedule


def _point_system_for(schedule: Schedule) -> PointSystem:
    """The point system of the schedule's event (not the one captured on the match)."""
    point_system_id = schedule.event.point_system_id
    point_system = None
    if point_system_id is not None:
        point_system = PointSystem.get_or_none(PointSystem.id == point_system_id)
    if point_system is None:
        raise NotFoundError("Point system not found")
    return point_system


def _leaderboard(match_ids: list[int], point_system: PointSystem) -> LeaderboardData:
    team_rows = TeamStats.for_matches(match_ids)
    player_rows = PlayerStats.for_matches(match_ids)

    data = LeaderboardData(
        team_results=aggregate_team_stats(team_rows, point_system),
        player_results=aggregate_player_stats(player_rows),
    )
    log.info(
        "leaderboard_built",
        matches=len(match_ids),
        team_rows=len(team_rows),
        player_rows=len(player_rows),
        teams=len(data.team_results),
        players=len(data.player_results),
    )
    return data


def _group_leaderboard(match_ids: list[int]) -> LeaderboardData:
    """
    Leaderboard across several matches, scored with the point system of the
    first match's event.
    """
    if not match_ids:
        raise NotFoundError("No matches provided")

    distinct_ids = list(dict.fromkeys(match_ids))
    matches = Match.for_ids(distinct_ids)
    if len(matches) != len(distinct_ids):
        raise NotFoundError("Invalid match IDs provided")

    schedule = _schedule_for_match(distinct_ids[0])
    point_system = _point_system_for(schedule)

    return _leaderboard([match.id for match in matches], point_system)


def _played_match_ids(schedules: list[Schedule]) -> list[int]:
    return [schedule.match_id for schedule in schedules if schedule.match_id is not None]


# ------------------------------- Operations ------------------------------- #

@service_call("Error fetching per-match results", LeaderboardResponse)
def get_single_match_result(match_id: int) -> LeaderboardResponse:
    """Team and player leaderboards for one match."""
    schedule = _schedule_for_match(match_id)
    point_system = _point_system_for(schedule)

    return LeaderboardResponse(
        status=ApiStatus.SUCCESS,
        message="Successfully retrieved match results",
        data=_leaderboard([schedule.match_id], point_system),
    )


@service_call("Error fetching overall results", LeaderboardResponse)
def get_group_result(match_ids: list[int]) -> LeaderboardResponse:
    """
    Team and player leaderboards across a set of matches.

    Every id must resolve to an ingested match.
    """
    return LeaderboardResponse(
        status=ApiStatus.SUCCESS,
        message="Successfully retrieved results",
        data=_group_leaderboard(match_ids),
    )


@service_call("Error fetching group results", LeaderboardResponse)
def get_group_schedule_result(group_id: int) -> LeaderboardResponse:
    """Leaderboards across every played match on a group's schedule."""
    schedules = Schedule.for_group(group_id)
    if not schedules:
        raise NotFoundError("No schedules found for the group")

    match_ids = _played_match_ids(schedules)
    if not match_ids:
        raise NotFoundError("No matches found for the group")

    return LeaderboardResponse(
        status=ApiStatus.SUCCESS,
        message="Successfully retrieved results",
        data=_group_leaderboard(match_ids),
    )


@service_call("Error fetching stage results", LeaderboardResponse)
def get_stage_result(stage_id: int) -> LeaderboardResponse:
    """Leaderboards across every played match of a stage."""
    schedules = Schedule.for_stage(stage_id)
    if not schedules:
        raise NotFoundError("No schedules found for the stage")

    match_ids = _played_match_ids(schedules)
    if not match_ids:
        raise NotFoundError("No matches found for the stage")

    return LeaderboardResponse(
        status=ApiStatus.SUCCESS,
        message="Results data fetched successfully",
        data=_group_leaderboard(match_ids),
    )


@service_call("Error fetching match data", ScheduleResultResponse)
def get_schedule_results(schedule_ids: list[int]) -> ScheduleResultResponse:
    """
    Leaderboards for schedule slots.

    One slot gives that match's leaderboard; several give the combined one
    over the slots that have been played. match_exists tells the caller
    whether anything was played at all.
    """
    schedules = Schedule.for_ids(list(dict.fromkeys(schedule_ids)))
    if not schedules:
        raise NotFoundError("Schedule not found")

    match_ids = _played_match_ids(schedules)
    if not match_ids:
        return ScheduleResultResponse(
            status=ApiStatus.NOT_FOUND,
            message="Match data not found",
            match_exists=False,
            error_code="NOT_FOUND",
        )

    if len(schedules) == 1:
        schedule = _schedule_for_match(match_ids[0])
        data = _leaderboard(match_ids, _point_system_for(schedule))
    else:
        data = _group_leaderboard(match_ids)

    return ScheduleResultResponse(
        status=ApiStatus.SUCCESS,
        message="Match data found",
        match_exists=True,
        data=data,
    )


@service_call("Error fetching star of the match", StarOfMatchResponse)
def get_star_of_match(match_id: int) -> StarOfMatchResponse:
    """Award lists computed from one match's player leaderboard."""
    schedule = _schedule_for_match(match_id)
    players = aggregate_player_stats(PlayerStats.for_matches([schedule.match_id]))

    return StarOfMatchResponse(
        status=ApiStatus.SUCCESS,
        message="Successfully retrieved star of the match",
        data=select_stars(players),
    )
