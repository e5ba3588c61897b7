"""
Stats Aggregation Service

Pure logic folding per-match stat rows into ranked leaderboards.
No I/O - takes TeamStats/PlayerStats rows (with team/player loaded) and
returns TeamResult/PlayerResult lists in final order.
"""

from functools import cmp_to_key
from typing import Iterable

from db.models.tournament import PlayerStats, PointSystem, TeamStats
from schemas.results import PlayerResult, TeamResult
from utils.constants import (
    MVP_DECIMALS,
    MVP_MULTIPLIER,
    MVP_WEIGHTS,
    UNKNOWN_PLAYER,
    UNKNOWN_TEAM,
    UNKNOWN_UID,
)
from utils.text import decode_game_text


def _compare_teams(a: TeamResult, b: TeamResult) -> int:
    """
    Leaderboard order: total points, chicken dinners, placement points and
    kills (all descending), then the better last-match placement when both
    teams have one, fewer matches played, and finally the team name.
    """
    for field in ("total_point", "wwcd", "place_point", "kill"):
        diff = getattr(b, field) - getattr(a, field)
        if diff:
            return 1 if diff > 0 else -1

    if a.last_match_rank and b.last_match_rank and a.last_match_rank != b.last_match_rank:
        return a.last_match_rank - b.last_match_rank

    if a.matches_played != b.matches_played:
        return a.matches_played - b.matches_played

    if a.team == b.team:
        return 0
    return -1 if a.team < b.team else 1


def _player_sort_key(player: PlayerResult) -> tuple:
    return (-player.mvp, -player.kill, -player.damage, -player.survival_time)


def _fold_team_row(result: TeamResult, row: TeamStats, point_system: PointSystem) -> None:
    result.kill += row.kill_num
    result.damage += row.damage
    result.place_point += point_system.points_for_rank(row.rank)
    result.total_point = result.place_point + result.kill
    result.wwcd += 1 if row.rank == 1 else 0
    result.matches_played += 1
    result.last_match_rank = row.rank

    result.survival_time += row.survival_time
    result.assists += row.assists
    result.knockouts += row.knockouts
    result.heal += row.heal
    result.grenade_kills += row.kill_num_by_grenade
    result.vehicle_kills += row.kill_num_in_vehicle
    result.head_shot_num += row.head_shot_num
    result.smoke_grenade_used += row.use_smoke_grenade_num
    result.frag_grenade_used += row.use_frag_grenade_num
    result.burn_grenade_used += row.use_burn_grenade_num
    result.vehicle_travel_distance += row.drive_distance
    result.kill_distance = max(result.kill_distance, row.max_kill_distance)


def _fold_player_row(result: PlayerResult, row: PlayerStats) -> None:
    result.kill += row.kill_num
    result.damage += row.damage
    result.survival_time += row.survival_time
    result.assists += row.assists
    result.heal += row.heal
    result.matches_played += 1
    result.knockouts += row.knockouts
    result.rescue_times += row.rescue_times or 0
    result.grenade_kills += row.kill_num_by_grenade
    result.vehicle_kills += row.kill_num_in_vehicle
    result.head_shot_num += row.head_shot_num
    result.smoke_grenade_used += row.use_smoke_grenade_num
    result.frag_grenade_used += row.use_frag_grenade_num
    result.burn_grenade_used += row.use_burn_grenade_num
    result.vehicle_travel_distance += row.drive_distance
    result.kill_distance = max(result.kill_distance, row.max_kill_distance)


def _share(value: float, total: float) -> float:
    return value / total if total else 0.0


def aggregate_team_stats(
    rows: Iterable[TeamStats],
    point_system: PointSystem,
) -> list[TeamResult]:
    """
    Fold team rows into a ranked team leaderboard.

    Rows must come in match order so last_match_rank ends up as the
    placement of the latest match. Disqualified teams are left out.

    Args:
        rows: TeamStats rows with their team loaded
        point_system: Placement table used for place_point

    Returns:
        TeamResult list sorted by leaderboard order, c_rank set 1..n
    """
    results: dict[int, TeamResult] = {}

    for row in rows:
        team = row.team
        if team.dq:
            continue

        result = results.get(row.team_id)
        if result is None:
            result = TeamResult(team=decode_game_text(team.name) or UNKNOWN_TEAM)
            results[row.team_id] = result

        _fold_team_row(result, row, point_system)

    ranked = sorted(results.values(), key=cmp_to_key(_compare_teams))
    for index, result in enumerate(ranked, 1):
        result.c_rank = index
    return ranked


def aggregate_player_stats(rows: Iterable[PlayerStats]) -> list[PlayerResult]:
    """
    Fold player rows into a ranked player leaderboard with MVP scores.

    The MVP score weighs each player's share of the window's total survival
    time, damage and kills. Disqualified teams' players are kept.

    Args:
        rows: PlayerStats rows with player and player.team loaded

    Returns:
        PlayerResult list sorted by mvp, kills, damage, survival time
    """
    results: dict[int, PlayerResult] = {}
    total_survival_time = 0.0
    total_damage = 0.0
    total_kills = 0

    for row in rows:
        result = results.get(row.player_id)
        if result is None:
            player = row.player
            result = PlayerResult(
                in_game_name=decode_game_text(player.name) or UNKNOWN_PLAYER,
                uid=player.uid or UNKNOWN_UID,
                team_name=decode_game_text(player.team.name) or UNKNOWN_TEAM,
            )
            results[row.player_id] = result

        _fold_player_row(result, row)

        total_survival_time += row.survival_time
        total_damage += row.damage
        total_kills += row.kill_num

    for result in results.values():
        result.avg_survival_time = result.survival_time / result.matches_played
        score = (
            _share(result.survival_time, total_survival_time) * MVP_WEIGHTS["survival_time"]
            + _share(result.damage, total_damage) * MVP_WEIGHTS["damage"]
            + _share(result.kill, total_kills) * MVP_WEIGHTS["kills"]
        )
        result.mvp = round(score * MVP_MULTIPLIER, MVP_DECIMALS)

    ranked = sorted(results.values(), key=_player_sort_key)
    for index, result in enumerate(ranked, 1):
        result.c_rank = index
    return ranked
