"""
Star of the Match

Picks the three award categories from a single match's player leaderboard.
Ties are kept: every player sharing the top value is listed.
"""

from schemas.results import (
    BestCompanionEntry,
    FinisherEntry,
    GoingAllOutEntry,
    PlayerResult,
    StarOfMatch,
)


def select_stars(players: list[PlayerResult]) -> StarOfMatch:
    """
    Build the star-of-the-match lists from an aggregated player leaderboard.

    - going_all_out: players tied at the most kills
    - best_companion: players tied at the most rescues
    - finishers: the leaderboard's top-ranked player(s) (c_rank == 1)
    """
    if not players:
        return StarOfMatch()

    max_kills = max(player.kill for player in players)
    max_rescues = max(player.rescue_times for player in players)

    return StarOfMatch(
        going_all_out=[
            GoingAllOutEntry(
                in_game_name=player.in_game_name,
                uid=player.uid,
                team_name=player.team_name,
                knockouts=player.knockouts,
                kill=player.kill,
                bonus=0,
                damage=player.damage,
            )
            for player in players
            if player.kill == max_kills
        ],
        best_companion=[
            BestCompanionEntry(
                in_game_name=player.in_game_name,
                uid=player.uid,
                team_name=player.team_name,
                assists=player.assists,
                rescue_times=player.rescue_times,
                heal=player.heal,
                survival_time=player.survival_time,
            )
            for player in players
            if player.rescue_times == max_rescues
        ],
        finishers=[
            FinisherEntry(
                in_game_name=player.in_game_name,
                uid=player.uid,
                team_name=player.team_name,
                kill=player.kill,
                assists=player.assists,
                travel_distance=player.vehicle_travel_distance,
                survival_time=player.survival_time,
            )
            for player in players
            if player.c_rank == 1
        ],
    )
