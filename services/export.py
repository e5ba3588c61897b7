"""
Leaderboard Export

Turns aggregated leaderboards into pandas DataFrames for CSV/spreadsheet
export. Column order follows the leaderboard models.
"""

import pandas as pd

from schemas.results import LeaderboardData, PlayerResult, TeamResult

TEAM_COLUMNS = list(TeamResult.model_fields)
PLAYER_COLUMNS = list(PlayerResult.model_fields)


def team_frame(teams: list[TeamResult]) -> pd.DataFrame:
    """One row per team, indexed by c_rank."""
    frame = pd.DataFrame([team.model_dump() for team in teams], columns=TEAM_COLUMNS)
    return frame.set_index("c_rank")


def player_frame(players: list[PlayerResult]) -> pd.DataFrame:
    """One row per player, indexed by c_rank."""
    frame = pd.DataFrame([player.model_dump() for player in players], columns=PLAYER_COLUMNS)
    return frame.set_index("c_rank")


def leaderboard_frames(data: LeaderboardData) -> dict[str, pd.DataFrame]:
    """Team and player leaderboards keyed by sheet name."""
    return {
        "teams": team_frame(data.team_results),
        "players": player_frame(data.player_results),
    }
