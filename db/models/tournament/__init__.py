"""
Tournament Schema Models

Point systems, roster, tournament structure, ingested matches and the
per-match stat rows derived from them.
"""

from db.models.tournament.point_system import PointSystem
from db.models.tournament.roster import Team, Player
from db.models.tournament.structure import (
    Event,
    Stage,
    Group,
    GroupTeam,
    Schedule,
    ScheduleGroup,
)
from db.models.tournament.match import Match
from db.models.tournament.stats import COUNTER_FIELDS, PlayerStats, TeamStats

__all__ = [
    # Configuration
    "PointSystem",
    # Roster
    "Team",
    "Player",
    # Structure
    "Event",
    "Stage",
    "Group",
    "GroupTeam",
    "Schedule",
    "ScheduleGroup",
    # Matches and derived stats
    "Match",
    "PlayerStats",
    "TeamStats",
    "COUNTER_FIELDS",
]
