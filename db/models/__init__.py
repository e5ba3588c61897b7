# Import all models to ensure they are registered with the database
from .pipeline_run import PipelineRun
from .tournament import (
    PointSystem,
    Team,
    Player,
    Event,
    Stage,
    Group,
    GroupTeam,
    Schedule,
    ScheduleGroup,
    Match,
    PlayerStats,
    TeamStats,
)

# Creation order: dependencies first
MODELS = [
    PipelineRun,
    PointSystem,
    Team,
    Player,
    Event,
    Stage,
    Group,
    GroupTeam,
    Schedule,
    ScheduleGroup,
    Match,
    PlayerStats,
    TeamStats,
]

__all__ = [
    'PipelineRun', 'PointSystem', 'Team', 'Player', 'Event', 'Stage', 'Group',
    'GroupTeam', 'Schedule', 'ScheduleGroup', 'Match', 'PlayerStats', 'TeamStats',
    'MODELS',
]
