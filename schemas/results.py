from pydantic import BaseModel
from typing import Optional

from .common import BaseResponse

# ------------------------------- Leaderboard Rows ------------------------------- #

class TeamResult(BaseModel):
    """One team's aggregated line on a leaderboard"""
    team: str
    kill: int = 0
    damage: float = 0
    place_point: int = 0
    total_point: int = 0
    wwcd: int = 0
    matches_played: int = 0
    c_rank: int = 0
    last_match_rank: int = 0
    survival_time: float = 0
    assists: int = 0
    knockouts: int = 0
    heal: float = 0
    grenade_kills: int = 0
    vehicle_kills: int = 0
    head_shot_num: int = 0
    smoke_grenade_used: int = 0
    frag_grenade_used: int = 0
    burn_grenade_used: int = 0
    vehicle_travel_distance: float = 0
    kill_distance: float = 0

class PlayerResult(BaseModel):
    """One player's aggregated line on a leaderboard"""
    in_game_name: str
    uid: str
    team_name: str
    kill: int = 0
    damage: float = 0
    survival_time: float = 0
    avg_survival_time: float = 0
    assists: int = 0
    heal: float = 0
    matches_played: int = 0
    c_rank: int = 0
    mvp: float = 0
    knockouts: int = 0
    rescue_times: int = 0
    grenade_kills: int = 0
    vehicle_kills: int = 0
    head_shot_num: int = 0
    smoke_grenade_used: int = 0
    frag_grenade_used: int = 0
    burn_grenade_used: int = 0
    vehicle_travel_distance: float = 0
    kill_distance: float = 0

class LeaderboardData(BaseModel):
    team_results: list[TeamResult] = []
    player_results: list[PlayerResult] = []

# ------------------------------- Star of the Match ------------------------------- #

class GoingAllOutEntry(BaseModel):
    in_game_name: str
    uid: str
    team_name: str
    knockouts: int
    kill: int
    bonus: int = 0
    damage: float

class BestCompanionEntry(BaseModel):
    in_game_name: str
    uid: str
    team_name: str
    assists: int
    rescue_times: int
    heal: float
    survival_time: float

class FinisherEntry(BaseModel):
    in_game_name: str
    uid: str
    team_name: str
    kill: int
    assists: int
    travel_distance: float
    survival_time: float

class StarOfMatch(BaseModel):
    going_all_out: list[GoingAllOutEntry] = []
    best_companion: list[BestCompanionEntry] = []
    finishers: list[FinisherEntry] = []

# ------------------------------- Roster Validation ------------------------------- #

class RosterMismatch(BaseModel):
    player_name: str
    uid: str

class RosterValidationData(BaseModel):
    """Players seen on one side of the reconciliation but not the other"""
    game_players_unmatched: list[RosterMismatch] = []
    db_players_unmatched: list[RosterMismatch] = []
    has_mismatches: bool = False

# ------------------------------- Responses ------------------------------- #

class IngestData(BaseModel):
    game_id: str
    match_id: int
    team_rows: int = 0
    player_rows: int = 0
    run_id: Optional[str] = None
    duration_seconds: Optional[float] = None

class IngestResponse(BaseResponse):
    data: Optional[IngestData] = None

class LeaderboardResponse(BaseResponse):
    data: Optional[LeaderboardData] = None

class StarOfMatchResponse(BaseResponse):
    data: Optional[StarOfMatch] = None

class RosterValidationResponse(BaseResponse):
    data: Optional[RosterValidationData] = None

class ScheduleResultResponse(BaseResponse):
    """Leaderboard for one or more schedule slots; match_exists is False when nothing was played"""
    match_exists: bool = False
    data: Optional[LeaderboardData] = None

# ------------------------------- Requests ------------------------------- #

class OverallResultRequest(BaseModel):
    match_ids: list[int]

class ScheduleResultRequest(BaseModel):
    schedule_ids: list[int]

class MatchUploadRequest(BaseModel):
    """Telemetry upload for a schedule slot; telemetry is validated by the service"""
    schedule_id: int
    telemetry: dict
