"""
Match Telemetry Schema

Explicit shape of the end-of-match dump produced by the game observer client.
Payloads are validated once, at the boundary; everything downstream works on
these models instead of raw dicts.
"""

from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from core.errors import MalformedDataError
from utils.text import normalize_uid


def _drop_nulls(data: Any) -> Any:
    """Observer clients send null for counters they never touched."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None}
    return data


class TelemetryPlayer(BaseModel):
    """One entry of TotalPlayerList."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Identity
    uid: str = Field(alias="uId")
    player_name: str = Field(default="", alias="playerName")
    player_open_id: Optional[str] = Field(default=None, alias="playerOpenId")
    team_id: Optional[str] = Field(default=None, alias="teamId")
    team_name: str = Field(default="", alias="teamName")

    # Counters
    kill_num: int = Field(default=0, ge=0, alias="killNum")
    kill_num_before_die: int = Field(default=0, ge=0, alias="killNumBeforeDie")
    got_air_drop_num: int = Field(default=0, ge=0, alias="gotAirDropNum")
    max_kill_distance: float = Field(default=0, ge=0, alias="maxKillDistance")
    damage: float = Field(default=0, ge=0)
    kill_num_in_vehicle: int = Field(default=0, ge=0, alias="killNumInVehicle")
    kill_num_by_grenade: int = Field(default=0, ge=0, alias="killNumByGrenade")
    ai_kill_num: int = Field(default=0, ge=0, alias="AIKillNum")
    boss_kill_num: int = Field(default=0, ge=0, alias="BossKillNum")
    rank: int = Field(default=0, ge=0)
    in_damage: float = Field(default=0, ge=0, alias="inDamage")
    heal: float = Field(default=0, ge=0)
    head_shot_num: int = Field(default=0, ge=0, alias="headShotNum")
    survival_time: float = Field(default=0, ge=0, alias="survivalTime")
    drive_distance: float = Field(default=0, ge=0, alias="driveDistance")
    march_distance: float = Field(default=0, ge=0, alias="marchDistance")
    assists: int = Field(default=0, ge=0)
    knockouts: int = Field(default=0, ge=0)
    rescue_times: int = Field(default=0, ge=0, alias="rescueTimes")
    use_smoke_grenade_num: int = Field(default=0, ge=0, alias="useSmokeGrenadeNum")
    use_frag_grenade_num: int = Field(default=0, ge=0, alias="useFragGrenadeNum")
    use_burn_grenade_num: int = Field(default=0, ge=0, alias="useBurnGrenadeNum")
    use_flash_grenade_num: int = Field(default=0, ge=0, alias="useFlashGrenadeNum")
    poison_total_damage: float = Field(default=0, ge=0, alias="PoisonTotalDamage")
    use_self_rescue_time: int = Field(default=0, ge=0, alias="UseSelfRescueTime")
    use_emergency_call_time: int = Field(default=0, ge=0, alias="UseEmergencyCallTime")

    @model_validator(mode="before")
    @classmethod
    def drop_null_counters(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("uid", mode="before")
    @classmethod
    def validate_uid(cls, v: Any) -> str:
        uid = normalize_uid(v)
        if not uid:
            raise ValueError("uId must not be empty")
        return uid

    @field_validator("player_open_id", "team_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_uid(v)


class TelemetryTeam(BaseModel):
    """One entry of TeamInfoList."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    team_id: Optional[str] = Field(default=None, alias="teamId")
    team_name: str = Field(default="", alias="teamName")
    kill_num: int = Field(default=0, ge=0, alias="killNum")
    live_member_num: int = Field(default=0, ge=0, alias="liveMemberNum")
    is_show_logo: bool = Field(default=False, alias="isShowLogo")
    logo_pic_url: Optional[str] = Field(default=None, alias="logoPicUrl")

    @model_validator(mode="before")
    @classmethod
    def drop_null_fields(cls, data: Any) -> Any:
        return _drop_nulls(data)

    @field_validator("team_id", mode="before")
    @classmethod
    def stringify_team_id(cls, v: Any) -> Optional[str]:
        return None if v is None else normalize_uid(v)


class MatchTelemetry(BaseModel):
    """
    Full telemetry for one completed game.

    Accepts the root object either bare or wrapped in "allinfo" (the way the
    observer client exports it).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    game_id: str = Field(alias="GameID")
    game_start_time: Optional[str] = Field(default=None, alias="GameStartTime")
    fighting_start_time: Optional[str] = Field(default=None, alias="FightingStartTime")
    finished_start_time: Optional[str] = Field(default=None, alias="FinishedStartTime")
    current_time: Optional[str] = Field(default=None, alias="CurrentTime")
    players: list[TelemetryPlayer] = Field(alias="TotalPlayerList")
    teams: list[TelemetryTeam] = Field(default_factory=list, alias="TeamInfoList")

    @model_validator(mode="before")
    @classmethod
    def unwrap_allinfo(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("allinfo"), dict):
            return data["allinfo"]
        return data

    @field_validator("game_id", mode="before")
    @classmethod
    def validate_game_id(cls, v: Any) -> str:
        game_id = normalize_uid(v)
        if not game_id:
            raise ValueError("GameID must not be empty")
        return game_id

    @field_validator(
        "game_start_time",
        "fighting_start_time",
        "finished_start_time",
        "current_time",
        mode="before",
    )
    @classmethod
    def stringify_timestamps(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @classmethod
    def from_payload(cls, payload: Any) -> "MatchTelemetry":
        """
        Validate a raw payload (already a MatchTelemetry, or decoded JSON).

        Raises:
            MalformedDataError: If the payload does not have the telemetry shape
        """
        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "root"
            raise MalformedDataError(
                f"Malformed telemetry at {location}: {first['msg']}"
            ) from e

    @property
    def global_info(self) -> dict:
        """Timestamps stored on the match row."""
        return {
            "GameStartTime": self.game_start_time,
            "FightingStartTime": self.fighting_start_time,
            "FinishedStartTime": self.finished_start_time,
            "CurrentTime": self.current_time,
        }

    def player_snapshot(self) -> list[dict]:
        return [player.model_dump(by_alias=True) for player in self.players]

    def team_snapshot(self) -> list[dict]:
        return [team.model_dump(by_alias=True) for team in self.teams]
