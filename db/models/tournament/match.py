"""
Match Table

One completed game session. The external game id is the idempotency key:
it carries a unique index so two concurrent uploads of the same game can
never both commit, whatever the application-level check decided.
"""

import json
from datetime import datetime

from peewee import (
    AutoField,
    CharField,
    DateTimeField,
    ForeignKeyField,
    TextField,
)

from db.base import BaseModel, db
from db.models.tournament.point_system import PointSystem
from db.models.tournament.structure import Group, Schedule


class Match(BaseModel):
    """
    Raw telemetry snapshot for one played schedule slot.

    Attributes:
        game_id: External game identifier (globally unique)
        schedule: Schedule slot the match was played for
        group: First group of the schedule, kept for group-scoped lookups
        game_global_info: JSON of the game's start/fight/finish timestamps
        team_info: JSON list of the per-team telemetry entries
        player_info: JSON list of the per-player telemetry entries
        point_system: Point system in effect when the match was scored
    """

    id = AutoField(primary_key=True)
    game_id = CharField(max_length=64, unique=True)
    schedule = ForeignKeyField(
        Schedule,
        backref="matches",
        on_delete="CASCADE",
        column_name="schedule_id",
        unique=True,
    )
    group = ForeignKeyField(
        Group,
        backref="matches",
        on_delete="SET NULL",
        column_name="group_id",
        null=True,
    )
    game_global_info = TextField(default="{}")  # JSON string
    team_info = TextField(default="[]")  # JSON string
    player_info = TextField(default="[]")  # JSON string
    point_system = ForeignKeyField(
        PointSystem,
        backref="matches",
        on_delete="RESTRICT",
        column_name="point_system_id",
    )
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "matches"

    def __repr__(self) -> str:
        return f"<Match(id={self.id}, game_id={self.game_id}, schedule_id={self.schedule_id})>"

    @property
    def players(self) -> list[dict]:
        return json.loads(self.player_info or "[]")

    @property
    def teams(self) -> list[dict]:
        return json.loads(self.team_info or "[]")

    @property
    def global_info(self) -> dict:
        return json.loads(self.game_global_info or "{}")

    @classmethod
    def exists_for_game(cls, game_id: str) -> bool:
        """Advisory duplicate check; the unique index is the real guard."""
        return cls.select().where(cls.game_id == game_id).exists()

    @classmethod
    def create_for_game(
        cls,
        game_id: str,
        schedule_id: int,
        point_system_id: int,
        game_global_info: dict,
        team_info: list[dict],
        player_info: list[dict],
        group_id: int | None = None,
    ) -> "Match":
        """
        Insert a match for a game id.

        Raises:
            IntegrityError: If the game id (or schedule) already has a match.
                Runs in a savepoint so the caller's transaction stays usable.
        """
        with db.atomic():
            return cls.create(
                game_id=game_id,
                schedule=schedule_id,
                group=group_id,
                point_system=point_system_id,
                game_global_info=json.dumps(game_global_info),
                team_info=json.dumps(team_info),
                player_info=json.dumps(player_info),
            )

    @classmethod
    def for_ids(cls, match_ids: list[int]) -> list["Match"]:
        if not match_ids:
            return []
        return list(cls.select().where(cls.id.in_(match_ids)).order_by(cls.id))
