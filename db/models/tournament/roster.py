"""
Roster Tables

Registration-time identity for teams and players. This core only reads
them: the roster is reconciled against match telemetry and used to attach
per-match stats to the right entities.
"""

from datetime import datetime

from peewee import (
    AutoField,
    BooleanField,
    CharField,
    DateTimeField,
    ForeignKeyField,
    SmallIntegerField,
)

from db.base import BaseModel


class Team(BaseModel):
    """
    Registered team.

    Attributes:
        id: Auto-incrementing primary key
        name: Team name as registered (may arrive mis-encoded from uploads)
        tag: Short tag shown on overlays
        slot: Lobby slot number
        dq: Disqualified teams are excluded from team leaderboards
    """

    id = AutoField(primary_key=True)
    name = CharField(max_length=100)
    tag = CharField(max_length=20, null=True)
    slot = SmallIntegerField(null=True)
    dq = BooleanField(default=False)
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "teams"

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}', dq={self.dq})>"


class Player(BaseModel):
    """
    Registered player.

    Attributes:
        id: Auto-incrementing primary key
        name: Registered in-game name
        uid: In-game unique identifier, stored as an opaque string
        team: Team the player is registered with
    """

    id = AutoField(primary_key=True)
    name = CharField(max_length=100)
    uid = CharField(max_length=64, index=True)
    team = ForeignKeyField(
        Team,
        backref="players",
        on_delete="CASCADE",
        column_name="team_id",
    )
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "players"
        indexes = (
            # A uid is registered at most once per team
            (("team", "uid"), True),
        )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name}', uid={self.uid})>"

    @classmethod
    def for_teams(cls, team_ids: list[int]) -> list["Player"]:
        """All registered players of the given teams, in one query."""
        if not team_ids:
            return []
        return list(
            cls.select()
            .where(cls.team.in_(team_ids))
            .order_by(cls.team, cls.id)
        )
