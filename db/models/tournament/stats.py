"""
Per-Match Stat Tables

Derived counters for one entity in one match. PlayerStats rows are a direct
copy of the player's telemetry counters; TeamStats rows sum the counters of
the team's matched players (best rank, longest kill). Both are upserted on
their (entity, match) key so derivation can be re-run without duplicating.
"""

from datetime import datetime
from uuid import UUID

from peewee import (
    AutoField,
    DateTimeField,
    FloatField,
    ForeignKeyField,
    IntegerField,
    SmallIntegerField,
    UUIDField,
)

from db.base import BaseModel
from db.models.tournament.match import Match
from db.models.tournament.roster import Player, Team


# Counter columns shared by player and team rows, in telemetry order
COUNTER_FIELDS: tuple[str, ...] = (
    "kill_num",
    "kill_num_before_die",
    "got_air_drop_num",
    "max_kill_distance",
    "damage",
    "kill_num_in_vehicle",
    "kill_num_by_grenade",
    "ai_kill_num",
    "boss_kill_num",
    "rank",
    "in_damage",
    "heal",
    "head_shot_num",
    "survival_time",
    "drive_distance",
    "march_distance",
    "assists",
    "knockouts",
    "rescue_times",
    "use_smoke_grenade_num",
    "use_frag_grenade_num",
    "use_burn_grenade_num",
    "use_flash_grenade_num",
    "poison_total_damage",
    "use_self_rescue_time",
    "use_emergency_call_time",
)


class StatCounters(BaseModel):
    """Counter columns inherited by PlayerStats and TeamStats (no table of its own)."""

    # Combat
    kill_num = IntegerField(default=0)
    kill_num_before_die = IntegerField(default=0)
    max_kill_distance = FloatField(default=0)
    damage = FloatField(default=0)
    in_damage = FloatField(default=0)
    head_shot_num = IntegerField(default=0)
    assists = IntegerField(default=0)
    knockouts = IntegerField(default=0)
    ai_kill_num = IntegerField(default=0)
    boss_kill_num = IntegerField(default=0)

    # Survival
    rank = SmallIntegerField(default=0)
    survival_time = FloatField(default=0)
    heal = FloatField(default=0)
    rescue_times = IntegerField(default=0)
    poison_total_damage = FloatField(default=0)
    use_self_rescue_time = IntegerField(default=0)
    use_emergency_call_time = IntegerField(default=0)

    # Movement
    drive_distance = FloatField(default=0)
    march_distance = FloatField(default=0)

    # Items
    got_air_drop_num = IntegerField(default=0)
    kill_num_in_vehicle = IntegerField(default=0)
    kill_num_by_grenade = IntegerField(default=0)
    use_smoke_grenade_num = IntegerField(default=0)
    use_frag_grenade_num = IntegerField(default=0)
    use_burn_grenade_num = IntegerField(default=0)
    use_flash_grenade_num = IntegerField(default=0)

    # Audit columns
    pipeline_run_id = UUIDField(null=True, index=True)
    created_at = DateTimeField(default=datetime.utcnow)
    updated_at = DateTimeField(default=datetime.utcnow)

    def save(self, *args, **kwargs):
        """Override save to auto-update updated_at timestamp."""
        self.updated_at = datetime.utcnow()
        return super().save(*args, **kwargs)

    def counters(self) -> dict:
        return {name: getattr(self, name) for name in COUNTER_FIELDS}


class PlayerStats(StatCounters):
    """
    One player's counters for one match.

    Unique on (player, match).
    """

    id = AutoField(primary_key=True)
    player = ForeignKeyField(
        Player,
        backref="match_stats",
        on_delete="CASCADE",
        column_name="player_id",
    )
    match = ForeignKeyField(
        Match,
        backref="player_stats",
        on_delete="CASCADE",
        column_name="match_id",
    )

    class Meta:
        table_name = "player_stats"
        indexes = (
            (("player", "match"), True),
            (("match",), False),
        )

    def __repr__(self) -> str:
        return (
            f"<PlayerStats("
            f"player_id={self.player_id}, "
            f"match_id={self.match_id}, "
            f"kills={self.kill_num})>"
        )

    @classmethod
    def upsert_stats(
        cls,
        player_id: int,
        match_id: int,
        stats: dict,
        pipeline_run_id: UUID | None = None,
    ) -> "PlayerStats":
        """
        Insert or update a player's counters for a match.

        Args:
            player_id: Registered player id
            match_id: Match id
            stats: Counter values keyed by column name
            pipeline_run_id: Optional run that produced the values

        Returns:
            The created or updated PlayerStats instance
        """
        defaults = {name: stats.get(name, 0) for name in COUNTER_FIELDS}
        defaults["pipeline_run_id"] = pipeline_run_id

        record, created = cls.get_or_create(
            player=player_id,
            match=match_id,
            defaults=defaults,
        )

        if not created:
            for key, value in defaults.items():
                setattr(record, key, value)
            record.save()

        return record

    @classmethod
    def for_matches(cls, match_ids: list[int]) -> list["PlayerStats"]:
        """Rows for the given matches with player and team loaded, in match order."""
        if not match_ids:
            return []
        return list(
            cls.select(cls, Player, Team)
            .join(Player)
            .join(Team)
            .where(cls.match.in_(match_ids))
            .order_by(cls.match, cls.id)
        )


class TeamStats(StatCounters):
    """
    One team's summed counters for one match.

    Exactly one row per (team, match); rank is the team's placement.
    """

    id = AutoField(primary_key=True)
    team = ForeignKeyField(
        Team,
        backref="match_stats",
        on_delete="CASCADE",
        column_name="team_id",
    )
    match = ForeignKeyField(
        Match,
        backref="team_stats",
        on_delete="CASCADE",
        column_name="match_id",
    )

    class Meta:
        table_name = "team_stats"
        indexes = (
            (("team", "match"), True),
            (("match",), False),
        )

    def __repr__(self) -> str:
        return (
            f"<TeamStats("
            f"team_id={self.team_id}, "
            f"match_id={self.match_id}, "
            f"rank={self.rank}, "
            f"kills={self.kill_num})>"
        )

    @classmethod
    def upsert_stats(
        cls,
        team_id: int,
        match_id: int,
        stats: dict,
        pipeline_run_id: UUID | None = None,
    ) -> "TeamStats":
        """Insert or update a team's counters for a match (same contract as PlayerStats)."""
        defaults = {name: stats.get(name, 0) for name in COUNTER_FIELDS}
        defaults["pipeline_run_id"] = pipeline_run_id

        record, created = cls.get_or_create(
            team=team_id,
            match=match_id,
            defaults=defaults,
        )

        if not created:
            for key, value in defaults.items():
                setattr(record, key, value)
            record.save()

        return record

    @classmethod
    def for_matches(cls, match_ids: list[int]) -> list["TeamStats"]:
        """Rows for the given matches with the team loaded, in match order."""
        if not match_ids:
            return []
        return list(
            cls.select(cls, Team)
            .join(Team)
            .where(cls.match.in_(match_ids))
            .order_by(cls.match, cls.id)
        )
