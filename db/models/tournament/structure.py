"""
Tournament Structure Tables

Event -> Stage -> Group -> Schedule hierarchy. Managed by the dashboard;
this core resolves schedules to their event (for the point system) and to
the teams of their groups (for roster reconciliation and stat derivation).
"""

from datetime import datetime

from peewee import (
    AutoField,
    CharField,
    DateTimeField,
    DeferredForeignKey,
    ForeignKeyField,
    SmallIntegerField,
)

from db.base import BaseModel
from db.models.tournament.point_system import PointSystem
from db.models.tournament.roster import Team


class Event(BaseModel):
    """A tournament. Carries the point system used to score its matches."""

    id = AutoField(primary_key=True)
    name = CharField(max_length=150)
    organizer = CharField(max_length=150, null=True)
    point_system = ForeignKeyField(
        PointSystem,
        backref="events",
        on_delete="SET NULL",
        column_name="point_system_id",
        null=True,
    )
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "events"

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name='{self.name}')>"


class Stage(BaseModel):
    id = AutoField(primary_key=True)
    name = CharField(max_length=100)
    event = ForeignKeyField(Event, backref="stages", on_delete="CASCADE", column_name="event_id")
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "stages"


class Group(BaseModel):
    id = AutoField(primary_key=True)
    name = CharField(max_length=100)
    event = ForeignKeyField(Event, backref="groups", on_delete="CASCADE", column_name="event_id")
    stage = ForeignKeyField(Stage, backref="groups", on_delete="CASCADE", column_name="stage_id")
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "groups"

    @classmethod
    def team_ids_for(cls, group_ids: list[int]) -> list[int]:
        """Distinct team ids across the given groups, in registration order."""
        if not group_ids:
            return []
        query = (
            GroupTeam.select(GroupTeam.team)
            .where(GroupTeam.group.in_(group_ids))
            .order_by(GroupTeam.id)
        )
        seen: dict[int, None] = {}
        for link in query:
            seen.setdefault(link.team_id, None)
        return list(seen)


class GroupTeam(BaseModel):
    """Team membership of a group."""

    id = AutoField(primary_key=True)
    group = ForeignKeyField(Group, backref="team_links", on_delete="CASCADE", column_name="group_id")
    team = ForeignKeyField(Team, backref="group_links", on_delete="CASCADE", column_name="team_id")

    class Meta:
        table_name = "group_teams"
        indexes = ((("group", "team"), True),)


class Schedule(BaseModel):
    """
    One scheduled match slot.

    Attributes:
        event, stage: Owning tournament and stage
        match_no: Match number within the groups' schedule
        map: Map played (Erangel, Miramar, ...)
        match: The ingested match, once played (at most one)
    """

    id = AutoField(primary_key=True)
    event = ForeignKeyField(Event, backref="schedules", on_delete="CASCADE", column_name="event_id")
    stage = ForeignKeyField(Stage, backref="schedules", on_delete="CASCADE", column_name="stage_id")
    match_no = SmallIntegerField()
    overall_match_no = SmallIntegerField(null=True)
    map = CharField(max_length=20, null=True)
    start_time = CharField(max_length=20, null=True)
    date = CharField(max_length=20, null=True)
    match = DeferredForeignKey(
        "Match",
        null=True,
        unique=True,
        column_name="match_id",
        on_delete="SET NULL",
    )
    created_at = DateTimeField(default=datetime.utcnow)

    class Meta:
        table_name = "schedules"

    def __repr__(self) -> str:
        return (
            f"<Schedule("
            f"id={self.id}, "
            f"match_no={self.match_no}, "
            f"match_id={self.match_id})>"
        )

    def group_ids(self) -> list[int]:
        """Ids of the groups playing in this slot."""
        return [
            link.group_id
            for link in ScheduleGroup.select(ScheduleGroup.group)
            .where(ScheduleGroup.schedule == self.id)
            .order_by(ScheduleGroup.id)
        ]

    @classmethod
    def find_by_match(cls, match_id) -> "Schedule | None":
        """The schedule slot a match was ingested for."""
        return (
            cls.select(cls, Event)
            .join(Event)
            .where(cls.match == match_id)
            .first()
        )

    @classmethod
    def for_ids(cls, schedule_ids: list[int]) -> list["Schedule"]:
        if not schedule_ids:
            return []
        return list(cls.select().where(cls.id.in_(schedule_ids)).order_by(cls.id))

    @classmethod
    def for_group(cls, group_id) -> list["Schedule"]:
        """All slots a group plays in, in match order."""
        return list(
            cls.select()
            .join(ScheduleGroup)
            .where(ScheduleGroup.group == group_id)
            .order_by(cls.match_no, cls.id)
            .distinct()
        )

    @classmethod
    def for_stage(cls, stage_id) -> list["Schedule"]:
        return list(
            cls.select()
            .where(cls.stage == stage_id)
            .order_by(cls.match_no, cls.id)
        )


class ScheduleGroup(BaseModel):
    """Groups competing in a schedule slot."""

    id = AutoField(primary_key=True)
    schedule = ForeignKeyField(Schedule, backref="group_links", on_delete="CASCADE", column_name="schedule_id")
    group = ForeignKeyField(Group, backref="schedule_links", on_delete="CASCADE", column_name="group_id")

    class Meta:
        table_name = "schedule_groups"
        indexes = ((("schedule", "group"), True),)
